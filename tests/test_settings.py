# tests/test_settings.py
"""
Unit-tests for ConfigPresets.settings.lib
(covers preset name validation, label helpers and ConfigPaths).

Run with:
    python -m unittest tests.test_settings
"""
from ConfigPresets.settings import lib
from tests.base import BaseTestCase


class PresetNameTests(BaseTestCase):

    def test_valid_names(self):
        for name in ('Melee', 'Range 2', 'PvP (1)', 'a-b_c.d,e;f=g+h!', 'Skåne', 'Över'):
            with self.subTest(name=name):
                self.assertTrue(lib.is_valid_preset_name(name))

    def test_invalid_names(self):
        for name in ('', None, 'a/b', 'a\\b', 'what?', 'a|b', '{x}', 'tab\tname', 'Zürich'):
            with self.subTest(name=name):
                self.assertFalse(lib.is_valid_preset_name(name))

    def test_placeholder_name(self):
        self.assertEqual(lib.placeholder_name(3), 'Preset 3')


class LabelHelperTests(BaseTestCase):

    def test_split_and_capitalize(self):
        self.assertEqual(lib.split_and_capitalize('showNpcNames'), 'Show Npc Names')
        self.assertEqual(lib.split_and_capitalize('zoom'), 'Zoom')
        self.assertEqual(lib.split_and_capitalize('show-icons'), 'Showicons')
        self.assertEqual(lib.split_and_capitalize(''), '')

    def test_component_list_to_string(self):
        self.assertEqual(lib.component_list_to_string(['Boosts']), 'Boosts plugin.')
        self.assertEqual(lib.component_list_to_string(['Boosts', 'Camera']), 'Boosts and Camera plugins.')
        self.assertEqual(
            lib.component_list_to_string(['Agility', 'Boosts', 'Camera']),
            'Agility, Boosts and Camera plugins.',
        )

    def test_component_list_to_string_requires_names(self):
        with self.assertRaises(ValueError):
            lib.component_list_to_string([])


class ConfigPathsTests(BaseTestCase):

    def test_presets_dir_created(self):
        self.assertTrue(self.config_paths.presets_dir.is_dir())

    def test_custom_presets_dir(self):
        target = self.temp_dir / 'nested' / 'presets'
        paths = lib.ConfigPaths(presets_dir=target)
        self.assertEqual(paths.presets_dir, target)
        self.assertTrue(target.is_dir())

    def test_delete_presets_dir_if_empty(self):
        (self.config_paths.presets_dir / 'Melee.json').write_text('{}', encoding='utf-8')
        self.assertFalse(self.config_paths.delete_presets_dir_if_empty())

        (self.config_paths.presets_dir / 'Melee.json').unlink()
        self.assertTrue(self.config_paths.delete_presets_dir_if_empty())
        self.assertFalse(self.config_paths.presets_dir.exists())
        self.assertFalse(self.config_paths.delete_presets_dir_if_empty())
