# tests/test_editor.py
"""
Unit-tests for ConfigPresets.presets.editor

Run with:
    python -m unittest tests.test_editor
"""
from ConfigPresets.presets.editor import EditorState, PresetEditor, parse_custom_setting
from ConfigPresets.presets.model import Config, Preset
from ConfigPresets.status import status
from tests.base import BaseAPITestCase, mute_ui_signals


class ParseCustomSettingTests(BaseAPITestCase):

    def test_parse(self):
        self.assertEqual(parse_custom_setting('overlay.color=red'), ('overlay', 'color', 'red'))
        self.assertEqual(parse_custom_setting(' overlay.opacity '), ('overlay', 'opacity', None))
        self.assertEqual(parse_custom_setting('overlay.opacity='), ('overlay', 'opacity', None))
        self.assertEqual(parse_custom_setting('overlay.font=a=b'), ('overlay', 'font', 'a=b'))

    def test_parse_malformed(self):
        for text in (None, '', 'overlay', '.color=red', 'overlay.=red'):
            with self.subTest(text=text):
                self.assertIsNone(parse_custom_setting(text))


class PresetEditorTests(BaseAPITestCase):

    def setUp(self) -> None:
        super().setUp()
        self.preset = self.api.create_preset('Empty', snapshot=False)
        self.editor = self.api.edit(self.preset)
        self.live = {c.display_name: c for c in self.api.current_configs()}

    def stored(self) -> Preset:
        return self.api.get(self.preset.id)

    def test_attach_and_detach(self):
        self.assertIs(self.api.editor, self.editor)
        self.assertEqual(self.editor.state, EditorState.Editing)
        self.assertEqual(len(self.editor.live_configs), 3)

        self.api.stop_editing()
        self.assertEqual(self.editor.state, EditorState.Detached)
        self.assertIsNone(self.api.editor)
        with self.assertRaises(RuntimeError):
            self.editor.add_enabled(self.live['Boosts'])

    def test_unattached_editor_rejects_edits(self):
        editor = PresetEditor(self.api, self.preset)
        self.assertEqual(editor.state, EditorState.Unattached)
        with self.assertRaises(RuntimeError):
            editor.toggle_local()

    def test_edit_switches_editor(self):
        other = self.api.create_preset('Other', snapshot=False)
        editor = self.api.edit(other)
        self.assertFalse(self.editor.is_editing)
        self.assertTrue(editor.is_editing)

    def test_update_all_modified_reads_current_live_state(self):
        camera = self.live['Camera']
        self.editor.add_setting(camera, camera.get_setting('zoom'))
        self.assertEqual(self.stored().get_config('Camera').get_setting('zoom').value, '400')

        self.host.values[('camera', 'zoom')] = '999'
        self.editor.update_all_modified()
        self.assertEqual(self.stored().get_config('Camera').get_setting('zoom').value, '999')

    def test_update_preset_while_editing_reads_current_live_state(self):
        camera = self.live['Camera']
        self.editor.add_setting(camera, camera.get_setting('zoom'))
        self.host.values[('camera', 'zoom')] = '999'
        self.host.components['Camera'][1] = True

        self.api.update_preset(self.preset)
        config = self.stored().get_config('Camera')
        self.assertEqual(config.get_setting('zoom').value, '999')
        self.assertIsNone(config.enabled)

    def test_add_and_remove_setting_prunes_config(self):
        boosts = self.live['Boosts']
        self.editor.add_setting(boosts, boosts.get_setting('showIcons'))

        config = self.stored().get_config('Boosts')
        self.assertIsNone(config.enabled)
        self.assertEqual(config.setting_keys(), ['showIcons'])
        self.assertEqual(config.get_setting('showIcons').value, 'true')

        self.editor.remove_setting(boosts, boosts.get_setting('showIcons'))
        self.assertTrue(self.stored().is_empty)
        self.assertEqual(self.storage.load_all()[0].configs, [])

    def test_remove_setting_from_every_config(self):
        boosts = self.live['Boosts']
        showicons = boosts.get_setting('showIcons')
        self.editor.add_setting(boosts, showicons)
        self.editor.add_setting(boosts, boosts.get_setting('threshold'))
        self.editor.add_enabled(self.live['Camera'])

        self.editor.remove_setting(None, showicons)
        self.assertEqual(self.stored().config_names(), ['Boosts', 'Camera'])
        self.assertEqual(self.stored().get_config('Boosts').setting_keys(), ['threshold'])

    def test_add_and_remove_enabled(self):
        camera = self.live['Camera']
        self.editor.add_enabled(camera)
        self.assertFalse(self.stored().get_config('Camera').enabled)

        self.editor.remove_enabled(camera)
        self.assertIsNone(self.stored().get_config('Camera'))

    def test_remove_enabled_keeps_config_with_settings(self):
        boosts = self.live['Boosts']
        self.editor.add_enabled(boosts)
        self.editor.add_setting(boosts, boosts.get_setting('threshold'))
        self.editor.remove_enabled(boosts)

        config = self.stored().get_config('Boosts')
        self.assertIsNone(config.enabled)
        self.assertEqual(config.setting_keys(), ['threshold'])

    def test_add_configuration_replaces(self):
        self.editor.add_configuration(self.live['Agility'])
        self.editor.add_configuration(Config('Agility', 'agility', False))
        self.assertEqual(self.stored().config_names(), ['Agility'])
        self.assertFalse(self.stored().get_config('Agility').enabled)
        self.assertEqual(self.stored().get_config('Agility').settings, {})

        self.editor.remove_configuration(self.live['Agility'])
        self.assertTrue(self.stored().is_empty)

    def test_add_all_and_remove_all(self):
        self.editor.add_all(self.live.values())
        self.assertEqual(self.stored().config_names(), ['Boosts', 'Camera', 'Agility'])
        self.editor.remove_all([self.live['Boosts'], self.live['Agility']])
        self.assertEqual(self.stored().config_names(), ['Camera'])

    def test_add_custom_setting_with_value(self):
        self.assertTrue(self.editor.add_custom_setting(self.live['Boosts'], 'overlay.color=red'))

        setting = self.stored().get_config('Boosts').get_setting('color')
        self.assertEqual(setting.value, 'red')
        self.assertEqual(setting.custom_group, 'overlay')
        self.assertEqual(setting.owning_config_name, 'Boosts')
        self.assertEqual(setting.name, 'Color')

    def test_add_custom_setting_reads_host_value(self):
        self.host.values[('overlay', 'fontSize')] = '12'
        self.assertTrue(self.editor.add_custom_setting(self.live['Camera'], 'overlay.fontSize'))
        setting = self.stored().get_config('Camera').get_setting('fontSize')
        self.assertEqual(setting.value, '12')
        self.assertEqual(setting.name, 'Font Size')

    def test_add_custom_setting_rejects_bad_input(self):
        self.assertFalse(self.editor.add_custom_setting(self.live['Boosts'], 'color=red'))
        self.assertTrue(self.editor.add_custom_setting(self.live['Boosts'], 'overlay.color=red'))
        self.assertFalse(self.editor.add_custom_setting(self.live['Boosts'], 'other.color=blue'))
        self.assertEqual(self.stored().get_config('Boosts').get_setting('color').value, 'red')

    def test_update_configurations_keeps_captured_keys(self):
        boosts = self.live['Boosts']
        self.editor.add_setting(boosts, boosts.get_setting('showIcons'))

        self.host.values[('boosts', 'showIcons')] = 'false'
        self.host.values[('boosts', 'threshold')] = '9'
        self.editor.refresh_live()
        live = next(c for c in self.editor.live_configs if c.display_name == 'Boosts')
        self.editor.update_configurations(self.stored().get_config('Boosts'), live)

        config = self.stored().get_config('Boosts')
        self.assertEqual(config.setting_keys(), ['showIcons'])
        self.assertEqual(config.get_setting('showIcons').value, 'false')
        self.assertIsNone(config.enabled)

    def test_update_all_modified(self):
        self.editor.add_enabled(self.live['Camera'])
        self.editor.add_setting(self.live['Agility'], self.live['Agility'].get_setting('showLapCount'))

        self.host.components['Camera'][1] = True
        self.host.values[('agility', 'showLapCount')] = 'true'
        self.editor.refresh_live()
        self.editor.update_all_modified()

        self.assertTrue(self.stored().get_config('Camera').enabled)
        self.assertEqual(self.stored().get_config('Agility').get_setting('showLapCount').value, 'true')

    def test_update_all_modified_missing_live_component(self):
        self.editor.add_enabled(self.live['Camera'])
        self.editor.add_configuration(Config('Ghost', 'ghost', True))
        self.host.components['Camera'][1] = True
        self.editor.refresh_live()

        with mute_ui_signals(), self.assertRaises(status.LiveConfigNotFoundException):
            self.editor.update_all_modified()
        self.assertFalse(self.stored().get_config('Camera').enabled)

    def test_removed_preset_raises(self):
        editor = PresetEditor(self.api, self.preset)
        editor.attach()
        self.api.delete_preset(self.preset)
        with mute_ui_signals(), self.assertRaises(status.PresetNotFoundException):
            editor.add_enabled(self.live['Boosts'])

    def test_configuration_to_every_preset(self):
        other = self.api.create_preset('Other')
        self.editor.add_configuration_to_presets(Config('Camera', 'camera', True))

        self.assertTrue(self.stored().get_config('Camera').enabled)
        self.assertTrue(self.api.get(other.id).get_config('Camera').enabled)
        self.assertEqual(self.api.get(other.id).config_names(), ['Boosts', 'Camera', 'Agility'])

        self.editor.remove_configuration_from_presets(self.live['Camera'])
        self.assertIsNone(self.stored().get_config('Camera'))
        self.assertEqual(self.api.get(other.id).config_names(), ['Boosts', 'Agility'])

    def test_toggle_local(self):
        self.assertTrue(self.stored().is_local_only)
        self.editor.toggle_local()
        self.assertFalse(self.stored().is_local_only)
        self.assertFalse(self.storage.load_all()[0].is_local_only)

    def test_updates_emit_index(self):
        updated: list[int] = []

        def _slot(index: int) -> None:
            updated.append(index)

        self.api.create_preset('Second', snapshot=False)
        self.api.presetUpdated.connect(_slot)
        self.editor.add_enabled(self.live['Boosts'])
        self.assertEqual(updated, [0])
