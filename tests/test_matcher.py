# tests/test_matcher.py
"""
Unit-tests for ConfigPresets.presets.matcher

Run with:
    python -m unittest tests.test_matcher
"""
import unittest

from ConfigPresets.presets.matcher import match_config, match_preset, match_presets
from ConfigPresets.presets.model import Config, Preset, Setting


def _config(name, enabled=None, **values) -> Config:
    return Config(name, name.lower(), enabled, [Setting(k, k, v) for k, v in values.items()])


class MatchConfigTests(unittest.TestCase):

    def setUp(self) -> None:
        self.live = _config('Boosts', True, showIcons='true', threshold='5', other='x')

    def test_missing_target_never_matches(self):
        self.assertFalse(match_config(self.live, None))

    def test_subset_match(self):
        self.assertTrue(match_config(self.live, _config('Boosts', None, showIcons='true')))
        self.assertFalse(match_config(self.live, _config('Boosts', None, showIcons='false')))

    def test_enabled_mismatch(self):
        self.assertTrue(match_config(self.live, _config('Boosts', True)))
        self.assertFalse(match_config(self.live, _config('Boosts', False)))

    def test_unasserted_enabled_matches_both(self):
        disabled = _config('Boosts', False, showIcons='true')
        self.assertTrue(match_config(disabled, _config('Boosts', None, showIcons='true')))

    def test_null_target_value_matches_anything(self):
        self.assertTrue(match_config(self.live, _config('Boosts', True, threshold=None)))

    def test_key_missing_from_live_is_ignored(self):
        self.assertTrue(match_config(self.live, _config('Boosts', True, removedKey='1')))

    def test_empty_target_matches(self):
        self.assertTrue(match_config(self.live, _config('Boosts')))


class MatchPresetTests(unittest.TestCase):

    def setUp(self) -> None:
        self.live = [
            _config('Boosts', True, showIcons='true'),
            _config('Camera', False, zoom='400'),
        ]

    def test_all_configs_must_match(self):
        preset = Preset('Melee', configs=[_config('Boosts', True), _config('Camera', None, zoom='400')])
        self.assertTrue(match_preset(preset, self.live))

        preset.set_config(_config('Camera', True))
        self.assertFalse(match_preset(preset, self.live))

    def test_components_not_live_are_skipped(self):
        preset = Preset('Melee', configs=[_config('Agility', True, showLapCount='true'), _config('Boosts', True)])
        self.assertTrue(match_preset(preset, self.live))

    def test_empty_preset_matches(self):
        self.assertTrue(match_preset(Preset('Empty'), self.live))


class MatchPresetsTests(unittest.TestCase):

    def test_compares_shared_components_only(self):
        a = Preset('A', configs=[_config('Boosts', True, showIcons='true'), _config('Camera', False)])
        b = Preset('B', configs=[_config('Boosts', True, showIcons='true')])
        c = Preset('C', configs=[_config('Boosts', True, showIcons='false')])
        self.assertTrue(match_presets(a, b))
        self.assertFalse(match_presets(a, c))
        self.assertTrue(match_presets(a, Preset('Empty')))
