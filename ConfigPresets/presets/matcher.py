"""Comparison of stored configs against live state.

Matching is a *subset match*: a stored config matches when every value it specifies
equals the live value. Live settings the stored config never captured are ignored,
and a stored value of ``None`` matches anything.
"""
from typing import Iterable, Optional

from .model import Config, Preset


def match_config(live: Config, target: Optional[Config]) -> bool:
    """Return True if ``target`` is satisfied by ``live``.

    Args:
        live: The live config of a component.
        target: The stored config for the same component.

    Returns:
        bool: False if target is missing, if both sides assert a different enabled
        state, or if a non-null target value differs from the live value of the same key.
    """
    if target is None:
        return False

    if target.enabled is not None and live.enabled is not None and target.enabled != live.enabled:
        return False

    for key, setting in target.settings.items():
        live_setting = live.settings.get(key)
        if live_setting is None or setting.value is None:
            continue
        if setting.value != live_setting.value:
            return False
    return True


def match_preset(preset: Preset, live_configs: Iterable[Config]) -> bool:
    """Return True if every config of ``preset`` matches its live counterpart.

    Configs of components the host does not currently have are skipped. A preset
    without configs matches trivially.
    """
    live_by_name = {}
    for config in live_configs:
        live_by_name.setdefault(config.display_name, config)

    for config in preset.configs:
        live = live_by_name.get(config.display_name)
        if live is None:
            continue
        if not match_config(live, config):
            return False
    return True


def match_presets(preset: Preset, other: Preset) -> bool:
    """Compare two stored presets over the components present in both."""
    for config in preset.configs:
        other_config = other.get_config(config.display_name)
        if other_config is None:
            continue
        if not match_config(config, other_config):
            return False
    return True
