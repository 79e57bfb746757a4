"""Conversion of presets written in the old per-group format.

Old preset files stored two flat maps instead of a config list::

    {
        "id": 1600000000000,
        "name": "Old",
        "enabledPlugins": {"Boosts": true},
        "pluginSettings": {"boosts": {"showIcons": "true"}}
    }

Component group ids and setting labels are not part of that format, so they are
recovered from the live configs at conversion time.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from .model import Config, Preset, Setting


def is_legacy(data: Any) -> bool:
    return isinstance(data, dict) and 'enabledPlugins' in data and 'pluginSettings' in data


def _setting_name(live: Config, key: str) -> Optional[str]:
    setting = live.get_setting(key)
    return setting.name if setting else None


def convert(data: Dict[str, Any], live_configs: Iterable[Config]) -> Preset:
    """Convert a legacy preset dict to a :class:`Preset`.

    Components unknown to the live state are dropped, as are settings whose key the
    live component no longer has.

    Raises:
        ValueError: If the legacy data has no name or malformed maps.
    """
    name = data.get('name')
    if not isinstance(name, str):
        raise ValueError('Legacy preset is missing its "name".')

    enabled_map = data.get('enabledPlugins')
    settings_map = data.get('pluginSettings')
    if not isinstance(enabled_map, dict) or not isinstance(settings_map, dict):
        raise ValueError(f'Legacy preset "{name}" has malformed plugin maps.')

    live_by_name = {c.display_name: c for c in live_configs}

    configs: List[Config] = []
    for display_name, enabled in enabled_map.items():
        live = live_by_name.get(display_name)
        if live is None or live.group_id is None:
            logging.debug(f'Legacy preset "{name}": no live component "{display_name}", skipped')
            continue

        config = Config(display_name, live.group_id, bool(enabled))
        for key, value in (settings_map.get(live.group_id) or {}).items():
            label = _setting_name(live, key)
            if label is None:
                continue
            config.add_setting(Setting(label, key, None if value is None else str(value)))
        configs.append(config)

    preset = Preset(name=name, configs=configs)
    logging.info(f'Converted legacy preset "{name}" with {len(configs)} component(s)')
    return preset
