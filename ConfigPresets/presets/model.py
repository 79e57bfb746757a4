"""Preset entities: Setting, Config and Preset.

A :class:`Preset` is a named snapshot holding one :class:`Config` per component. Each
config asserts an optional enabled state and carries the component's
:class:`Setting` values keyed by setting key.

The dict form produced by :meth:`Preset.to_dict` is the on-disk and clipboard format::

    {
        "id": 1700000000000,
        "name": "Melee",
        "keyCombo": "Ctrl+F1",
        "isLocalOnly": true,
        "loadOnFocusChange": null,
        "configs": [
            {
                "displayName": "Boosts",
                "groupId": "boosts",
                "enabled": true,
                "settings": [
                    {"name": "Show Icons", "key": "showIcons", "value": "true",
                     "customGroup": null, "owningConfigName": null}
                ]
            }
        ]
    }
"""
import copy
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

_last_id: int = 0


def new_preset_id() -> int:
    """Return a millisecond timestamp id, strictly increasing within this process."""
    global _last_id
    now = int(time.time() * 1000)
    _last_id = max(now, _last_id + 1)
    return _last_id


def _get(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    # Older presets were written with different field names
    for k in keys:
        if k in data:
            return data[k]
    return default


def _optional_str(value: Any, field_name: str) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    raise TypeError(f'"{field_name}" must be a string or null, got {type(value).__name__}.')


def _optional_bool(value: Any, field_name: str) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    raise TypeError(f'"{field_name}" must be a boolean or null, got {type(value).__name__}.')


@dataclass(slots=True)
class Setting:
    """One configuration key inside one component."""
    name: str
    key: str
    value: Optional[str] = None  # None: unreadable or unset
    custom_group: Optional[str] = None  # storage group differing from the owning config's group
    owning_config_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'key': self.key,
            'value': self.value,
            'customGroup': self.custom_group,
            'owningConfigName': self.owning_config_name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Setting':
        if not isinstance(data, dict):
            raise TypeError(f'Setting must be an object, got {type(data).__name__}.')
        key = data.get('key')
        if not isinstance(key, str) or not key:
            raise ValueError('Setting is missing its "key".')
        name = data.get('name')
        return cls(
            name=name if isinstance(name, str) else key,
            key=key,
            value=_optional_str(data.get('value'), 'value'),
            custom_group=_optional_str(_get(data, 'customGroup', 'customConfigName'), 'customGroup'),
            owning_config_name=_optional_str(_get(data, 'owningConfigName', 'configName'), 'owningConfigName'),
        )


@dataclass(slots=True)
class Config:
    """One component's configuration block.

    Settings are kept in insertion order and keyed by :attr:`Setting.key`, so a key
    can only ever appear once per config.
    """
    display_name: str
    group_id: Optional[str]
    enabled: Optional[bool] = None  # None: no enabled/disabled assertion
    settings: Dict[str, Setting] = field(default_factory=dict)

    def __init__(
            self,
            display_name: str,
            group_id: Optional[str],
            enabled: Optional[bool] = None,
            settings: Optional[Iterable[Setting]] = None
    ) -> None:
        self.display_name = display_name
        self.group_id = group_id
        self.enabled = enabled
        self.settings = {}
        for setting in settings or ():
            self.add_setting(setting)

    @property
    def is_empty(self) -> bool:
        """True when the config holds no settings and asserts no enabled state."""
        return not self.settings and self.enabled is None

    def setting_keys(self) -> List[str]:
        return list(self.settings.keys())

    def get_setting(self, key: str) -> Optional[Setting]:
        return self.settings.get(key)

    def add_setting(self, setting: Setting) -> bool:
        """Append a setting unless its key is already present.

        Returns:
            bool: True if the setting was added.
        """
        if setting.key in self.settings:
            return False
        self.settings[setting.key] = setting
        return True

    def remove_setting(self, key: str) -> bool:
        return self.settings.pop(key, None) is not None

    def contains_custom_settings(self) -> bool:
        return any(s.custom_group is not None for s in self.settings.values())

    def copy(self) -> 'Config':
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'displayName': self.display_name,
            'groupId': self.group_id,
            'enabled': self.enabled,
            'settings': [s.to_dict() for s in self.settings.values()],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        if not isinstance(data, dict):
            raise TypeError(f'Config must be an object, got {type(data).__name__}.')
        display_name = _get(data, 'displayName', 'name')
        if not isinstance(display_name, str) or not display_name:
            raise ValueError('Config is missing its "displayName".')
        settings = data.get('settings') or []
        if not isinstance(settings, list):
            raise TypeError(f'Config "{display_name}" settings must be a list.')
        return cls(
            display_name=display_name,
            group_id=_optional_str(_get(data, 'groupId', 'configName'), 'groupId'),
            enabled=_optional_bool(data.get('enabled'), 'enabled'),
            settings=[Setting.from_dict(s) for s in settings],
        )


@dataclass(slots=True)
class Preset:
    """A named snapshot of component configurations."""
    name: str
    id: int = field(default_factory=new_preset_id)
    key_combo: Optional[str] = None
    is_local_only: bool = True
    load_on_focus_change: Optional[bool] = None  # True: on focus gain, False: on focus loss
    configs: List[Config] = field(default_factory=list)

    def __repr__(self) -> str:
        return f'<Preset id={self.id}, name={self.name!r}, configs={len(self.configs)}>'

    @property
    def is_empty(self) -> bool:
        return not self.configs

    def config_names(self) -> List[str]:
        return [c.display_name for c in self.configs]

    def get_config(self, display_name: str) -> Optional[Config]:
        return next((c for c in self.configs if c.display_name == display_name), None)

    def get_config_by_group(self, group_id: Optional[str]) -> Optional[Config]:
        return next((c for c in self.configs if c.group_id == group_id), None)

    def set_config(self, config: Config) -> None:
        """Replace the config with the same display name in place, or append it."""
        for i, c in enumerate(self.configs):
            if c.display_name == config.display_name:
                self.configs[i] = config
                return
        self.configs.append(config)

    def remove_config(self, display_name: str) -> bool:
        count = len(self.configs)
        self.configs = [c for c in self.configs if c.display_name != display_name]
        return len(self.configs) != count

    def copy(self) -> 'Preset':
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'keyCombo': self.key_combo,
            'isLocalOnly': self.is_local_only,
            'loadOnFocusChange': self.load_on_focus_change,
            'configs': [c.to_dict() for c in self.configs],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Preset':
        """Build a preset from its dict form.

        Raises:
            TypeError: If data or one of its fields has the wrong type.
            ValueError: If the name or the configs list is missing.
        """
        if not isinstance(data, dict):
            raise TypeError(f'Preset must be an object, got {type(data).__name__}.')

        name = data.get('name')
        if not isinstance(name, str):
            raise ValueError('Preset is missing its "name".')

        configs = _get(data, 'configs', 'pluginConfigs')
        if not isinstance(configs, list):
            raise ValueError(f'Preset "{name}" is missing its configs list.')

        preset_id = data.get('id')
        if preset_id is None:
            preset_id = new_preset_id()
            logging.debug(f'Preset "{name}" has no id, assigned {preset_id}')
        elif isinstance(preset_id, bool) or not isinstance(preset_id, int):
            raise TypeError(f'Preset "{name}" id must be an integer.')

        key_combo = _get(data, 'keyCombo', 'keybind')
        if key_combo is not None and not isinstance(key_combo, str):
            logging.debug(f'Preset "{name}" has an unsupported key combination, dropped')
            key_combo = None

        is_local_only = _get(data, 'isLocalOnly', 'local', default=True)
        if is_local_only is None:
            is_local_only = True

        parsed = []
        for config_data in configs:
            config = Config.from_dict(config_data)
            if any(c.display_name == config.display_name for c in parsed):
                logging.warning(f'Preset "{name}" lists "{config.display_name}" more than once, '
                                f'keeping the first')
                continue
            parsed.append(config)

        return cls(
            name=name,
            id=preset_id,
            key_combo=key_combo,
            is_local_only=_optional_bool(is_local_only, 'isLocalOnly'),
            load_on_focus_change=_optional_bool(_get(data, 'loadOnFocusChange', 'loadOnFocus'),
                                                'loadOnFocusChange'),
            configs=parsed,
        )
