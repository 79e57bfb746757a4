"""Incremental editing of one preset.

:class:`PresetEditor` works on a copy of one preset. Every mutating call writes the
copy's configs back into the collection entry with the same id and saves the whole
collection, so there is never an edited-but-unsaved state.
"""
import dataclasses
import enum
import logging
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from .model import Config, Preset, Setting
from ..settings import lib
from ..status import status

if TYPE_CHECKING:
    from .lib import PresetsAPI


class EditorState(enum.Enum):
    Unattached = enum.auto()
    Editing = enum.auto()
    Detached = enum.auto()


def parse_custom_setting(text: Optional[str]) -> Optional[Tuple[str, str, Optional[str]]]:
    """Parse ``'<group>.<key>=<value>'`` user input.

    The ``=<value>`` part is optional.

    Returns:
        tuple: ``(group, key, value)`` with value None when omitted, or None when the
        input is malformed.
    """
    if not text:
        return None
    group, sep, rest = text.strip().partition('.')
    if not sep:
        return None
    key, eq, value = rest.partition('=')
    group = group.strip()
    key = key.strip()
    if not group or not key:
        return None
    return group, key, (value if eq and value else None)


class PresetEditor:
    """Edits one preset of a :class:`~ConfigPresets.presets.lib.PresetsAPI` collection.

    Args:
        api: The presets API owning the collection.
        preset: The preset to edit. The editor keeps its own copy.
    """

    def __init__(self, api: 'PresetsAPI', preset: Preset) -> None:
        self._api = api
        self.edited_preset: Preset = preset.copy()
        self.live_configs: List[Config] = []
        self.state = EditorState.Unattached

    def __repr__(self) -> str:
        return f'<PresetEditor preset={self.edited_preset!r}, state={self.state.name}>'

    def attach(self) -> None:
        self.live_configs = self._api.current_configs()
        self.state = EditorState.Editing
        logging.debug(f'Editing preset "{self.edited_preset.name}"')

    def detach(self) -> None:
        self.state = EditorState.Detached
        logging.debug(f'Stopped editing preset "{self.edited_preset.name}"')

    @property
    def is_editing(self) -> bool:
        return self.state is EditorState.Editing

    def refresh_live(self) -> None:
        """Re-read the live configuration snapshot from the host."""
        self.live_configs = self._api.current_configs()

    def _verify_editing(self) -> None:
        if not self.is_editing:
            raise RuntimeError(f'Preset editor is {self.state.name}, cannot edit "{self.edited_preset.name}"')

    def _live_config(self, display_name: str) -> Optional[Config]:
        return next((c for c in self.live_configs if c.display_name == display_name), None)

    def _store(self, config: Config) -> None:
        # Empty configs are never kept inside a preset
        if config.is_empty:
            self.edited_preset.remove_config(config.display_name)
        else:
            self.edited_preset.set_config(config)

    def _add_configuration(self, config: Config) -> None:
        self._store(config.copy())

    def _remove_configuration(self, config: Config) -> None:
        self.edited_preset.remove_config(config.display_name)

    def _reconciled(self, preset_config: Config, live_config: Config) -> Config:
        keys = preset_config.setting_keys()
        updated = live_config.copy()
        updated.settings = {k: s for k, s in updated.settings.items() if k in keys}
        if preset_config.enabled is None:
            updated.enabled = None
        return updated

    def update_edited_preset(self) -> None:
        """Write the edited configs into the collection and save every preset.

        Raises:
            status.PresetNotFoundException: If the preset was removed from the collection.
        """
        preset = self._api.get(self.edited_preset.id)
        if preset is None:
            raise status.PresetNotFoundException(f'"{self.edited_preset.name}" ({self.edited_preset.id})')

        preset.configs = [c.copy() for c in self.edited_preset.configs]
        preset.is_local_only = self.edited_preset.is_local_only
        self._api.save_presets()
        self._api.presetUpdated.emit(self._api.index(preset))

    def add_configuration(self, config: Config) -> None:
        """Add a component's config, replacing the one with the same display name."""
        self._verify_editing()
        self._add_configuration(config)
        self.update_edited_preset()

    def remove_configuration(self, config: Config) -> None:
        """Remove a component from the preset entirely."""
        self._verify_editing()
        self._remove_configuration(config)
        self.update_edited_preset()

    def add_setting(self, live_config: Config, setting: Setting) -> None:
        """Add one setting of ``live_config``'s component to the preset."""
        self._verify_editing()
        config = self.edited_preset.get_config(live_config.display_name)
        if config is None:
            config = Config(live_config.display_name, live_config.group_id, None)
            self.edited_preset.configs.append(config)
        if not config.add_setting(dataclasses.replace(setting)):
            logging.debug(f'"{setting.key}" is already part of "{config.display_name}"')
        self.update_edited_preset()

    def remove_setting(self, config: Optional[Config], setting: Setting) -> None:
        """Remove one setting by key.

        Args:
            config: The setting's component, or None to strip the key from every component.
            setting: The setting to remove.
        """
        self._verify_editing()
        if config is None:
            targets = list(self.edited_preset.configs)
        else:
            target = self.edited_preset.get_config(config.display_name)
            targets = [target] if target else []

        for target in targets:
            target.remove_setting(setting.key)
            if target.is_empty:
                self._remove_configuration(target)
        self.update_edited_preset()

    def add_enabled(self, live_config: Config) -> None:
        """Assert the component's current enabled state in the preset."""
        self._verify_editing()
        config = self.edited_preset.get_config(live_config.display_name)
        if config is None:
            self.edited_preset.configs.append(
                Config(live_config.display_name, live_config.group_id, live_config.enabled)
            )
        else:
            config.enabled = live_config.enabled
        self.update_edited_preset()

    def remove_enabled(self, live_config: Config) -> None:
        """Stop asserting the component's enabled state."""
        self._verify_editing()
        config = self.edited_preset.get_config(live_config.display_name)
        if config is not None:
            config.enabled = None
            if config.is_empty:
                self._remove_configuration(config)
        self.update_edited_preset()

    def add_custom_setting(self, live_config: Config, text: str) -> bool:
        """Add a setting stored under another component's group.

        Args:
            live_config: The component that will house the custom setting.
            text: User input in the form ``'<group>.<key>=<value>'``.

        Returns:
            bool: True if the setting was added.
        """
        self._verify_editing()
        parsed = parse_custom_setting(text)
        if parsed is None:
            logging.warning(f'Failed to add custom setting "{text}" to preset. '
                            f'Reason: expected <group>.<key>=<value>')
            return False
        group, key, value = parsed

        config = self.edited_preset.get_config_by_group(live_config.group_id)
        if config is not None and config.get_setting(key) is not None:
            logging.warning(f'Custom setting "{group}.{key}" is already part of "{config.display_name}"')
            return False

        if config is None:
            live = next((c for c in self.live_configs if c.group_id == live_config.group_id), live_config)
            config = Config(live.display_name, live.group_id, None)
            self.edited_preset.configs.append(config)

        if value is None:
            value = self._api.host.get_configuration(group, key)

        config.add_setting(Setting(
            name=lib.split_and_capitalize(key),
            key=key,
            value=value,
            custom_group=group,
            owning_config_name=config.display_name,
        ))
        self.update_edited_preset()

        # Custom groups may be shared with other components, the live state must be rebuilt
        self._api.refresh_presets()
        self.refresh_live()
        return True

    def update_configurations(self, preset_config: Config, live_config: Config) -> None:
        """Refresh one component from live state.

        Only settings already captured by ``preset_config`` are kept, and the enabled
        state stays unasserted if it was unasserted before.
        """
        self._verify_editing()
        self._store(self._reconciled(preset_config, live_config))
        self.update_edited_preset()

    def update_all_modified(self) -> None:
        """Refresh every component of the preset from the current live state.

        Raises:
            status.LiveConfigNotFoundException: If a component has no live counterpart.
                Nothing is changed in that case.
        """
        self._verify_editing()
        self.refresh_live()
        pairs = []
        missing = []
        for config in self.edited_preset.configs:
            live = self._live_config(config.display_name)
            if live is None:
                missing.append(config.display_name)
            pairs.append((config, live))
        if missing:
            raise status.LiveConfigNotFoundException(', '.join(missing))

        for config, live in pairs:
            self._store(self._reconciled(config, live))
        self.update_edited_preset()

    def add_all(self, configs: Iterable[Config]) -> None:
        self._verify_editing()
        for config in configs:
            self._add_configuration(config)
        self.update_edited_preset()

    def remove_all(self, configs: Iterable[Config]) -> None:
        self._verify_editing()
        for config in configs:
            self._remove_configuration(config)
        self.update_edited_preset()

    def add_configuration_to_presets(self, config: Config) -> None:
        """Add ``config`` to the edited preset and to every other preset."""
        self._verify_editing()
        self._add_configuration(config)
        for preset in self._api.presets:
            if preset.id == self.edited_preset.id:
                continue
            if config.is_empty:
                preset.remove_config(config.display_name)
            else:
                preset.set_config(config.copy())
        self.update_edited_preset()

    def remove_configuration_from_presets(self, config: Config) -> None:
        """Remove ``config``'s component from the edited preset and every other preset."""
        self._verify_editing()
        self._remove_configuration(config)
        for preset in self._api.presets:
            if preset.id == self.edited_preset.id:
                continue
            preset.remove_config(config.display_name)
        self.update_edited_preset()

    def toggle_local(self) -> None:
        self._verify_editing()
        self.edited_preset.is_local_only = not self.edited_preset.is_local_only
        self.update_edited_preset()
