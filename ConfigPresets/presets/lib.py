"""PresetsAPI: the single owner of the preset collection.

The API keeps the ordered preset list, persists it after every change through
:class:`~ConfigPresets.presets.storage.PresetStorage`, keeps the keybind index in
step with it and applies presets to the live state through a
:class:`~ConfigPresets.presets.host.Host`.
"""
import logging
from typing import Dict, Iterator, List, Optional, Union

from PySide6 import QtCore

from . import codec
from .editor import PresetEditor
from .host import Host
from .keybind import KeybindIndex, normalize_key_combo
from .matcher import match_preset
from .model import Config, Preset, Setting
from .storage import PresetStorage
from ..settings import lib
from ..status import status
from ..ui import actions
from ..ui.actions import signals

#: Delay between a change in the presets directory and the reload it triggers.
WATCH_DELAY_MS: int = 250


class PresetsAPI(QtCore.QObject):
    """
    Manages presets: the ordered collection, its on-disk files and the keybind index.
    Provides methods to create, import, export, edit, delete and load presets.
    """

    # Signals to notify views of changes
    presetsReloaded = QtCore.Signal()
    presetAdded = QtCore.Signal(int)
    presetRemoved = QtCore.Signal(int)
    presetUpdated = QtCore.Signal(int)
    presetLoaded = QtCore.Signal(int)

    def __init__(self, host: Host, storage: Optional[PresetStorage] = None) -> None:
        """
        Args:
            host: The adapter to the live component registry.
            storage: Preset storage, defaults to the application presets directory.
        """
        super().__init__()
        self.host = host
        self.storage = storage or PresetStorage(lib.ConfigPaths().presets_dir)
        self.keybinds = KeybindIndex()
        self._items: List[Preset] = []
        self._editor: Optional[PresetEditor] = None

        self._watching = False
        self._known_files: Dict[str, int] = {}
        self._watcher = QtCore.QFileSystemWatcher(self)

        # Coalesce the bursts of change notifications a single file write produces
        self._refresh_timer = QtCore.QTimer(self)
        self._refresh_timer.setSingleShot(True)
        self._refresh_timer.setInterval(WATCH_DELAY_MS)

        self._connect_signals()
        self.load_presets()

    def _connect_signals(self) -> None:
        self._watcher.directoryChanged.connect(self._on_presets_dir_changed)
        self._watcher.fileChanged.connect(self._on_presets_dir_changed)
        self._refresh_timer.timeout.connect(self.reload_if_changed)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Preset]:
        return iter(list(self._items))

    def __getitem__(self, key: Union[int, str]) -> Preset:
        if isinstance(key, int):
            return self._items[key]
        if isinstance(key, str):
            for item in self._items:
                if item.name == key:
                    return item
            raise KeyError(f'No preset named \'{key}\'')
        raise TypeError('Key must be int or str')

    @property
    def presets(self) -> List[Preset]:
        """A snapshot list of all presets in collection order."""
        return list(self._items)

    @property
    def editor(self) -> Optional[PresetEditor]:
        return self._editor

    def get(self, preset_id: int) -> Optional[Preset]:
        """Return the preset with the given id, or None if not found."""
        return next((item for item in self._items if item.id == preset_id), None)

    def index(self, preset: Preset) -> int:
        """Return the collection index of the preset with ``preset``'s id, or -1."""
        return next((i for i, item in enumerate(self._items) if item.id == preset.id), -1)

    def current_configs(self) -> List[Config]:
        """Return the host's live configs, without ignored components."""
        return [c for c in self.host.get_current_configs() if c.display_name not in lib.IGNORED_COMPONENTS]

    def load_presets(self, keep_order: bool = False) -> None:
        """Reload the collection from disk.

        Args:
            keep_order: Keep the current collection order for presets already known.
                Presets new to the collection are appended in file name order.
        """
        presets = self.storage.load_all(self.current_configs())
        if keep_order:
            order = {p.id: i for i, p in enumerate(self._items)}
            presets.sort(key=lambda p: order.get(p.id, len(order)))

        self._items = presets
        self.keybinds.rebuild(self._items)
        self._known_files = self._presets_dir_state()
        self._watch_files()
        self.presetsReloaded.emit()

    def save_presets(self) -> None:
        """Persist every preset and rebuild the keybind index.

        Raises:
            OSError: If a preset file cannot be written.
        """
        try:
            self.storage.save_all(self._items)
        finally:
            # Our own writes must not read as outside changes
            self._known_files = self._presets_dir_state()
            self._watch_files()
        self.keybinds.rebuild(self._items)
        signals.presetsChanged.emit()

    def refresh_presets(self) -> None:
        """Reload from disk, save back and ask the host for a new live snapshot."""
        self.load_presets(keep_order=True)
        self.save_presets()
        signals.liveStateRefreshRequested.emit()

    @property
    def is_watching(self) -> bool:
        return self._watching

    def watch_presets_dir(self) -> None:
        """Reload the collection whenever preset files are added, removed or edited outside the API."""
        self.storage.presets_dir.mkdir(parents=True, exist_ok=True)
        path = str(self.storage.presets_dir)
        if path not in self._watcher.directories():
            self._watcher.addPath(path)
        self._watching = True
        self._watch_files()
        logging.debug(f'Watching {path} for preset changes')

    def stop_watching(self) -> None:
        self._refresh_timer.stop()
        paths = self._watcher.directories() + self._watcher.files()
        if paths:
            self._watcher.removePaths(paths)
        self._watching = False
        logging.debug('Stopped watching the presets directory')

    def _presets_dir_state(self) -> Dict[str, int]:
        try:
            return {p.name: p.stat().st_mtime_ns for p in self.storage.presets_dir.iterdir()}
        except OSError:
            return {}

    def _watch_files(self) -> None:
        if not self._watching:
            return
        watched = set(self._watcher.files())
        paths = [str(p) for p in sorted(self.storage.presets_dir.glob(f'*.{lib.PRESET_FORMAT}'))
                 if p.is_file() and str(p) not in watched]
        if paths:
            self._watcher.addPaths(paths)

    @QtCore.Slot(str)
    def _on_presets_dir_changed(self, path: str) -> None:
        if self._watching:
            self._refresh_timer.start()

    @QtCore.Slot()
    def reload_if_changed(self) -> bool:
        """Refresh the collection if the presets directory differs from the last load or save.

        Returns:
            bool: True if the collection was refreshed.
        """
        if self._presets_dir_state() == self._known_files:
            return False
        logging.info(f'Preset files changed in {self.storage.presets_dir}, reloading')
        self.refresh_presets()
        return True

    def snapshot(self) -> List[Config]:
        """Return a copy of every live config, suitable for storing in a preset."""
        return [c.copy() for c in self.current_configs()]

    def create_preset(self, name: str = '', snapshot: bool = True) -> Preset:
        """Create and store a new preset.

        Args:
            name: The preset name. An empty name becomes ``'Preset <n>'``.
            snapshot: Capture every live config when True, create an empty preset otherwise.

        Returns:
            The newly created Preset.
        """
        name = name.strip() if name else ''
        if not name:
            name = lib.placeholder_name(len(self._items) + 1)
        preset = Preset(name=name, configs=self.snapshot() if snapshot else [])
        return self.add_preset(preset)

    def add_preset(self, preset: Preset) -> Preset:
        """Append a preset to the collection and save.

        A preset whose id is already taken is given a new id.
        """
        if self.get(preset.id) is not None:
            old_id = preset.id
            preset.id = Preset(name=preset.name).id
            logging.debug(f'Preset id {old_id} already taken, re-identified as {preset.id}')

        self._items.append(preset)
        self.save_presets()
        self.presetAdded.emit(len(self._items) - 1)
        logging.debug(f'Added preset "{preset.name}" ({preset.id})')
        return preset

    def delete_preset(self, preset: Preset) -> bool:
        """Remove a preset from the collection and save.

        Returns:
            bool: False if the preset is not part of the collection.
        """
        idx = self.index(preset)
        if idx < 0:
            logging.warning(f'Cannot delete preset "{preset.name}": not found')
            return False

        self._items.pop(idx)
        if self._editor and self._editor.edited_preset.id == preset.id:
            self.stop_editing()
        self.save_presets()
        self.presetRemoved.emit(idx)
        logging.debug(f'Deleted preset "{preset.name}"')
        return True

    def _require(self, preset: Preset) -> Preset:
        item = self.get(preset.id)
        if item is None:
            raise status.PresetNotFoundException(f'"{preset.name}" ({preset.id})')
        return item

    def _updated(self, item: Preset) -> None:
        self.save_presets()
        self.presetUpdated.emit(self.index(item))

    def rename_preset(self, preset: Preset, new_name: str) -> bool:
        """Rename a preset. Returns False for an empty name."""
        if not new_name or not new_name.strip():
            logging.warning('Ignored empty new_name')
            return False
        item = self._require(preset)
        item.name = new_name.strip()
        if self._editor and self._editor.edited_preset.id == item.id:
            self._editor.edited_preset.name = item.name
        self._updated(item)
        return True

    def set_key_combo(self, preset: Preset, combo: Optional[str]) -> bool:
        """Bind a preset to a key combination, or unbind it with None or an empty string.

        Returns:
            bool: False if ``combo`` is not a valid key combination. The binding is
            left unchanged in that case.
        """
        item = self._require(preset)
        normalized = normalize_key_combo(combo)
        if normalized is None and combo and combo.strip():
            logging.warning(f'Ignored invalid key combination "{combo}" for "{item.name}"')
            return False
        item.key_combo = normalized
        self._updated(item)
        return True

    def set_load_on_focus_change(self, preset: Preset, value: Optional[bool]) -> None:
        """Load the preset on focus gain (True), focus loss (False) or never (None)."""
        item = self._require(preset)
        item.load_on_focus_change = value
        self._updated(item)

    def update_preset(self, preset: Preset) -> None:
        """Refresh every component of a preset from live state.

        Raises:
            status.LiveConfigNotFoundException: If a component is not live.
        """
        editor = self._editor
        if editor and editor.is_editing and editor.edited_preset.id == preset.id:
            editor.update_all_modified()
            return

        scratch = PresetEditor(self, self._require(preset))
        scratch.attach()
        try:
            scratch.update_all_modified()
        finally:
            scratch.detach()

    def edit(self, preset: Preset) -> PresetEditor:
        """Make ``preset`` the edited preset, detaching any previous editor."""
        item = self._require(preset)
        self.stop_editing()
        self._editor = PresetEditor(self, item)
        self._editor.attach()
        return self._editor

    def stop_editing(self) -> None:
        if self._editor is not None:
            self._editor.detach()
            self._editor = None

    def matching_presets(self) -> List[Preset]:
        """Return the presets that match live state."""
        live = self.current_configs()
        return [p for p in self._items if match_preset(p, live)]

    def is_active(self, preset: Preset) -> bool:
        return match_preset(preset, self.current_configs())

    def load_preset(self, preset: Preset) -> None:
        """Apply a preset to the live state.

        Every setting with a value is written under its custom group, or the
        component's group. Components are then enabled or disabled as asserted.
        Components holding custom settings whose enabled state the preset does not
        change are restarted so they re-read their settings.
        """
        signals.presetAboutToBeLoaded.emit()

        restart = []
        for config in preset.configs:
            if not config.contains_custom_settings():
                continue
            enabled = self.host.is_component_enabled(config.display_name)
            if enabled is None:
                continue
            if config.enabled is None or config.enabled == enabled:
                restart.append(config.display_name)

        for config in preset.configs:
            for setting in config.settings.values():
                # Hidden timers or unpicked colors are stored as None
                if setting.value is None:
                    continue
                custom = setting.custom_group is not None
                group = setting.custom_group if custom else config.group_id
                if group is None:
                    logging.warning(f'Cannot write "{setting.key}" of "{config.display_name}": no group')
                    continue
                self.host.set_configuration(group, setting.key, setting.value, custom=custom)

            if config.enabled is not None and self.host.is_component_enabled(config.display_name) is not None:
                self.host.set_component_enabled(config.display_name, config.enabled)

        for name in restart:
            self.host.restart_component(name)

        logging.info(f'Loaded preset "{preset.name}"')
        idx = self.index(preset)
        if idx >= 0:
            self.presetLoaded.emit(idx)
        signals.presetLoaded.emit()

    def disable_preset(self, preset: Preset) -> None:
        """Disable every component the preset enables."""
        for config in preset.configs:
            if config.enabled and self.host.is_component_enabled(config.display_name) is not None:
                self.host.set_component_enabled(config.display_name, False)
        logging.info(f'Disabled preset "{preset.name}"')

    def on_key_combo(self, combo: str) -> Optional[Preset]:
        """Load the next preset bound to ``combo``.

        Returns:
            The loaded preset, or None if nothing is bound to the combination.
        """
        preset = self.keybinds.resolve_next(combo, self.current_configs())
        if preset is None:
            logging.debug(f'No preset bound to "{combo}"')
            return None
        self.load_preset(preset)
        return preset

    def on_focus_changed(self, focused: bool) -> List[Preset]:
        """Load every preset set to load on this focus change.

        Returns:
            list[Preset]: The loaded presets.
        """
        loaded = [p for p in self._items if p.load_on_focus_change is not None and p.load_on_focus_change == focused]
        for preset in loaded:
            self.load_preset(preset)
        return loaded

    def export_preset(self, preset: Preset) -> str:
        return codec.export_preset(preset)

    def import_preset(self, text: Optional[str]) -> Optional[Preset]:
        """Import a preset from exported text and add it to the collection.

        Returns:
            The imported preset, or None if the text holds no valid preset.
        """
        preset = codec.import_preset(text, self._items)
        if preset is None:
            signals.notification.emit(status.get_message(status.Status.ClipboardInvalid))
            return None
        return self.add_preset(preset)

    def copy_to_clipboard(self, preset: Preset) -> None:
        actions.set_clipboard_text(self.export_preset(preset))
        signals.notification.emit(f'Copied "{preset.name}" to the clipboard.')

    def paste_from_clipboard(self) -> Optional[Preset]:
        """Import the preset held by the system clipboard."""
        text = actions.get_clipboard_text()
        if text is None:
            return None
        return self.import_preset(text)

    def custom_settings_for(self, group_id: str) -> List[Setting]:
        """Return the custom settings stored presets declare for a component group.

        Each ``<custom group>.<key>`` pair is returned once, first occurrence wins.
        Hosts include these settings when building the live config for ``group_id``.
        """
        seen: Dict[str, Setting] = {}
        for preset in self._items:
            for config in preset.configs:
                if config.group_id != group_id:
                    continue
                for setting in config.settings.values():
                    if setting.custom_group is None:
                        continue
                    seen.setdefault(f'{setting.custom_group}.{setting.key}', setting)
        return list(seen.values())

    def unsaved_components(self, preset: Preset) -> List[str]:
        """Return live components the preset has no config for."""
        names = set(preset.config_names())
        return [c.display_name for c in self.current_configs() if c.display_name not in names]

    def missing_components(self, preset: Preset) -> List[str]:
        """Return components in the preset that are not live."""
        live = {c.display_name for c in self.current_configs()}
        missing = [name for name in preset.config_names() if name not in live]
        if missing:
            logging.debug(f'Preset "{preset.name}" uses missing {lib.component_list_to_string(missing)}')
        return missing
