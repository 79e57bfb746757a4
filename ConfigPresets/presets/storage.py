"""One-file-per-preset persistence of the preset collection.

Saving is never incremental: :meth:`PresetStorage.save_all` clears the presets
directory and writes every preset again, so renamed presets leave no orphaned files.
"""
import json
import logging
import pathlib
import shutil
from typing import Any, Dict, Iterable, List, Optional, Set

from . import legacy
from .model import Config, Preset
from ..settings import lib
from ..status import status


class PresetStorage:
    """Reads and writes presets as JSON files in one directory."""

    def __init__(self, presets_dir: pathlib.Path) -> None:
        self.presets_dir = pathlib.Path(presets_dir)

    def __repr__(self) -> str:
        return f'<PresetStorage presets_dir={str(self.presets_dir)!r}>'

    @staticmethod
    def sanitize(preset: Preset) -> str:
        """Return the file base name for a preset.

        Names failing :func:`~ConfigPresets.settings.lib.is_valid_preset_name` are
        replaced by a placeholder derived from the preset id.
        """
        name = preset.name.strip() if preset.name else ''
        if lib.is_valid_preset_name(name) and name.strip('.'):
            return name
        placeholder = lib.placeholder_name(preset.id)
        logging.debug(f'Preset name {preset.name!r} is not a valid file name, using "{placeholder}"')
        return placeholder

    @staticmethod
    def open_preset(path: pathlib.Path) -> Dict[str, Any]:
        """Read and parse a preset file.

        Raises:
            OSError: if the file cannot be read.
            ValueError: if the file does not contain a JSON object.
        """
        with path.open('r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as ex:
                raise ValueError(f'Malformed JSON in {path}: {ex}') from ex
        if not isinstance(data, dict):
            raise ValueError(f'{path} does not contain a preset object')
        return data

    @staticmethod
    def write_preset(path: pathlib.Path, preset: Preset) -> None:
        with path.open('w', encoding='utf-8') as f:
            json.dump(preset.to_dict(), f, indent=4, ensure_ascii=False)
            f.flush()

    def _stored_id(self, path: pathlib.Path) -> Optional[int]:
        try:
            return self.open_preset(path).get('id')
        except (OSError, ValueError) as ex:
            logging.debug(f'Could not read id of {path}: {ex}')
            return None

    def _clear(self) -> None:
        for entry in self.presets_dir.iterdir():
            try:
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
            except OSError as ex:
                logging.warning(f'Could not delete {entry.name}: {ex}')

    def path_for(self, preset: Preset, written: Set[str]) -> pathlib.Path:
        """Return a free file path for ``preset``.

        A name is taken when it was written earlier in the same save pass, or when a
        leftover file of that name holds a preset with a different id. Taken names get
        a ``" (n)"`` suffix, counting up from 1.
        """
        base = self.sanitize(preset)
        candidate = f'{base}.{lib.PRESET_FORMAT}'
        n = 0
        while True:
            path = self.presets_dir / candidate
            if candidate not in written:
                if not path.exists():
                    return path
                if path.is_file() and self._stored_id(path) == preset.id:
                    return path
            n += 1
            candidate = f'{base} ({n}).{lib.PRESET_FORMAT}'

    def save_all(self, presets: Iterable[Preset]) -> List[pathlib.Path]:
        """Replace the directory contents with one file per preset.

        Returns:
            list[pathlib.Path]: The written files in preset order.

        Raises:
            OSError: If a preset file cannot be written. Files written before the
                failure stay on disk.
        """
        self.presets_dir.mkdir(parents=True, exist_ok=True)
        self._clear()

        written: Set[str] = set()
        paths: List[pathlib.Path] = []
        for preset in presets:
            path = self.path_for(preset, written)
            try:
                self.write_preset(path, preset)
            except OSError as ex:
                logging.error(f'Failed to write preset "{preset.name}" to {path}: {ex}')
                raise
            written.add(path.name)
            paths.append(path)

        logging.debug(f'Saved {len(paths)} preset(s) to {self.presets_dir}')
        return paths

    def load_all(self, live_configs: Optional[Iterable[Config]] = None) -> List[Preset]:
        """Load every valid preset file.

        Args:
            live_configs: Live state used to convert legacy-format files. Legacy files
                are skipped when omitted.

        Returns:
            list[Preset]: Presets in file name order, without duplicate ids.

        Raises:
            status.PresetsDirInvalidException: If the directory cannot be listed.
        """
        if not self.presets_dir.exists():
            logging.info(f'Creating presets directory: {self.presets_dir}')
            self.presets_dir.mkdir(parents=True, exist_ok=True)
            return []

        try:
            entries = sorted(self.presets_dir.iterdir())
        except OSError as ex:
            raise status.PresetsDirInvalidException(f'{self.presets_dir}: {ex}') from ex

        live_configs = list(live_configs) if live_configs is not None else None

        presets: List[Preset] = []
        loaded_ids: Set[int] = set()
        for path in entries:
            if path.is_dir():
                logging.warning(f'Skipped invalid preset: {path} is a directory')
                continue

            preset = self._parse(path, live_configs)
            if preset is None:
                continue
            if preset.id in loaded_ids:
                logging.debug(f'Skipped duplicate preset id {preset.id} in {path}')
                continue

            loaded_ids.add(preset.id)
            presets.append(preset)

        logging.debug(f'Loaded {len(presets)} preset(s) from {self.presets_dir}')
        return presets

    def _parse(self, path: pathlib.Path, live_configs: Optional[List[Config]]) -> Optional[Preset]:
        try:
            data = self.open_preset(path)
            if legacy.is_legacy(data):
                if live_configs is None:
                    logging.warning(f'Skipped legacy preset {path}: no live state to convert it with')
                    return None
                return legacy.convert(data, live_configs)
            return Preset.from_dict(data)
        except (OSError, ValueError, TypeError) as ex:
            logging.warning(f'Failed to load preset from {path}: {ex}')
            return None
