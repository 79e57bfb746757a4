"""Settings library for preset paths and naming rules.

Provides:
    - ConfigPaths: resolution and preparation of the presets directory.
    - Constants for the preset file format, placeholder names and ignored components.
    - Preset name validation and helpers for deriving display labels.
"""

import logging
import pathlib
import re
from typing import List, Optional

from PySide6 import QtCore

app_name: str = 'ConfigPresets'

PRESET_FORMAT: str = 'json'
DEFAULT_PRESET_NAME: str = 'Preset'

#: Components that never take part in presets, e.g. the component hosting the presets itself.
IGNORED_COMPONENTS: List[str] = ['Plugin Presets', 'Configuration', 'Xtea', 'Twitch', 'Notes', 'Discord']

#: Letters (including the a-ö accented range), digits, space and - _ . , ; = ( ) + !
PRESET_NAME_PATTERN: re.Pattern = re.compile(r'^[ a-zà-ö0-9\-_.,;=()+!]+$', re.IGNORECASE)


def is_valid_preset_name(name: Optional[str]) -> bool:
    """Check whether a preset name can be used as a file name.

    Args:
        name (str): The preset name to validate.

    Returns:
        bool: True if the name is non-empty and only uses allowed characters.
    """
    if not name:
        return False
    return bool(PRESET_NAME_PATTERN.fullmatch(name))


def placeholder_name(number: int) -> str:
    """Return a generated placeholder preset name, e.g. 'Preset 3'."""
    return f'{DEFAULT_PRESET_NAME} {number}'


def split_and_capitalize(value: str) -> str:
    """Turn a camelCase setting key into a display label.

    Non-word characters are dropped, words are split at uppercase letters and
    every word is capitalized, e.g. ``'showNpcNames'`` becomes ``'Show Npc Names'``.
    """
    value = re.sub(r'\W', '', value or '')
    value = re.sub(r'(.)([A-Z])', r'\1 \2', value)
    return ' '.join(w[:1].upper() + w[1:] for w in value.split(' '))


def component_list_to_string(names: List[str]) -> str:
    """Join component names into a readable sentence.

    Args:
        names (list[str]): Component names, at least one.

    Returns:
        str: e.g. ``'Agility, Boosts and Camera plugins.'``
    """
    if not names:
        raise ValueError('At least one component name is required.')

    message = names[0]
    for i in range(1, len(names)):
        if i == len(names) - 1:
            message += f' and {names[i]}'
            break
        message += ', '
        if i % 4 == 0:
            message += '\n'
        message += names[i]

    if len(names) == 1:
        return f'{message} plugin.'
    return f'{message} plugins.'


class ConfigPaths:
    """Manage application file paths and ensure the presets directory exists.

    The presets directory defaults to ``<AppDataLocation>/presets``. Tests and hosts that
    keep their presets elsewhere pass ``presets_dir`` explicitly.
    """

    def __init__(self, presets_dir: Optional[pathlib.Path] = None) -> None:
        """Set up application paths and create the presets directory when missing.

        Args:
            presets_dir: Optional directory overriding the default location.
        """
        QtCore.QCoreApplication.setApplicationName(app_name)
        QtCore.QCoreApplication.setOrganizationName('')
        logging.debug(f'Setting application name: {app_name}')

        if presets_dir is None:
            p = QtCore.QStandardPaths.writableLocation(QtCore.QStandardPaths.AppDataLocation)
            app_data_dir = pathlib.Path(p)
            logging.debug(f'Using app data directory: {app_data_dir}')
            self.presets_dir: pathlib.Path = app_data_dir / 'presets'
        else:
            self.presets_dir = pathlib.Path(presets_dir)

        self._verify_and_prepare()

    def _verify_and_prepare(self) -> None:
        """Create the presets directory if it does not exist yet."""
        if not self.presets_dir.exists():
            logging.info(f'Creating presets directory: {self.presets_dir}')
            self.presets_dir.mkdir(parents=True, exist_ok=True)

    def delete_presets_dir_if_empty(self) -> bool:
        """Remove the presets directory when it holds no entries.

        Returns:
            bool: True if the directory was removed.
        """
        if not self.presets_dir.exists():
            return False
        if any(self.presets_dir.iterdir()):
            return False
        try:
            self.presets_dir.rmdir()
        except OSError as ex:
            logging.warning(f'Could not delete {self.presets_dir}: {ex}')
            return False
        return True
