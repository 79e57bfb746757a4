"""
ConfigPresets: snapshot, store, share and reconcile named presets of component configurations.

This package provides:

- :mod:`ConfigPresets.presets` – The preset data model, matcher, keybind index, storage, sharing codec and editor.
- :mod:`ConfigPresets.settings` – Application paths, constants and preset name validation.
- :mod:`ConfigPresets.status` – Status codes and status-carrying exceptions.
- :mod:`ConfigPresets.ui` – Application-wide Qt signals and clipboard slots.
- :mod:`ConfigPresets.log` – In-app logging with an in-memory log tank.

Use :class:`ConfigPresets.presets.lib.PresetsAPI` together with a
:class:`ConfigPresets.presets.host.Host` implementation to manage presets.
"""

import sys

# Fail on Python < 3.11
if not (sys.version_info.major == 3 and sys.version_info.minor >= 11):
    raise RuntimeError('ConfigPresets requires Python 3.11 or higher.')

__version__ = '0.1.0'
__author__ = 'Gergely Wootsch'
__license__ = 'GPL-3.0'
__copyright__ = 'Copyright (C) 2025 Gergely Wootsch'
__description__ = 'ConfigPresets: named presets of component configurations with keybind cycling and sharing.'

from .log import log

log.setup_logging()
