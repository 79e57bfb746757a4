"""
UI package: application-wide signals and host-facing slots.

This package provides:

- :mod:`ConfigPresets.ui.actions` – Application-wide Qt signals and clipboard slots.
"""
