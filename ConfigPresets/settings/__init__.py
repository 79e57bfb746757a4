"""
Settings package: application paths, constants and name validation.

This package provides:

- :mod:`ConfigPresets.settings.lib` – Preset directory resolution, preset name validation and placeholder names.
"""
