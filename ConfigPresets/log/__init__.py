"""
Logging subsystem: handlers and helpers for application logging.

Modules:

- :mod:`ConfigPresets.log.log` – Log handler integrating with Python logging and the Qt message bridge.
"""
