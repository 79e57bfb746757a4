"""Application-wide Qt signals and clipboard slots for ConfigPresets.

This module provides:
    - get_clipboard_text / set_clipboard_text: the clipboard medium used to share presets.
    - Signals: custom Qt signals for preset collection changes, preset loading,
      user notifications, errors and log display.
"""
import logging
from typing import Optional

from PySide6 import QtCore, QtGui


def get_clipboard_text() -> Optional[str]:
    """Return the text currently held by the system clipboard.

    Emits a notification and returns None when no application clipboard is available or
    the clipboard is empty.
    """
    from ..status import status

    if not isinstance(QtCore.QCoreApplication.instance(), QtGui.QGuiApplication):
        logging.warning('Unable to read the system clipboard: no application instance.')
        signals.notification.emit('Unable to read system clipboard.')
        return None

    text = QtGui.QGuiApplication.clipboard().text()
    if not text:
        signals.notification.emit(status.get_message(status.Status.ClipboardEmpty))
        return None
    return text


def set_clipboard_text(text: str) -> None:
    """Place the given text on the system clipboard."""
    if not isinstance(QtCore.QCoreApplication.instance(), QtGui.QGuiApplication):
        logging.warning('Unable to write the system clipboard: no application instance.')
        return
    QtGui.QGuiApplication.clipboard().setText(text)
    logging.debug(f'Copied {len(text)} characters to the clipboard')


class Signals(QtCore.QObject):
    """Centralized Qt signals for preset, live state and log events."""
    presetsChanged = QtCore.Signal()
    presetAboutToBeLoaded = QtCore.Signal()
    presetLoaded = QtCore.Signal()

    # The host should rebuild its live configuration snapshot
    liveStateRefreshRequested = QtCore.Signal()

    notification = QtCore.Signal(str)
    showLogs = QtCore.Signal()

    error = QtCore.Signal(str)

    def __init__(self):
        super().__init__()
        self._connect_signals()

    def _connect_signals(self):
        @QtCore.Slot(str)
        def notification_logged(message: str) -> None:
            logging.info(f'Notification: {message}')

        self.notification.connect(notification_logged)


signals = Signals()
