"""Status definitions and exceptions for ConfigPresets.

This module provides:
    - Status: enumeration of possible preset states
    - STATUS_MESSAGE: user-facing messages for each status
    - get_message: retrieve the message for a status
    - BaseStatusException: base exception carrying a Status
    - Specific exceptions (e.g., LiveConfigNotFoundException) for error handling in the preset APIs
"""
import enum
import logging
from typing import Dict


class Status(enum.StrEnum):
    """Enumeration of preset status codes."""
    UnknownStatus = enum.auto()

    # Storage status
    PresetsDirInvalid = enum.auto()

    # Collection status
    PresetNotFound = enum.auto()

    # Live state status
    LiveConfigNotFound = enum.auto()

    # Sharing status
    ClipboardEmpty = enum.auto()
    ClipboardInvalid = enum.auto()


STATUS_MESSAGE: Dict[Status, str] = {
    Status.UnknownStatus: 'Unknown status. Please check the presets folder.',

    Status.PresetsDirInvalid: 'Could not read the presets folder.',

    Status.PresetNotFound: 'Could not find the preset. Was it deleted?',

    Status.LiveConfigNotFound: 'Could not find the current configuration of a component in the preset.',

    Status.ClipboardEmpty: 'Your clipboard is empty.',
    Status.ClipboardInvalid: 'You do not have any valid presets in your clipboard.',
}


def get_message(status: Status) -> str:
    """
    Get the message for a given status.

    Args:
        status (Status): The status enum.

    Returns:
        str: The message associated with the status.
    """
    return STATUS_MESSAGE.get(status, 'Unknown status')


class BaseStatusException(Exception):
    """Base exception for status-based errors in ConfigPresets.

    Attributes:
        status (Status): Status code associated with this error.
        status_message (str): User-facing message for the status.

    Args:
        message (str): Optional additional context for the error.
    """
    status = Status.UnknownStatus

    def __init__(self, message: str = None):
        self.status_message = get_message(self.status)
        exception_message = f'{self.status_message} {message}' if message else self.status_message
        super().__init__(exception_message)

        logging.error(exception_message)

        from ..ui.actions import signals
        signals.error.emit(message or self.status_message)


class PresetsDirInvalidException(BaseStatusException):
    """Exception raised when the presets directory cannot be listed."""
    status = Status.PresetsDirInvalid


class PresetNotFoundException(BaseStatusException):
    """Exception raised when a preset id is not present in the preset collection."""
    status = Status.PresetNotFound


class LiveConfigNotFoundException(BaseStatusException):
    """Exception raised when a preset config has no live counterpart during a bulk update."""
    status = Status.LiveConfigNotFound
