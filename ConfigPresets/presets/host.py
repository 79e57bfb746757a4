"""The boundary to the process that owns the live components.

Presets never enable a component or write a value themselves. Subclass :class:`Host`
to expose the live registry to :class:`~ConfigPresets.presets.lib.PresetsAPI`.
"""
from typing import List, Optional

from .model import Config


class Host:
    """Adapter interface to the live component registry."""

    def get_current_configs(self) -> List[Config]:
        """Return a freshly built config for every live component.

        The returned configs are treated as an immutable snapshot.
        """
        raise NotImplementedError

    def get_configuration(self, group: str, key: str) -> Optional[str]:
        """Return the live value stored under ``group``/``key``, or None."""
        raise NotImplementedError

    def set_configuration(self, group: str, key: str, value: str, custom: bool = False) -> None:
        """Write ``value`` under ``group``/``key``.

        ``custom`` is True when the group differs from the owning component's own group.
        """
        raise NotImplementedError

    def is_component_enabled(self, name: str) -> Optional[bool]:
        """Return whether the named component is enabled, or None if it is unknown."""
        raise NotImplementedError

    def set_component_enabled(self, name: str, enabled: bool) -> None:
        raise NotImplementedError

    def restart_component(self, name: str) -> None:
        """Stop and start the named component so it re-reads custom-grouped settings."""
        raise NotImplementedError
