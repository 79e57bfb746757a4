"""Key combination index used to cycle through presets.

Several presets may share one key combination. Pressing it repeatedly loads the
preset after the one currently matching live state, looping back to the first.
"""
import logging
from typing import Dict, Iterable, List, Optional

from PySide6 import QtGui

from .matcher import match_preset
from .model import Config, Preset


def normalize_key_combo(combo: Optional[str]) -> Optional[str]:
    """Return the portable text form of a key combination, e.g. ``'Ctrl+Shift+F1'``.

    Args:
        combo: A key combination such as ``'ctrl+shift+f1'``.

    Returns:
        The normalized combination, or None when the combination is empty or unparsable.
    """
    if not combo or not combo.strip():
        return None
    sequence = QtGui.QKeySequence(combo.strip(), QtGui.QKeySequence.SequenceFormat.PortableText)
    normalized = sequence.toString(QtGui.QKeySequence.SequenceFormat.PortableText)
    if sequence.isEmpty() or not normalized:
        logging.warning(f'Could not parse key combination "{combo}"')
        return None
    return normalized


class KeybindIndex:
    """Maps normalized key combinations to the presets bound to them.

    The index is always rebuilt from the full preset collection, never patched, and
    keeps the collection order for every combination.
    """

    def __init__(self) -> None:
        self._keybinds: Dict[str, List[Preset]] = {}

    def __contains__(self, combo: str) -> bool:
        return normalize_key_combo(combo) in self._keybinds

    def __len__(self) -> int:
        return len(self._keybinds)

    def rebuild(self, presets: Iterable[Preset]) -> None:
        self._keybinds.clear()
        for preset in presets:
            combo = normalize_key_combo(preset.key_combo)
            if combo is None:
                continue
            self._keybinds.setdefault(combo, []).append(preset)
        logging.debug(f'Keybind index rebuilt with {len(self._keybinds)} combination(s)')

    def clear(self) -> None:
        self._keybinds.clear()

    def combos(self) -> List[str]:
        return list(self._keybinds.keys())

    def presets_for(self, combo: str) -> List[Preset]:
        """Return a copy of the presets bound to ``combo`` in cycling order."""
        return list(self._keybinds.get(normalize_key_combo(combo), []))

    def resolve_next(self, combo: str, live_configs: Iterable[Config]) -> Optional[Preset]:
        """Return the preset to load when ``combo`` is pressed.

        The first bound preset matching live state at index ``i`` yields the preset at
        ``i + 1``, wrapping to the first. When none matches, the first preset is
        returned. An unbound combination yields None.
        """
        presets = self._keybinds.get(normalize_key_combo(combo))
        if not presets:
            return None

        live_configs = list(live_configs)
        current = -1
        for i, preset in enumerate(presets):
            if match_preset(preset, live_configs):
                current = i
                break
        return presets[(current + 1) % len(presets)]
