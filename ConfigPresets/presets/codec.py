"""Portable text export and import of a single preset.

The exported text is the same JSON object a preset file holds, without framing, so
it can travel through the clipboard or a chat message.
"""
import json
import logging
import re
from typing import Iterable, Optional, Tuple

from .model import Preset, new_preset_id

NUMERIC_SUFFIX_PATTERN: re.Pattern = re.compile(r'^(?P<base>.*) \((?P<number>\d+)\)$', re.DOTALL)


def split_numeric_suffix(name: str) -> Tuple[str, Optional[int]]:
    """Split a trailing ``" (<digits>)"`` suffix off a preset name.

    Args:
        name: A preset name, e.g. ``'Melee (2)'``.

    Returns:
        tuple: ``('Melee', 2)`` for a suffixed name, ``(name, None)`` otherwise.
    """
    match = NUMERIC_SUFFIX_PATTERN.match(name)
    if not match:
        return name, None
    return match.group('base'), int(match.group('number'))


def count_containing(name: str, names: Iterable[str]) -> int:
    """Count the names that contain ``name`` as a substring."""
    return sum(1 for n in names if name in n)


def create_name_with_suffix(name: str, existing: Iterable[Preset]) -> str:
    """Resolve an imported preset name against the existing presets.

    Every existing name *containing* the imported name counts as a duplicate, so
    ``'Melee'`` collides with ``'Melee (2)'``. A colliding name gets a ``" (<count>)"``
    suffix. A name that already carries a numeric suffix is stripped first and the
    count is taken again against the stripped base name.
    """
    names = [p.name for p in existing]
    duplicates = count_containing(name, names)
    if not duplicates:
        return name

    base, number = split_numeric_suffix(name)
    if number is not None:
        duplicates = count_containing(base, names)
        return f'{base} ({duplicates})'
    return f'{name} ({duplicates})'


def export_preset(preset: Preset) -> str:
    """Serialize a preset to a self-describing JSON text."""
    return json.dumps(preset.to_dict(), ensure_ascii=False)


def decode_preset(text: Optional[str]) -> Optional[Preset]:
    """Parse a preset from text without touching its id or name.

    Returns:
        The decoded preset, or None if the text is not a valid preset.
    """
    if not text or not text.strip():
        logging.warning('Nothing to import: the text is empty')
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError as ex:
        logging.warning(f'Failed to import preset: {ex}')
        return None
    if not isinstance(data, dict):
        logging.warning('Failed to import preset: the text is not a preset object')
        return None
    try:
        return Preset.from_dict(data)
    except (ValueError, TypeError) as ex:
        logging.warning(f'Failed to import preset: {ex}')
        return None


def import_preset(text: Optional[str], existing: Iterable[Preset]) -> Optional[Preset]:
    """Decode an exported preset and make it safe to add to ``existing``.

    The imported id is never trusted: a fresh id is assigned. The name is resolved
    with :func:`create_name_with_suffix`.

    Returns:
        The imported preset, or None if the text does not hold a valid preset.
    """
    preset = decode_preset(text)
    if preset is None:
        return None

    preset.id = new_preset_id()
    preset.is_local_only = True
    name = create_name_with_suffix(preset.name, existing)
    if name != preset.name:
        logging.debug(f'Imported preset "{preset.name}" renamed to "{name}"')
        preset.name = name

    logging.info(f'Imported preset "{preset.name}" with {len(preset.configs)} component(s)')
    return preset
