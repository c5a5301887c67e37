"""Normalisation of Notion page, database and block IDs."""

import string

from src.notion.exceptions import InvalidIdentifierError

ID_LENGTH = 32

# Group boundaries of the canonical 8-4-4-4-12 form
_GROUPS = (8, 4, 4, 4, 12)
_HEX_DIGITS = frozenset(string.hexdigits)


def normalize_id(raw: str) -> str:
    """Convert a loosely formatted ID to its canonical hyphenated form.

    Accepts IDs with or without hyphens, e.g. ``2fb74f324ab980f583dfc93c885072e7``
    or ``2fb74f32-4ab9-80f5-83df-c93c885072e7``.

    :param raw: ID as supplied by the user.
    :returns: Lowercase ID in 8-4-4-4-12 form.
    :raises InvalidIdentifierError: If the ID is not 32 hex characters.
    """
    clean = raw.strip().replace("-", "")

    if len(clean) != ID_LENGTH:
        raise InvalidIdentifierError(
            f"Invalid ID '{raw}': expected {ID_LENGTH} hex characters, got {len(clean)}"
        )

    if not _HEX_DIGITS.issuperset(clean):
        raise InvalidIdentifierError(f"Invalid ID '{raw}': contains non-hex characters")

    clean = clean.lower()
    parts: list[str] = []
    offset = 0
    for size in _GROUPS:
        parts.append(clean[offset : offset + size])
        offset += size

    return "-".join(parts)
