"""Room label parsing for multi-room and roomless commitments."""

from __future__ import annotations

import re


_VIRTUAL_PATTERNS = (
    re.compile(r"\bonline\b", re.IGNORECASE),
    re.compile(r"\bzoom\b", re.IGNORECASE),
    re.compile(r"\bvirtual\b", re.IGNORECASE),
    re.compile(r"^remote$", re.IGNORECASE),
    re.compile(r"^asynchronous$", re.IGNORECASE),
)

_PLACEHOLDER_PATTERNS = (
    re.compile(r"^tba$", re.IGNORECASE),
    re.compile(r"^to\s+be\s+(announced|assigned)$", re.IGNORECASE),
    re.compile(r"^no\s+room\s+needed$", re.IGNORECASE),
    re.compile(r"^no\s+room$", re.IGNORECASE),
    re.compile(r"^\(none\s+assigned\)$", re.IGNORECASE),
    re.compile(r"^none\s+assigned$", re.IGNORECASE),
    re.compile(r"^n/?a$", re.IGNORECASE),
    re.compile(r"^general\s+assignment", re.IGNORECASE),
    re.compile(r"^off\s+campus$", re.IGNORECASE),
    re.compile(r"^arranged$", re.IGNORECASE),
)


def is_virtual_location(token: str) -> bool:
    return any(pattern.search(token) for pattern in _VIRTUAL_PATTERNS)


def is_placeholder_location(token: str) -> bool:
    return any(pattern.search(token) for pattern in _PLACEHOLDER_PATTERNS)


def is_physical_room(token: str) -> bool:
    """True for a label that names a real room rather than online/TBA text."""
    cleaned = token.strip()
    if not cleaned:
        return False
    return not is_virtual_location(cleaned) and not is_placeholder_location(cleaned)


def split_room_tokens(room_text: str | None, separator: str = ";") -> tuple[str, ...]:
    """Split a ';'-joined room field into its physical rooms, first occurrence wins."""
    if not room_text:
        return ()
    rooms: list[str] = []
    for token in room_text.split(separator):
        cleaned = " ".join(token.split())
        if not is_physical_room(cleaned) or cleaned in rooms:
            continue
        rooms.append(cleaned)
    return tuple(rooms)
