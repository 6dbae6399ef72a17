"""Dotted numeric version parsing and the update-available ordering rule."""

from typing import Sequence

from newversion.core.errors import ParseError

ZERO_VERSION = [0, 0, 0]


def parse_version(text: str | None) -> list[int]:
    """Split ``text`` on '.' and parse every segment as a base-10 integer.

    None or an empty string yields ``[0, 0, 0]``. Whitespace is not trimmed;
    callers pass already-clean strings.
    """
    if not text:
        return list(ZERO_VERSION)

    parts = []
    for segment in text.split('.'):
        # str.isdigit() also accepts superscripts and other unicode digits
        if not (segment.isascii() and segment.isdigit()):
            raise ParseError(segment, text)
        parts.append(int(segment))
    return parts


def render_version(parts: Sequence[int]) -> str:
    return '.'.join(str(p) for p in parts)


def can_update(local: Sequence[int], store: Sequence[int]) -> bool:
    """Return True if ``store`` is newer than ``local``.

    The first differing segment decides. When the shared prefix is equal,
    a longer store version counts as newer (1.2.0.1 > 1.2.0), but trailing
    segments are never zero-padded, so 1.2.0 is also newer than 1.2.
    """
    for local_part, store_part in zip(local, store):
        if store_part > local_part:
            return True
        if store_part < local_part:
            return False
    return len(store) > len(local)
