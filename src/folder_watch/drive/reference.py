"""Folder reference parsing — bare IDs and Google Drive folder URLs."""

from __future__ import annotations

import re

from folder_watch.errors import EmptyReference, UnrecognizedReference

BARE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

# Tried in order; the first pattern that matches wins.
URL_PATTERNS = (
    re.compile(r"/folders/([A-Za-z0-9_-]+)"),
    re.compile(r"[?&]id=([A-Za-z0-9_-]+)"),
    re.compile(r"#folders/([A-Za-z0-9_-]+)"),
)


def parse_reference(reference: str | None) -> str:
    """Extract a folder identifier from a raw user-supplied reference.

    Accepts a bare Drive ID or any of the URL shapes Drive hands out:
    ``.../drive/folders/<id>``, ``...open?id=<id>`` and ``...#folders/<id>``.

    Args:
        reference: Raw reference string as entered in the configuration table.

    Returns:
        The folder identifier.

    Raises:
        EmptyReference: If the reference is None or blank.
        UnrecognizedReference: If no accepted shape matches.
    """
    if reference is None:
        raise EmptyReference()
    trimmed = reference.strip()
    if not trimmed:
        raise EmptyReference()

    if BARE_ID_PATTERN.match(trimmed):
        return trimmed

    for pattern in URL_PATTERNS:
        match = pattern.search(trimmed)
        if match:
            return match.group(1)

    raise UnrecognizedReference(trimmed)
