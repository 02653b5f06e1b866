"""Stable folder-to-ledger identity mapping that survives renames."""

from __future__ import annotations

import logging
import re

from folder_watch.ledger.ledger import Ledger
from folder_watch.ledger.store import LedgerStore, MappingStore

logger = logging.getLogger(__name__)

MAX_LEDGER_NAME_LENGTH = 31
ID_FRAGMENT_LENGTH = 6
DEFAULT_BASE_NAME = "folder"
DEFAULT_ID_FRAGMENT = "id"
SUFFIX_SEPARATOR = "_"

_ILLEGAL_NAME_CHARS = re.compile(r"[/\\?*\[\]:]")
_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")


def sanitize_name(name: str | None) -> str:
    """Make a folder display name usable as a ledger name.

    Replaces ``/ \\ ? * [ ] :`` with underscores, trims whitespace, falls back
    to "folder" when nothing is left and truncates to 31 characters.
    """
    cleaned = _ILLEGAL_NAME_CHARS.sub("_", name or "").strip()
    if not cleaned:
        cleaned = DEFAULT_BASE_NAME
    return cleaned[:MAX_LEDGER_NAME_LENGTH]


def id_fragment(folder_id: str | None) -> str:
    """Return the last six alphanumeric characters of a folder identifier."""
    alphanumeric = _NON_ALPHANUMERIC.sub("", folder_id or "")
    return alphanumeric[-ID_FRAGMENT_LENGTH:] or DEFAULT_ID_FRAGMENT


def with_suffix(base: str, suffix: str) -> str:
    """Append ``_<suffix>`` to base, truncating base so the result fits 31 characters."""
    tail = f"{SUFFIX_SEPARATOR}{suffix}"
    return f"{base[: MAX_LEDGER_NAME_LENGTH - len(tail)]}{tail}"


class IdentityMapper:
    """Finds or creates the ledger belonging to a folder identifier.

    Lookup order, first match wins:

    1. The persisted mapping, if the ledger it names still exists.
    2. A ledger whose marker carries the folder identifier.
    3. A single ledger named after the folder (sanitized name, raw name or
       ``<sanitized>_...``) that is not marked for a different folder.
    4. A newly created ledger with a collision-free name.

    Whatever ledger is chosen gets re-marked and re-mapped.
    """

    def __init__(self, store: LedgerStore, mapping: MappingStore) -> None:
        self._store = store
        self._mapping = mapping

    def resolve(self, folder_id: str, display_name: str) -> Ledger:
        """Return the ledger for a folder, creating one when none is found.

        Args:
            folder_id: Canonical folder identifier.
            display_name: Current folder display name, possibly renamed since last run.

        Returns:
            The folder's Ledger.

        Raises:
            LedgerCreationFailed: If a new ledger has to be created and creation fails.
        """
        name = self._find_mapped(folder_id)
        if name is None:
            markers = self._read_markers()
            name = self._find_marked(folder_id, markers)
            if name is None:
                name = self._find_by_name(folder_id, display_name, markers)
            if name is None:
                name = self._create(folder_id, display_name, set(markers))

        self._store.write_marker(name, folder_id)
        self._mapping.set(folder_id, name)
        return Ledger(self._store, name)

    def generate_name(self, folder_id: str, display_name: str, taken: set[str]) -> str:
        """Build an unused ledger name of at most 31 characters.

        Tries ``<base>_<id fragment>`` first, then ``<base>_1``, ``<base>_2``, ...
        """
        base = sanitize_name(display_name)
        candidate = with_suffix(base, id_fragment(folder_id))
        counter = 1
        while candidate in taken:
            candidate = with_suffix(base, str(counter))
            counter += 1
        return candidate

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _find_mapped(self, folder_id: str) -> str | None:
        mapped = self._mapping.get(folder_id)
        if mapped and self._store.exists(mapped):
            logger.debug("[_find_mapped] mapping hit; folder_id:%s;ledger:%s", folder_id, mapped)
            return mapped
        if mapped:
            logger.info(
                "[_find_mapped] mapped ledger no longer exists; folder_id:%s;ledger:%s",
                folder_id,
                mapped,
            )
        return None

    def _read_markers(self) -> dict[str, str | None]:
        return {name: self._store.read_marker(name) for name in self._store.list_names()}

    @staticmethod
    def _find_marked(folder_id: str, markers: dict[str, str | None]) -> str | None:
        for name, marker in markers.items():
            if marker == folder_id:
                logger.info(
                    "[_find_marked] recovered ledger by marker; folder_id:%s;ledger:%s",
                    folder_id,
                    name,
                )
                return name
        return None

    @staticmethod
    def _find_by_name(
        folder_id: str, display_name: str, markers: dict[str, str | None]
    ) -> str | None:
        sanitized = sanitize_name(display_name)
        prefix = f"{sanitized}{SUFFIX_SEPARATOR}"
        candidates = [
            name
            for name in markers
            if name == sanitized or name == display_name or name.startswith(prefix)
        ]
        if len(candidates) != 1:
            if candidates:
                logger.info(
                    "[_find_by_name] ambiguous name candidates, creating new ledger;"
                    " folder_id:%s;candidate_count:%d",
                    folder_id,
                    len(candidates),
                )
            return None

        candidate = candidates[0]
        marker = markers[candidate]
        if marker and marker != folder_id:
            return None
        logger.info(
            "[_find_by_name] adopted ledger by name; folder_id:%s;ledger:%s", folder_id, candidate
        )
        return candidate

    def _create(self, folder_id: str, display_name: str, taken: set[str]) -> str:
        name = self.generate_name(folder_id, display_name, taken)
        self._store.create(name)
        logger.info("[_create] created ledger for folder; folder_id:%s;ledger:%s", folder_id, name)
        return name
