"""Per-folder snapshot ledger and the new-since-last-run reconciler."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from folder_watch.drive.models import Entry
from folder_watch.ledger.store import LedgerStore

logger = logging.getLogger(__name__)

LEDGER_HEADER = ["Name", "URL", "Kind", "LastUpdated", "Owner", "AncestryPath"]
URL_COLUMN = 1


class Ledger:
    """Snapshot of the last known listing of one monitored folder."""

    def __init__(self, store: LedgerStore, name: str) -> None:
        self._store = store
        self.name = name

    def read_existing_identifiers(self) -> set[str]:
        """Return the entry URLs recorded by the previous run.

        Returns:
            Set of URL strings; empty when the ledger is missing or holds
            nothing beyond its header.
        """
        if not self._store.exists(self.name):
            return set()
        rows = self._store.read_rows(self.name)
        if len(rows) < 2:
            return set()
        return {row[URL_COLUMN] for row in rows[1:] if len(row) > URL_COLUMN and row[URL_COLUMN]}

    def replace_contents(self, header: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        """Discard the previous snapshot and write header plus rows in one bulk write."""
        table = [list(header)] + [list(row) for row in rows]
        self._store.write_rows(self.name, table)
        logger.info(
            "[replace_contents] ledger replaced; ledger:%s;row_count:%d", self.name, len(rows)
        )


def reconcile(ledger: Ledger, entries: Sequence[Entry]) -> list[Entry]:
    """Compute entries new since the last run, then replace the ledger snapshot.

    An entry is new when its URL was not recorded in the ledger. Renames or
    timestamp changes of an already-known URL are not reported.

    Args:
        ledger: Ledger holding the previous snapshot.
        entries: Fresh enumeration of the folder.

    Returns:
        New entries, in enumeration order.
    """
    prior = ledger.read_existing_identifiers()
    new_entries = [entry for entry in entries if entry.url not in prior]
    ledger.replace_contents(LEDGER_HEADER, [entry.to_row() for entry in entries])
    logger.info(
        "[reconcile] reconciled ledger; ledger:%s;entry_count:%d;new_count:%d",
        ledger.name,
        len(entries),
        len(new_entries),
    )
    return new_entries
