"""Folder configuration table persisted as a CSV blob."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from folder_watch.ledger.store import BlobContainer

if TYPE_CHECKING:
    from folder_watch.config import AppConfig

logger = logging.getLogger(__name__)

TABLE_HEADER = ["Enabled", "Reference", "Name", "LastChecked", "Owner", "EmailRecipient", "Error"]
BOOLEAN_LITERALS = {"TRUE": True, "FALSE": False}


@dataclass
class FolderRow:
    """One configured folder; Name, LastChecked, Owner and Error are written by a run."""

    enabled: bool
    reference: str
    name: str = ""
    last_checked: str = ""
    owner: str = ""
    email_recipient: str = ""
    error: str = ""
    # Set for blank lines, which are written back as empty cells.
    blank: bool = False

    @classmethod
    def from_cells(cls, cells: list[str]) -> FolderRow:
        padded = list(cells) + [""] * (len(TABLE_HEADER) - len(cells))
        return cls(
            enabled=BOOLEAN_LITERALS.get(padded[0].strip().upper(), False),
            reference=padded[1],
            name=padded[2],
            last_checked=padded[3],
            owner=padded[4],
            email_recipient=padded[5].strip(),
            error=padded[6],
            blank=not any(cell.strip() for cell in cells),
        )

    def to_cells(self) -> list[str]:
        if self.blank:
            return [""] * len(TABLE_HEADER)
        return [
            "TRUE" if self.enabled else "FALSE",
            self.reference,
            self.name,
            self.last_checked,
            self.owner,
            self.email_recipient,
            self.error,
        ]


def is_header_row(cells: list[str]) -> bool:
    """A first row is a header unless its first cell is a boolean literal."""
    if not cells:
        return True
    return cells[0].strip().upper() not in BOOLEAN_LITERALS


def parse_table(cells: list[list[str]]) -> tuple[list[str] | None, list[FolderRow]]:
    """Split raw table cells into an optional header row and folder rows.

    Args:
        cells: All rows of the table as lists of strings.

    Returns:
        Tuple of (header, rows); header is None when the first row holds data.
        Blank lines are kept as disabled rows so positions match the table.
    """
    if not cells:
        return None, []
    header: list[str] | None = None
    body = cells
    if is_header_row(cells[0]):
        header, body = cells[0], cells[1:]
    return header, [FolderRow.from_cells(row) for row in body]


def format_table(header: list[str] | None, rows: list[FolderRow]) -> list[list[str]]:
    table = [header] if header is not None else []
    table.extend(row.to_cells() for row in rows)
    return table


class ConfigTable:
    """Reads and writes the folder configuration table blob."""

    def __init__(self, container: BlobContainer, blob_path: str) -> None:
        self._container = container
        self._blob_path = blob_path
        self._header: list[str] | None = list(TABLE_HEADER)

    def read_rows(self) -> list[FolderRow]:
        """Return the configured folder rows; empty when the table does not exist yet."""
        text = self._container.read_text(self._blob_path)
        if text is None:
            logger.info("[read_rows] no configuration table found; blob:%s", self._blob_path)
            return []
        header, rows = parse_table(list(csv.reader(io.StringIO(text, newline=""))))
        self._header = header
        logger.info("[read_rows] loaded configuration table; row_count:%d", len(rows))
        return rows

    def write_rows(self, rows: list[FolderRow]) -> None:
        """Write all rows back, keeping the header if the table had one."""
        buffer = io.StringIO(newline="")
        csv.writer(buffer, lineterminator="\n").writerows(format_table(self._header, rows))
        self._container.write_text(self._blob_path, buffer.getvalue())
        logger.info("[write_rows] saved configuration table; row_count:%d", len(rows))


def config_table_from_config(config: AppConfig) -> ConfigTable:
    """Construct a ConfigTable from application configuration."""
    container = BlobContainer.from_connection_string(
        config.storage_connection_string, config.state_container
    )
    return ConfigTable(container, config.config_blob)
