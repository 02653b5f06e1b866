"""Unit tests for orchestration/table.py — folder configuration table."""

from unittest.mock import MagicMock

from azure.core.exceptions import ResourceNotFoundError

from folder_watch.ledger.store import BlobContainer
from folder_watch.orchestration.table import (
    TABLE_HEADER,
    ConfigTable,
    FolderRow,
    format_table,
    is_header_row,
    parse_table,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_table() -> tuple[ConfigTable, MagicMock]:
    """Return (table, mock_blob_client)."""
    mock_blob_service = MagicMock()
    container = BlobContainer(mock_blob_service, "folder-watch-state")
    client = mock_blob_service.get_container_client.return_value
    return ConfigTable(container, "config/folders.csv"), client.get_blob_client.return_value


# ---------------------------------------------------------------------------
# Header detection and parsing
# ---------------------------------------------------------------------------


class TestHeaderDetection:
    def test_boolean_literal_first_cell_is_data(self) -> None:
        assert is_header_row(["TRUE", "abc"]) is False
        assert is_header_row([" false ", "abc"]) is False

    def test_other_first_cell_is_header(self) -> None:
        assert is_header_row(["Enabled", "Reference"]) is True
        assert is_header_row([]) is True


class TestParseTable:
    def test_parses_rows_after_header(self) -> None:
        header, rows = parse_table(
            [
                TABLE_HEADER,
                ["TRUE", "ABC123", "", "", "", "me@example.com", ""],
                ["FALSE", "XYZ", "Old", "2026-01-01", "o@x", "", "boom"],
            ]
        )

        assert header == TABLE_HEADER
        assert rows[0] == FolderRow(
            enabled=True, reference="ABC123", email_recipient="me@example.com"
        )
        assert rows[1].enabled is False
        assert rows[1].error == "boom"

    def test_headerless_table_keeps_first_row(self) -> None:
        header, rows = parse_table([["TRUE", "ABC123"]])

        assert header is None
        assert rows == [FolderRow(enabled=True, reference="ABC123")]

    def test_blank_lines_become_disabled_rows(self) -> None:
        _, rows = parse_table([TABLE_HEADER, ["", "", ""], ["TRUE", "A"]])

        assert len(rows) == 2
        assert rows[0].blank is True
        assert rows[0].enabled is False
        assert rows[0].reference == ""
        assert rows[1].blank is False
        assert rows[0].to_cells() == [""] * len(TABLE_HEADER)

    def test_format_preserves_header_choice(self) -> None:
        rows = [FolderRow(enabled=True, reference="A", name="Docs")]

        assert format_table(None, rows) == [["TRUE", "A", "Docs", "", "", "", ""]]
        assert format_table(TABLE_HEADER, rows)[0] == TABLE_HEADER


# ---------------------------------------------------------------------------
# ConfigTable persistence
# ---------------------------------------------------------------------------


class TestConfigTable:
    def test_missing_blob_yields_no_rows(self) -> None:
        table, blob = _make_table()
        blob.download_blob.side_effect = ResourceNotFoundError("missing")

        assert table.read_rows() == []

    def test_round_trip_keeps_header(self) -> None:
        table, blob = _make_table()
        blob.download_blob.return_value.readall.return_value = (
            "Enabled,Reference,Name,LastChecked,Owner,EmailRecipient,Error\n"
            "TRUE,https://drive.google.com/drive/folders/ABC,,,,me@example.com,\n"
        ).encode()

        rows = table.read_rows()
        rows[0].name = "Docs"
        table.write_rows(rows)

        written = blob.upload_blob.call_args[0][0].decode("utf-8").splitlines()
        assert written[0].startswith("Enabled,Reference")
        assert written[1] == (
            "TRUE,https://drive.google.com/drive/folders/ABC,Docs,,,me@example.com,"
        )

    def test_round_trip_keeps_blank_lines_in_place(self) -> None:
        table, blob = _make_table()
        blob.download_blob.return_value.readall.return_value = (
            b"Enabled,Reference\nTRUE,abc\n,,,,,,\nTRUE,def\n"
        )

        rows = table.read_rows()
        rows[2].name = "Second"
        table.write_rows(rows)

        written = blob.upload_blob.call_args[0][0].decode("utf-8").splitlines()
        assert written == [
            "Enabled,Reference",
            "TRUE,abc,,,,,",
            ",,,,,,",
            "TRUE,def,Second,,,,",
        ]
