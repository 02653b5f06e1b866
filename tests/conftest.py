"""Pytest configuration — adds src/ to sys.path and provides in-memory store fakes."""

import os
import sys

import pytest

# Add src/ to Python path so tests can import from folder_watch
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from folder_watch.errors import LedgerCreationFailed  # noqa: E402


class MemoryLedgerStore:
    """Dict-backed ledger workspace with the same surface as BlobLedgerStore."""

    def __init__(self) -> None:
        self.rows: dict[str, list[list[str]]] = {}
        self.markers: dict[str, str] = {}
        self.fail_create = False

    def list_names(self) -> list[str]:
        return list(self.rows)

    def exists(self, name: str) -> bool:
        return name in self.rows

    def create(self, name: str) -> None:
        if self.fail_create:
            raise LedgerCreationFailed(name, "quota exceeded")
        self.rows[name] = []

    def read_rows(self, name: str) -> list[list[str]]:
        return [list(row) for row in self.rows.get(name, [])]

    def write_rows(self, name: str, rows: list[list[str]]) -> None:
        self.rows[name] = [list(row) for row in rows]

    def read_marker(self, name: str) -> str | None:
        return self.markers.get(name)

    def write_marker(self, name: str, folder_id: str) -> None:
        self.markers[name] = folder_id


class MemoryMappingStore:
    """Dict-backed folder-to-ledger mapping."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


@pytest.fixture
def ledger_store() -> MemoryLedgerStore:
    return MemoryLedgerStore()


@pytest.fixture
def mapping_store() -> MemoryMappingStore:
    return MemoryMappingStore()
