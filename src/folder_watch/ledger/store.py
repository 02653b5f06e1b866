"""Ledger workspace and ledger mapping persisted in Azure Blob Storage."""

from __future__ import annotations

import contextlib
import csv
import io
import json
import logging
from typing import TYPE_CHECKING, Protocol

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContainerClient

from folder_watch.errors import LedgerCreationFailed

if TYPE_CHECKING:
    from folder_watch.config import AppConfig

logger = logging.getLogger(__name__)

# Blob metadata key holding the owning folder identifier of a ledger.
MARKER_METADATA_KEY = "folder_marker"
LEDGER_SUFFIX = ".csv"


class MappingStore(Protocol):
    """Key-value store holding the folder identifier to ledger name mapping."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class LedgerStore(Protocol):
    """Workspace of named ledgers, each with rows and an owner marker."""

    def list_names(self) -> list[str]: ...

    def exists(self, name: str) -> bool: ...

    def create(self, name: str) -> None: ...

    def read_rows(self, name: str) -> list[list[str]]: ...

    def write_rows(self, name: str, rows: list[list[str]]) -> None: ...

    def read_marker(self, name: str) -> str | None: ...

    def write_marker(self, name: str, folder_id: str) -> None: ...


class BlobContainer:
    """Thin wrapper around one blob container that creates it on first write."""

    def __init__(self, blob_service: BlobServiceClient, container: str) -> None:
        self._client: ContainerClient = blob_service.get_container_client(container)
        self._container = container
        self._ensured = False

    @classmethod
    def from_connection_string(cls, connection_string: str, container: str) -> BlobContainer:
        return cls(BlobServiceClient.from_connection_string(connection_string), container)

    @property
    def client(self) -> ContainerClient:
        return self._client

    def ensure(self) -> None:
        """Create the container if needed. Only attempted once per instance."""
        if self._ensured:
            return
        with contextlib.suppress(ResourceExistsError):
            self._client.create_container()
            logger.info("[ensure] created blob container; container:%s", self._container)
        self._ensured = True

    def read_text(self, blob_path: str) -> str | None:
        """Return the blob's UTF-8 content, or None when it does not exist."""
        try:
            data = self._client.get_blob_client(blob_path).download_blob().readall()
        except ResourceNotFoundError:
            return None
        return data.decode("utf-8")  # type: ignore[no-any-return]

    def write_text(
        self,
        blob_path: str,
        text: str,
        metadata: dict[str, str] | None = None,
    ) -> None:
        self.ensure()
        self._client.get_blob_client(blob_path).upload_blob(
            text.encode("utf-8"), overwrite=True, metadata=metadata
        )


class BlobMappingStore:
    """Folder identifier to ledger name mapping, stored as one JSON blob.

    The mapping is loaded on first access and written through on every
    ``set``. Stale entries are never removed.
    """

    def __init__(self, container: BlobContainer, blob_path: str) -> None:
        self._container = container
        self._blob_path = blob_path
        self._data: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._data is None:
            text = self._container.read_text(self._blob_path)
            if text is None:
                logger.info("[_load] no ledger mapping found in blob storage — first run")
                self._data = {}
            else:
                self._data = {str(k): str(v) for k, v in json.loads(text).items()}
        return self._data

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        if data.get(key) == value:
            return
        data[key] = value
        self._container.write_text(self._blob_path, json.dumps(data, sort_keys=True, indent=2))
        logger.info("[set] saved ledger mapping; folder_id:%s;ledger:%s", key, value)


class BlobLedgerStore:
    """Ledger workspace where each ledger is a CSV blob under a common prefix.

    The ledger's marker (the folder identifier that owns it) lives in the
    blob's metadata under ``folder_marker`` and survives content rewrites.
    """

    def __init__(self, container: BlobContainer, prefix: str = "ledgers/") -> None:
        self._container = container
        self._prefix = prefix

    def _blob_path(self, name: str) -> str:
        return f"{self._prefix}{name}{LEDGER_SUFFIX}"

    def list_names(self) -> list[str]:
        """Return the names of all ledgers in the workspace."""
        names: list[str] = []
        try:
            for blob in self._container.client.list_blobs(name_starts_with=self._prefix):
                path: str = blob.name
                if path.endswith(LEDGER_SUFFIX):
                    names.append(path[len(self._prefix) : -len(LEDGER_SUFFIX)])
        except ResourceNotFoundError:
            return []
        return names

    def exists(self, name: str) -> bool:
        return bool(self._container.client.get_blob_client(self._blob_path(name)).exists())

    def create(self, name: str) -> None:
        """Create an empty ledger.

        Raises:
            LedgerCreationFailed: If the blob cannot be created.
        """
        try:
            self._container.ensure()
            self._container.client.get_blob_client(self._blob_path(name)).upload_blob(
                b"", overwrite=False
            )
        except AzureError as exc:
            logger.error("[create] ledger creation failed; ledger:%s;error:%s", name, exc)
            raise LedgerCreationFailed(name, str(exc)) from exc
        logger.info("[create] created ledger; ledger:%s", name)

    def read_rows(self, name: str) -> list[list[str]]:
        """Return all rows of a ledger, header included; empty if it does not exist."""
        text = self._container.read_text(self._blob_path(name))
        if not text:
            return []
        return list(csv.reader(io.StringIO(text, newline="")))

    def write_rows(self, name: str, rows: list[list[str]]) -> None:
        """Replace a ledger's content with the given rows in a single upload."""
        buffer = io.StringIO(newline="")
        csv.writer(buffer, lineterminator="\n").writerows(rows)
        marker = self.read_marker(name)
        metadata = {MARKER_METADATA_KEY: marker} if marker else None
        self._container.write_text(self._blob_path(name), buffer.getvalue(), metadata=metadata)

    def read_marker(self, name: str) -> str | None:
        try:
            properties = (
                self._container.client.get_blob_client(self._blob_path(name)).get_blob_properties()
            )
        except ResourceNotFoundError:
            return None
        return (properties.metadata or {}).get(MARKER_METADATA_KEY) or None

    def write_marker(self, name: str, folder_id: str) -> None:
        blob_client = self._container.client.get_blob_client(self._blob_path(name))
        metadata = dict(blob_client.get_blob_properties().metadata or {})
        metadata[MARKER_METADATA_KEY] = folder_id
        blob_client.set_blob_metadata(metadata)


def ledger_store_from_config(config: AppConfig) -> BlobLedgerStore:
    """Construct a BlobLedgerStore from application configuration."""
    container = BlobContainer.from_connection_string(
        config.storage_connection_string, config.state_container
    )
    return BlobLedgerStore(container, prefix=config.ledger_prefix)


def mapping_store_from_config(config: AppConfig) -> BlobMappingStore:
    """Construct a BlobMappingStore from application configuration."""
    container = BlobContainer.from_connection_string(
        config.storage_connection_string, config.state_container
    )
    return BlobMappingStore(container, config.mapping_blob)
