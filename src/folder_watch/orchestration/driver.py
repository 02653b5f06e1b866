"""Synchronization driver — runs the detection pipeline for every configured folder."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Protocol

from folder_watch.drive.client import DriveRestClient, load_credentials
from folder_watch.drive.enumerator import RecursiveEnumerator
from folder_watch.drive.lister import PaginatedLister
from folder_watch.drive.models import Entry
from folder_watch.drive.native import NativeDriveClient
from folder_watch.drive.reference import parse_reference
from folder_watch.drive.resolver import MetadataResolver
from folder_watch.errors import FolderWatchError, InvalidReference, RowProcessingError
from folder_watch.ledger.identity import IdentityMapper
from folder_watch.ledger.ledger import reconcile
from folder_watch.ledger.store import ledger_store_from_config, mapping_store_from_config
from folder_watch.orchestration.notifier import LoggingNotifier, Notifier
from folder_watch.orchestration.table import FolderRow, config_table_from_config

if TYPE_CHECKING:
    from folder_watch.config import AppConfig

logger = logging.getLogger(__name__)


class RowState(enum.Enum):
    """Terminal state of one configured row after a run."""

    SKIP = "skip"
    REFERENCE_ERROR = "reference_error"
    RESOLUTION_ERROR = "resolution_error"
    SUCCESS = "success"


@dataclass
class RowResult:
    row_index: int
    state: RowState
    folder_name: str = ""
    new_entries: list[Entry] = field(default_factory=list)
    error: str = ""


@dataclass
class SyncReport:
    results: list[RowResult] = field(default_factory=list)

    def count(self, state: RowState) -> int:
        return sum(1 for result in self.results if result.state is state)

    @property
    def new_entry_count(self) -> int:
        return sum(len(result.new_entries) for result in self.results)


class FolderTable(Protocol):
    def read_rows(self) -> list[FolderRow]: ...

    def write_rows(self, rows: list[FolderRow]) -> None: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SyncDriver:
    """Processes configured folder rows strictly in order, isolating failures per row."""

    def __init__(
        self,
        table: FolderTable,
        resolver: MetadataResolver,
        mapper: IdentityMapper,
        enumerator: RecursiveEnumerator,
        notifier: Notifier,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialise the driver.

        Args:
            table: Configuration table supplying rows and receiving status updates.
            resolver: Resolves folder identifiers to metadata.
            mapper: Finds or creates the ledger of each folder.
            enumerator: Walks folder trees.
            notifier: Receives non-empty new-entry deltas.
            clock: Source of the LastChecked timestamp.
        """
        self._table = table
        self._resolver = resolver
        self._mapper = mapper
        self._enumerator = enumerator
        self._notifier = notifier
        self._clock = clock

    def run(self) -> SyncReport:
        """Run one synchronization pass over all configured rows.

        Row status fields are written back to the table even when the run
        is aborted by an unexpected error, which is logged and re-raised.

        Returns:
            SyncReport with one RowResult per configured row.
        """
        logger.info("[run] starting synchronization run")
        rows = self._table.read_rows()
        report = SyncReport()
        try:
            for index, row in enumerate(rows):
                report.results.append(self.process_row(index, row))
        except Exception:
            logger.exception("[run] synchronization run failed")
            raise
        finally:
            self._table.write_rows(rows)

        logger.info(
            "[run] run complete; row_count:%d;success:%d;failed:%d;new_count:%d",
            len(rows),
            report.count(RowState.SUCCESS),
            report.count(RowState.REFERENCE_ERROR) + report.count(RowState.RESOLUTION_ERROR),
            report.new_entry_count,
        )
        return report

    def process_row(self, index: int, row: FolderRow) -> RowResult:
        """Run the pipeline for one row and record its outcome on the row.

        Args:
            index: Position of the row in the table, used for logging.
            row: The configured folder row; mutated with status fields.

        Returns:
            RowResult describing the terminal state of the row.
        """
        if not row.enabled or not row.reference.strip():
            return RowResult(row_index=index, state=RowState.SKIP)

        try:
            folder_id = parse_reference(row.reference)
        except InvalidReference as exc:
            return self._fail(index, row, RowState.REFERENCE_ERROR, exc)

        try:
            metadata = self._resolver.resolve(folder_id).unwrap()
            ledger = self._mapper.resolve(folder_id, metadata.name)
            entries = self._enumerator.enumerate(metadata)
            new_entries = reconcile(ledger, entries)
        except FolderWatchError as exc:
            return self._fail(index, row, RowState.RESOLUTION_ERROR, exc)
        except Exception as exc:
            wrapped = RowProcessingError(index, exc)
            wrapped.__cause__ = exc
            return self._fail(index, row, RowState.RESOLUTION_ERROR, wrapped)

        row.name = metadata.name
        row.owner = metadata.owner_email
        row.last_checked = self._timestamp()
        row.error = ""
        logger.info(
            "[process_row] row synchronized; row:%d;folder_id:%s;ledger:%s;new_count:%d",
            index,
            folder_id,
            ledger.name,
            len(new_entries),
        )

        if new_entries and row.email_recipient:
            try:
                self._notifier.notify(row.email_recipient, metadata.name, new_entries)
            except Exception:
                logger.error(
                    "[process_row] notification failed; row:%d;folder_id:%s",
                    index,
                    folder_id,
                    exc_info=True,
                )

        return RowResult(
            row_index=index,
            state=RowState.SUCCESS,
            folder_name=metadata.name,
            new_entries=new_entries,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _fail(
        self, index: int, row: FolderRow, state: RowState, error: FolderWatchError
    ) -> RowResult:
        row.error = error.message
        row.last_checked = self._timestamp()
        logger.error(
            "[process_row] row failed; row:%d;state:%s;error:%s",
            index,
            state.value,
            error.message,
            exc_info=error.__cause__ is not None,
        )
        return RowResult(row_index=index, state=state, folder_name=row.name, error=error.message)

    def _timestamp(self) -> str:
        return self._clock().isoformat(timespec="seconds")


def sync_driver_from_config(config: AppConfig, notifier: Notifier | None = None) -> SyncDriver:
    """Construct a SyncDriver from application configuration.

    Loads the Google credentials once and shares them between the native
    and REST backends, then wires the blob-backed stores.

    Args:
        config: Application configuration instance.
        notifier: Notification collaborator; defaults to LoggingNotifier.

    Returns:
        Configured SyncDriver instance.
    """
    credentials = load_credentials(config.google_token_file)
    rest = DriveRestClient(credentials)
    native = NativeDriveClient.from_credentials(credentials, page_size=config.page_size)
    lister = PaginatedLister(rest, page_size=config.page_size)
    return SyncDriver(
        table=config_table_from_config(config),
        resolver=MetadataResolver(native, rest),
        mapper=IdentityMapper(ledger_store_from_config(config), mapping_store_from_config(config)),
        enumerator=RecursiveEnumerator(native, lister, max_depth=config.max_depth),
        notifier=notifier or LoggingNotifier(),
    )
