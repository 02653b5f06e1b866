"""Depth-first enumeration of a monitored folder tree."""

from __future__ import annotations

import logging

from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from folder_watch.drive.lister import PaginatedLister
from folder_watch.drive.models import Backend, DriveChild, Entry, FolderMetadata
from folder_watch.drive.native import NativeDriveClient
from folder_watch.errors import ListingFailed

logger = logging.getLogger(__name__)

ANCESTRY_SEPARATOR = " > "
DEFAULT_MAX_DEPTH = 64


class RecursiveEnumerator:
    """Flattens a folder tree into an ordered list of entries.

    Both backends produce the same output shape. A failure on a single
    child (a file that cannot be read or a sub-folder that cannot be
    listed) is logged and that child's subtree is skipped; a failure listing
    the root container propagates as ListingFailed.
    """

    def __init__(
        self,
        native: NativeDriveClient,
        lister: PaginatedLister,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._native = native
        self._lister = lister
        self._max_depth = max_depth

    def enumerate(self, metadata: FolderMetadata) -> list[Entry]:
        """Enumerate every entry beneath a resolved folder.

        Args:
            metadata: Resolved folder metadata; its backend selects the traversal.

        Returns:
            All entries of the subtree in depth-first traversal order.

        Raises:
            ListingFailed: If the root container cannot be listed.
        """
        entries: list[Entry] = []
        if metadata.backend is Backend.NATIVE:
            try:
                self._walk_native(metadata.folder_id, metadata.name, 0, entries)
            except (HttpError, GoogleAuthError, OSError) as exc:
                raise ListingFailed(
                    metadata.folder_id, getattr(exc, "status_code", None), str(exc)
                ) from exc
        else:
            self._walk_rest(metadata.folder_id, metadata.name, metadata.scope_id, 0, entries)

        logger.info(
            "[enumerate] enumeration complete; folder_id:%s;backend:%s;entry_count:%d",
            metadata.folder_id,
            metadata.backend.value,
            len(entries),
        )
        return entries

    # ------------------------------------------------------------------
    # Native traversal: files first, then each sub-folder and its subtree
    # ------------------------------------------------------------------

    def _walk_native(self, folder_id: str, ancestry: str, depth: int, entries: list[Entry]) -> None:
        for child in self._native.iter_files(folder_id):
            self._append(child, ancestry, entries)

        for child in self._native.iter_folders(folder_id):
            if not self._append(child, ancestry, entries):
                continue
            if not self._may_descend(child, depth):
                continue
            try:
                self._walk_native(child.id, _join(ancestry, child.name), depth + 1, entries)
            except Exception:
                logger.warning(
                    "[_walk_native] skipping unreadable sub-folder; folder_id:%s;name:%s",
                    child.id,
                    child.name,
                    exc_info=True,
                )

    # ------------------------------------------------------------------
    # REST traversal: page by page, descending as folders are met
    # ------------------------------------------------------------------

    def _walk_rest(
        self,
        container_id: str,
        ancestry: str,
        scope_id: str | None,
        depth: int,
        entries: list[Entry],
    ) -> None:
        page_token: str | None = None
        while True:
            page = self._lister.list_page(container_id, page_token, scope_id)
            for child in page.items:
                if not self._append(child, ancestry, entries):
                    continue
                if not child.is_folder or not self._may_descend(child, depth):
                    continue
                try:
                    self._walk_rest(
                        child.id, _join(ancestry, child.name), scope_id, depth + 1, entries
                    )
                except Exception:
                    logger.warning(
                        "[_walk_rest] skipping unreadable sub-folder; folder_id:%s;name:%s",
                        child.id,
                        child.name,
                        exc_info=True,
                    )
            page_token = page.next_token
            if not page_token:
                return

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _append(child: DriveChild, ancestry: str, entries: list[Entry]) -> bool:
        try:
            entries.append(Entry.from_child(child, ancestry))
        except Exception:
            logger.warning(
                "[_append] skipping unreadable item; item_id:%s",
                getattr(child, "id", ""),
                exc_info=True,
            )
            return False
        return True

    def _may_descend(self, child: DriveChild, depth: int) -> bool:
        if depth + 1 > self._max_depth:
            logger.warning(
                "[_may_descend] max depth reached, not descending; folder_id:%s;max_depth:%d",
                child.id,
                self._max_depth,
            )
            return False
        return True


def _join(ancestry: str, name: str) -> str:
    return f"{ancestry}{ANCESTRY_SEPARATOR}{name}"
