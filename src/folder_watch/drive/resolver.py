"""Folder metadata resolution across the native and REST backends."""

from __future__ import annotations

import logging

from folder_watch.drive.client import DriveApiError, DriveAuthError, DriveRestClient
from folder_watch.drive.models import (
    DEFAULT_FOLDER_NAME,
    FIELD_DRIVE_ID,
    FIELD_MIME_TYPE,
    FIELD_NAME,
    FOLDER_MIME_TYPE,
    METADATA_FIELDS,
    OWNER_FIELDS,
    OWNER_UNAVAILABLE,
    Backend,
    FolderMetadata,
    Outcome,
    first_owner_email,
)
from folder_watch.drive.native import NativeDriveClient
from folder_watch.errors import FolderUnresolvable, NotAFolder

logger = logging.getLogger(__name__)


class MetadataResolver:
    """Resolves a folder identifier to authoritative metadata.

    The native backend is tried first. Any failure there (not found, no
    permission, transient error) falls through to the REST backend with
    shared-drive support enabled. The backend that succeeded is recorded on
    the returned metadata so enumeration can use the same one.
    """

    def __init__(self, native: NativeDriveClient, rest: DriveRestClient) -> None:
        self._native = native
        self._rest = rest

    def resolve(self, folder_id: str) -> Outcome[FolderMetadata]:
        """Resolve folder metadata, native backend first.

        Args:
            folder_id: Canonical folder identifier.

        Returns:
            Outcome carrying FolderMetadata, or a FolderUnresolvable / NotAFolder error.
        """
        primary = self._resolve_native(folder_id)
        if primary.ok:
            return primary

        logger.info(
            "[resolve] native backend failed, trying REST; folder_id:%s;reason:%s",
            folder_id,
            primary.error,
        )
        return self._resolve_rest(folder_id)

    def resolve_owner(self, folder_id: str) -> str:
        """Return the folder owner's email, or "unavailable". Never raises."""
        try:
            email = self._native.get_owner_email(folder_id)
            if email:
                return email
        except Exception as exc:
            logger.info(
                "[resolve_owner] native owner lookup failed; folder_id:%s;error:%s",
                folder_id,
                exc,
            )

        try:
            return first_owner_email(self._rest.get_file(folder_id, OWNER_FIELDS))
        except (DriveApiError, DriveAuthError) as exc:
            logger.info(
                "[resolve_owner] REST owner lookup failed; folder_id:%s;error:%s",
                folder_id,
                exc,
            )
        return OWNER_UNAVAILABLE

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _resolve_native(self, folder_id: str) -> Outcome[FolderMetadata]:
        try:
            raw = self._native.get_folder(folder_id)
        except Exception as exc:
            return Outcome.failure(FolderUnresolvable(folder_id, str(exc)))

        if raw.get(FIELD_MIME_TYPE) != FOLDER_MIME_TYPE:
            return Outcome.failure(NotAFolder(folder_id))

        return Outcome.success(
            FolderMetadata(
                folder_id=folder_id,
                name=raw.get(FIELD_NAME) or DEFAULT_FOLDER_NAME,
                owner_email=self.resolve_owner(folder_id),
                backend=Backend.NATIVE,
                scope_id=None,
            )
        )

    def _resolve_rest(self, folder_id: str) -> Outcome[FolderMetadata]:
        try:
            raw = self._rest.get_file(folder_id, METADATA_FIELDS)
        except (DriveApiError, DriveAuthError) as exc:
            logger.warning(
                "[_resolve_rest] REST metadata request failed; folder_id:%s;error:%s",
                folder_id,
                exc,
            )
            return Outcome.failure(FolderUnresolvable(folder_id, str(exc)))

        if not raw:
            return Outcome.failure(FolderUnresolvable(folder_id, "empty response"))

        if raw.get(FIELD_MIME_TYPE) != FOLDER_MIME_TYPE:
            return Outcome.failure(NotAFolder(folder_id))

        return Outcome.success(
            FolderMetadata(
                folder_id=folder_id,
                name=raw.get(FIELD_NAME) or DEFAULT_FOLDER_NAME,
                owner_email=first_owner_email(raw),
                backend=Backend.REST_ONLY,
                scope_id=raw.get(FIELD_DRIVE_ID) or None,
            )
        )
