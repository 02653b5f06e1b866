"""Native Drive backend built on the google-api-python-client object API."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from folder_watch.drive.models import (
    FIELD_FILES,
    FIELD_NEXT_PAGE_TOKEN,
    FOLDER_MIME_TYPE,
    LISTING_FIELDS,
    METADATA_FIELDS,
    OWNER_FIELDS,
    DriveChild,
    parse_child,
)

logger = logging.getLogger(__name__)


class NativeDriveClient:
    """Object-style access to folders in the authenticated user's own corpus.

    Unlike the REST client this backend never enables shared-drive support,
    so items that live only on shared drives fail here and are picked up by
    the REST fallback instead. Failures surface as
    ``googleapiclient.errors.HttpError``.
    """

    def __init__(self, service: Any, page_size: int = 1000) -> None:
        """Initialise the client.

        Args:
            service: A Drive v3 resource from ``googleapiclient.discovery.build``.
            page_size: Number of children requested per page.
        """
        self._service = service
        self._page_size = page_size

    @classmethod
    def from_credentials(cls, credentials: Credentials, page_size: int = 1000) -> NativeDriveClient:
        service = build("drive", "v3", credentials=credentials, cache_discovery=False)
        return cls(service, page_size=page_size)

    def get_folder(self, folder_id: str) -> dict[str, Any]:
        """Return the raw metadata resource for a folder."""
        request = self._service.files().get(fileId=folder_id, fields=METADATA_FIELDS)
        return request.execute()  # type: ignore[no-any-return]

    def get_owner_email(self, folder_id: str) -> str | None:
        """Return the first owner's email address, or None when Drive reports none."""
        resource = self._service.files().get(fileId=folder_id, fields=OWNER_FIELDS).execute()
        owners = resource.get("owners") or []
        if not owners:
            return None
        email = owners[0].get("emailAddress")
        return str(email) if email else None

    def iter_files(self, folder_id: str) -> Iterator[DriveChild]:
        """Yield the non-folder children of a folder."""
        query = f"'{folder_id}' in parents and mimeType != '{FOLDER_MIME_TYPE}' and trashed = false"
        yield from self._iter_query(query)

    def iter_folders(self, folder_id: str) -> Iterator[DriveChild]:
        """Yield the sub-folders of a folder."""
        query = f"'{folder_id}' in parents and mimeType = '{FOLDER_MIME_TYPE}' and trashed = false"
        yield from self._iter_query(query)

    def _iter_query(self, query: str) -> Iterator[DriveChild]:
        page_token: str | None = None
        while True:
            response = (
                self._service.files()
                .list(
                    q=query,
                    fields=LISTING_FIELDS,
                    pageSize=self._page_size,
                    pageToken=page_token,
                )
                .execute()
            )
            for raw in response.get(FIELD_FILES, []):
                yield parse_child(raw)
            page_token = response.get(FIELD_NEXT_PAGE_TOKEN)
            if not page_token:
                return
