"""Single-page child listing against the Drive REST API."""

from __future__ import annotations

import logging
from typing import Any

from folder_watch.config import MAX_PAGE_SIZE
from folder_watch.drive.client import DriveApiError, DriveAuthError, DriveRestClient
from folder_watch.drive.models import (
    FIELD_FILES,
    FIELD_NEXT_PAGE_TOKEN,
    LISTING_FIELDS,
    ListingPage,
    parse_child,
)
from folder_watch.errors import ListingFailed

logger = logging.getLogger(__name__)


class PaginatedLister:
    """Issues one listing page request per call; never retries."""

    def __init__(self, rest: DriveRestClient, page_size: int = MAX_PAGE_SIZE) -> None:
        self._rest = rest
        self._page_size = min(page_size, MAX_PAGE_SIZE)

    def build_params(
        self,
        container_id: str,
        page_token: str | None = None,
        scope_id: str | None = None,
    ) -> dict[str, Any]:
        """Return the query parameters for one page of direct, non-trashed children."""
        params: dict[str, Any] = {
            "q": f"'{container_id}' in parents and trashed = false",
            "fields": LISTING_FIELDS,
            "pageSize": self._page_size,
            "supportsAllDrives": True,
            "includeItemsFromAllDrives": True,
        }
        if page_token:
            params["pageToken"] = page_token
        if scope_id:
            params["corpora"] = "drive"
            params["driveId"] = scope_id
        return params

    def list_page(
        self,
        container_id: str,
        page_token: str | None = None,
        scope_id: str | None = None,
    ) -> ListingPage:
        """Fetch one page of children of a container.

        Args:
            container_id: Folder whose direct children are listed.
            page_token: Continuation token from the previous page, if any.
            scope_id: Shared-drive ID restricting the corpus, if any.

        Returns:
            ListingPage with parsed children and the next continuation token.

        Raises:
            ListingFailed: If the request fails.
        """
        params = self.build_params(container_id, page_token, scope_id)
        try:
            response = self._rest.get("/files", params)
        except DriveApiError as exc:
            raise ListingFailed(container_id, exc.status_code or None, exc.message) from exc
        except DriveAuthError as exc:
            raise ListingFailed(container_id, None, str(exc)) from exc

        items = [parse_child(raw) for raw in response.get(FIELD_FILES, [])]
        next_token = response.get(FIELD_NEXT_PAGE_TOKEN) or None
        logger.debug(
            "[list_page] fetched page; container_id:%s;item_count:%d;has_more:%s",
            container_id,
            len(items),
            next_token is not None,
        )
        return ListingPage(items=items, next_token=next_token)
