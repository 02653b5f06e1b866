"""Google Drive v3 REST client authenticated with a Google OAuth bearer token."""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib import request as urllib_request
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

logger = logging.getLogger(__name__)

DRIVE_BASE_URL = "https://www.googleapis.com/drive/v3"
DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive.readonly"]


class DriveAuthError(Exception):
    """Raised when the OAuth bearer token cannot be obtained or refreshed."""


class DriveApiError(Exception):
    """Raised when the Drive REST API returns a non-2xx response."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Drive API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


def load_credentials(token_file: str) -> Credentials:
    """Load authorized-user OAuth credentials from a token file.

    Args:
        token_file: Path to a JSON file produced by an installed-app OAuth flow.

    Returns:
        Google OAuth credentials; refreshed lazily by the clients.
    """
    return Credentials.from_authorized_user_file(  # type: ignore[no-untyped-call]
        token_file, DRIVE_SCOPES
    )


class DriveRestClient:
    """Authenticated client for the Drive v3 REST API."""

    def __init__(self, credentials: Credentials) -> None:
        """Initialise the client.

        Args:
            credentials: Google OAuth credentials supplying the bearer token.
        """
        self._credentials = credentials

    def _acquire_token(self) -> str:
        """Return a valid bearer token, refreshing the credentials when needed.

        Returns:
            Access token string.

        Raises:
            DriveAuthError: If the credentials cannot be refreshed.
        """
        if not self._credentials.valid:
            try:
                self._credentials.refresh(Request())
            except GoogleAuthError as exc:
                logger.error("[_acquire_token] token refresh failed; error:%s", exc)
                raise DriveAuthError(f"Token refresh failed: {exc}") from exc
        if not self._credentials.token:
            raise DriveAuthError("Credentials produced no access token")
        return str(self._credentials.token)

    def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Perform an authenticated GET request to the Drive API.

        Args:
            path: URL path relative to DRIVE_BASE_URL (must start with '/').
            params: Query parameters; booleans are sent as "true"/"false".

        Returns:
            Parsed JSON response body as a dict.

        Raises:
            DriveAuthError: If token acquisition fails.
            DriveApiError: If the request fails or the body is not JSON. Status
                code 0 marks failures without an HTTP response.
        """
        token = self._acquire_token()
        url = f"{DRIVE_BASE_URL}{path}"
        if params:
            encoded = {k: _encode_param(v) for k, v in params.items() if v is not None}
            url = f"{url}?{urlencode(encoded)}"
        req = urllib_request.Request(
            url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
            },
            method="GET",
        )
        try:
            with urllib_request.urlopen(req) as resp:
                body = resp.read()
                return json.loads(body)  # type: ignore[no-any-return]
        except HTTPError as exc:
            raw = exc.read()
            try:
                detail = json.loads(raw).get("error", {}).get("message", exc.reason)
            except Exception:
                detail = exc.reason
            raise DriveApiError(exc.code, str(detail)) from exc
        except URLError as exc:
            raise DriveApiError(0, str(exc.reason)) from exc
        except OSError as exc:
            # Timeouts and resets while reading the body are not wrapped by urllib.
            raise DriveApiError(0, f"Connection error: {exc}") from exc
        except ValueError as exc:
            raise DriveApiError(0, f"Invalid JSON response: {exc}") from exc

    def get_file(self, file_id: str, fields: str) -> dict[str, Any]:
        """Fetch one file resource with shared-drive support enabled.

        Args:
            file_id: Drive file or folder ID.
            fields: Field selection string.

        Returns:
            The file resource as a dict.
        """
        return self.get(
            f"/files/{quote(file_id, safe='')}",
            {"fields": fields, "supportsAllDrives": True},
        )


def _encode_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
