"""Data models for Google Drive folders, listing pages and enumerated entries."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from folder_watch.errors import FolderWatchError

# Drive v3 JSON field names
FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_MIME_TYPE = "mimeType"
FIELD_MODIFIED_TIME = "modifiedTime"
FIELD_WEB_VIEW_LINK = "webViewLink"
FIELD_OWNERS = "owners"
FIELD_EMAIL_ADDRESS = "emailAddress"
FIELD_DRIVE_ID = "driveId"
FIELD_FILES = "files"
FIELD_NEXT_PAGE_TOKEN = "nextPageToken"

# Field selections sent on the wire
METADATA_FIELDS = "id,name,mimeType,owners,driveId"
OWNER_FIELDS = "owners"
LISTING_FIELDS = "nextPageToken, files(id,name,mimeType,modifiedTime,webViewLink,owners)"

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
OWNER_UNAVAILABLE = "unavailable"
DEFAULT_FOLDER_NAME = "Untitled folder"

FOLDER_URL_TEMPLATE = "https://drive.google.com/drive/folders/{id}"
FILE_URL_TEMPLATE = "https://drive.google.com/file/d/{id}/view"

T = TypeVar("T")


class Backend(enum.Enum):
    """Data source a folder was resolved through."""

    NATIVE = "native"
    REST_ONLY = "rest"


class EntryKind(enum.Enum):
    """Kind of an enumerated entry, as written to the ledger."""

    FILE = "File"
    FOLDER = "Folder"


@dataclass(frozen=True)
class FolderMetadata:
    """Authoritative metadata of a monitored folder.

    Attributes:
        folder_id: Canonical Drive folder ID.
        name: Display name of the folder.
        owner_email: Owner email address, or "unavailable".
        backend: Backend that resolved the folder; enumeration uses the same one.
        scope_id: Shared-drive ID when the folder lives on a shared drive.
    """

    folder_id: str
    name: str
    owner_email: str
    backend: Backend
    scope_id: str | None = None


@dataclass(frozen=True)
class DriveChild:
    """One raw child record returned by a listing page."""

    id: str
    name: str
    mime_type: str
    modified_time: str
    web_view_link: str
    owner_email: str

    @property
    def is_folder(self) -> bool:
        return self.mime_type == FOLDER_MIME_TYPE

    @property
    def url(self) -> str:
        if self.web_view_link:
            return self.web_view_link
        template = FOLDER_URL_TEMPLATE if self.is_folder else FILE_URL_TEMPLATE
        return template.format(id=self.id)


@dataclass
class ListingPage:
    """A single page of children plus the continuation token, if any."""

    items: list[DriveChild] = field(default_factory=list)
    next_token: str | None = None


@dataclass(frozen=True)
class Entry:
    """One file or folder discovered during enumeration."""

    name: str
    url: str
    kind: EntryKind
    last_updated: str
    owner: str
    ancestry_path: str

    def to_row(self) -> list[str]:
        """Return the entry as a ledger row in header column order."""
        return [
            self.name,
            self.url,
            self.kind.value,
            self.last_updated,
            self.owner,
            self.ancestry_path,
        ]

    @classmethod
    def from_child(cls, child: DriveChild, ancestry_path: str) -> Entry:
        return cls(
            name=child.name,
            url=child.url,
            kind=EntryKind.FOLDER if child.is_folder else EntryKind.FILE,
            last_updated=child.modified_time,
            owner=child.owner_email,
            ancestry_path=ancestry_path,
        )


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a success value or a typed error, never both.

    Used by the resolution layers so that a failed backend attempt is
    reported as a value instead of an exception crossing backend boundaries.
    """

    value: T | None = None
    error: FolderWatchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: FolderWatchError) -> Outcome[T]:
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the success value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


def parse_child(raw: dict) -> DriveChild:  # type: ignore[type-arg]
    """Map a raw Drive v3 file resource to a DriveChild."""
    return DriveChild(
        id=raw.get(FIELD_ID, ""),
        name=raw.get(FIELD_NAME, ""),
        mime_type=raw.get(FIELD_MIME_TYPE, ""),
        modified_time=raw.get(FIELD_MODIFIED_TIME, ""),
        web_view_link=raw.get(FIELD_WEB_VIEW_LINK, ""),
        owner_email=first_owner_email(raw),
    )


def first_owner_email(raw: dict) -> str:  # type: ignore[type-arg]
    """Return owners[0].emailAddress from a file resource, or "unavailable"."""
    owners = raw.get(FIELD_OWNERS) or []
    if owners:
        email = owners[0].get(FIELD_EMAIL_ADDRESS)
        if email:
            return str(email)
    return OWNER_UNAVAILABLE
