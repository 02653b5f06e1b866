"""Error taxonomy for folder synchronization."""

from __future__ import annotations


class FolderWatchError(Exception):
    """Base class for all folder synchronization errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidReference(FolderWatchError):
    """Raised when a folder reference cannot be parsed."""


class EmptyReference(InvalidReference):
    """Raised when the folder reference is empty or blank."""

    def __init__(self) -> None:
        super().__init__("Folder reference is empty")


class UnrecognizedReference(InvalidReference):
    """Raised when a folder reference matches no known ID or URL shape."""

    def __init__(self, reference: str) -> None:
        super().__init__(f"Unrecognized folder reference: {reference}")
        self.reference = reference


class ResolutionError(FolderWatchError):
    """Base class for failures between parsing and enumeration."""


class FolderUnresolvable(ResolutionError):
    """Raised when neither backend can resolve a folder identifier."""

    def __init__(self, folder_id: str, detail: str = "") -> None:
        message = f"Folder not accessible: {folder_id}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.folder_id = folder_id


class NotAFolder(ResolutionError):
    """Raised when the identifier resolves to something other than a folder."""

    def __init__(self, folder_id: str) -> None:
        super().__init__(f"Identifier does not refer to a folder: {folder_id}")
        self.folder_id = folder_id


class LedgerCreationFailed(ResolutionError):
    """Raised when a new ledger cannot be created for a folder."""

    def __init__(self, name: str, detail: str = "") -> None:
        message = f"Could not create ledger {name!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.name = name


class ListingFailed(FolderWatchError):
    """Raised when a listing page request fails or times out."""

    def __init__(self, container_id: str, status_code: int | None, detail: str = "") -> None:
        message = f"Listing failed for {container_id}"
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.container_id = container_id
        self.status_code = status_code


class RowProcessingError(FolderWatchError):
    """Wraps an unexpected exception raised while processing one configured row."""

    def __init__(self, row_index: int, cause: BaseException) -> None:
        super().__init__(f"Row {row_index} failed: {cause}")
        self.row_index = row_index
