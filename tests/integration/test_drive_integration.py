"""Integration tests for Google Drive connectivity.

These tests require a real Google OAuth token file and are skipped in CI/CD
unless the FW_GOOGLE_TOKEN_FILE and FW_TEST_FOLDER environment variables are set.
"""

import os

import pytest

pytestmark = pytest.mark.skipif(
    not (os.getenv("FW_GOOGLE_TOKEN_FILE") and os.getenv("FW_TEST_FOLDER")),
    reason="Real Google Drive credentials not available",
)


def test_resolve_and_enumerate_real_folder() -> None:
    """Resolve a real folder and enumerate it without raising."""
    from folder_watch.drive.client import DriveRestClient, load_credentials
    from folder_watch.drive.enumerator import RecursiveEnumerator
    from folder_watch.drive.lister import PaginatedLister
    from folder_watch.drive.native import NativeDriveClient
    from folder_watch.drive.reference import parse_reference
    from folder_watch.drive.resolver import MetadataResolver

    credentials = load_credentials(os.environ["FW_GOOGLE_TOKEN_FILE"])
    rest = DriveRestClient(credentials)
    native = NativeDriveClient.from_credentials(credentials)
    folder_id = parse_reference(os.environ["FW_TEST_FOLDER"])

    metadata = MetadataResolver(native, rest).resolve(folder_id).unwrap()
    entries = RecursiveEnumerator(native, PaginatedLister(rest)).enumerate(metadata)

    assert metadata.folder_id == folder_id
    assert isinstance(entries, list)
