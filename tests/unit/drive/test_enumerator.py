"""Unit tests for drive/enumerator.py — depth-first tree enumeration."""

from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest
from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError

from folder_watch.drive.enumerator import RecursiveEnumerator
from folder_watch.drive.models import (
    FOLDER_MIME_TYPE,
    Backend,
    DriveChild,
    EntryKind,
    FolderMetadata,
    ListingPage,
)
from folder_watch.errors import ListingFailed

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _file(id: str, name: str | None = None) -> DriveChild:
    return DriveChild(
        id, name or id, "text/plain", "2026-01-01T00:00:00Z", f"https://f/{id}", "o@x"
    )


def _folder(id: str, name: str | None = None) -> DriveChild:
    return DriveChild(
        id, name or id, FOLDER_MIME_TYPE, "2026-01-01T00:00:00Z", f"https://d/{id}", "o@x"
    )


def _metadata(backend: Backend, scope_id: str | None = None) -> FolderMetadata:
    return FolderMetadata("root", "Root", "o@x", backend, scope_id)


def _http_error(status: int = 403) -> HttpError:
    resp = MagicMock()
    resp.status = status
    resp.reason = "Forbidden"
    return HttpError(resp, b"{}")


def _native_tree(
    files: dict[str, list[DriveChild]],
    folders: dict[str, list[DriveChild]],
    broken: set[str] | None = None,
) -> MagicMock:
    """Return a mock native client serving the given tree."""
    broken = broken or set()

    def iter_files(folder_id: str) -> Iterator[DriveChild]:
        if folder_id in broken:
            raise _http_error()
        yield from files.get(folder_id, [])

    def iter_folders(folder_id: str) -> Iterator[DriveChild]:
        yield from folders.get(folder_id, [])

    native = MagicMock()
    native.iter_files.side_effect = iter_files
    native.iter_folders.side_effect = iter_folders
    return native


def _rest_lister(pages: dict[tuple[str, str | None], ListingPage]) -> MagicMock:
    """Return a mock lister keyed by (container_id, page_token)."""

    def list_page(
        container_id: str, page_token: str | None = None, scope_id: str | None = None
    ) -> ListingPage:
        key = (container_id, page_token)
        if key not in pages:
            raise ListingFailed(container_id, 404, "missing")
        return pages[key]

    lister = MagicMock()
    lister.list_page.side_effect = list_page
    return lister


# ---------------------------------------------------------------------------
# Native traversal
# ---------------------------------------------------------------------------


class TestNativeTraversal:
    def test_files_before_folders_depth_first(self) -> None:
        native = _native_tree(
            files={"root": [_file("a"), _file("b")], "s1": [_file("c")], "s2": [_file("d")]},
            folders={"root": [_folder("s1", "Sub1"), _folder("s2", "Sub2")]},
        )
        enumerator = RecursiveEnumerator(native, MagicMock())

        entries = enumerator.enumerate(_metadata(Backend.NATIVE))

        assert [e.name for e in entries] == ["a", "b", "Sub1", "c", "Sub2", "d"]
        assert [e.ancestry_path for e in entries] == [
            "Root",
            "Root",
            "Root",
            "Root > Sub1",
            "Root",
            "Root > Sub2",
        ]
        assert entries[2].kind is EntryKind.FOLDER

    def test_unreadable_sub_folder_is_skipped(self) -> None:
        native = _native_tree(
            files={"root": [_file("a")], "ok": [_file("b")]},
            folders={"root": [_folder("bad", "Bad"), _folder("ok", "Ok")]},
            broken={"bad"},
        )
        enumerator = RecursiveEnumerator(native, MagicMock())

        entries = enumerator.enumerate(_metadata(Backend.NATIVE))

        assert [e.name for e in entries] == ["a", "Bad", "Ok", "b"]

    def test_root_failure_raises_listing_failed(self) -> None:
        native = _native_tree(files={}, folders={}, broken={"root"})
        enumerator = RecursiveEnumerator(native, MagicMock())

        with pytest.raises(ListingFailed):
            enumerator.enumerate(_metadata(Backend.NATIVE))

    @pytest.mark.parametrize(
        "error",
        [RefreshError("invalid_grant"), TimeoutError("timed out"), ConnectionResetError("reset")],
    )
    def test_root_transport_failure_raises_listing_failed(self, error: Exception) -> None:
        native = MagicMock()
        native.iter_files.side_effect = error
        enumerator = RecursiveEnumerator(native, MagicMock())

        with pytest.raises(ListingFailed) as exc_info:
            enumerator.enumerate(_metadata(Backend.NATIVE))

        assert exc_info.value.container_id == "root"
        assert exc_info.value.__cause__ is error

    def test_max_depth_stops_descent(self) -> None:
        native = _native_tree(
            files={"l1": [_file("x")], "l2": [_file("y")]},
            folders={"root": [_folder("l1", "L1")], "l1": [_folder("l2", "L2")]},
        )
        enumerator = RecursiveEnumerator(native, MagicMock(), max_depth=1)

        entries = enumerator.enumerate(_metadata(Backend.NATIVE))

        assert [e.name for e in entries] == ["L1", "x", "L2"]


# ---------------------------------------------------------------------------
# REST traversal
# ---------------------------------------------------------------------------


class TestRestTraversal:
    def test_follows_continuation_tokens(self) -> None:
        lister = _rest_lister(
            {
                ("root", None): ListingPage([_file("a")], "tok-2"),
                ("root", "tok-2"): ListingPage([_file("b")], None),
            }
        )
        enumerator = RecursiveEnumerator(MagicMock(), lister)

        entries = enumerator.enumerate(_metadata(Backend.REST_ONLY))

        assert [e.name for e in entries] == ["a", "b"]
        assert lister.list_page.call_count == 2

    def test_descends_into_folders_in_order_met(self) -> None:
        lister = _rest_lister(
            {
                ("root", None): ListingPage([_folder("s1", "Sub1"), _file("a")], "tok-2"),
                ("root", "tok-2"): ListingPage([_folder("s2", "Sub2")], None),
                ("s1", None): ListingPage([_file("c")], None),
                ("s2", None): ListingPage([_file("d")], None),
            }
        )
        enumerator = RecursiveEnumerator(MagicMock(), lister)

        entries = enumerator.enumerate(_metadata(Backend.REST_ONLY))

        assert [e.name for e in entries] == ["Sub1", "c", "a", "Sub2", "d"]
        assert entries[1].ancestry_path == "Root > Sub1"
        assert entries[4].ancestry_path == "Root > Sub2"

    def test_passes_scope_id_to_every_page(self) -> None:
        lister = _rest_lister(
            {
                ("root", None): ListingPage([_folder("s1")], None),
                ("s1", None): ListingPage([], None),
            }
        )
        enumerator = RecursiveEnumerator(MagicMock(), lister)

        enumerator.enumerate(_metadata(Backend.REST_ONLY, scope_id="drive-7"))

        scopes = {call.args[2] for call in lister.list_page.call_args_list}
        assert scopes == {"drive-7"}

    def test_unlistable_sub_folder_is_skipped(self) -> None:
        lister = _rest_lister(
            {
                ("root", None): ListingPage([_folder("gone", "Gone"), _file("a")], None),
            }
        )
        enumerator = RecursiveEnumerator(MagicMock(), lister)

        entries = enumerator.enumerate(_metadata(Backend.REST_ONLY))

        assert [e.name for e in entries] == ["Gone", "a"]

    def test_root_failure_propagates(self) -> None:
        enumerator = RecursiveEnumerator(MagicMock(), _rest_lister({}))

        with pytest.raises(ListingFailed):
            enumerator.enumerate(_metadata(Backend.REST_ONLY))
