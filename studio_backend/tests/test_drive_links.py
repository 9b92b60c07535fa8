"""Tests for the Drive sweep / rescue link resolver."""
import asyncio

import pytest

from conftest import FakeDrive
from studio_backend.config import RESCUE_CEILING, SWEEP_MAX_PAGES, SWEEP_PAGE_SIZE
from studio_backend.services.drive_links import (
    normalize_thumbnail_url,
    rescue_drive_links,
    resolve_drive_links,
    sweep_drive_links,
)


class TestNormalizeThumbnailUrl:

    @pytest.mark.parametrize("raw, expected", [
        ("http://x/y=s220", "https://x/y=s1600"),
        ("https://lh3.googleusercontent.com/abc=s220-c", "https://lh3.googleusercontent.com/abc=s1600"),
        ("https://lh3.googleusercontent.com/abc=w200-h150-p-k-nu", "https://lh3.googleusercontent.com/abc=s1600"),
        ("https://lh3.googleusercontent.com/abc", "https://lh3.googleusercontent.com/abc=s1600"),
        ("//lh3.googleusercontent.com/abc=s64", "https://lh3.googleusercontent.com/abc=s1600"),
    ])
    def test_normalizes(self, raw, expected):
        assert normalize_thumbnail_url(raw) == expected

    def test_idempotent(self):
        once = normalize_thumbnail_url("http://x/y=s220")
        assert normalize_thumbnail_url(once) == once


class TestSweep:

    def test_sweep_maps_every_thumbnail(self):
        drive = FakeDrive(pages=[{"files": [
            {"id": "abc", "thumbnailLink": "http://x/y=s220"},
            {"id": "nothumb"},
            {"id": "other", "thumbnailLink": "https://x/o=s220"},
        ]}])
        link_map = {}
        pages = asyncio.run(sweep_drive_links(drive, link_map))
        assert pages == 1
        assert link_map == {"abc": "https://x/y=s1600", "other": "https://x/o=s1600"}
        assert drive.list_calls[0]["page_size"] == SWEEP_PAGE_SIZE
        assert "trashed = false" in drive.list_calls[0]["query"]
        assert "image/" in drive.list_calls[0]["query"]

    def test_follows_page_tokens(self):
        drive = FakeDrive(pages=[
            {"files": [{"id": "a", "thumbnailLink": "https://x/a"}], "nextPageToken": "t1"},
            {"files": [{"id": "b", "thumbnailLink": "https://x/b"}]},
        ])
        link_map = {}
        asyncio.run(sweep_drive_links(drive, link_map))
        assert set(link_map) == {"a", "b"}
        assert [c["page_token"] for c in drive.list_calls] == [None, "t1"]

    def test_stops_at_page_cap(self):
        pages = [
            {"files": [{"id": f"f{i}", "thumbnailLink": f"https://x/{i}"}], "nextPageToken": f"t{i}"}
            for i in range(SWEEP_MAX_PAGES + 5)
        ]
        drive = FakeDrive(pages=pages)
        link_map = {}
        fetched = asyncio.run(sweep_drive_links(drive, link_map))
        assert fetched == SWEEP_MAX_PAGES
        assert len(drive.list_calls) == SWEEP_MAX_PAGES
        assert len(link_map) == SWEEP_MAX_PAGES

    def test_error_keeps_what_was_collected(self):
        drive = FakeDrive(
            pages=[{"files": [{"id": "a", "thumbnailLink": "https://x/a"}], "nextPageToken": "t1"}],
            list_error_at=1,
        )
        link_map = {}
        asyncio.run(sweep_drive_links(drive, link_map))
        assert link_map == {"a": "https://x/a=s1600"}

    def test_first_writer_wins(self):
        drive = FakeDrive(pages=[{"files": [
            {"id": "a", "thumbnailLink": "https://x/first"},
            {"id": "a", "thumbnailLink": "https://x/second"},
        ]}])
        link_map = {}
        asyncio.run(sweep_drive_links(drive, link_map))
        assert link_map["a"] == "https://x/first=s1600"


class TestRescue:

    def test_rescues_only_missing_ids(self):
        drive = FakeDrive(
            pages=[{"files": [{"id": "abc", "thumbnailLink": "http://x/y=s220"}]}],
            files={"missing1": {"id": "missing1", "thumbnailLink": "http://x/m=s220"}},
        )
        link_map = asyncio.run(resolve_drive_links(drive, ["abc", "missing1"]))
        assert drive.get_calls == ["missing1"]
        assert link_map == {"abc": "https://x/y=s1600", "missing1": "https://x/m=s1600"}

    def test_failed_rescue_leaves_id_unresolved(self):
        drive = FakeDrive(get_errors={"missing1"})
        link_map = asyncio.run(resolve_drive_links(drive, ["missing1"]))
        assert drive.get_calls == ["missing1"]
        assert link_map == {}

    def test_no_rescue_at_or_above_ceiling(self):
        ids = [f"id{i}" for i in range(RESCUE_CEILING)]
        drive = FakeDrive()
        attempted = asyncio.run(rescue_drive_links(drive, ids, {}))
        assert attempted == []
        assert drive.get_calls == []

    def test_rescue_just_below_ceiling(self):
        ids = [f"id{i}" for i in range(RESCUE_CEILING - 1)]
        drive = FakeDrive(files={i: {"id": i, "thumbnailLink": f"https://x/{i}"} for i in ids})
        link_map = {}
        attempted = asyncio.run(rescue_drive_links(drive, ids, link_map))
        assert sorted(attempted) == sorted(ids)
        assert len(link_map) == RESCUE_CEILING - 1

    def test_nothing_missing_means_no_calls(self):
        drive = FakeDrive()
        assert asyncio.run(rescue_drive_links(drive, ["a"], {"a": "https://x/a=s1600"})) == []
        assert drive.get_calls == []

    def test_twenty_five_unresolved_ids(self):
        ids = [f"gone{i}" for i in range(25)]
        drive = FakeDrive(pages=[{"files": []}])
        link_map = asyncio.run(resolve_drive_links(drive, ids))
        assert drive.get_calls == []
        assert link_map == {}
