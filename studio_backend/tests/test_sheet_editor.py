"""Tests for row add / update / delete on a worksheet."""
import pytest

from conftest import FakeDrive, FakeWorksheet
from studio_backend.services.errors import InvalidRequestError, RowNotFoundError
from studio_backend.services.sheet_editor import SheetEditor


@pytest.fixture
def images_ws():
    return FakeWorksheet("ProjectImages", [
        ["id", "projectId", "fileId", "isCover", "driveFolderId"],
        ["i1", "p1", "f1", "Si", ""],
        ["i2", "p1", "f2", "No", ""],
        ["i3", "p2", "f3", "Si", "folderX"],
    ])


def _column(ws, name):
    idx = ws.values[0].index(name)
    return [r[idx] for r in ws.values[1:]]


class TestAdd:

    def test_only_header_fields_are_written(self, images_ws):
        editor = SheetEditor(images_ws, "ProjectImages")
        new_id = editor.add({"id": "i9", "projectId": "p2", "fileId": "f9", "bogus": "x"})
        assert new_id == "i9"
        assert images_ws.values[-1] == ["i9", "p2", "f9", "", ""]

    def test_generates_id(self):
        ws = FakeWorksheet("Services", [["id", "title"]])
        new_id = SheetEditor(ws, "Services").add({"title": "Video"})
        assert new_id.startswith("servi_")
        assert ws.values[-1] == [new_id, "Video"]

    def test_new_cover_resets_siblings(self, images_ws):
        SheetEditor(images_ws, "ProjectImages").add({"projectId": "p1", "isCover": "Si"})
        assert _column(images_ws, "isCover") == ["No", "No", "Si", "Si"]

    def test_cover_rule_only_for_image_sheets(self):
        ws = FakeWorksheet("Projects", [["id", "isCover"], ["a", "Si"]])
        SheetEditor(ws, "Projects").add({"id": "b", "isCover": "Si"})
        assert _column(ws, "isCover") == ["Si", "Si"]


class TestUpdate:

    def test_updates_matching_row(self, images_ws):
        SheetEditor(images_ws, "ProjectImages").update({"id": "i2"}, {"fileId": "new", "bogus": 1})
        assert images_ws.values[2] == ["i2", "p1", "new", "No", ""]

    def test_cover_update_keeps_only_this_row(self, images_ws):
        SheetEditor(images_ws, "ProjectImages").update({"id": "i2"}, {"isCover": "Si"})
        assert _column(images_ws, "isCover") == ["No", "Si", "Si"]

    def test_criteria_compare_as_strings(self):
        ws = FakeWorksheet("Videos", [["id", "order"], ["7", "1"]])
        SheetEditor(ws, "Videos").update({"id": 7}, {"order": "2"})
        assert ws.values[1] == ["7", "2"]

    def test_unknown_row(self, images_ws):
        with pytest.raises(RowNotFoundError):
            SheetEditor(images_ws, "ProjectImages").update({"id": "zzz"}, {"fileId": "x"})

    def test_missing_criteria(self, images_ws):
        with pytest.raises(InvalidRequestError):
            SheetEditor(images_ws, "ProjectImages").update({}, {"fileId": "x"})


class TestDelete:

    def test_deletes_row_and_drive_assets(self, images_ws):
        drive = FakeDrive()
        SheetEditor(images_ws, "ProjectImages", drive=drive).delete({"id": "i3"})
        assert drive.deleted == ["f3", "folderX"]
        assert [r[0] for r in images_ws.values[1:]] == ["i1", "i2"]

    def test_drive_failure_does_not_block_row_delete(self, images_ws):
        class BrokenDrive(FakeDrive):
            def delete_file(self, file_id):
                raise RuntimeError("insufficient permissions")

        SheetEditor(images_ws, "ProjectImages", drive=BrokenDrive()).delete({"id": "i1"})
        assert [r[0] for r in images_ws.values[1:]] == ["i2", "i3"]


class TestApply:

    def test_unknown_action(self, images_ws):
        with pytest.raises(InvalidRequestError):
            SheetEditor(images_ws, "ProjectImages").apply("rename", {}, {})

    def test_add_returns_new_id(self, images_ws):
        result = SheetEditor(images_ws, "ProjectImages").apply("add", {"id": "i7"}, None)
        assert result == {"message": "OK", "newId": "i7"}
