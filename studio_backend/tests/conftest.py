"""
Shared fixtures: in-memory stand-ins for the spreadsheet and Drive gateways.
"""
from typing import Any, Dict, List, Optional

import pytest
from gspread.utils import a1_to_rowcol

from studio_backend.services.row_mapper import SheetTable


class FakeWorksheet:
    """Keeps a grid of cell values and answers the gspread calls the services make."""

    def __init__(self, title: str, values: List[List[Any]]):
        self.title = title
        self.values = [list(r) for r in values]

    def get_all_values(self):
        return [list(r) for r in self.values]

    def row_values(self, row: int):
        return list(self.values[row - 1]) if row <= len(self.values) else []

    def append_row(self, values, value_input_option="RAW"):
        self.values.append(list(values))

    def batch_update(self, data, value_input_option="RAW"):
        for item in data:
            start = item["range"].split(":")[0]
            row, col = a1_to_rowcol(start)
            for r_off, row_vals in enumerate(item["values"]):
                r = row - 1 + r_off
                while len(self.values) <= r:
                    self.values.append([])
                target = self.values[r]
                for c_off, val in enumerate(row_vals):
                    c = col - 1 + c_off
                    while len(target) <= c:
                        target.append("")
                    target[c] = val

    def delete_rows(self, index: int):
        del self.values[index - 1]


class FakeSheetSource:
    """Opened spreadsheet made of FakeWorksheets; titles in `failing` raise on load."""

    def __init__(self, sheets: Dict[str, List[List[Any]]], failing=()):
        self.worksheets = {t: FakeWorksheet(t, v) for t, v in sheets.items()}
        self.failing = set(failing)
        self.loaded: List[str] = []

    def worksheet(self, title: str) -> Optional[FakeWorksheet]:
        return self.worksheets.get(title)

    async def load_table(self, title: str) -> Optional[SheetTable]:
        self.loaded.append(title)
        if title in self.failing:
            raise RuntimeError(f"quota exceeded reading {title}")
        ws = self.worksheets.get(title)
        if ws is None:
            return None
        values = ws.get_all_values()
        return SheetTable(title=title, headers=values[0] if values else [], rows=values[1:])


class FakeDrive:
    """
    Drive gateway double.

    pages: successive files.list responses; list_error: raise on that page index;
    files: id -> metadata for files.get; get_errors: ids whose lookup raises.
    """

    def __init__(self, pages=None, files=None, list_error_at: Optional[int] = None,
                 get_errors=(), folders=None):
        self.pages = list(pages or [])
        self.files = dict(files or {})
        self.list_error_at = list_error_at
        self.get_errors = set(get_errors)
        self.folders: Dict[tuple, str] = dict(folders or {})
        self.existing_folders = set(self.folders.values())
        self.list_calls: List[Dict[str, Any]] = []
        self.get_calls: List[str] = []
        self.deleted: List[str] = []
        self.uploaded: List[Dict[str, Any]] = []
        self.public: List[str] = []
        self.fail_public = False

    async def list_files(self, query, page_token, page_size):
        idx = len(self.list_calls)
        self.list_calls.append({"query": query, "page_token": page_token, "page_size": page_size})
        if self.list_error_at is not None and idx == self.list_error_at:
            raise RuntimeError("backend error")
        if idx < len(self.pages):
            return self.pages[idx]
        return {"files": []}

    async def get_file(self, file_id):
        self.get_calls.append(file_id)
        if file_id in self.get_errors:
            raise RuntimeError("File not found")
        return self.files.get(file_id, {"id": file_id})

    def delete_file(self, file_id):
        self.deleted.append(file_id)

    def folder_exists(self, folder_id):
        return folder_id in self.existing_folders

    def find_or_create_folder(self, parent_id, name):
        key = (parent_id, name)
        if key not in self.folders:
            self.folders[key] = f"folder_{len(self.folders) + 1}"
            self.existing_folders.add(self.folders[key])
        return self.folders[key]

    def upload_file(self, stream, filename, mimetype, folder_id):
        self.uploaded.append({"name": filename, "mimetype": mimetype, "folder": folder_id, "data": stream.read()})
        return {"id": "new_file", "thumbnailLink": "http://lh3.example.com/d/new_file=s220",
                "webViewLink": "https://drive.google.com/file/d/new_file/view"}

    def make_public(self, file_id):
        if self.fail_public:
            raise RuntimeError("forbidden")
        self.public.append(file_id)


@pytest.fixture
def image_sheets():
    """Projects plus two image sheets referencing Drive files."""
    return {
        "Projects": [
            ["id", "title", "order"],
            ["p1", "Wedding", "2"],
            ["p2", "Concert", "1"],
        ],
        "ProjectImages": [
            ["id", "projectId", "fileId", "isCover", "order"],
            ["i1", "p1", "abc", "Si", "1"],
            ["i2", "p1", " missing1 ", "No", "2"],
        ],
        "ClientLogos": [
            ["id", "name", "fileId"],
            ["l1", "Acme", "logo1"],
        ],
    }


@pytest.fixture
def sheet_source(image_sheets):
    return FakeSheetSource(image_sheets)
