"""
Sheet editor - add / update / delete rows of one worksheet.

Rows are matched by the first key of `criteria`, comparing as strings and
resolving the column name laxly. Image sheets keep a single cover image per
parent: marking one row `isCover = "Si"` resets its siblings to "No".
"""
import logging
import time
from typing import Any, Dict, List, Optional, Tuple

from gspread.utils import rowcol_to_a1

from studio_backend.config import COVER_PARENT_KEYS, debug_log as _dlog
from studio_backend.services.errors import InvalidRequestError, RowNotFoundError
from studio_backend.services.row_mapper import find_header

COVER_YES = "Si"
COVER_NO = "No"


def generate_row_id(title: str) -> str:
    return f"{title.lower()[:5]}_{int(time.time() * 1000)}"


def _cell(row: List[Any], idx: Optional[int]) -> str:
    if idx is None or idx >= len(row):
        return ""
    return "" if row[idx] is None else str(row[idx])


class SheetEditor:
    """CRUD over a gspread worksheet, with best-effort Drive cleanup on delete."""

    ACTIONS = ("add", "update", "delete")

    def __init__(self, worksheet, title: str, drive=None):
        self.worksheet = worksheet
        self.title = title
        self.drive = drive
        values = worksheet.get_all_values()
        self.headers: List[str] = values[0] if values else []
        self.rows: List[List[Any]] = values[1:]

    # ----- helpers -----
    def _col(self, name: str) -> Optional[int]:
        header = find_header(self.headers, name)
        return self.headers.index(header) if header is not None else None

    @staticmethod
    def _sheet_row(pos: int) -> int:
        """Position in self.rows -> 1-based sheet row (row 1 is the header)."""
        return pos + 2

    def _find_row(self, criteria: Dict[str, Any]) -> Tuple[int, List[Any]]:
        if not criteria:
            raise InvalidRequestError("Missing criteria.")
        key, wanted = next(iter(criteria.items()))
        col = self._col(key)
        if col is not None:
            for pos, row in enumerate(self.rows):
                if _cell(row, col) == str(wanted):
                    return pos, row
        raise RowNotFoundError(f"No row in {self.title} with {key} = {wanted}.")

    def _reset_sibling_covers(self, parent_id: str, keep_row_id: Optional[str] = None) -> int:
        parent_key = COVER_PARENT_KEYS[self.title]
        parent_col, cover_col, id_col = self._col(parent_key), self._col("isCover"), self._col("id")
        if parent_col is None or cover_col is None:
            return 0

        updates = []
        for pos, row in enumerate(self.rows):
            if _cell(row, parent_col) != parent_id or _cell(row, cover_col) != COVER_YES:
                continue
            if keep_row_id is not None and _cell(row, id_col) == keep_row_id:
                continue
            updates.append({"range": rowcol_to_a1(self._sheet_row(pos), cover_col + 1), "values": [[COVER_NO]]})

        if updates:
            self.worksheet.batch_update(updates, value_input_option="USER_ENTERED")
            _dlog(f"[editor] {self.title}: reset {len(updates)} previous cover(s) of {parent_id}")
        return len(updates)

    def _wants_single_cover(self, data: Dict[str, Any]) -> bool:
        return self.title in COVER_PARENT_KEYS and data.get("isCover") == COVER_YES

    # ----- actions -----
    def apply(self, action: str, data: Optional[Dict[str, Any]], criteria: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        if action == "add":
            return {"message": "OK", "newId": self.add(data or {})}
        if action == "update":
            self.update(criteria or {}, data or {})
            return {"message": "OK"}
        if action == "delete":
            self.delete(criteria or {})
            return {"message": "OK"}
        raise InvalidRequestError(f"Unknown action: {action}")

    def add(self, data: Dict[str, Any]) -> str:
        """Append a row built from the header-backed fields of `data`."""
        row_id = str(data.get("id") or generate_row_id(self.title))
        clean = {h: data[h] for h in self.headers if h in data}
        id_header = find_header(self.headers, "id")
        if id_header is not None:
            clean[id_header] = row_id

        if self._wants_single_cover(data):
            parent_key = COVER_PARENT_KEYS[self.title]
            self._reset_sibling_covers(str(data.get(parent_key, "")))

        self.worksheet.append_row([clean.get(h, "") for h in self.headers], value_input_option="USER_ENTERED")
        _dlog(f"[editor] {self.title}: added {row_id}")
        return row_id

    def update(self, criteria: Dict[str, Any], data: Dict[str, Any]) -> None:
        pos, row = self._find_row(criteria)

        if self._wants_single_cover(data):
            parent_id = _cell(row, self._col(COVER_PARENT_KEYS[self.title]))
            self._reset_sibling_covers(parent_id, keep_row_id=_cell(row, self._col("id")))

        new_row = [_cell(row, i) for i in range(len(self.headers))]
        for key, value in data.items():
            if key in self.headers:
                new_row[self.headers.index(key)] = value

        sheet_row = self._sheet_row(pos)
        rng = f"{rowcol_to_a1(sheet_row, 1)}:{rowcol_to_a1(sheet_row, max(len(self.headers), 1))}"
        self.worksheet.batch_update([{"range": rng, "values": [new_row]}], value_input_option="USER_ENTERED")
        _dlog(f"[editor] {self.title}: updated row {sheet_row}")

    def delete(self, criteria: Dict[str, Any]) -> None:
        """Delete the row, removing its Drive file and folder first when present."""
        pos, row = self._find_row(criteria)

        for column in ("fileId", "driveFolderId"):
            drive_id = _cell(row, self._col(column)).strip()
            if drive_id and self.drive is not None:
                try:
                    self.drive.delete_file(drive_id)
                    _dlog(f"[editor] deleted Drive {column} {drive_id}")
                except Exception as e:
                    _dlog(f"[editor] could not delete Drive {column} {drive_id}: {e}", logging.WARNING)

        self.worksheet.delete_rows(self._sheet_row(pos))
        _dlog(f"[editor] {self.title}: deleted row {self._sheet_row(pos)}")
