"""Row mapper - turns header + row values from a sheet into flat records."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

Record = Dict[str, str]


def normalize_header(name: str) -> str:
    """Canonical key used for lax field lookup ("  FileId " -> "fileid")."""
    return (name or "").strip().lower()


def find_header(headers: Sequence[str], name: str) -> Optional[str]:
    """Return the real header matching `name` laxly, leftmost first."""
    target = normalize_header(name)
    for h in headers:
        if normalize_header(h) == target:
            return h
    return None


@dataclass
class SheetTable:
    """Header row plus data rows of one worksheet, as returned by the Sheets API."""
    title: str
    headers: List[str]
    rows: List[List[Any]] = field(default_factory=list)


class HeaderIndex:
    """
    Record key -> column index, computed once per sheet load.

    Every non-blank header is reachable by its exact spelling and by its
    lower-cased trimmed alias. When two columns compete for the same key the
    leftmost one wins, and exact spellings are claimed before any alias.
    """

    def __init__(self, columns: Dict[str, int]):
        self.columns = columns

    @classmethod
    def from_headers(cls, headers: Sequence[str]) -> "HeaderIndex":
        columns: Dict[str, int] = {}
        for i, h in enumerate(headers):
            if isinstance(h, str) and h.strip():
                columns.setdefault(h, i)
        for i, h in enumerate(headers):
            if isinstance(h, str) and h.strip():
                columns.setdefault(normalize_header(h), i)
        return cls(columns)

    def to_record(self, values: Sequence[Any]) -> Record:
        record: Record = {}
        for key, i in self.columns.items():
            val = values[i] if i < len(values) else ""
            record[key] = "" if val is None else str(val)
        return record


def rows_to_records(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> List[Record]:
    if not rows:
        return []
    index = HeaderIndex.from_headers(headers)
    return [index.to_record(r) for r in rows]


def table_to_records(table: SheetTable) -> List[Record]:
    return rows_to_records(table.headers, table.rows)


def set_field(record: Record, name: str, value: str) -> None:
    """Write `value` under `name` and its lax alias so both keys stay in agreement."""
    record[name] = value
    alias = normalize_header(name)
    if alias != name:
        record[alias] = value
