"""Sheet aggregator - loads several worksheets concurrently into records."""
import asyncio
import logging
from typing import Dict, List, Optional, Protocol, Sequence

from studio_backend.config import debug_log as _dlog
from studio_backend.services.row_mapper import Record, SheetTable, table_to_records
from studio_backend.utils.concurrency import settle_all


class SheetSource(Protocol):
    async def load_table(self, title: str) -> Optional[SheetTable]:
        """Return the worksheet's headers and rows, or None if it does not exist."""
        ...


def parse_sheet_titles(raw: Optional[str], default: Sequence[str]) -> List[str]:
    """Split a comma-separated `sheets` parameter; fall back to `default`."""
    if not raw:
        return list(default)
    titles = [t.strip() for t in raw.split(",")]
    return [t for t in titles if t] or list(default)


async def _load_records(source: SheetSource, title: str) -> List[Record]:
    table = await source.load_table(title)
    if table is None:
        _dlog(f"[aggregate] sheet '{title}' not found", logging.WARNING)
        return []
    return table_to_records(table)


async def aggregate_sheets(titles: Sequence[str], source: SheetSource) -> Dict[str, List[Record]]:
    """
    Load every requested sheet at once and map title -> records.

    A sheet that is missing or fails to load maps to an empty list; the
    result always has one entry per distinct requested title.
    """
    unique = list(dict.fromkeys(titles))
    outcomes = await settle_all(_load_records(source, t) for t in unique)

    data: Dict[str, List[Record]] = {}
    for title, outcome in zip(unique, outcomes):
        if outcome.ok:
            data[title] = outcome.value
        else:
            _dlog(f"[aggregate] sheet '{title}' failed: {outcome.error}", logging.WARNING)
            data[title] = []
    return data


async def load_sheets(titles: Sequence[str], source: SheetSource) -> Dict[str, List[Record]]:
    """
    Like aggregate_sheets, but a load error propagates to the caller.

    Only a sheet that does not exist maps to an empty list.
    """
    unique = list(dict.fromkeys(titles))
    results = await asyncio.gather(*(_load_records(source, t) for t in unique))
    return dict(zip(unique, results))
