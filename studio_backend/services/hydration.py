"""Hydration - attach resolved Drive URLs to image sheet records."""
from typing import Dict, List, Mapping, Tuple

from studio_backend.config import IMAGE_SHEET_FIELDS
from studio_backend.services.row_mapper import Record, set_field

FILE_ID_KEY = "fileid"


def record_file_id(record: Record) -> str:
    return (record.get(FILE_ID_KEY) or "").strip()


def has_image_sheets(titles, table: Mapping[str, Tuple[str, ...]] = IMAGE_SHEET_FIELDS) -> bool:
    return any(t in table for t in titles)


def collect_file_ids(
    data: Mapping[str, List[Record]],
    table: Mapping[str, Tuple[str, ...]] = IMAGE_SHEET_FIELDS,
) -> List[str]:
    """Distinct non-empty file ids referenced by the image sheets in `data`."""
    ids: Dict[str, None] = {}
    for title in table:
        for record in data.get(title) or []:
            fid = record_file_id(record)
            if fid:
                ids.setdefault(fid)
    return list(ids)


def hydrate_records(
    data: Dict[str, List[Record]],
    link_map: Mapping[str, str],
    table: Mapping[str, Tuple[str, ...]] = IMAGE_SHEET_FIELDS,
) -> Dict[str, List[Record]]:
    """Set the display URL fields in place for every record whose fileId resolved."""
    for title, fields in table.items():
        for record in data.get(title) or []:
            url = link_map.get(record_file_id(record))
            if not url:
                continue
            for name in fields:
                set_field(record, name, url)
    return data
