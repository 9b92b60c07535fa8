"""Admin data service - aggregated sheets with fresh Drive image links."""
import time
from typing import Dict, List, Sequence

from studio_backend.config import debug_log as _dlog
from studio_backend.services.drive_links import DriveFileSource, resolve_drive_links
from studio_backend.services.hydration import collect_file_ids, has_image_sheets, hydrate_records
from studio_backend.services.row_mapper import Record
from studio_backend.services.sheet_aggregator import SheetSource, aggregate_sheets


class AdminDataService:
    """Read-time hydration of the admin panel data."""

    @staticmethod
    async def load(
        titles: Sequence[str],
        source: SheetSource,
        drive: DriveFileSource,
    ) -> Dict[str, List[Record]]:
        """
        Load the requested sheets and, when image sheets are among them,
        replace their image URLs with freshly resolved Drive thumbnails.

        Args:
            titles: Sheet titles to load
            source: Opened spreadsheet
            drive: Drive gateway used by the link resolver

        Returns:
            {sheet_title: [record, ...]}
        """
        start = time.time()
        data = await aggregate_sheets(titles, source)

        if has_image_sheets(data):
            link_map = await resolve_drive_links(drive, collect_file_ids(data))
            hydrate_records(data, link_map)

        _dlog(f"[admin-data] {len(data)} sheets in {time.time() - start:.2f}s")
        return data
