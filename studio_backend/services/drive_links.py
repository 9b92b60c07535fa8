"""
Drive link resolver.

Builds a request-scoped map of Drive file id -> sharable thumbnail URL:

1. sweep: page through every non-trashed image visible to the service account
2. rescue: look up, one by one, the requested ids the sweep did not surface,
   only while there are fewer than RESCUE_CEILING of them
"""
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Protocol

from studio_backend.config import (
    RESCUE_CEILING,
    SWEEP_MAX_PAGES,
    SWEEP_PAGE_SIZE,
    SWEEP_QUERY,
    THUMBNAIL_SIZE,
    debug_log as _dlog,
)
from studio_backend.utils.concurrency import settle_all

LinkMap = Dict[str, str]

# Trailing Google image size options: =s220, =s220-c, =w200-h150-p-k-nu
_SIZE_SUFFIX_RE = re.compile(r"=[swh]\d+(?:-[A-Za-z0-9]+)*$")


class DriveFileSource(Protocol):
    async def list_files(self, query: str, page_token: Optional[str], page_size: int) -> Dict[str, Any]:
        """Return {"files": [{id, thumbnailLink?}], "nextPageToken"?}."""
        ...

    async def get_file(self, file_id: str) -> Dict[str, Any]:
        """Return {id, thumbnailLink?} for a single file."""
        ...


def normalize_thumbnail_url(url: str, size: str = THUMBNAIL_SIZE) -> str:
    """Force https and replace any size suffix with `=<size>`."""
    url = url.strip()
    if url.startswith("http://"):
        url = "https://" + url[len("http://"):]
    elif url.startswith("//"):
        url = "https:" + url
    return f"{_SIZE_SUFFIX_RE.sub('', url)}={size}"


async def sweep_drive_links(drive: DriveFileSource, link_map: LinkMap) -> int:
    """
    Crawl image files page by page into link_map; returns pages fetched.

    Stops at the last page or after SWEEP_MAX_PAGES. Any listing error ends
    the sweep with whatever was collected so far.
    """
    page_token: Optional[str] = None
    pages = 0
    try:
        while pages < SWEEP_MAX_PAGES:
            resp = await drive.list_files(SWEEP_QUERY, page_token, SWEEP_PAGE_SIZE)
            pages += 1
            for f in resp.get("files") or []:
                fid, thumb = f.get("id"), f.get("thumbnailLink")
                if fid and thumb:
                    link_map.setdefault(fid, normalize_thumbnail_url(thumb))
            page_token = resp.get("nextPageToken")
            if not page_token:
                break
        else:
            _dlog(f"[drive] sweep stopped at page cap ({SWEEP_MAX_PAGES})", logging.WARNING)
    except Exception as e:
        _dlog(f"[drive] sweep failed after {pages} page(s): {e}", logging.ERROR)
    return pages


async def rescue_drive_links(drive: DriveFileSource, file_ids: List[str], link_map: LinkMap) -> List[str]:
    """
    Fetch metadata for each id concurrently and fill link_map gaps.

    Returns the ids actually attempted (empty when over the ceiling).
    """
    missing = [fid for fid in dict.fromkeys(file_ids) if fid not in link_map]
    if not missing:
        return []
    if len(missing) >= RESCUE_CEILING:
        _dlog(f"[drive] {len(missing)} unresolved ids, rescue skipped (ceiling {RESCUE_CEILING})",
              logging.WARNING)
        return []

    outcomes = await settle_all(drive.get_file(fid) for fid in missing)
    for fid, outcome in zip(missing, outcomes):
        if not outcome.ok:
            _dlog(f"[drive] rescue failed {fid}: {outcome.error}", logging.WARNING)
            continue
        thumb = (outcome.value or {}).get("thumbnailLink")
        if thumb:
            link_map.setdefault(fid, normalize_thumbnail_url(thumb))
        else:
            _dlog(f"[drive] rescue found no thumbnail for {fid}", logging.WARNING)
    return missing


async def resolve_drive_links(drive: DriveFileSource, file_ids: Iterable[str]) -> LinkMap:
    """Sweep, then rescue what is still missing. Never raises."""
    wanted = [fid for fid in file_ids if fid]
    link_map: LinkMap = {}
    await sweep_drive_links(drive, link_map)
    await rescue_drive_links(drive, wanted, link_map)
    _dlog(f"[drive] link map ready: {len(link_map)} entries for {len(set(wanted))} requested ids")
    return link_map
