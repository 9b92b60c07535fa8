"""Image proxy - relay a public Drive image through the backend."""
import logging
from dataclasses import dataclass

import httpx

from studio_backend.config import DRIVE_VIEW_URL, debug_log as _dlog

DEFAULT_CONTENT_TYPE = "image/jpeg"


@dataclass
class ProxiedImage:
    status_code: int
    content: bytes
    content_type: str


async def fetch_drive_image(client: httpx.AsyncClient, file_id: str) -> ProxiedImage:
    """Download `uc?export=view` for file_id, following Drive's redirects."""
    resp = await client.get(DRIVE_VIEW_URL, params={"export": "view", "id": file_id}, follow_redirects=True)
    if resp.status_code >= 400:
        _dlog(f"[proxy] Drive answered {resp.status_code} for {file_id}", logging.WARNING)
        return ProxiedImage(resp.status_code, resp.reason_phrase.encode(), "text/plain")

    content_type = resp.headers.get("content-type") or DEFAULT_CONTENT_TYPE
    _dlog(f"[proxy] {file_id}: {len(resp.content)} bytes, {content_type}")
    return ProxiedImage(200, resp.content, content_type)
