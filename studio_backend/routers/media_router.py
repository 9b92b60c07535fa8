"""Media router - image proxy for Drive-hosted pictures."""
import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from studio_backend.config import debug_log as _dlog
from studio_backend.dependencies import get_http_client
from studio_backend.services.image_proxy import fetch_drive_image

router = APIRouter(prefix="/api/media", tags=["Media"])


@router.get(
    "/proxy",
    summary="Proxy a public Drive image",
    response_class=Response,
)
async def proxy_image(
    id: Optional[str] = Query(None, description="Drive file id"),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    if not id:
        raise HTTPException(status_code=400, detail="Missing id.")
    try:
        image = await fetch_drive_image(client, id)
    except httpx.HTTPError as e:
        _dlog(f"[proxy] {id} failed: {e}", logging.ERROR)
        raise HTTPException(status_code=500, detail=str(e))

    if image.status_code != 200:
        return Response(content=image.content, status_code=image.status_code, media_type=image.content_type)
    return Response(
        content=image.content,
        media_type=image.content_type,
        headers={
            "Access-Control-Allow-Origin": "*",
            "Cache-Control": "public, max-age=31536000",
        },
    )
