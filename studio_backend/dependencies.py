"""FastAPI dependencies: outbound HTTP client, Google gateways and admin authentication."""
import logging
from typing import AsyncIterator, Dict, Optional

import httpx
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from studio_backend.config import debug_log as _dlog
from studio_backend.services.oauth import validate_access_token
from studio_backend.utils.google_api import GoogleDriveFiles, GoogleSheetSource

HTTP_TIMEOUT = 20.0

bearer = HTTPBearer(auto_error=False)


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
        yield client


async def get_sheet_source() -> GoogleSheetSource:
    """Open the spreadsheet; a bad credential fails the whole request."""
    try:
        return await GoogleSheetSource.open_async()
    except Exception as e:
        _dlog(f"[sheets] cannot open spreadsheet: {e}", logging.ERROR)
        raise HTTPException(status_code=500, detail=f"Cannot open spreadsheet: {e}")


def get_service_drive() -> GoogleDriveFiles:
    try:
        return GoogleDriveFiles.for_service_account()
    except Exception as e:
        _dlog(f"[drive] cannot build service: {e}", logging.ERROR)
        raise HTTPException(status_code=500, detail=f"Cannot connect to Drive: {e}")


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> Dict[str, str]:
    """Admin identity from a Google access token; 401 when missing or invalid."""
    token = credentials.credentials if credentials else ""
    user = await validate_access_token(client, token)
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized.")
    return {**user, "token": token}
