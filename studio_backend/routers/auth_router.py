"""Auth router - Google OAuth helpers for the admin front end."""
import httpx
from fastapi import APIRouter, Depends, HTTPException

from studio_backend.config import GOOGLE_OAUTH_CLIENT_ID, debug_log as _dlog
from studio_backend.dependencies import get_http_client
from studio_backend.models import (
    AuthCodeRequest,
    AuthConfigResponse,
    MessageResponse,
    RefreshRequest,
    RevokeRequest,
)
from studio_backend.services import oauth
from studio_backend.services.errors import OAuthError

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.get(
    "/config",
    response_model=AuthConfigResponse,
    summary="Public OAuth client id",
)
async def get_auth_config():
    if not GOOGLE_OAUTH_CLIENT_ID:
        _dlog("[auth] GOOGLE_OAUTH_CLIENT_ID is not configured")
        raise HTTPException(status_code=500, detail="Server configuration error [Auth Cfg].")
    return AuthConfigResponse(clientId=GOOGLE_OAUTH_CLIENT_ID)


@router.post("/google", summary="Exchange an authorization code for tokens")
async def exchange_code(body: AuthCodeRequest, client: httpx.AsyncClient = Depends(get_http_client)):
    if not body.code or not body.redirectUri:
        raise HTTPException(status_code=400, detail='Missing parameters: "code" and "redirectUri" are required.')
    try:
        return await oauth.exchange_code(client, body.code, body.redirectUri)
    except OAuthError as e:
        raise HTTPException(
            status_code=500,
            detail={"error": "Internal error authenticating with Google.", "details": e.details},
        )


@router.post("/refresh", summary="Refresh an expired access token")
async def refresh(body: RefreshRequest, client: httpx.AsyncClient = Depends(get_http_client)):
    if not body.refresh_token:
        raise HTTPException(status_code=400, detail="Missing refresh_token.")
    try:
        return await oauth.refresh_access_token(client, body.refresh_token)
    except OAuthError as e:
        raise HTTPException(
            status_code=500,
            detail={"error": "Internal error refreshing the token.", "details": e.details},
        )


@router.post("/revoke", response_model=MessageResponse, summary="Revoke a token (logout)")
async def revoke(body: RevokeRequest, client: httpx.AsyncClient = Depends(get_http_client)):
    if not body.token:
        raise HTTPException(status_code=400, detail="Missing token to revoke.")
    if await oauth.revoke_token(client, body.token):
        return MessageResponse(message="Token revoked.")
    # Logout must still succeed on the front end
    return MessageResponse(message="Logout processed.")
