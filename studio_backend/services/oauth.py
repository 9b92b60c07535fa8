"""
OAuth service - Google token exchange, refresh, revocation and validation.
All calls go through the httpx.AsyncClient handed in by the router.
"""
import logging
import time
from typing import Any, Dict, Optional

import httpx

from studio_backend.config import (
    GOOGLE_OAUTH_CLIENT_ID,
    GOOGLE_OAUTH_CLIENT_SECRET,
    GOOGLE_REVOKE_URL,
    GOOGLE_TOKEN_URL,
    GOOGLE_TOKENINFO_URL,
    debug_log as _dlog,
)
from studio_backend.services.errors import OAuthError


def _json_or_text(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


def _with_expiry_date(tokens: Dict[str, Any]) -> Dict[str, Any]:
    """Add expiry_date (epoch millis) next to Google's relative expires_in."""
    expires_in = tokens.get("expires_in")
    if isinstance(expires_in, (int, float)):
        tokens["expiry_date"] = int(time.time() * 1000 + expires_in * 1000)
    return tokens


async def _token_request(client: httpx.AsyncClient, form: Dict[str, str], what: str) -> Dict[str, Any]:
    try:
        resp = await client.post(GOOGLE_TOKEN_URL, data=form)
    except httpx.HTTPError as e:
        raise OAuthError(f"{what} failed", details=str(e)) from e
    body = _json_or_text(resp)
    if resp.status_code >= 400 or not isinstance(body, dict):
        _dlog(f"[oauth] {what} rejected ({resp.status_code}): {body}", logging.ERROR)
        raise OAuthError(f"{what} failed", details=body)
    return _with_expiry_date(body)


async def exchange_code(client: httpx.AsyncClient, code: str, redirect_uri: str) -> Dict[str, Any]:
    """Swap an authorization code for access/refresh tokens."""
    return await _token_request(client, {
        "code": code,
        "client_id": GOOGLE_OAUTH_CLIENT_ID,
        "client_secret": GOOGLE_OAUTH_CLIENT_SECRET,
        "redirect_uri": redirect_uri,
        "grant_type": "authorization_code",
    }, "code exchange")


async def refresh_access_token(client: httpx.AsyncClient, refresh_token: str) -> Dict[str, Any]:
    tokens = await _token_request(client, {
        "refresh_token": refresh_token,
        "client_id": GOOGLE_OAUTH_CLIENT_ID,
        "client_secret": GOOGLE_OAUTH_CLIENT_SECRET,
        "grant_type": "refresh_token",
    }, "token refresh")
    tokens.setdefault("refresh_token", refresh_token)
    return tokens


async def revoke_token(client: httpx.AsyncClient, token: str) -> bool:
    """True when Google accepted the revocation."""
    try:
        resp = await client.post(GOOGLE_REVOKE_URL, params={"token": token})
    except httpx.HTTPError as e:
        _dlog(f"[oauth] revoke failed: {e}", logging.WARNING)
        return False
    if resp.status_code >= 400:
        _dlog(f"[oauth] revoke rejected ({resp.status_code}): {_json_or_text(resp)}", logging.WARNING)
        return False
    return True


async def validate_access_token(client: httpx.AsyncClient, token: str) -> Optional[Dict[str, str]]:
    """
    Check an access token against Google's tokeninfo endpoint.

    Returns {"email", "id"} when the token is valid and was issued for our
    OAuth client, None otherwise.
    """
    if not token:
        _dlog("[auth] no token provided", logging.WARNING)
        return None
    if not GOOGLE_OAUTH_CLIENT_ID:
        _dlog("[auth] GOOGLE_OAUTH_CLIENT_ID is not configured", logging.ERROR)
        return None

    try:
        resp = await client.get(GOOGLE_TOKENINFO_URL, params={"access_token": token})
    except httpx.HTTPError as e:
        _dlog(f"[auth] tokeninfo request failed: {e}", logging.ERROR)
        return None

    data = _json_or_text(resp)
    if resp.status_code >= 400 or not isinstance(data, dict):
        detail = data.get("error_description") or data.get("error") if isinstance(data, dict) else data
        _dlog(f"[auth] invalid or expired token: {detail}", logging.WARNING)
        return None

    if data.get("aud") != GOOGLE_OAUTH_CLIENT_ID:
        _dlog(f"[auth] audience mismatch: expected {GOOGLE_OAUTH_CLIENT_ID}, got {data.get('aud')}", logging.WARNING)
        return None

    return {"email": data.get("email", ""), "id": data.get("sub", "")}
