"""
Google API client management.
Handles service account / user credentials, the gspread spreadsheet gateway
and the Drive v3 gateway used by the link resolver, the editor and uploads.
"""
import asyncio
import logging
import os
from typing import Any, BinaryIO, Dict, List, Optional

import gspread
from google.oauth2 import credentials as user_credentials
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseUpload

from studio_backend.config import (
    FOLDER_MIME_TYPE,
    GOOGLE_CREDS,
    GOOGLE_PRIVATE_KEY,
    GOOGLE_SERVICE_ACCOUNT_EMAIL,
    GOOGLE_SHEET_ID,
    GOOGLE_TOKEN_URL,
    SERVICE_ACCOUNT_SCOPES,
    debug_log as _dlog,
)
from studio_backend.services.row_mapper import SheetTable

# =========================
# Singleton Services
# =========================
_GSPREAD_CLIENT: Optional[gspread.Client] = None


# =========================
# Credentials
# =========================
def get_service_account_credentials() -> service_account.Credentials:
    """
    Service account credentials from GOOGLE_SERVICE_ACCOUNT_EMAIL/GOOGLE_PRIVATE_KEY,
    or from the GOOGLE_APPLICATION_CREDENTIALS key file.
    """
    if GOOGLE_SERVICE_ACCOUNT_EMAIL and GOOGLE_PRIVATE_KEY:
        info = {
            "type": "service_account",
            "client_email": GOOGLE_SERVICE_ACCOUNT_EMAIL,
            "private_key": GOOGLE_PRIVATE_KEY,
            "token_uri": GOOGLE_TOKEN_URL,
        }
        return service_account.Credentials.from_service_account_info(info, scopes=SERVICE_ACCOUNT_SCOPES)
    if GOOGLE_CREDS and os.path.exists(GOOGLE_CREDS):
        return service_account.Credentials.from_service_account_file(GOOGLE_CREDS, scopes=SERVICE_ACCOUNT_SCOPES)
    raise RuntimeError("Service account is not configured (GOOGLE_SERVICE_ACCOUNT_EMAIL / GOOGLE_PRIVATE_KEY).")


def get_user_credentials(access_token: str) -> user_credentials.Credentials:
    """Wrap an admin's OAuth access token so Drive calls act on their behalf."""
    return user_credentials.Credentials(token=access_token)


def get_gspread_client() -> gspread.Client:
    """Get or create gspread client singleton."""
    global _GSPREAD_CLIENT
    if _GSPREAD_CLIENT is None:
        _GSPREAD_CLIENT = gspread.authorize(get_service_account_credentials())
    return _GSPREAD_CLIENT


# =========================
# Sheets Gateway
# =========================
class GoogleSheetSource:
    """Opened spreadsheet with its worksheets indexed by title."""

    def __init__(self, spreadsheet: gspread.Spreadsheet):
        self.spreadsheet = spreadsheet
        self.worksheets: Dict[str, gspread.Worksheet] = {ws.title: ws for ws in spreadsheet.worksheets()}

    @classmethod
    def open(cls, sheet_id: Optional[str] = None) -> "GoogleSheetSource":
        """Open the spreadsheet; credential or permission errors propagate."""
        sheet_id = sheet_id or GOOGLE_SHEET_ID
        if not sheet_id:
            raise RuntimeError("GOOGLE_SHEET_ID is not configured.")
        source = cls(get_gspread_client().open_by_key(sheet_id))
        _dlog(f"[sheets] opened spreadsheet with {len(source.worksheets)} sheets")
        return source

    @classmethod
    async def open_async(cls, sheet_id: Optional[str] = None) -> "GoogleSheetSource":
        return await asyncio.to_thread(cls.open, sheet_id)

    def worksheet(self, title: str) -> Optional[gspread.Worksheet]:
        return self.worksheets.get(title)

    def read_table(self, title: str) -> Optional[SheetTable]:
        ws = self.worksheet(title)
        if ws is None:
            return None
        values = ws.get_all_values()
        headers = values[0] if values else []
        rows = [r for r in values[1:] if any((c or "").strip() for c in r)]
        return SheetTable(title=title, headers=headers, rows=rows)

    async def load_table(self, title: str) -> Optional[SheetTable]:
        return await asyncio.to_thread(self.read_table, title)


# =========================
# Drive Gateway
# =========================
class GoogleDriveFiles:
    """Drive v3 operations. Blocking calls; the async variants run in a worker thread."""

    def __init__(self, credentials):
        self.credentials = credentials

    @classmethod
    def for_service_account(cls) -> "GoogleDriveFiles":
        return cls(get_service_account_credentials())

    @classmethod
    def for_user(cls, access_token: str) -> "GoogleDriveFiles":
        return cls(get_user_credentials(access_token))

    def _service(self):
        # A fresh client per call: httplib2 connections are not thread-safe.
        return build("drive", "v3", credentials=self.credentials, cache_discovery=False)

    # ----- reads -----
    def list_files_sync(self, query: str, page_token: Optional[str], page_size: int) -> Dict[str, Any]:
        params = {
            "q": query,
            "pageSize": page_size,
            "fields": "nextPageToken, files(id, thumbnailLink)",
            "supportsAllDrives": True,
            "includeItemsFromAllDrives": True,
        }
        if page_token:
            params["pageToken"] = page_token
        return self._service().files().list(**params).execute()

    def get_file_sync(self, file_id: str, fields: str = "id, thumbnailLink") -> Dict[str, Any]:
        return self._service().files().get(fileId=file_id, fields=fields, supportsAllDrives=True).execute()

    async def list_files(self, query: str, page_token: Optional[str], page_size: int) -> Dict[str, Any]:
        return await asyncio.to_thread(self.list_files_sync, query, page_token, page_size)

    async def get_file(self, file_id: str) -> Dict[str, Any]:
        return await asyncio.to_thread(self.get_file_sync, file_id)

    def folder_exists(self, folder_id: str) -> bool:
        try:
            self.get_file_sync(folder_id, fields="id")
            return True
        except Exception as e:
            _dlog(f"[drive] folder {folder_id} not reachable: {e}", logging.WARNING)
            return False

    # ----- writes -----
    def find_or_create_folder(self, parent_id: str, name: str) -> str:
        safe_name = name.replace("\\", "\\\\").replace("'", "\\'")
        q = (
            f"mimeType='{FOLDER_MIME_TYPE}' and name='{safe_name}' "
            f"and '{parent_id}' in parents and trashed = false"
        )
        svc = self._service()
        found: List[Dict[str, Any]] = svc.files().list(
            q=q, fields="files(id)", supportsAllDrives=True, includeItemsFromAllDrives=True
        ).execute().get("files", [])
        if found:
            return found[0]["id"]

        created = svc.files().create(
            body={"name": name, "mimeType": FOLDER_MIME_TYPE, "parents": [parent_id]},
            fields="id",
            supportsAllDrives=True,
        ).execute()
        _dlog(f"[drive] created folder '{name}' under {parent_id}")
        return created["id"]

    def upload_file(self, stream: BinaryIO, filename: str, mimetype: str, folder_id: str) -> Dict[str, Any]:
        media = MediaIoBaseUpload(stream, mimetype=mimetype or "application/octet-stream", resumable=False)
        return self._service().files().create(
            body={"name": filename, "parents": [folder_id]},
            media_body=media,
            fields="id, thumbnailLink, webViewLink",
            supportsAllDrives=True,
        ).execute()

    def make_public(self, file_id: str) -> None:
        self._service().permissions().create(
            fileId=file_id,
            body={"role": "reader", "type": "anyone"},
            fields="id",
            supportsAllDrives=True,
        ).execute()

    def delete_file(self, file_id: str) -> None:
        self._service().files().delete(fileId=file_id, supportsAllDrives=True).execute()
