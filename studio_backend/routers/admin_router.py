"""Admin router - endpoints behind Google sign-in for managing site content."""
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

from studio_backend.config import (
    DEBUG_LOG,
    DEFAULT_ADMIN_SHEETS,
    GOOGLE_DRIVE_ASSET_FOLDER_ID,
    GOOGLE_OAUTH_CLIENT_ID,
    GOOGLE_PRIVATE_KEY,
    GOOGLE_CREDS,
    GOOGLE_SHEET_ID,
    debug_log as _dlog,
)
from studio_backend.dependencies import get_service_drive, get_sheet_source, require_admin
from studio_backend.models import (
    HeaderDiagnostics,
    HealthResponse,
    InspectResponse,
    SheetUpdateRequest,
    SheetUpdateResponse,
    UploadResponse,
)
from studio_backend.services.admin_data import AdminDataService
from studio_backend.services.errors import InvalidRequestError, RowNotFoundError, SheetNotFoundError
from studio_backend.services.row_mapper import HeaderIndex, find_header
from studio_backend.services.sheet_editor import SheetEditor
from studio_backend.services.sheet_aggregator import parse_sheet_titles
from studio_backend.services.uploads import upload_image
from studio_backend.utils.google_api import GoogleDriveFiles

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Configuration health check",
)
async def health():
    return HealthResponse(
        status="ok",
        spreadsheet_configured=bool(GOOGLE_SHEET_ID),
        service_account_configured=bool(GOOGLE_PRIVATE_KEY or GOOGLE_CREDS),
        oauth_configured=bool(GOOGLE_OAUTH_CLIENT_ID),
        asset_folder_configured=bool(GOOGLE_DRIVE_ASSET_FOLDER_ID),
    )


@router.get(
    "/data",
    summary="Load sheets for the admin panel",
    description="""
    Reads the requested sheets in parallel and returns `{sheet: [records]}`.

    Image sheets (ProjectImages, RentalItemImages, ServiceImages, ClientLogos)
    get `imageUrl` (and `logoUrl` for logos) refreshed from Drive thumbnails.
    A missing or failing sheet comes back as an empty list.
    """
)
async def get_admin_data(
    sheets: Optional[str] = Query(None, description="Comma-separated sheet titles"),
    user: Dict[str, str] = Depends(require_admin),
    source=Depends(get_sheet_source),
    drive=Depends(get_service_drive),
):
    titles = parse_sheet_titles(sheets, DEFAULT_ADMIN_SHEETS)
    try:
        return await AdminDataService.load(titles, source, drive)
    except Exception as e:
        _dlog(f"[admin-data] failed: {e}", logging.ERROR)
        raise HTTPException(status_code=500, detail=str(e))


@router.post(
    "/sheet",
    response_model=SheetUpdateResponse,
    response_model_exclude_none=True,
    summary="Add, update or delete a row",
)
def update_sheet_data(
    body: SheetUpdateRequest,
    user: Dict[str, str] = Depends(require_admin),
    source=Depends(get_sheet_source),
    drive=Depends(get_service_drive),
):
    try:
        worksheet = source.worksheet(body.sheet)
        if worksheet is None:
            raise SheetNotFoundError(body.sheet)
        editor = SheetEditor(worksheet, body.sheet, drive=drive)
        result = editor.apply(body.action, body.data, body.criteria)
        _dlog(f"[admin] {user.get('email')} {body.action} on {body.sheet}")
        return result
    except RowNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        _dlog(f"[admin] sheet {body.action} failed: {e}", logging.ERROR)
        raise HTTPException(status_code=500, detail=str(e) or "Internal server error")


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Upload an image to the Drive asset folder",
)
def upload(
    file: Optional[UploadFile] = File(None),
    targetFolderId: Optional[str] = Form(None),
    parentFolderName: Optional[str] = Form(None),
    targetSubfolder: Optional[str] = Form(None),
    user: Dict[str, str] = Depends(require_admin),
):
    if file is None:
        raise HTTPException(status_code=400, detail="No file received.")
    try:
        drive = GoogleDriveFiles.for_user(user["token"])
        return upload_image(
            drive,
            file.file,
            file.filename or "upload",
            file.content_type or "application/octet-stream",
            target_folder_id=targetFolderId,
            parent_folder_name=parentFolderName,
            subfolder=targetSubfolder,
        )
    except Exception as e:
        _dlog(f"[upload] failed: {e}", logging.ERROR)
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        file.file.close()


@router.get(
    "/inspect",
    response_model=InspectResponse,
    summary="Inspect raw headers of a sheet",
    description="Quoted header names, the first row by header, and whether Drive id columns are detectable."
)
async def inspect_sheet(
    sheet: str = Query("ProjectImages", description="Sheet title"),
    user: Dict[str, str] = Depends(require_admin),
    source=Depends(get_sheet_source),
):
    table = await source.load_table(sheet)
    if table is None:
        raise HTTPException(status_code=404, detail=f'Sheet "{sheet}" not found.')

    sample = None
    if table.rows:
        index = HeaderIndex({f"[{h}]": i for i, h in enumerate(table.headers)})
        sample = index.to_record(table.rows[0])

    file_col = find_header(table.headers, "fileId")
    folder_col = find_header(table.headers, "driveFolderId")
    return InspectResponse(
        sheet=sheet,
        headers=[f'"{h}"' for h in table.headers],
        sample_row=sample,
        diagnostics=HeaderDiagnostics(
            has_fileId=file_col is not None,
            has_driveFolderId=folder_col is not None,
            fileId_column=file_col,
            driveFolderId_column=folder_col,
        ),
    )


@router.get("/logs", summary="Tail of the server debug log")
async def get_logs(
    limit: int = Query(200, ge=1, le=5000),
    user: Dict[str, str] = Depends(require_admin),
) -> Dict[str, List[str]]:
    return {"lines": DEBUG_LOG[-limit:]}
