"""Upload service - store admin images in the Drive asset folder tree."""
import logging
from typing import Any, BinaryIO, Dict, Optional

from studio_backend.config import GOOGLE_DRIVE_ASSET_FOLDER_ID, debug_log as _dlog
from studio_backend.services.drive_links import normalize_thumbnail_url

DEFAULT_PARENT_FOLDER = "General"
DEFAULT_SUBFOLDER = "Varios"

_EMPTY_FOLDER_VALUES = ("", "null", "undefined")


def _usable_folder_id(folder_id: Optional[str]) -> Optional[str]:
    if folder_id is None or folder_id.strip() in _EMPTY_FOLDER_VALUES:
        return None
    return folder_id.strip()


def resolve_target_folder(drive, root_id: str, target_folder_id: Optional[str],
                          parent_folder_name: str, subfolder: str) -> str:
    """
    Folder that receives the upload: `root/<subfolder>/<parent_folder_name>`,
    unless the caller passed a target folder that still exists.
    """
    category_id = drive.find_or_create_folder(root_id, subfolder)
    target = _usable_folder_id(target_folder_id)
    if target and drive.folder_exists(target):
        return target
    if target:
        _dlog(f"[upload] folder {target} is gone, recreating '{parent_folder_name}'", logging.WARNING)
    return drive.find_or_create_folder(category_id, parent_folder_name)


def upload_image(
    drive,
    stream: BinaryIO,
    filename: str,
    mimetype: str,
    target_folder_id: Optional[str] = None,
    parent_folder_name: Optional[str] = None,
    subfolder: Optional[str] = None,
    root_id: Optional[str] = None,
) -> Dict[str, Any]:
    root_id = root_id or GOOGLE_DRIVE_ASSET_FOLDER_ID
    if not root_id:
        raise RuntimeError("GOOGLE_DRIVE_ASSET_FOLDER_ID is not configured.")

    folder_id = resolve_target_folder(
        drive,
        root_id,
        target_folder_id,
        parent_folder_name or DEFAULT_PARENT_FOLDER,
        subfolder or DEFAULT_SUBFOLDER,
    )
    created = drive.upload_file(stream, filename, mimetype, folder_id)

    try:
        drive.make_public(created["id"])
    except Exception as e:
        _dlog(f"[upload] could not make {created['id']} public: {e}", logging.WARNING)

    thumb = created.get("thumbnailLink")
    image_url = normalize_thumbnail_url(thumb) if thumb else created.get("webViewLink", "")

    _dlog(f"[upload] {filename} -> {created['id']} in {folder_id}")
    return {
        "message": "OK",
        "fileId": created["id"],
        "imageUrl": image_url,
        "driveFolderId": folder_id,
    }
