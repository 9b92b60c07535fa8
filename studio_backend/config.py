"""
Configuration and global state for the studio backend.
Centralizes environment variables, sheet catalogues, Drive resolver limits and logging.
"""
import logging
import os
import time
from pathlib import Path
from typing import Dict, List, Tuple

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parent.parent
load_dotenv(ROOT_DIR / ".env")

# =========================
# Environment Configuration
# =========================
GOOGLE_SHEET_ID = os.environ.get("GOOGLE_SHEET_ID", "")
GOOGLE_SERVICE_ACCOUNT_EMAIL = os.environ.get("GOOGLE_SERVICE_ACCOUNT_EMAIL", "")
GOOGLE_PRIVATE_KEY = os.environ.get("GOOGLE_PRIVATE_KEY", "").replace("\\n", "\n")
GOOGLE_CREDS = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS", "")

GOOGLE_OAUTH_CLIENT_ID = os.environ.get("GOOGLE_OAUTH_CLIENT_ID", "")
GOOGLE_OAUTH_CLIENT_SECRET = os.environ.get("GOOGLE_OAUTH_CLIENT_SECRET", "")

GOOGLE_DRIVE_ASSET_FOLDER_ID = os.environ.get("GOOGLE_DRIVE_ASSET_FOLDER_ID", "")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

SERVICE_ACCOUNT_SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_REVOKE_URL = "https://oauth2.googleapis.com/revoke"
GOOGLE_TOKENINFO_URL = "https://www.googleapis.com/oauth2/v3/tokeninfo"
DRIVE_VIEW_URL = "https://drive.google.com/uc"

# =========================
# Sheet Catalogues
# =========================
DEFAULT_ADMIN_SHEETS: List[str] = ["Projects", "ProjectImages", "Bookings"]

WEBSITE_SHEETS: List[str] = [
    "Settings",
    "About",
    "Videos",
    "ClientLogos",
    "Projects",
    "ProjectImages",
    "Services",
    "ServiceContentBlocks",
    "ServiceImages",
    "RentalCategories",
    "RentalItems",
    "RentalItemImages",
]

# Image sheet title -> record fields that receive the resolved Drive URL
IMAGE_SHEET_FIELDS: Dict[str, Tuple[str, ...]] = {
    "ProjectImages": ("imageUrl",),
    "RentalItemImages": ("imageUrl",),
    "ServiceImages": ("imageUrl",),
    "ClientLogos": ("imageUrl", "logoUrl"),
}

# Image sheet title -> column grouping images under one parent (single cover rule)
COVER_PARENT_KEYS: Dict[str, str] = {
    "ProjectImages": "projectId",
    "RentalItemImages": "itemId",
}

BOOKINGS_SHEET = "Bookings"
BLOCKED_DATES_SHEET = "BlockedDates"
BOOKING_BLOCKING_STATUSES = ("confirmado", "pagado")

# =========================
# Drive Link Resolver
# =========================
THUMBNAIL_SIZE = "s1600"
SWEEP_QUERY = "mimeType contains 'image/' and trashed = false"
SWEEP_PAGE_SIZE = 1000
SWEEP_MAX_PAGES = 10
RESCUE_CEILING = 20

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"

# =========================
# Logging
# =========================
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("studio_backend")

DEBUG_LOG: List[str] = []
DEBUG_LOG_MAX = 5000


def debug_log(msg: str, level: int = logging.INFO):
    """Log a message and keep a timestamped copy in DEBUG_LOG."""
    ts = time.strftime("%Y-%m-%d %H:%M:%S")
    logger.log(level, msg)
    DEBUG_LOG.append(f"[{ts}] {msg}")
    if len(DEBUG_LOG) > DEBUG_LOG_MAX:
        del DEBUG_LOG[: len(DEBUG_LOG) - DEBUG_LOG_MAX]
