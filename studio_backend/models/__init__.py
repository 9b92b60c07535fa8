"""Pydantic models for API requests/responses."""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


# ============= Auth Models =============
class AuthConfigResponse(BaseModel):
    """Public OAuth configuration for the admin front end."""
    clientId: str


class AuthCodeRequest(BaseModel):
    """Authorization code issued to the admin front end."""
    code: Optional[str] = Field(None, description="Authorization code from Google")
    redirectUri: Optional[str] = Field(None, description="Exact redirect URI used by the front end")


class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = None


class RevokeRequest(BaseModel):
    token: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


# ============= Sheet Editing Models =============
class SheetUpdateRequest(BaseModel):
    """Row operation on one sheet."""
    sheet: str = Field(..., description="Sheet title", examples=["ProjectImages"])
    action: str = Field(..., description="add | update | delete")
    data: Dict[str, Any] = Field(default_factory=dict, description="Column values")
    criteria: Dict[str, Any] = Field(default_factory=dict, description="{column: value} identifying the row")


class SheetUpdateResponse(BaseModel):
    message: str
    newId: Optional[str] = None


class UploadResponse(BaseModel):
    message: str
    fileId: str
    imageUrl: str
    driveFolderId: str


# ============= Website Models =============
class BookingRequest(BaseModel):
    """Booking form submitted from the public site."""
    itemId: Optional[str] = None
    itemName: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    totalDays: Optional[Any] = None
    totalPrice: Optional[Any] = None
    customerName: Optional[str] = None
    customerEmail: Optional[str] = None
    customerPhone: Optional[str] = None


class BookingResponse(BaseModel):
    message: str
    bookingId: str


# ============= Diagnostics Models =============
class HeaderDiagnostics(BaseModel):
    has_fileId: bool
    has_driveFolderId: bool
    fileId_column: Optional[str] = None
    driveFolderId_column: Optional[str] = None


class InspectResponse(BaseModel):
    """Raw header/row view of one sheet."""
    sheet: str
    headers: List[str]
    sample_row: Optional[Dict[str, str]] = None
    diagnostics: HeaderDiagnostics


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    spreadsheet_configured: bool
    service_account_configured: bool
    oauth_configured: bool
    asset_folder_configured: bool
