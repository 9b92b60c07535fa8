"""Website router - public endpoints used by the studio site."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from studio_backend.config import (
    BLOCKED_DATES_SHEET,
    BOOKINGS_SHEET,
    WEBSITE_SHEETS,
    debug_log as _dlog,
)
from studio_backend.dependencies import get_service_drive, get_sheet_source
from studio_backend.models import BookingRequest, BookingResponse
from studio_backend.services.admin_data import AdminDataService
from studio_backend.services.bookings import append_booking, build_booking, unavailable_dates
from studio_backend.services.errors import InvalidRequestError
from studio_backend.services.sheet_aggregator import load_sheets
from studio_backend.services.website_data import WebsiteDataService

router = APIRouter(prefix="/api/website", tags=["Website"])


@router.get(
    "/data",
    summary="Content for the public site",
    description="Settings, about, portfolio, projects, services and rentals with their images."
)
async def get_website_data(
    source=Depends(get_sheet_source),
    drive=Depends(get_service_drive),
):
    try:
        data = await AdminDataService.load(WEBSITE_SHEETS, source, drive)
        return WebsiteDataService.build(data)
    except Exception as e:
        _dlog(f"[website] failed: {e}", logging.ERROR)
        raise HTTPException(status_code=500, detail=f"Failed to fetch website data: {e}")


@router.get(
    "/availability",
    summary="Unavailable days of a rental item",
    description="Sorted YYYY-MM-DD days covered by confirmed/paid bookings or admin blocks."
)
async def get_availability(
    itemId: str = Query(..., description="Rental item id"),
    source=Depends(get_sheet_source),
):
    try:
        data = await load_sheets([BOOKINGS_SHEET, BLOCKED_DATES_SHEET], source)
    except Exception as e:
        _dlog(f"[availability] {itemId} failed: {e}", logging.ERROR)
        raise HTTPException(status_code=500, detail=f"Failed to fetch availability: {e}")
    return unavailable_dates(itemId, data[BOOKINGS_SHEET], data[BLOCKED_DATES_SHEET])


@router.post(
    "/bookings",
    response_model=BookingResponse,
    summary="Create a booking request",
)
def create_booking(
    body: BookingRequest,
    source=Depends(get_sheet_source),
):
    try:
        booking = build_booking(body.model_dump(exclude_none=True))
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))

    worksheet = source.worksheet(BOOKINGS_SHEET)
    if worksheet is None:
        raise HTTPException(status_code=500, detail=f'Sheet "{BOOKINGS_SHEET}" not found.')

    try:
        append_booking(worksheet, booking)
    except Exception as e:
        _dlog(f"[bookings] create failed: {e}", logging.ERROR)
        raise HTTPException(status_code=500, detail=f"Could not save booking: {e}")

    return BookingResponse(message="Booking created.", bookingId=booking["id"])
