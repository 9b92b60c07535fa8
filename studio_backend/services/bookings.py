"""Bookings service - public rental bookings and item availability."""
import logging
import time
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Set

from studio_backend.config import BOOKING_BLOCKING_STATUSES, debug_log as _dlog
from studio_backend.services.errors import InvalidRequestError
from studio_backend.services.row_mapper import Record

REQUIRED_BOOKING_FIELDS = ("itemId", "startDate", "endDate", "customerName", "customerEmail")
BOOKING_INITIAL_STATUS = "Pendiente"


def _parse_day(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def dates_in_range(start: str, end: str) -> List[str]:
    """Every YYYY-MM-DD day from start to end, both included."""
    first, last = _parse_day(start), _parse_day(end)
    if first is None or last is None:
        _dlog(f"[bookings] unparseable range {start!r}..{end!r}", logging.WARNING)
        return []
    days = []
    current = first
    while current <= last:
        days.append(current.isoformat())
        current += timedelta(days=1)
    return days


def build_booking(data: Dict[str, Any]) -> Dict[str, Any]:
    missing = [f for f in REQUIRED_BOOKING_FIELDS if not data.get(f)]
    if missing:
        raise InvalidRequestError(f"Missing required fields: {', '.join(missing)}")
    return {
        "id": f"res_{int(time.time() * 1000)}",
        "bookingTimestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "status": BOOKING_INITIAL_STATUS,
        "itemId": data["itemId"],
        "itemName": data.get("itemName") or "",
        "startDate": data["startDate"],
        "endDate": data["endDate"],
        "totalDays": data.get("totalDays") or "",
        "totalPrice": data.get("totalPrice") or "",
        "customerName": data["customerName"],
        "customerEmail": data["customerEmail"],
        "customerPhone": data.get("customerPhone") or "",
    }


def append_booking(worksheet, booking: Dict[str, Any]) -> None:
    """Append the booking under the worksheet's own header order."""
    headers = worksheet.row_values(1)
    worksheet.append_row([booking.get(h, "") for h in headers], value_input_option="USER_ENTERED")
    _dlog(f"[bookings] created {booking['id']} for item {booking['itemId']}")


def unavailable_dates(item_id: str, bookings: Iterable[Record], blocked: Iterable[Record]) -> List[str]:
    """Sorted days taken by confirmed/paid bookings or blocked by an admin."""
    days: Set[str] = set()
    for row in bookings:
        status = (row.get("status") or "").strip().lower()
        if row.get("itemId") == item_id and status in BOOKING_BLOCKING_STATUSES:
            if row.get("startDate") and row.get("endDate"):
                days.update(dates_in_range(row["startDate"], row["endDate"]))
    for row in blocked:
        if row.get("itemId") == item_id and row.get("startDate") and row.get("endDate"):
            days.update(dates_in_range(row["startDate"], row["endDate"]))
    return sorted(days)
