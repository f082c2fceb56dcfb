"""Time Utilities - UTC timestamps, Vietnam-local display and relative time"""
from datetime import datetime, timezone, timedelta
from typing import Optional
from dateutil import parser as date_parser
from dateutil import tz

VIETNAM_TZ = tz.gettz("Asia/Ho_Chi_Minh")


def utc_now() -> datetime:
    """Get current UTC datetime"""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite returns them naive)"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_iso(dt: datetime) -> str:
    """
    Format datetime to ISO 8601 string

    Args:
        dt: Datetime object

    Returns:
        ISO formatted string with Z suffix for UTC
    """
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")


def parse_iso(iso_string: str) -> datetime:
    """
    Parse ISO 8601 string to datetime

    Args:
        iso_string: ISO formatted datetime string

    Returns:
        Datetime object in UTC
    """
    return ensure_utc(date_parser.isoparse(iso_string))


def to_vietnam_time(dt: datetime) -> datetime:
    """Convert to Asia/Ho_Chi_Minh local time"""
    return ensure_utc(dt).astimezone(VIETNAM_TZ)


def format_vietnam_date(dt: Optional[datetime]) -> str:
    """dd/mm/yyyy in Vietnam local time"""
    if dt is None:
        return ""
    return to_vietnam_time(dt).strftime("%d/%m/%Y")


def format_vietnam_datetime(dt: Optional[datetime]) -> str:
    """dd/mm/yyyy HH:MM in Vietnam local time"""
    if dt is None:
        return ""
    return to_vietnam_time(dt).strftime("%d/%m/%Y %H:%M")


def is_today(dt: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """Whether dt falls on the current Vietnam calendar day"""
    if dt is None:
        return False
    now = now or utc_now()
    return to_vietnam_time(dt).date() == to_vietnam_time(now).date()


def is_within(dt: Optional[datetime], delta: timedelta, now: Optional[datetime] = None) -> bool:
    """Whether dt lies within `delta` before now"""
    if dt is None:
        return False
    now = now or utc_now()
    return now - ensure_utc(dt) <= delta


def relative_time(dt: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Vietnamese relative time ("Vừa xong", "5 phút trước", ...)

    Args:
        dt: Past datetime
        now: Reference time (defaults to utc_now)

    Returns:
        Human readable string
    """
    if dt is None:
        return ""
    now = now or utc_now()
    seconds = int((now - ensure_utc(dt)).total_seconds())

    if seconds < 60:
        return "Vừa xong"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes} phút trước"
    hours = minutes // 60
    if hours < 24:
        return f"{hours} giờ trước"
    days = hours // 24
    if days < 7:
        return f"{days} ngày trước"
    if days < 30:
        return f"{days // 7} tuần trước"
    if days < 365:
        return f"{days // 30} tháng trước"
    return f"{days // 365} năm trước"
