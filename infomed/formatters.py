"""
Formatting utilities for display.

Provides consistent formatting for dates, prices, statuses and QR downloads.
"""

import base64
import binascii
import re
from datetime import datetime
from typing import Optional


def _parse(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def format_date(value: Optional[str | datetime]) -> str:
    """
    Format a date for display.

    Args:
        value: ISO date string or datetime object

    Returns:
        Formatted date string (e.g. Mar 5, 2025) or "-"
    """
    if not value:
        return "-"

    try:
        dt = _parse(value)
    except ValueError:
        return str(value)
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}"


def format_datetime(value: Optional[str | datetime]) -> str:
    """Format a datetime as "Mar 5, 2025 14:30" or "-"."""
    if not value:
        return "-"

    try:
        dt = _parse(value)
    except ValueError:
        return str(value)
    return f"{format_date(dt)} {dt.strftime('%H:%M')}"


def format_price(value: Optional[float | str]) -> str:
    """Prices are free text on the API side; numbers get two decimals."""
    if value is None or value == "":
        return "-"

    try:
        return f"{float(value):,.2f}"
    except (TypeError, ValueError):
        return str(value)


def format_status(is_active: Optional[bool]) -> tuple[str, str]:
    """
    Format a record status with label and color.

    Returns:
        Tuple of (display_label, color)
    """
    if is_active is None:
        return "-", "gray"
    return ("Active", "green") if is_active else ("Inactive", "red")


def qr_filename(medicine_name: str) -> str:
    """Download name for a record's QR code image."""
    slug = re.sub(r"\s+", "-", medicine_name.strip()).lower()
    return f"qr-code-{slug or 'record'}.png"


def decode_data_url(data_url: Optional[str]) -> Optional[bytes]:
    """
    Decode a base64 ``data:`` URL (as returned for QR images) into bytes.

    Returns None for anything that is not a base64 data URL.
    """
    if not data_url or not data_url.startswith("data:"):
        return None

    header, _, encoded = data_url.partition(",")
    if ";base64" not in header:
        return None
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        return None
