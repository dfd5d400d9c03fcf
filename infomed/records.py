"""
Record operations used by the dashboard, create and view pages.

Each helper catches API errors and returns a result the page can render
directly, the way the pages report failures inline.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from infomed.api_client import APIClient, APIError, MalformedResponseError, unwrap
from infomed.core.logging import get_logger
from infomed.schemas import InfoRecord, Pagination
from infomed.validation import ValidationError, ensure_valid, validate_info_record

logger = get_logger(__name__)


@dataclass
class QRResult:
    """A record together with its QR code."""
    record: InfoRecord
    qr_image: Optional[str] = None
    qr_url: Optional[str] = None


def _parse_record(raw: object) -> InfoRecord:
    if not isinstance(raw, dict):
        raise MalformedResponseError("Invalid response: missing record")
    try:
        return InfoRecord.model_validate(raw)
    except PydanticValidationError as e:
        raise MalformedResponseError("Invalid response: unreadable record") from e


def load_records(api: APIClient, page: int = 1, limit: int = 10) -> tuple[list[InfoRecord], Pagination, Optional[str]]:
    """
    Load one page of the admin's records.

    Returns:
        Tuple of (records, pagination, error message or None)
    """
    try:
        payload = unwrap(api.info.list(page=page, limit=limit))
        records = [_parse_record(item) for item in payload.get("infoRecords", [])]
        pagination = Pagination.model_validate(payload.get("pagination") or {"current": page})
        return records, pagination, None
    except (APIError, PydanticValidationError) as e:
        message = getattr(e, "message", None) or "Failed to fetch records"
        return [], Pagination(current=page), message


def create_record(api: APIClient, data: dict[str, str]) -> tuple[bool, str, Optional[QRResult]]:
    """
    Validate and submit a new record.

    Returns:
        Tuple of (success, message, QR result on success)
    """
    try:
        ensure_valid(validate_info_record(data))
        payload = unwrap(api.info.create({key: value.strip() for key, value in data.items()}))
        record = _parse_record(payload.get("infoRecord"))
    except ValidationError:
        return False, "Please fix the highlighted fields", None
    except APIError as e:
        logger.warning(f"Record creation failed: {e.message}")
        return False, e.message or "Failed to create QR code", None

    logger.info(f"Created record {record.unique_id}")
    result = QRResult(record, payload.get("qrCodeDataUrl"), payload.get("qrCodeUrl"))
    return True, "QR code generated successfully!", result


def load_public_record(api: APIClient, unique_id: str) -> tuple[Optional[QRResult], Optional[str]]:
    """
    Fetch a record by its public unique id.

    Returns:
        Tuple of (result or None, error message or None)
    """
    if not unique_id:
        return None, "No record id given"
    try:
        payload = unwrap(api.info.get_by_unique_id(unique_id))
        record = _parse_record(payload.get("infoRecord"))
    except APIError as e:
        return None, e.message or "Failed to fetch information"
    return QRResult(record, payload.get("qrCodeImage"), payload.get("qrCodeUrl")), None


def toggle_record(api: APIClient, record_id: str) -> tuple[bool, str]:
    """Activate or deactivate a record."""
    try:
        api.info.toggle(record_id)
        return True, "Record status updated"
    except APIError as e:
        return False, e.message or "Failed to toggle record status"


def delete_record(api: APIClient, record_id: str) -> tuple[bool, str]:
    """Delete a record permanently."""
    try:
        api.info.delete(record_id)
        logger.info(f"Deleted record {record_id}")
        return True, "Record deleted"
    except APIError as e:
        return False, e.message or "Failed to delete record"
