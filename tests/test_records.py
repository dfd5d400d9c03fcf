"""
Tests for the record helpers used by the pages.
"""

import requests

from infomed.records import (
    create_record,
    delete_record,
    load_public_record,
    load_records,
    toggle_record,
)

from tests.conftest import make_response
from tests.test_validation import VALID_RECORD

CREATED = {
    "_id": "r1",
    "uniqueId": "u1",
    **VALID_RECORD,
    "createdAt": "2025-03-05T14:30:00.000Z",
    "viewCount": 0,
    "isActive": True,
}


class TestLoadRecords:

    def test_parses_records_and_pagination(self, api, mock_request):
        mock_request.return_value = make_response(200, {
            "success": True,
            "data": {
                "infoRecords": [{**CREATED, "viewCount": 7, "lastViewed": "2025-03-06T08:00:00Z"}],
                "pagination": {"current": 2, "pages": 3, "total": 25},
            },
        })

        records, pagination, error = load_records(api, page=2, limit=10)

        assert error is None
        assert records[0].medicine_name == "Paracetamol 500mg"
        assert records[0].view_count == 7
        assert records[0].id == "r1"
        assert (pagination.current, pagination.pages, pagination.total) == (2, 3, 25)

    def test_failure_returns_message(self, api, mock_request):
        mock_request.side_effect = requests.exceptions.ConnectionError()

        records, pagination, error = load_records(api, page=3)

        assert records == []
        assert pagination.current == 3
        assert "connect" in error


class TestCreateRecord:

    def test_success(self, api, mock_request):
        mock_request.return_value = make_response(201, {
            "success": True,
            "data": {
                "infoRecord": CREATED,
                "qrCodeDataUrl": "data:image/png;base64,iVBORw0KGgo=",
                "qrCodeUrl": "http://localhost:3000/view/u1",
            },
        })

        success, message, result = create_record(api, {**VALID_RECORD, "btno": " BT-001 "})

        assert success is True
        assert result.record.unique_id == "u1"
        assert result.qr_url == "http://localhost:3000/view/u1"
        assert result.qr_image.startswith("data:image/png")
        assert mock_request.call_args.kwargs["json"]["btno"] == "BT-001"

    def test_invalid_form_never_reaches_network(self, api, mock_request):
        success, message, result = create_record(api, {**VALID_RECORD, "drugs": ""})

        assert success is False
        assert result is None
        mock_request.assert_not_called()

    def test_remote_error(self, api, mock_request):
        mock_request.return_value = make_response(400, {"message": "Invalid expiry date"})

        success, message, result = create_record(api, VALID_RECORD)

        assert (success, message, result) == (False, "Invalid expiry date", None)

    def test_missing_record_in_response(self, api, mock_request):
        mock_request.return_value = make_response(201, {"success": True, "data": {}})

        success, message, _ = create_record(api, VALID_RECORD)

        assert success is False
        assert "missing record" in message


class TestPublicRecord:

    def test_found(self, api, mock_request):
        mock_request.return_value = make_response(200, {
            "success": True,
            "data": {"infoRecord": CREATED, "qrCodeImage": "data:image/png;base64,AA==", "qrCodeUrl": "u"},
        })

        result, error = load_public_record(api, "u1")

        assert error is None
        assert result.record.comp_name == "Acme Pharma"
        assert result.qr_image == "data:image/png;base64,AA=="

    def test_not_found(self, api, mock_request):
        mock_request.return_value = make_response(404, {"success": False, "message": "Information not found"})

        result, error = load_public_record(api, "missing")

        assert result is None
        assert error == "Information not found"

    def test_no_id(self, api, mock_request):
        result, error = load_public_record(api, "")

        assert result is None
        mock_request.assert_not_called()


class TestToggleAndDelete:

    def test_toggle(self, api, mock_request):
        mock_request.return_value = make_response(200, {"success": True, "data": {"isActive": False}})

        assert toggle_record(api, "r1") == (True, "Record status updated")

    def test_toggle_failure(self, api, mock_request):
        mock_request.return_value = make_response(403, {"message": "Not your record"})

        assert toggle_record(api, "r1") == (False, "Not your record")

    def test_delete(self, api, mock_request):
        mock_request.return_value = make_response(200, {"success": True, "message": "Deleted"})

        assert delete_record(api, "r1") == (True, "Record deleted")
        assert mock_request.call_args.kwargs["method"] == "DELETE"

    def test_delete_failure(self, api, mock_request):
        mock_request.return_value = make_response(500, {"message": "db down"})

        assert delete_record(api, "r1") == (False, "db down")
