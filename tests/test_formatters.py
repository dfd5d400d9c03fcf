"""
Tests for display formatting.
"""

import base64
from datetime import datetime

import pytest

from infomed.formatters import (
    decode_data_url,
    format_date,
    format_datetime,
    format_price,
    format_status,
    qr_filename,
)


class TestDates:

    def test_format_date_iso_string(self):
        assert format_date("2025-03-05T14:30:00Z") == "Mar 5, 2025"

    def test_format_date_plain_date(self):
        assert format_date("2026-12-31") == "Dec 31, 2026"

    def test_format_datetime(self):
        assert format_datetime(datetime(2025, 3, 5, 14, 30)) == "Mar 5, 2025 14:30"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty(self, value):
        assert format_date(value) == "-"
        assert format_datetime(value) == "-"

    def test_unparseable_is_shown_as_is(self):
        assert format_date("12/2026") == "12/2026"


class TestPriceAndStatus:

    def test_numeric_price(self):
        assert format_price("1234.5") == "1,234.50"

    def test_free_text_price(self):
        assert format_price("Rs. 40") == "Rs. 40"

    def test_missing_price(self):
        assert format_price(None) == "-"

    def test_status(self):
        assert format_status(True) == ("Active", "green")
        assert format_status(False) == ("Inactive", "red")
        assert format_status(None) == ("-", "gray")


class TestQRHelpers:

    def test_qr_filename(self):
        assert qr_filename("Paracetamol  500 mg") == "qr-code-paracetamol-500-mg.png"

    def test_qr_filename_blank(self):
        assert qr_filename("  ") == "qr-code-record.png"

    def test_decode_data_url(self):
        payload = b"\x89PNG\r\n"
        url = "data:image/png;base64," + base64.b64encode(payload).decode()

        assert decode_data_url(url) == payload

    @pytest.mark.parametrize("url", [None, "", "http://example.com/qr.png", "data:image/png,raw", "data:image/png;base64,@@@"])
    def test_decode_rejects_non_base64(self, url):
        assert decode_data_url(url) is None
