"""Tests for api/base.py - Unified API response format."""

from datetime import timezone

from api.base import (
    success_response,
    error_response,
    ErrorCodes,
    to_json,
)


class TestSuccessResponse:
    """Tests for success_response()."""

    def test_structure(self):
        resp = success_response({"foo": "bar"})
        assert resp.success is True
        assert resp.data == {"foo": "bar"}
        assert resp.error is None

    def test_request_id_generated(self):
        resp = success_response({})
        assert resp.meta.request_id is not None
        assert len(resp.meta.request_id) > 0

    def test_timestamp_is_utc(self):
        resp = success_response({})
        assert resp.meta.timestamp.tzinfo == timezone.utc


class TestErrorResponse:
    """Tests for error_response()."""

    def test_structure(self):
        resp = error_response("TEST_ERROR", "Something went wrong")
        assert resp.success is False
        assert resp.data is None
        assert resp.error.code == "TEST_ERROR"
        assert resp.error.message == "Something went wrong"

    def test_request_id_generated(self):
        resp = error_response("ERR", "msg")
        assert resp.meta.request_id is not None
        assert len(resp.meta.request_id) > 0

    def test_timestamp_is_utc(self):
        resp = error_response("ERR", "msg")
        assert resp.meta.timestamp.tzinfo == timezone.utc


class TestErrorCodes:
    """Tests that ErrorCodes contains the codes clients branch on."""

    def test_has_internal_error(self):
        assert ErrorCodes.INTERNAL_ERROR == "INTERNAL_ERROR"

    def test_has_not_found(self):
        assert ErrorCodes.NOT_FOUND == "NOT_FOUND"

    def test_has_validation_error(self):
        assert ErrorCodes.VALIDATION_ERROR == "VALIDATION_ERROR"

    def test_has_data_source_unavailable(self):
        assert ErrorCodes.DATA_SOURCE_UNAVAILABLE == "DATA_SOURCE_UNAVAILABLE"

    def test_has_persistence_failed(self):
        assert ErrorCodes.PERSISTENCE_FAILED == "PERSISTENCE_FAILED"


class TestToJson:
    """Tests for to_json() - camelCase, JSON-safe model dumps."""

    def test_camel_case_and_string_money(self):
        from core.models import Product

        data = to_json(Product(id="06P", name="6MM CLEAR POLISHED", price="37.30", unit="sqm"))

        assert data == {
            "id": "06P",
            "name": "6MM CLEAR POLISHED",
            "description": "",
            "price": "37.30",
            "unit": "sqm",
            "category": "General",
        }

    def test_computed_fields_included(self):
        from core.models import InvoiceItem

        data = to_json(InvoiceItem(id="l1", description="Mirror", quantity="2", unit_price="40"))

        assert data["unitPrice"] == "40"
        assert data["total"] == "80"
