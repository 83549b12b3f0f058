"""
Transport tests: the authenticated request executor and the request-shaping
helpers (filters, cleaning, tags, dates, money).
"""

from datetime import date, datetime, timezone

import pytest
import requests

from clients.housecall_pro.errors import HousecallProApiError, ValidationError
from clients.housecall_pro.transport import (
    build_filter_query,
    clean_object,
    format_date,
    parse_money_amount,
    parse_tags,
)
from conftest import FakeResponse, ok


class TestRequest:
    def test_sets_auth_and_json_headers(self, api, session):
        assert session.headers["Authorization"] == "Token test-key"
        assert session.headers["Content-Type"] == "application/json"
        assert session.headers["Accept"] == "application/json"

    def test_builds_url_from_base_and_endpoint(self, api, session):
        session.queue(ok({"id": "c1"}))

        result = api.request("GET", "/customers/c1")

        assert result == {"id": "c1"}
        assert session.calls[0]["method"] == "GET"
        assert session.calls[0]["url"] == "https://api.example.test/v1/customers/c1"

    def test_empty_body_and_query_are_not_sent(self, api, session):
        session.queue(ok())

        api.request("POST", "/estimates/e1/send", {}, {})

        assert session.calls[0]["json"] is None
        assert session.calls[0]["params"] is None

    def test_body_and_query_are_sent_when_present(self, api, session):
        session.queue(ok())

        api.request("PUT", "/jobs/j1", {"work_status": "complete"}, {"expand": "x"})

        assert session.calls[0]["json"] == {"work_status": "complete"}
        assert session.calls[0]["params"] == {"expand": "x"}

    def test_boolean_query_values_are_lowercased(self, api, session):
        session.queue(ok())
        query = {"filter[active]": False, "filter[taxable]": True, "page[size]": 0}

        api.request("GET", "/employees", query=query)

        assert session.calls[0]["params"] == {
            "filter[active]": "false",
            "filter[taxable]": "true",
            "page[size]": 0,
        }
        assert query["filter[active]"] is False

    def test_empty_response_body_decodes_to_empty_dict(self, api, session):
        session.queue(FakeResponse(status_code=204, text=""))

        assert api.request("DELETE", "/customers/c1") == {}

    def test_http_error_keeps_upstream_payload(self, api, session):
        body = {"errors": [{"code": "not_found", "message": "Customer not found"}]}
        session.queue(FakeResponse(status_code=404, json_body=body))

        with pytest.raises(HousecallProApiError) as exc_info:
            api.request("GET", "/customers/missing")

        err = exc_info.value
        assert err.status_code == 404
        assert err.payload == body
        assert err.message == "Customer not found"
        assert err.context == "GET /customers/missing"
        assert isinstance(err.__cause__, requests.HTTPError)
        assert "status=404" in str(err)

    def test_http_error_with_text_body(self, api, session):
        session.queue(FakeResponse(status_code=502, text="Bad Gateway"))

        with pytest.raises(HousecallProApiError) as exc_info:
            api.request("GET", "/jobs")

        assert exc_info.value.status_code == 502
        assert exc_info.value.payload == "Bad Gateway"

    def test_transport_error_is_wrapped(self, api, session):
        session.queue(requests.ConnectionError("connection reset"))

        with pytest.raises(HousecallProApiError) as exc_info:
            api.request("GET", "/jobs")

        assert exc_info.value.status_code is None
        assert "connection reset" in str(exc_info.value)

    def test_no_retry_on_failure(self, api, session):
        session.queue(FakeResponse(status_code=500, json_body={"message": "boom"}), ok())

        with pytest.raises(HousecallProApiError):
            api.request("GET", "/jobs")

        assert len(session.calls) == 1

    def test_non_json_success_body(self, api, session):
        session.queue(FakeResponse(status_code=200, text="<html>"))

        with pytest.raises(HousecallProApiError, match="not valid JSON"):
            api.request("GET", "/jobs")


class TestBuildFilterQuery:
    def test_wraps_keys_and_skips_empty(self):
        query = build_filter_query({"status": "sent", "customer_id": None, "job_id": ""})

        assert query == {"filter[status]": "sent"}

    def test_joins_lists(self):
        assert build_filter_query({"employee_ids": ["a", "b"]}) == {"filter[employee_ids]": "a,b"}

    def test_keeps_false(self):
        assert build_filter_query({"active": False}) == {"filter[active]": False}


class TestCleanObject:
    def test_strips_none_and_empty_string(self):
        assert clean_object({"a": "value", "b": None, "c": ""}) == {"a": "value"}

    def test_keeps_zero_false_and_empty_list(self):
        assert clean_object({"a": 0, "b": False, "c": []}) == {"a": 0, "b": False, "c": []}

    def test_cleans_nested_dicts(self):
        result = clean_object({"address": {"street": "1 Main", "city": ""}, "meta": {"x": None}})

        assert result == {"address": {"street": "1 Main"}}


class TestParseTags:
    def test_comma_separated(self):
        assert parse_tags("tag1, tag2, tag3") == ["tag1", "tag2", "tag3"]

    def test_trims_and_drops_empty(self):
        assert parse_tags("  a  , , b ,") == ["a", "b"]

    def test_list_passes_through(self):
        assert parse_tags(["x", "y"]) == ["x", "y"]

    @pytest.mark.parametrize("value", ["", None])
    def test_empty(self, value):
        assert parse_tags(value) == []


class TestFormatDate:
    def test_iso_string_unchanged(self):
        assert format_date("2024-01-15T10:30:00.000Z") == "2024-01-15T10:30:00.000Z"

    def test_aware_datetime(self):
        value = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        assert format_date(value) == "2024-01-15T10:30:00.000Z"

    def test_date_only(self):
        assert format_date("2024-01-15") == "2024-01-15T00:00:00.000Z"
        assert format_date(date(2024, 1, 15)) == "2024-01-15T00:00:00.000Z"

    def test_offset_is_converted_to_utc(self):
        assert format_date("2024-01-15T12:00:00+02:00") == "2024-01-15T10:00:00.000Z"

    def test_milliseconds_kept(self):
        assert format_date("2024-01-15T10:30:00.123456Z") == "2024-01-15T10:30:00.123Z"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty(self, value):
        assert format_date(value) is None

    def test_garbage_raises_validation_error(self):
        with pytest.raises(ValidationError):
            format_date("not a date")


class TestParseMoneyAmount:
    @pytest.mark.parametrize(
        "amount, expected",
        [
            (99.99, "99.99"),
            (100, "100.00"),
            (0, "0.00"),
            (-50.5, "-50.50"),
            (99.999, "100.00"),
            (99.994, "99.99"),
            (2.675, "2.68"),
            (-2.675, "-2.68"),
        ],
    )
    def test_numbers(self, amount, expected):
        assert parse_money_amount(amount) == expected

    def test_numeric_strings_are_normalized(self):
        assert parse_money_amount("150.00") == "150.00"
        assert parse_money_amount("12.345") == "12.35"

    def test_non_numeric_string_passes_through(self):
        assert parse_money_amount("n/a") == "n/a"

    def test_infinite_is_rejected(self):
        with pytest.raises(ValidationError):
            parse_money_amount(float("inf"))
