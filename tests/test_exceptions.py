"""Tests for the error mapper and exception hierarchy."""

import pytest

from agent_platform_sdk.exceptions import (
    AgentPlatformError,
    ApiStatusError,
    AuthenticationError,
    AuthorizationError,
    CODE_TO_STATUS,
    NotFoundError,
    RateLimitError,
    STATUS_TO_CODE,
    ServerError,
    TransportError,
    ValidationError,
    code_for_status,
    error_from_response,
    status_for_code,
)

from tests.conftest import envelope, error_envelope

DOCUMENTED = [
    (401, "UNAUTHORIZED", AuthenticationError),
    (403, "FORBIDDEN", AuthorizationError),
    (404, "NOT_FOUND", NotFoundError),
    (422, "VALIDATION_ERROR", ValidationError),
    (429, "RATE_LIMITED", RateLimitError),
    (500, "INTERNAL_ERROR", ServerError),
]


class TestStatusCodeTable:
    @pytest.mark.parametrize("status,code,exc_type", DOCUMENTED)
    def test_status_maps_to_one_code(self, status, code, exc_type):
        assert code_for_status(status) == code
        assert status_for_code(code) == status
        assert code_for_status(status_for_code(code)) == code

    def test_table_is_one_to_one(self):
        assert len(STATUS_TO_CODE) == len(CODE_TO_STATUS) == 6

    def test_other_5xx_is_internal_error(self):
        assert code_for_status(503) == "INTERNAL_ERROR"

    def test_unknown_status(self):
        assert code_for_status(409) == "UNKNOWN_ERROR"
        assert status_for_code("TRANSPORT_ERROR") is None


class TestErrorFromResponse:
    @pytest.mark.parametrize("status,code,exc_type", DOCUMENTED)
    def test_maps_status_to_exception(self, status, code, exc_type):
        err = error_from_response(status, error_envelope(code, "nope"))
        assert type(err) is exc_type
        assert err.code == code
        assert err.message == "nope"
        assert err.status_code == status
        assert isinstance(err, ApiStatusError)

    def test_status_used_when_body_has_no_code(self):
        err = error_from_response(403, {"message": "no access"})
        assert isinstance(err, AuthorizationError)
        assert err.message == "no access"

    def test_details_preserved(self):
        details = {"fields": {"name": "required"}}
        err = error_from_response(422, error_envelope("VALIDATION_ERROR", "bad", details))
        assert err.details == details

    def test_retry_after_from_header(self):
        err = error_from_response(429, error_envelope("RATE_LIMITED"), {"Retry-After": "30"})
        assert isinstance(err, RateLimitError)
        assert err.retry_after == 30.0

    def test_retry_after_from_details(self):
        err = error_from_response(429, error_envelope("RATE_LIMITED", details={"retryAfter": 12}))
        assert err.retry_after == 12.0

    def test_retry_after_absent(self):
        err = error_from_response(429, error_envelope("RATE_LIMITED"))
        assert err.retry_after is None

    def test_unparseable_retry_after_ignored(self):
        err = error_from_response(429, {}, {"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"})
        assert err.retry_after is None

    def test_string_error_field(self):
        err = error_from_response(404, {"success": False, "error": "agent not found"})
        assert isinstance(err, NotFoundError)
        assert err.message == "agent not found"

    def test_non_dict_payload(self):
        err = error_from_response(500, "<html>bad gateway</html>")
        assert isinstance(err, ServerError)
        assert err.message == "HTTP 500"

    def test_request_id_from_header(self):
        err = error_from_response(404, {}, {"X-Request-Id": "req_hdr"})
        assert err.request_id == "req_hdr"

    def test_envelope_code_wins_over_status(self):
        err = error_from_response(200, error_envelope("FORBIDDEN"))
        assert isinstance(err, AuthorizationError)


class TestHierarchy:
    def test_all_errors_share_base(self):
        for exc in (TransportError("x"), ServerError("x"), RateLimitError("x")):
            assert isinstance(exc, AgentPlatformError)

    def test_str_includes_code(self):
        assert str(NotFoundError("missing")) == "[NOT_FOUND] missing"

    def test_transport_error_code(self):
        assert TransportError("down").code == "TRANSPORT_ERROR"


class TestMappedThroughClient:
    @pytest.mark.parametrize("status,code,exc_type", DOCUMENTED)
    def test_client_raises_typed_error(self, make_client, api, status, code, exc_type):
        client = make_client(retries=0)
        api.add("GET", "/agents", (status, error_envelope(code, "failed here")))
        with pytest.raises(exc_type) as exc:
            client.request("GET", "/agents")
        assert exc.value.code == code
        assert exc.value.message == "failed here"

    def test_rate_limit_carries_retry_after(self, client, api):
        api.add("GET", "/agents", (429, error_envelope("RATE_LIMITED"), {"Retry-After": "7"}))
        with pytest.raises(RateLimitError) as exc:
            client.request("GET", "/agents")
        assert exc.value.retry_after == 7.0

    def test_success_envelope_not_an_error(self, client, api):
        api.add("GET", "/agents", (200, envelope([])))
        assert client.request("GET", "/agents").success
