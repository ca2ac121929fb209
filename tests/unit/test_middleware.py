"""Unit tests for middleware."""
from unittest.mock import Mock

import pytest

from festgate.middleware.logging import REQUEST_ID_HEADER, LoggingMiddleware


def make_request(headers=None, method="POST", path="/api/v1/checkin/scan"):
    request = Mock()
    request.state = Mock(spec=[])
    request.headers = headers or {}
    request.method = method
    request.url = Mock()
    request.url.path = path
    request.client = Mock()
    request.client.host = "10.0.0.7"
    request.query_params = {}
    return request


def make_response(status_code=200):
    response = Mock()
    response.headers = {}
    response.status_code = status_code
    return response


@pytest.mark.unit
class TestLoggingMiddleware:
    """Request ID propagation."""

    @pytest.mark.asyncio
    async def test_request_id_set_before_handler(self):
        """Endpoints can read request.state.request_id while handling the request."""
        request = make_request()
        seen = {}

        async def call_next(req):
            seen["request_id"] = req.state.request_id
            return make_response()

        response = await LoggingMiddleware(Mock()).dispatch(request, call_next)

        assert seen["request_id"]
        assert response.headers[REQUEST_ID_HEADER] == seen["request_id"]

    @pytest.mark.asyncio
    async def test_request_ids_are_unique(self):
        middleware = LoggingMiddleware(Mock())

        async def call_next(req):
            return make_response()

        first = await middleware.dispatch(make_request(), call_next)
        second = await middleware.dispatch(make_request(), call_next)

        assert first.headers[REQUEST_ID_HEADER] != second.headers[REQUEST_ID_HEADER]

    @pytest.mark.asyncio
    async def test_scanner_supplied_request_id_is_reused(self):
        """Scanners retrying a request keep their own correlation ID."""
        request = make_request(headers={REQUEST_ID_HEADER: "gate-3-000172"})

        async def call_next(req):
            return make_response()

        response = await LoggingMiddleware(Mock()).dispatch(request, call_next)

        assert request.state.request_id == "gate-3-000172"
        assert response.headers[REQUEST_ID_HEADER] == "gate-3-000172"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("supplied", ["x" * 65, "bad\nid", "   "])
    async def test_unusable_request_id_is_replaced(self, supplied):
        request = make_request(headers={REQUEST_ID_HEADER: supplied})

        async def call_next(req):
            return make_response()

        await LoggingMiddleware(Mock()).dispatch(request, call_next)

        assert request.state.request_id != supplied.strip()
        assert len(request.state.request_id) == 36

    @pytest.mark.asyncio
    async def test_exceptions_propagate(self):
        async def call_next(req):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await LoggingMiddleware(Mock()).dispatch(make_request(), call_next)
