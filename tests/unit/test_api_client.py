import asyncio
from collections.abc import Callable

import httpx
import pytest

from univerify.api.client import ApiClient
from univerify.api.exceptions import (
    ApiError,
    AuthenticationRequiredError,
    MalformedResponseError,
    NetworkError,
)
from univerify.session.session import Session

Handler = Callable[[httpx.Request], httpx.Response]


def _request(handler: Handler, session: Session | None = None, **kwargs: object) -> dict:
    async def _go() -> dict:
        async with ApiClient(
            base_url="http://backend.test",
            session=session or Session(),
            transport=httpx.MockTransport(handler),
        ) as client:
            return await client.request("GET", "/health", **kwargs)

    return asyncio.run(_go())


class TestSuccessfulRequests:
    def test_returns_json_object(self) -> None:
        body = _request(lambda r: httpx.Response(200, json={"status": "ok"}))
        assert body == {"status": "ok"}

    def test_attaches_bearer_token_when_present(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        _request(handler, Session(token="tok-1"))

        assert seen[0].headers["Authorization"] == "Bearer tok-1"

    def test_no_authorization_header_without_token(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        _request(handler)

        assert "Authorization" not in seen[0].headers

    def test_joins_base_url_and_endpoint(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        _request(handler)

        assert str(seen[0].url) == "http://backend.test/health"


class TestAuthenticationPrecondition:
    def test_missing_token_raises_401_before_sending(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={})

        with pytest.raises(AuthenticationRequiredError) as exc_info:
            _request(handler, authenticated=True, auth_message="need a token")

        assert exc_info.value.status == 401
        assert exc_info.value.message == "need a token"
        assert calls == []

    def test_authenticated_request_with_token_is_sent(self) -> None:
        body = _request(
            lambda r: httpx.Response(200, json={"ok": True}),
            Session(token="tok"),
            authenticated=True,
        )
        assert body == {"ok": True}


class TestErrorResponses:
    def test_uses_backend_message(self) -> None:
        with pytest.raises(ApiError) as exc_info:
            _request(lambda r: httpx.Response(404, json={"message": "File not found"}))

        assert exc_info.value.status == 404
        assert exc_info.value.message == "File not found"
        assert exc_info.value.payload == {"message": "File not found"}

    def test_uses_error_field_when_message_missing(self) -> None:
        with pytest.raises(ApiError, match="Invalid signature"):
            _request(lambda r: httpx.Response(400, json={"error": "Invalid signature"}))

    def test_falls_back_to_status_line_for_non_json_body(self) -> None:
        with pytest.raises(ApiError) as exc_info:
            _request(lambda r: httpx.Response(500, text="<html>oops</html>"))

        assert exc_info.value.status == 500
        assert exc_info.value.message == "HTTP 500: Internal Server Error"
        assert exc_info.value.payload is None

    def test_falls_back_to_status_line_for_empty_json_body(self) -> None:
        with pytest.raises(ApiError, match="HTTP 502: Bad Gateway"):
            _request(lambda r: httpx.Response(502, json={}))


class TestNetworkFailures:
    def test_connect_error_becomes_status_zero(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError) as exc_info:
            _request(handler)

        assert exc_info.value.status == 0
        assert "Network error" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_timeout_becomes_status_zero(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(NetworkError):
            _request(handler)


class TestMalformedBodies:
    def test_non_json_success_body(self) -> None:
        with pytest.raises(MalformedResponseError, match="Invalid JSON"):
            _request(lambda r: httpx.Response(200, text="not json"))

    def test_non_object_success_body(self) -> None:
        with pytest.raises(MalformedResponseError, match="JSON object"):
            _request(lambda r: httpx.Response(200, json=[1, 2, 3]))
