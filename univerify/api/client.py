from types import TracebackType
from typing import Any

import httpx

from univerify.api.exceptions import (
    ApiError,
    AuthenticationRequiredError,
    MalformedResponseError,
    NetworkError,
)
from univerify.logging.logger import Log
from univerify.session.session import Session


class ApiClient:
    """Generic request/response wrapper around the UniVerify backend."""

    def __init__(
        self,
        *,
        base_url: str,
        session: Session,
        timeout_seconds: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            transport=transport,
        )

    @property
    def session(self) -> Session:
        return self._session

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        authenticated: bool = False,
        auth_message: str = "Authentication token is required",
        json: dict[str, Any] | None = None,
        data: dict[str, str] | None = None,
        files: dict[str, tuple[str, bytes, str]] | None = None,
    ) -> dict[str, Any]:
        """Send one request and return its decoded JSON object.

        Raises:
            AuthenticationRequiredError: if ``authenticated`` and no token is held.
                No request is sent in that case.
            NetworkError: if the request produced no HTTP response.
            ApiError: for any non-2xx response.
            MalformedResponseError: if a 2xx body is not a JSON object.
        """
        token = self._session.token
        if authenticated and not token:
            raise AuthenticationRequiredError(auth_message)

        headers = {"Authorization": f"Bearer {token}"} if token else {}
        Log.debug(f"{method} {endpoint}")
        try:
            response = await self._client.request(
                method,
                endpoint,
                headers=headers,
                json=json,
                data=data,
                files=files,
            )
        except httpx.HTTPError as exc:
            raise NetworkError(f"Network error: {exc}") from exc

        if not response.is_success:
            raise self._error_from_response(response)

        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedResponseError(
                f"Invalid JSON response from {endpoint}", response.status_code
            ) from exc
        if not isinstance(body, dict):
            raise MalformedResponseError(
                f"Response from {endpoint} must be a JSON object", response.status_code
            )
        return body

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    @staticmethod
    def _error_from_response(response: httpx.Response) -> ApiError:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            payload = None

        message = None
        if payload is not None:
            for key in ("message", "error"):
                value = payload.get(key)
                if isinstance(value, str) and value:
                    message = value
                    break
        if message is None:
            message = f"HTTP {response.status_code}: {response.reason_phrase}"
        Log.debug(f"Backend error {response.status_code}: {message}")
        return ApiError(message, response.status_code, payload)
