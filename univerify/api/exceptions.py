class ApiError(Exception):
    """Raised when a backend call fails.

    ``status`` is the HTTP status code of the failed response, 0 for
    network-level failures, or a synthetic code for local precondition
    failures. ``payload`` holds the parsed error body when one was available.
    """

    def __init__(
        self,
        message: str,
        status: int,
        payload: dict[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload


class AuthenticationRequiredError(ApiError):
    """Raised locally when an authenticated call is made without a bearer token."""

    def __init__(self, message: str = "Authentication token is required") -> None:
        super().__init__(message, 401)


class NetworkError(ApiError):
    """Raised when the request never produced an HTTP response."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 0)


class MalformedResponseError(ApiError):
    """Raised when a response body does not match the expected shape."""

    def __init__(self, message: str, status: int = 200) -> None:
        super().__init__(message, status)


class FileValidationError(ApiError):
    """Raised locally when a file violates the upload policy."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class ConfirmationTimeoutError(ApiError):
    """Raised when a transaction is not confirmed within the retry budget."""

    def __init__(self, message: str = "Transaction confirmation timeout") -> None:
        super().__init__(message, 408)


class ConfirmationCancelledError(ApiError):
    """Raised when a caller abandons an in-flight confirmation wait."""

    def __init__(self, message: str = "Transaction confirmation cancelled") -> None:
        super().__init__(message, 499)
