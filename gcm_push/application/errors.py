from __future__ import annotations

from typing import Any, Mapping


class GcmError(Exception):
    code = "gcm_error"
    retryable = False

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class UsageError(GcmError):
    code = "usage_error"


class SendError(GcmError):
    """Raised when a send is aborted as a whole."""

    code = "send_error"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.status_code = status_code


class InvalidRequest(SendError):
    code = "invalid_request"


class Unauthorized(SendError):
    code = "unauthorized"


class ServerError(SendError):
    code = "server_error"
    retryable = True

    def __init__(
        self,
        message: str,
        *,
        retry_after: float,
        status_code: int | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, details=details)
        self.retry_after = retry_after

    def backoff(self, attempt: int, *, base: float | None = None) -> float:
        """Seconds to wait before retry number `attempt` (1-based)."""
        if attempt < 1:
            raise ValueError("attempt starts at 1")
        base = self.retry_after if base is None else base
        return max(self.retry_after, base * 2 ** (attempt - 1))


class TransportError(SendError):
    code = "transport_error"

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        status_code: int | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, details=details)
        self.cause = cause


class MalformedResponse(TransportError):
    code = "malformed_response"
