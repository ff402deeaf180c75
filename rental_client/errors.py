from typing import Any, Dict, Optional


class RentalClientError(Exception):
    """Base class for everything this package raises."""


class ApiError(RentalClientError):
    """The backend answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int, payload: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def __str__(self) -> str:
        return f"HTTP {self.status_code}: {self.message}"


class BadRequestError(ApiError):
    pass


class UnauthorizedError(ApiError):
    pass


class ForbiddenError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class RateLimitedError(ApiError):
    pass


class ServerError(ApiError):
    pass


class NetworkError(RentalClientError):
    """The request was sent but no response came back."""


class ValidationError(RentalClientError):
    """A client-side form check failed; nothing was sent."""

    def __init__(self, errors: Dict[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in self.errors.items()))

    def first(self) -> Optional[str]:
        for message in self.errors.values():
            return message
        return None


_BY_STATUS = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    429: RateLimitedError,
}


def error_message(payload: Any, default: str = "An error occurred") -> str:
    if isinstance(payload, dict):
        for key in ("message", "msg", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    elif isinstance(payload, str) and payload.strip():
        return payload.strip()
    return default


def error_for_status(status_code: int, payload: Any) -> ApiError:
    if status_code >= 500:
        cls = ServerError
    else:
        cls = _BY_STATUS.get(status_code, ApiError)
    return cls(error_message(payload), status_code, payload)
