from .api import ApiClient
from .client import RentalClient
from .errors import (
    ApiError,
    NetworkError,
    RentalClientError,
    UnauthorizedError,
    ValidationError,
)
from .navigation import Navigator
from .session import FileTokenStorage, MemoryTokenStorage, SessionStore

__all__ = [
    "ApiClient",
    "ApiError",
    "FileTokenStorage",
    "MemoryTokenStorage",
    "Navigator",
    "NetworkError",
    "RentalClient",
    "RentalClientError",
    "SessionStore",
    "UnauthorizedError",
    "ValidationError",
]
