from .config import ClientConfig
from .http import (
    ApiClient,
    ApiDecodeError,
    ApiError,
    ApiStatusError,
    ApiTransportError,
)

__all__ = [
    "ApiClient",
    "ApiDecodeError",
    "ApiError",
    "ApiStatusError",
    "ApiTransportError",
    "ClientConfig",
]
