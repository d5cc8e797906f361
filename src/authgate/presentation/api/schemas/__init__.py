"""API request/response schemas."""

from authgate.presentation.api.schemas.auth import RegisterRequest, RegisterResponse

__all__ = [
    "RegisterRequest",
    "RegisterResponse",
]
