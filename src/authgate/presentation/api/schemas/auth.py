"""Registration schemas for request/response models."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Request schema for user registration.

    Fields are optional at the schema level so a missing field surfaces as
    the same ``Invalid payload`` answer as a malformed one.
    """

    email: str | None = Field(default=None, description="User's email address")
    password: str | None = Field(default=None, description="Plain-text password")
    name: str | None = Field(
        default=None,
        description="Display name (defaults to the email local part)",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "securepassword123",
                "name": "User",
            },
        },
    )


class RegisterResponse(BaseModel):
    """Response schema for a registered user."""

    id: str
    email: str
    name: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "0f8fad5b-d9cb-469f-a165-70867728950e",
                "email": "user@example.com",
                "name": "user",
            },
        },
    )
