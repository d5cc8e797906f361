"""Registration router for credential users."""

import logging

from fastapi import APIRouter, Request, status
from pydantic import ValidationError

from authgate.presentation.api.dependencies import DBSession, RegistrationServiceDep
from authgate.presentation.api.schemas.auth import RegisterRequest, RegisterResponse
from authgate_identity.domain.user import InvalidPayloadError

logger = logging.getLogger(__name__)

router = APIRouter()


async def _parse_register_request(request: Request) -> RegisterRequest:
    try:
        body = await request.json()
        return RegisterRequest.model_validate(body)
    except (ValueError, ValidationError) as e:
        raise InvalidPayloadError from e


@router.post(
    "/register",
    status_code=status.HTTP_200_OK,
    summary="Register a new user",
    responses={
        200: {"description": "User registered successfully"},
        400: {"description": "Invalid payload or email already registered"},
    },
)
async def register(
    request: Request,
    session: DBSession,
    registration_service: RegistrationServiceDep,
) -> RegisterResponse:
    """
    Create a credentials user from a JSON body ``{email, password, name?}``.

    Registration does not sign the user in; the client follows up with a
    credentials sign-in through ``/auth/callback/credentials``.
    """
    payload = await _parse_register_request(request)

    try:
        user = await registration_service.register(
            email=payload.email,
            password=payload.password,
            name=payload.name,
        )
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    # Only the submitted name is echoed; the stored default is not
    return RegisterResponse(
        id=str(user.id),
        email=user.email,
        name=payload.name or None,
    )
