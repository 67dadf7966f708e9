import json
import logging
from typing import Union

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.api.dependencies import get_user_registrar
from app.core.config import settings
from app.core.rate_limiting import limiter
from app.schemas.auth import ErrorResponse, RegisterRequest, RegisterResponse, first_error_message
from app.services.registration import Failed, Rejected, UserRegistrar, attempt_registration

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


async def handle_register(raw_body: Union[bytes, str], registrar: UserRegistrar) -> JSONResponse:
    """Validate a sign-up payload and hand it to ``registrar``.

    The registrar is called at most once, and only for a fully valid payload.
    Validation failures and business-rule rejections are reported as 400 with
    a client-safe message; anything else the registrar raises becomes a
    generic 500.
    """
    try:
        payload = json.loads(raw_body)
    except ValueError:
        logger.warning("Registration request with malformed body")
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    try:
        data = RegisterRequest.model_validate(payload)
    except ValidationError as e:
        message = first_error_message(e)
        logger.info(f"Registration validation failed: {message}")
        return _error(status.HTTP_400_BAD_REQUEST, message)

    logger.info(f"Received registration request for email: {data.email}")
    outcome = await attempt_registration(registrar, data)

    if isinstance(outcome, Rejected):
        return _error(status.HTTP_400_BAD_REQUEST, outcome.message)
    if isinstance(outcome, Failed):
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    body = RegisterResponse(user=outcome.user)
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=body.model_dump(mode="json"))


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@limiter.limit(settings.REGISTER_RATE_LIMIT)
async def register(request: Request, registrar: UserRegistrar = Depends(get_user_registrar)):
    raw_body = await request.body()
    return await handle_register(raw_body, registrar)
