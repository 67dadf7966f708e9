"""
Boundary around the user-creation collaborator.

The registrar raises ``RegistrationRejected`` for business-rule refusals
(duplicate email and the like). Anything else it raises, ``ValueError``
included, is an infrastructure failure whose text stays in the logs.
``attempt_registration`` turns both into values so the request handler can
branch on the outcome instead of on exceptions.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

from pydantic import ValidationError

from app.db.models import UserRole
from app.schemas.auth import CreatedUser, RegisterRequest
from app.services.auth import RegistrationRejected

logger = logging.getLogger(__name__)

UserRegistrar = Callable[[str, str, str, UserRole], Awaitable[Any]]


@dataclass(frozen=True)
class Registered:
    user: CreatedUser


@dataclass(frozen=True)
class Rejected:
    message: str


@dataclass(frozen=True)
class Failed:
    pass


RegistrationOutcome = Union[Registered, Rejected, Failed]


async def attempt_registration(registrar: UserRegistrar, data: RegisterRequest) -> RegistrationOutcome:
    """Call ``registrar`` exactly once and classify what happened."""
    try:
        created = await registrar(data.name, data.email, data.password, data.role)
    except RegistrationRejected as e:
        logger.warning(f"Registration rejected for {data.email}: {str(e)}")
        return Rejected(message=str(e))
    except Exception:
        logger.exception(f"Unexpected registration failure for {data.email}")
        return Failed()

    try:
        user = CreatedUser.model_validate(created)
    except ValidationError:
        logger.exception(f"Registrar returned an unusable user for {data.email}")
        return Failed()

    logger.info(f"Registration completed for email: {data.email}, user id: {user.id}")
    return Registered(user=user)
