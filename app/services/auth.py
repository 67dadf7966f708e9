import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select

from app.db.models import User, UserRole, UserStatus
from app.core.security import hash_password

logger = logging.getLogger(__name__)


class RegistrationRejected(ValueError):
    """Business-rule refusal whose message is safe to show the client."""


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def register_user(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
    role: UserRole = UserRole.TRADER,
) -> User:
    logger.info(f"Starting user registration for email: {email}")

    if await get_user_by_email(db, email):
        logger.warning(f"Registration attempt with existing email: {email}")
        raise RegistrationRejected("User already exists")

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=role,
        status=UserStatus.ACTIVE,
    )
    db.add(user)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        # Only a row that now holds this email means we lost a registration race
        if await get_user_by_email(db, email) is None:
            raise
        logger.warning(f"Concurrent registration detected for email: {email}")
        raise RegistrationRejected("User already exists")

    await db.refresh(user)
    logger.info(f"User account created with id: {user.id}, role: {user.role.value}")
    return user
