from functools import partial

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.services.auth import register_user
from app.services.registration import UserRegistrar


async def get_user_registrar(db: AsyncSession = Depends(get_db)) -> UserRegistrar:
    """User-creation collaborator for the registration endpoint, bound to the request's session."""
    return partial(register_user, db)
