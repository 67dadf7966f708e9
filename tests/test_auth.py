import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from app.db.models import User, UserRole, UserStatus
from app.services import auth as auth_service
from app.services.auth import RegistrationRejected, register_user, get_user_by_email
from app.core.security import hash_password, verify_password


@pytest.mark.asyncio
async def test_register_user(db_session):
    user = await register_user(
        db_session,
        name="Ann Lee",
        email="ann@example.com",
        password="Abcd1234!",
        role=UserRole.INVESTOR,
    )

    assert user.id
    assert user.name == "Ann Lee"
    assert user.email == "ann@example.com"
    assert user.role == UserRole.INVESTOR
    assert user.status == UserStatus.ACTIVE
    assert user.password_hash != "Abcd1234!"
    assert verify_password("Abcd1234!", user.password_hash)


@pytest.mark.asyncio
async def test_register_user_defaults_to_trader(db_session):
    user = await register_user(db_session, "Bob Stone", "bob@example.com", "Abcd1234!")

    assert user.role == UserRole.TRADER


@pytest.mark.asyncio
async def test_register_duplicate_email(db_session, existing_user):
    with pytest.raises(RegistrationRejected, match="User already exists"):
        await register_user(db_session, "Someone Else", existing_user.email, "Abcd1234!")


@pytest.mark.asyncio
async def test_register_duplicate_email_race(db_session, existing_user, monkeypatch):
    real_lookup = auth_service.get_user_by_email
    lookups = []

    async def lookup_misses_once(db, email):
        lookups.append(email)
        if len(lookups) == 1:
            return None
        return await real_lookup(db, email)

    monkeypatch.setattr(auth_service, "get_user_by_email", lookup_misses_once)

    with pytest.raises(RegistrationRejected, match="User already exists"):
        await register_user(db_session, "Racer", existing_user.email, "Abcd1234!")

    count = await db_session.scalar(select(func.count()).select_from(User))
    assert count == 1


@pytest.mark.asyncio
async def test_register_other_integrity_error_is_not_a_duplicate(db_session):
    with pytest.raises(IntegrityError):
        await register_user(db_session, None, "nameless@example.com", "Abcd1234!")

    count = await db_session.scalar(select(func.count()).select_from(User))
    assert count == 0


@pytest.mark.asyncio
async def test_get_user_by_email(db_session, existing_user):
    found = await get_user_by_email(db_session, "trader@example.com")
    missing = await get_user_by_email(db_session, "nobody@example.com")

    assert found.id == existing_user.id
    assert missing is None


def test_password_hash_roundtrip():
    long_password = "Aa1!" * 32
    password_hash = hash_password(long_password)

    assert password_hash.startswith("$2b$")
    assert verify_password(long_password, password_hash)
    assert not verify_password(long_password[:-1], password_hash)


def test_verify_password_rejects_garbage_hash():
    assert not verify_password("Abcd1234!", "not-a-bcrypt-hash")
