import re

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from app.db.models import UserRole

REGISTRABLE_ROLES = (UserRole.TRADER.value, UserRole.INVESTOR.value)

# Checked in order; the first failing rule is the one reported.
PASSWORD_RULES = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one number"),
    (re.compile(r"[^A-Za-z0-9]"), "Password must contain at least one special character"),
)

_FIELD_LABELS = {
    "name": "Name",
    "email": "Email",
    "password": "Password",
    "role": "Role",
}


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str = Field(repr=False)
    role: UserRole = UserRole.TRADER

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        if len(value) < 2:
            raise PydanticCustomError("name_too_short", "Name must be at least 2 characters")
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            raise PydanticCustomError("invalid_email", "Invalid email address") from None
        return value

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        if len(value) < 8:
            raise PydanticCustomError("password_too_short", "Password must be at least 8 characters")
        if len(value) > 128:
            raise PydanticCustomError("password_too_long", "Password must be less than 128 characters")
        for pattern, message in PASSWORD_RULES:
            if not pattern.search(value):
                raise PydanticCustomError("password_policy", message)
        return value

    @field_validator("role", mode="before")
    @classmethod
    def check_role(cls, value):
        if value not in REGISTRABLE_ROLES:
            raise PydanticCustomError(
                "invalid_role",
                "Role must be one of: {roles}",
                {"roles": ", ".join(REGISTRABLE_ROLES)},
            )
        return value


def first_error_message(exc: ValidationError) -> str:
    """Return a client-facing message for the first violated constraint."""
    errors = exc.errors()
    if not errors:
        return "Invalid request body"

    error = errors[0]
    loc = error.get("loc") or ()
    label = _FIELD_LABELS.get(loc[0]) if loc else None
    if label is None:
        return "Invalid request body"

    if error["type"] == "missing":
        return f"{label} is required"
    if error["type"] == "string_type":
        return f"{label} must be a string"
    return error["msg"]


class CreatedUser(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole

    class Config:
        from_attributes = True

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value):
        # ids are opaque to clients; stores may hand back integers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class RegisterResponse(BaseModel):
    message: str = "User created successfully"
    user: CreatedUser


class ErrorResponse(BaseModel):
    error: str
