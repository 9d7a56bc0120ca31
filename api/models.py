"""
API request and response models for Doorman REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Request models validate loosely-typed bodies (JSON or form fields) at the
boundary. Any failure is re-raised as auth.errors.ValidationError so the
client always sees 400 {"error": "..."} rather than FastAPI's 422 shape.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from auth.errors import ValidationError
from auth.models import User

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class _RequestBody(BaseModel):
    """Base for request bodies: unknown fields are dropped, not rejected."""

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def parse(cls, payload: object):
        """Validate payload, mapping pydantic errors onto a 400 ValidationError.

        Only the first error is reported. Messages raised by our own
        validators pass through; pydantic's built-in ones become the generic
        "Invalid request".
        """
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as exc:
            errors = exc.errors()
            if errors and errors[0]["type"] in _CUSTOM_ERROR_TYPES:
                raise ValidationError(errors[0]["msg"]) from exc
            raise ValidationError() from exc


_CUSTOM_ERROR_TYPES = frozenset({"missing_required", "invalid_age"})


def _require(model: BaseModel, fields: tuple[str, ...], message: str) -> None:
    # Empty strings count as missing.
    if any(not getattr(model, f) for f in fields):
        raise PydanticCustomError("missing_required", message)


class LoginRequest(_RequestBody):
    """Request body for POST /login."""

    email: Optional[str] = None
    password: Optional[str] = None

    @model_validator(mode="after")
    def check_required(self) -> "LoginRequest":
        _require(self, ("email", "password"), "Email and password are required")
        return self


class SignupRequest(_RequestBody):
    """Request body for POST /signup.

    Optional profile fields submitted as empty strings (as an HTML form does
    for blank inputs) are stored as NULL. age accepts 25 or "25".
    """

    email: Optional[str] = Field(default=None, max_length=255)
    name: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=255)
    nickname: Optional[str] = Field(default=None, max_length=255)
    age: Optional[int] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    sex: Optional[str] = Field(default=None, max_length=50)

    @field_validator("nickname", "phone", "sex", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("age", mode="before")
    @classmethod
    def coerce_age(cls, value):
        """Accept an int or a base-10 numeric string; blank means not given."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        if isinstance(value, bool):
            raise PydanticCustomError("invalid_age", "Age must be a whole number")
        if isinstance(value, int):
            age = value
        else:
            try:
                age = int(str(value).strip(), 10)
            except ValueError:
                raise PydanticCustomError("invalid_age", "Age must be a whole number") from None
        # SQLite INTEGER is a signed 64-bit value.
        if not -(2**63) <= age < 2**63:
            raise PydanticCustomError("invalid_age", "Age is out of range")
        return age

    @model_validator(mode="after")
    def check_required(self) -> "SignupRequest":
        _require(self, ("email", "name", "password"), "Email, name, and password are required")
        return self


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class SuccessResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True


class UserProfile(BaseModel):
    """Response for GET /api/user. Never carries the password hash."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    name: str
    nickname: Optional[str] = None
    age: Optional[int] = None
    phone: Optional[str] = None
    sex: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        """Build a UserProfile from the auth-layer User dataclass."""
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            nickname=user.nickname,
            age=user.age,
            phone=user.phone,
            sex=user.sex,
        )


class ErrorResponse(BaseModel):
    """Error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: str


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
