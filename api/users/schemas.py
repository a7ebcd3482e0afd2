"""
User-management API schemas (request models).
"""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

# bcrypt only hashes the first 72 bytes and newer releases reject anything longer.
PASSWORD_MAX_BYTES = 72


def _check_password_bytes(value: str | None) -> str | None:
    if value is not None and len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes.")
    return value


class CreateUserRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    name: str | None = Field(default=None, min_length=2, max_length=200)

    @field_validator("password")
    @classmethod
    def _validate_password(cls, value: str) -> str:
        return _check_password_bytes(value)


class UpdateUserRequest(BaseModel):
    # Unset fields are left untouched; `name: null` clears the name.
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6, max_length=128)
    name: str | None = Field(default=None, min_length=2, max_length=200)

    @model_validator(mode="after")
    def _require_one_field(self) -> "UpdateUserRequest":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update.")
        if "email" in self.model_fields_set and self.email is None:
            raise ValueError("email cannot be null.")
        if "password" in self.model_fields_set and self.password is None:
            raise ValueError("password cannot be null.")
        return self

    @field_validator("password")
    @classmethod
    def _validate_password(cls, value: str | None) -> str | None:
        return _check_password_bytes(value)
