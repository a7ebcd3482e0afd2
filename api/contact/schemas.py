"""
Contact-message API schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


class ContactCreateRequest(BaseModel):
    # Public form: unknown keys (including isRead) are ignored.
    name: str = Field(..., min_length=2, max_length=200)
    email: EmailStr
    whatsapp: str | None = Field(default=None, max_length=50)
    message: str = Field(..., min_length=10, max_length=5000)


class ContactUpdateRequest(BaseModel):
    """
    Partial update. A field left out of the body keeps its stored value;
    a field that is sent is written, including `isRead: false`.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, min_length=2, max_length=200)
    email: EmailStr | None = None
    whatsapp: str | None = Field(default=None, max_length=50)
    message: str | None = Field(default=None, min_length=10, max_length=5000)
    is_read: bool | None = Field(default=None, alias="isRead")

    @model_validator(mode="after")
    def _reject_null_required(self) -> "ContactUpdateRequest":
        for field in ("name", "email", "message", "is_read"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null.")
        return self
