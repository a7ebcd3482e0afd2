"""
Project request schemas.

Bodies arrive either as JSON or as multipart form fields, so these
models are validated explicitly by the service (after tag
normalization) instead of being bound by FastAPI.
"""

from __future__ import annotations

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

_http_url = TypeAdapter(HttpUrl)


def _check_image_url(value: str | None) -> str | None:
    if value is None:
        return None
    url = value.strip()
    if url:
        # Validate only; the trimmed string is stored, not the parsed URL.
        try:
            _http_url.validate_python(url)
        except ValidationError as exc:
            raise ValueError("Invalid image URL.") from exc
    return url


class ProjectCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    segment: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=2, max_length=100)
    title: str = Field(..., min_length=3, max_length=200)
    result: str = Field(..., min_length=5)
    details: str = Field(..., min_length=5)
    tags: list[str] | None = None
    image: str | None = None
    image_alt: str | None = Field(default=None, alias="imageAlt", max_length=300)

    @field_validator("image")
    @classmethod
    def _validate_image(cls, value: str | None) -> str | None:
        return _check_image_url(value)


class ProjectUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    segment: str | None = Field(default=None, min_length=1, max_length=100)
    category: str | None = Field(default=None, min_length=2, max_length=100)
    title: str | None = Field(default=None, min_length=3, max_length=200)
    result: str | None = Field(default=None, min_length=5)
    details: str | None = Field(default=None, min_length=5)
    tags: list[str] | None = None
    image: str | None = None
    image_alt: str | None = Field(default=None, alias="imageAlt", max_length=300)

    @field_validator("image")
    @classmethod
    def _validate_image(cls, value: str | None) -> str | None:
        return _check_image_url(value)

    @model_validator(mode="after")
    def _reject_null_fields(self) -> "ProjectUpdateRequest":
        for field in ("segment", "category", "title", "result", "details", "image_alt"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null.")
        return self
