"""
Project image handling.

An image reaches a project in one of two ways:
- an uploaded file, sent to Cloudinary; its `secure_url` is stored
- a URL string supplied by the client, stored as-is (trimmed)

An uploaded file always wins over a URL sent in the same request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import HTTPException, status
from starlette.datastructures import UploadFile

from core import cloudinary, config

# Keep this in line with the admin panel's client-side limit.
DEFAULT_MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5 MiB

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedImage:
    data: bytes
    filename: str
    content_type: str | None


def max_image_bytes() -> int:
    return config.env_int("MAX_IMAGE_UPLOAD_BYTES", DEFAULT_MAX_IMAGE_BYTES)


def is_empty_file_part(file: UploadFile) -> bool:
    # Browsers send an empty, nameless part when no file was picked.
    return not file.filename and not (file.size or 0)


async def read_image_upload(file: UploadFile) -> UploadedImage:
    """
    Read an uploaded image into memory, enforcing type and size limits.
    """
    content_type = (file.content_type or "").lower()
    if not content_type.startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file must be an image.",
        )

    max_bytes = max_image_bytes()
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()
    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"Image too large. Max is {max_bytes} bytes.",
            )

    return UploadedImage(data=bytes(buf), filename=file.filename or "upload", content_type=file.content_type)


async def upload(image: UploadedImage, *, action: str) -> str:
    try:
        result = await cloudinary.upload_image(
            image.data,
            filename=image.filename,
            content_type=image.content_type,
        )
    except cloudinary.CloudinaryError as exc:
        logger.error(
            "image_upload_failed action=%s filename=%s http_code=%s error=%s",
            action,
            image.filename,
            exc.http_code,
            exc.message,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to upload image: {exc.message}",
        ) from exc

    logger.debug("image_uploaded action=%s public_id=%s", action, result.get("public_id"))
    return str(result["secure_url"])


async def resolve_create_image(uploaded: UploadedImage | None, image_url: str | None) -> str:
    if uploaded is not None:
        return await upload(uploaded, action="create")

    url = (image_url or "").strip()
    if url:
        return url

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Image is required. Upload a file in the 'image' field or send an image URL.",
    )


async def resolve_update_image(existing: str, uploaded: UploadedImage | None, image_url: str | None) -> str:
    if uploaded is not None:
        return await upload(uploaded, action="update")

    # An empty value never clears the stored image.
    url = (image_url or "").strip()
    return url or existing
