"""
Cloudinary HTTP client helpers.

Used endpoint:
- POST /v1_1/<cloud_name>/image/upload  -> {"secure_url": "...", "public_id": "...", ...}

Uploads are signed with the Cloudinary SDK signer; the transport stays on httpx.
"""

from __future__ import annotations

import time
from typing import Any

import httpx
from cloudinary.utils import api_sign_request

from . import config

API_BASE_URL = "https://api.cloudinary.com"
DEFAULT_UPLOAD_FOLDER = "triforge/projects"


# Upload failures are explicit and separable from other runtime errors.
class CloudinaryError(RuntimeError):
    def __init__(self, message: str, *, http_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.http_code = http_code


def upload_folder() -> str:
    return config.env_str("CLOUDINARY_UPLOAD_FOLDER", DEFAULT_UPLOAD_FOLDER)


def _credentials() -> tuple[str, str, str]:
    cloud_name = config.env_str("CLOUDINARY_CLOUD_NAME")
    api_key = config.env_str("CLOUDINARY_API_KEY")
    api_secret = config.env_str("CLOUDINARY_API_SECRET")
    if not (cloud_name and api_key and api_secret):
        raise CloudinaryError("Cloudinary credentials are not configured.")
    return cloud_name, api_key, api_secret


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    return api_sign_request(dict(params), api_secret)


async def upload_image(
    data: bytes,
    *,
    filename: str = "upload",
    content_type: str | None = None,
    folder: str | None = None,
    timeout_s: float = 60.0,
) -> dict[str, Any]:
    """
    Upload raw image bytes and return Cloudinary's response payload.
    """
    if not data:
        raise CloudinaryError("Image file is empty.")

    cloud_name, api_key, api_secret = _credentials()
    signed = {"folder": folder or upload_folder(), "timestamp": int(time.time())}
    form = {
        **{k: str(v) for k, v in signed.items()},
        "api_key": api_key,
        "signature": sign_params(signed, api_secret),
    }
    files = {"file": (filename, data, content_type or "application/octet-stream")}

    try:
        async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=timeout_s) as client:
            resp = await client.post(f"/v1_1/{cloud_name}/image/upload", data=form, files=files)
    except httpx.HTTPError as exc:
        raise CloudinaryError(f"Cloudinary request failed: {exc}") from exc

    if resp.status_code != 200:
        raise CloudinaryError(_error_message(resp), http_code=resp.status_code)

    payload: dict[str, Any] = resp.json()
    secure_url = payload.get("secure_url")
    if not isinstance(secure_url, str) or not secure_url:
        raise CloudinaryError("Cloudinary returned no secure_url.", http_code=resp.status_code)
    return payload


def _error_message(resp: httpx.Response) -> str:
    try:
        error = resp.json().get("error")
    except ValueError:
        error = None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    # Avoid dumping huge bodies; include a small snippet.
    return f"Cloudinary upload failed: {resp.status_code} {resp.text[:300]}"
