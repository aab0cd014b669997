"""Image Payload Rules — validates base64 image uploads before they leave the process.

Invariants:
    - normalize_image_payload is PURE: returns a data URI or raises InputValidationError
    - Payloads without a "data:" prefix are assumed to be JPEG
    - Decoded size is bounded by max_bytes
"""

import base64
import binascii
import re

from closetmap.core.errors import InputValidationError

DEFAULT_MIME = "image/jpeg"
_DATA_URI = re.compile(r"^data:(image/[\w.+-]+);base64,(.*)$", re.DOTALL)


def decoded_size(b64: str) -> int:
    """Byte length of the decoded payload, computed without decoding."""
    stripped = b64.rstrip("=")
    return (len(stripped) * 3) // 4


def normalize_image_payload(raw: str, max_bytes: int, field: str = "imageBase64") -> str:
    """Return raw as a data URI suitable for the image store."""
    raw = raw.strip()
    if not raw:
        raise InputValidationError("Image is required", field)

    if raw.startswith("data:"):
        match = _DATA_URI.match(raw)
        if not match:
            raise InputValidationError("Image must be a base64 image data URI", field)
        mime, body = match.group(1), match.group(2)
    else:
        mime, body = DEFAULT_MIME, raw

    body = "".join(body.split())
    if not body:
        raise InputValidationError("Image is required", field)
    try:
        base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError):
        raise InputValidationError("Image is not valid base64", field)

    if decoded_size(body) > max_bytes:
        raise InputValidationError(
            f"Image must not exceed {max_bytes // (1024 * 1024)}MB", field,
        )
    return f"data:{mime};base64,{body}"
