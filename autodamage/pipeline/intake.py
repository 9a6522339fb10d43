"""Image intake: validation, encoding and id assignment for uploads."""

import base64
import io
import time
import uuid
from dataclasses import dataclass
from typing import Optional
from PIL import Image, UnidentifiedImageError
from loguru import logger


@dataclass(frozen=True)
class EncodedImage:
    """An accepted upload ready to be sent for analysis."""
    image_id: str
    name: str
    data_uri: str


def new_image_id() -> str:
    """Unique id of the form '<epoch-ms>-<9 chars>'."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def detect_image_format(content: bytes) -> Optional[str]:
    """
    Identify the image format of raw bytes.

    Returns:
        Lowercase format name (e.g. 'jpeg', 'png'), or None if not an image
    """
    if not content:
        return None

    try:
        with Image.open(io.BytesIO(content)) as img:
            img.verify()
            image_format = img.format
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError):
        return None

    return image_format.lower() if image_format else None


def encode_image(content: bytes, name: str) -> Optional[EncodedImage]:
    """
    Encode an uploaded file as a base64 data URI.

    Args:
        content: Raw file bytes
        name: Original file name

    Returns:
        EncodedImage, or None when the file is not an image
    """
    image_format = detect_image_format(content)
    if image_format is None:
        logger.warning(f"Skipping non-image upload: {name}")
        return None

    data_uri = f"data:image/{image_format};base64,{base64.b64encode(content).decode()}"

    return EncodedImage(image_id=new_image_id(), name=name, data_uri=data_uri)
