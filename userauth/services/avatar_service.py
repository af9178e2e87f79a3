"""Avatar thumbnails (Pillow)."""
from __future__ import annotations

import logging
import os

from PIL import Image, ImageOps

from userauth.core.errors import AvatarProcessingError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/pjpeg", "image/png", "image/gif", "image/webp"}


class AvatarProcessor:
    """Resizes uploaded images to a fixed square thumbnail."""

    def __init__(self, size: int = 250):
        self.size = max(1, int(size))

    def resize(self, source: str, destination: str) -> str:
        try:
            with Image.open(source) as opened:
                image = ImageOps.exif_transpose(opened)
                image = image.convert("RGB")
                image = ImageOps.fit(image, (self.size, self.size), Image.LANCZOS)
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            logger.warning("Avatar resize failed for %s: %s", source, exc)
            raise AvatarProcessingError("Unable to process avatar image") from exc
        os.makedirs(os.path.dirname(destination) or ".", exist_ok=True)
        image.save(destination, format="JPEG", quality=85, optimize=True)
        return destination
