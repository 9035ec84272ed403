"""Local storage for uploaded profile images, served under /uploads."""
import logging
import os
from pathlib import Path
from typing import Optional
from uuid import uuid4

from fitmeal.infra import paths

logger = logging.getLogger(__name__)

URL_PREFIX = '/uploads/profile-images/'
_EXTENSIONS = {'image/jpeg': '.jpg', 'image/png': '.png', 'image/webp': '.webp'}


def save_profile_image(user_id: str, content: bytes, content_type: str) -> str:
    """Write the image and return its public URL."""
    folder = paths.profile_images_dir()
    os.makedirs(folder, exist_ok=True)
    filename = f"{user_id}-{uuid4().hex[:12]}{_EXTENSIONS.get(content_type, '')}"
    with open(folder / filename, 'wb') as f:
        f.write(content)
    logger.info(f"Stored profile image {filename} ({len(content)} bytes)")
    return URL_PREFIX + filename


def _path_for(url: str) -> Optional[Path]:
    if not url or not url.startswith(URL_PREFIX):
        return None
    name = Path(url[len(URL_PREFIX):]).name
    return paths.profile_images_dir() / name if name else None


def delete_profile_image(url: str) -> bool:
    path = _path_for(url)
    if path is None or not path.exists():
        return False
    try:
        path.unlink()
        return True
    except OSError as e:
        logger.warning(f"Could not delete old profile image {path}: {e}")
        return False
