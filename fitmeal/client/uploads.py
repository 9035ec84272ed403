import logging
from typing import Any, Dict

from fitmeal.client.api_client import ApiClient
from fitmeal.client.errors import ValidationError
from fitmeal.utilities.constants import ALLOWED_IMAGE_TYPES, MAX_IMAGE_SIZE

logger = logging.getLogger(__name__)

UPLOAD_IMAGE_PATH = "/api/profile/upload-image"
DELETE_IMAGE_PATH = "/api/profile/delete-image"


def validate_image_upload(content_type: str, size: int) -> None:
    """Reject anything but JPEG/PNG/WebP and files over 5MB (5MB itself is fine)."""
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Please select a JPEG, PNG, or WebP image")
    if size > MAX_IMAGE_SIZE:
        raise ValidationError("Image must be smaller than 5MB")
    if size <= 0:
        raise ValidationError("Please select an image to upload")


async def upload_profile_image(client: ApiClient, filename: str, content: bytes,
                               content_type: str) -> Dict[str, Any]:
    validate_image_upload(content_type, len(content))
    body = await client.post(UPLOAD_IMAGE_PATH, files={"profileImage": (filename, content, content_type)})
    logger.info(f"Uploaded profile image {filename}")
    return body["data"]


async def delete_profile_image(client: ApiClient) -> None:
    await client.delete(DELETE_IMAGE_PATH)
