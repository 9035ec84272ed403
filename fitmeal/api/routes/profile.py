import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from fitmeal.api.deps import get_current_user, users
from fitmeal.domain.User import User
from fitmeal.infra.image_store import delete_profile_image, save_profile_image
from fitmeal.utilities.constants import ALLOWED_IMAGE_TYPES, MAX_IMAGE_SIZE

router = APIRouter(prefix="/api/profile", tags=["profile"])
logger = logging.getLogger(__name__)


@router.get("")
def get_profile(user: User = Depends(get_current_user)):
    return {'status': 'success', 'data': user.to_public_dict()}


@router.post("/upload-image")
async def upload_image(profileImage: UploadFile = File(...), user: User = Depends(get_current_user)):
    if profileImage.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail="Invalid file type. Only JPEG, PNG, and WebP images are allowed.")
    content = await profileImage.read(MAX_IMAGE_SIZE + 1)
    if len(content) > MAX_IMAGE_SIZE:
        raise HTTPException(status_code=400, detail="File too large. Maximum size is 5MB.")
    if not content:
        raise HTTPException(status_code=400, detail="No image uploaded")

    previous = user.profile_picture
    user.profile_picture = save_profile_image(user.id, content, profileImage.content_type)
    users.save(user)
    if previous:
        delete_profile_image(previous)
    logger.info(f"User {user.id} uploaded a new profile image")
    return {'status': 'success', 'data': {'profileImageUrl': user.profile_picture, 'user': user.to_public_dict()}}


@router.delete("/delete-image")
def delete_image(user: User = Depends(get_current_user)):
    if not user.profile_picture:
        raise HTTPException(status_code=400, detail="No profile image to delete")
    delete_profile_image(user.profile_picture)
    user.profile_picture = None
    users.save(user)
    return {'status': 'success', 'message': 'Profile image deleted successfully'}
