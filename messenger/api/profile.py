# messenger/api/profile.py

from fastapi import APIRouter, Depends

from messenger.api.dependencies import get_current_user, get_profile_interactor
from messenger.infrastructure import schemas
from messenger.interactors.profile_interactor import ProfileInteractor

router = APIRouter()


@router.get("/", response_model=schemas.Profile)
async def read_profile(
    profile_interactor: ProfileInteractor = Depends(get_profile_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    return await profile_interactor.go_online(current_user.user_id)


@router.patch("/", response_model=schemas.Profile)
async def update_profile(
    profile_update: schemas.ProfileUpdate,
    profile_interactor: ProfileInteractor = Depends(get_profile_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    return await profile_interactor.update_profile(current_user.user_id, profile_update)
