# messenger/api/users.py

from fastapi import APIRouter, Depends, Query

from messenger.api.dependencies import get_current_user, get_profile_interactor
from messenger.infrastructure import schemas
from messenger.interactors.profile_interactor import ProfileInteractor

router = APIRouter()


@router.get("/search", response_model=list[schemas.Profile])
async def search_users(
    query: str = Query("", description="Part of a tag or display name"),
    profile_interactor: ProfileInteractor = Depends(get_profile_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    return await profile_interactor.search(query, current_user.user_id)
