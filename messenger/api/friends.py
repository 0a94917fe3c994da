# messenger/api/friends.py

from fastapi import APIRouter, Depends

from messenger.api.dependencies import get_current_user, get_friendship_interactor
from messenger.domain.entities import FriendshipStatus
from messenger.infrastructure import schemas
from messenger.interactors.friendship_interactor import FriendshipInteractor

router = APIRouter()


@router.get("/", response_model=list[schemas.FriendWithProfile])
async def read_friends(
    friendship_interactor: FriendshipInteractor = Depends(get_friendship_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    return await friendship_interactor.get_friends(current_user.user_id)


@router.get("/requests", response_model=list[schemas.FriendRequest])
async def read_friend_requests(
    friendship_interactor: FriendshipInteractor = Depends(get_friendship_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    return await friendship_interactor.get_pending_requests(current_user.user_id)


@router.post("/", response_model=schemas.Friendship)
async def send_friend_request(
    request: schemas.FriendshipCreate,
    friendship_interactor: FriendshipInteractor = Depends(get_friendship_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    return await friendship_interactor.request_friendship(
        current_user.user_id, request.friend_id
    )


@router.patch("/{friendship_id}", response_model=schemas.Friendship)
async def answer_friend_request(
    friendship_id: str,
    answer: schemas.FriendshipUpdate,
    friendship_interactor: FriendshipInteractor = Depends(get_friendship_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    return await friendship_interactor.respond(
        friendship_id, current_user.user_id, FriendshipStatus(answer.status)
    )
