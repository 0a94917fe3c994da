# messenger/interactors/friendship_interactor.py
import logging

from messenger.domain.entities import FriendshipStatus
from messenger.domain.exceptions import Conflict, Forbidden, NotFound, ValidationError
from messenger.gateways.interfaces import IFriendshipGateway, IProfileGateway
from messenger.infrastructure import schemas

logger = logging.getLogger("MessengerAPI.friends")


class FriendshipInteractor:
    def __init__(
        self, friendship_gateway: IFriendshipGateway, profile_gateway: IProfileGateway
    ):
        self.friendship_gateway = friendship_gateway
        self.profile_gateway = profile_gateway

    async def request_friendship(
        self, current_user_id: str, friend_id: str
    ) -> schemas.Friendship:
        if friend_id == current_user_id:
            raise ValidationError("You cannot add yourself as a friend")
        if not await self.profile_gateway.get_profile(friend_id):
            raise NotFound("User not found")
        if await self.friendship_gateway.get_between(current_user_id, friend_id):
            raise Conflict("Friendship already exists")

        friendship = await self.friendship_gateway.create_friendship(
            current_user_id, friend_id
        )
        logger.info(f"{current_user_id} sent a friend request to {friend_id}")
        return schemas.Friendship.model_validate(friendship)

    async def respond(
        self, friendship_id: str, current_user_id: str, status: FriendshipStatus
    ) -> schemas.Friendship:
        friendship = await self.friendship_gateway.get_friendship(friendship_id)
        if not friendship:
            raise NotFound("Friendship not found")
        if friendship.friend_id != current_user_id:
            raise Forbidden("Only the recipient can answer a friend request")
        if friendship.status != FriendshipStatus.PENDING:
            raise Conflict(f"Friend request is already {friendship.status}")

        updated = await self.friendship_gateway.update_status(friendship, status)
        logger.info(f"{current_user_id} {status} friend request {friendship_id}")
        return schemas.Friendship.model_validate(updated)

    async def get_friends(self, current_user_id: str) -> list[schemas.FriendWithProfile]:
        friendships = await self.friendship_gateway.get_accepted(current_user_id)
        other_ids = [
            f.friend_id if f.user_id == current_user_id else f.user_id
            for f in friendships
        ]
        profiles = await self.profile_gateway.get_profiles(other_ids)
        return [
            schemas.FriendWithProfile(
                **schemas.Friendship.model_validate(friendship).model_dump(),
                friend=(
                    schemas.Profile.model_validate(profiles[other_id])
                    if other_id in profiles
                    else None
                ),
            )
            for friendship, other_id in zip(friendships, other_ids)
        ]

    async def get_pending_requests(
        self, current_user_id: str
    ) -> list[schemas.FriendRequest]:
        requests = await self.friendship_gateway.get_pending_for(current_user_id)
        profiles = await self.profile_gateway.get_profiles([r.user_id for r in requests])
        return [
            schemas.FriendRequest(
                **schemas.Friendship.model_validate(request).model_dump(),
                user=(
                    schemas.Profile.model_validate(profiles[request.user_id])
                    if request.user_id in profiles
                    else None
                ),
            )
            for request in requests
        ]
