# messenger/gateways/friendship_gateway.py
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from messenger.domain.entities import FriendshipStatus, pair_key, utcnow
from messenger.domain.exceptions import Conflict
from messenger.gateways.interfaces import IFriendshipGateway
from messenger.infrastructure import models
from messenger.infrastructure.data_mappers import FriendshipMapper
from messenger.infrastructure.uow import UnitOfWork, UoWModel


class FriendshipGateway(IFriendshipGateway):
    def __init__(self, session: AsyncSession, uow: UnitOfWork):
        self.session = session
        self.uow = uow
        uow.mappers[models.Friendship] = FriendshipMapper(session)

    async def get_friendship(self, friendship_id: str) -> Optional[UoWModel]:
        stmt = select(models.Friendship).filter(models.Friendship.id == friendship_id)
        result = await self.session.execute(stmt)
        friendship = result.scalar_one_or_none()
        return UoWModel(friendship, self.uow) if friendship else None

    async def get_between(self, user_id: str, other_user_id: str) -> Optional[UoWModel]:
        stmt = select(models.Friendship).filter(
            models.Friendship.pair_key == pair_key(user_id, other_user_id)
        )
        result = await self.session.execute(stmt)
        friendship = result.scalar_one_or_none()
        return UoWModel(friendship, self.uow) if friendship else None

    async def create_friendship(self, user_id: str, friend_id: str) -> UoWModel:
        db_friendship = models.Friendship(
            id=models.new_id(),
            user_id=user_id,
            friend_id=friend_id,
            status=FriendshipStatus.PENDING.value,
            pair_key=pair_key(user_id, friend_id),
            created_at=utcnow(),
        )
        uow_friendship = self.uow.register_new(db_friendship)
        try:
            await self.uow.commit()
        except IntegrityError:
            self.uow.clear()
            raise Conflict("Friendship already exists")
        return uow_friendship

    async def update_status(self, friendship: UoWModel, status: str) -> UoWModel:
        friendship.status = FriendshipStatus(status).value
        await self.uow.commit()
        return friendship

    async def get_accepted(self, user_id: str) -> List[UoWModel]:
        stmt = (
            select(models.Friendship)
            .filter(
                or_(
                    models.Friendship.user_id == user_id,
                    models.Friendship.friend_id == user_id,
                ),
                models.Friendship.status == FriendshipStatus.ACCEPTED.value,
            )
            .order_by(models.Friendship.created_at)
        )
        result = await self.session.execute(stmt)
        return [UoWModel(f, self.uow) for f in result.scalars().all()]

    async def get_pending_for(self, user_id: str) -> List[UoWModel]:
        stmt = (
            select(models.Friendship)
            .filter(
                models.Friendship.friend_id == user_id,
                models.Friendship.status == FriendshipStatus.PENDING.value,
            )
            .order_by(models.Friendship.created_at)
        )
        result = await self.session.execute(stmt)
        return [UoWModel(f, self.uow) for f in result.scalars().all()]
