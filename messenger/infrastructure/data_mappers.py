# messenger/infrastructure/data_mappers.py

from typing import Generic, Protocol, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from messenger.infrastructure import models

ModelT = TypeVar("ModelT")
ModelT_contra = TypeVar("ModelT_contra", contravariant=True)


class DataMapper(Protocol[ModelT_contra]):
    async def insert(self, model: ModelT_contra):
        raise NotImplementedError

    async def delete(self, model: ModelT_contra):
        raise NotImplementedError

    async def update(self, model: ModelT_contra):
        raise NotImplementedError


class SQLAlchemyMapper(Generic[ModelT]):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, model: ModelT):
        self.session.add(model)
        await self.session.flush()

    async def delete(self, model: ModelT):
        await self.session.delete(model)
        await self.session.flush()

    async def update(self, model: ModelT):
        await self.session.merge(model)


class ProfileMapper(SQLAlchemyMapper[models.Profile]):
    pass


class ChatMapper(SQLAlchemyMapper[models.Chat]):
    pass


class ParticipantMapper(SQLAlchemyMapper[models.Participant]):
    pass


class MessageMapper(SQLAlchemyMapper[models.Message]):
    pass


class FriendshipMapper(SQLAlchemyMapper[models.Friendship]):
    pass
