# messenger/gateways/chat_gateway.py
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from messenger.domain.entities import utcnow
from messenger.domain.exceptions import Conflict
from messenger.gateways.interfaces import IChatGateway
from messenger.infrastructure import models
from messenger.infrastructure.data_mappers import ChatMapper
from messenger.infrastructure.uow import UnitOfWork, UoWModel


class ChatGateway(IChatGateway):
    def __init__(self, session: AsyncSession, uow: UnitOfWork):
        self.session = session
        self.uow = uow
        uow.mappers[models.Chat] = ChatMapper(session)

    async def get_chat(self, chat_id: str) -> Optional[UoWModel]:
        stmt = select(models.Chat).filter(models.Chat.id == chat_id)
        result = await self.session.execute(stmt)
        chat = result.scalar_one_or_none()
        return UoWModel(chat, self.uow) if chat else None

    async def get_private_chat(self, private_key: str) -> Optional[UoWModel]:
        stmt = select(models.Chat).filter(models.Chat.private_key == private_key)
        result = await self.session.execute(stmt)
        chat = result.scalar_one_or_none()
        return UoWModel(chat, self.uow) if chat else None

    async def create_chat(
        self,
        chat_type: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        created_by: Optional[str] = None,
        private_key: Optional[str] = None,
    ) -> UoWModel:
        now = utcnow()
        db_chat = models.Chat(
            id=models.new_id(),
            type=chat_type,
            name=name,
            description=description,
            created_by=created_by,
            private_key=private_key,
            created_at=now,
            updated_at=now,
        )
        uow_chat = self.uow.register_new(db_chat)
        try:
            await self.uow.commit()
        except IntegrityError:
            # another request created the same private chat first
            self.uow.clear()
            raise Conflict("A private chat between these users already exists")
        return uow_chat

    async def update_chat(self, chat: UoWModel, changes: dict) -> UoWModel:
        for key, value in changes.items():
            setattr(chat, key, value)
        chat.updated_at = utcnow()
        await self.uow.commit()
        return chat

    async def delete_chat(self, chat: UoWModel) -> None:
        # messages and participations go with the chat
        await self.session.execute(
            delete(models.Message).where(models.Message.chat_id == chat.id)
        )
        await self.session.execute(
            delete(models.Participant).where(models.Participant.chat_id == chat.id)
        )
        self.uow.register_deleted(chat)
        await self.uow.commit()
