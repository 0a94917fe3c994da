# messenger/gateways/message_gateway.py
from datetime import datetime, timedelta

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from messenger.domain.entities import Attachment, as_utc, utcnow
from messenger.gateways.interfaces import IMessageGateway
from messenger.infrastructure import models
from messenger.infrastructure.data_mappers import MessageMapper
from messenger.infrastructure.uow import UnitOfWork, UoWModel

_TICK = timedelta(microseconds=1)


class MessageGateway(IMessageGateway):
    """Append-only log of messages, ordered per chat by ``created_at``."""

    def __init__(self, session: AsyncSession, uow: UnitOfWork):
        self.session = session
        self.uow = uow
        uow.mappers[models.Message] = MessageMapper(session)

    async def _latest_timestamp(self, chat_id: str) -> datetime | None:
        stmt = select(func.max(models.Message.created_at)).filter(
            models.Message.chat_id == chat_id
        )
        result = await self.session.execute(stmt)
        return as_utc(result.scalar_one_or_none())

    async def _next_timestamp(self, chat_id: str) -> datetime:
        # strictly increasing per chat even if the wall clock stalls or steps back
        now = utcnow()
        latest = await self._latest_timestamp(chat_id)
        if latest is not None and now <= latest:
            return latest + _TICK
        return now

    async def append(
        self,
        chat_id: str,
        sender_id: str,
        content: str,
        message_type: str,
        attachment: Attachment | None = None,
    ) -> UoWModel:
        db_message = models.Message(
            id=models.new_id(),
            chat_id=chat_id,
            sender_id=sender_id,
            content=content,
            type=message_type,
            attachment_url=attachment.url if attachment else None,
            attachment_name=attachment.name if attachment else None,
            attachment_size=attachment.size if attachment else None,
            created_at=await self._next_timestamp(chat_id),
            is_read=False,
        )
        uow_message = self.uow.register_new(db_message)
        await self.uow.commit()
        # last activity of the chat follows its newest message
        await self.session.execute(
            update(models.Chat)
            .where(models.Chat.id == chat_id)
            .values(updated_at=db_message.created_at)
        )
        return uow_message

    async def list_messages(
        self, chat_id: str, limit: int = 50
    ) -> list[tuple[UoWModel, models.Profile | None]]:
        stmt = (
            select(models.Message, models.Profile)
            .outerjoin(models.Profile, models.Profile.user_id == models.Message.sender_id)
            .filter(models.Message.chat_id == chat_id)
            .order_by(models.Message.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        newest_first = [
            (UoWModel(message, self.uow), sender) for message, sender in result.all()
        ]
        newest_first.reverse()
        return newest_first

    async def last_message(self, chat_id: str) -> UoWModel | None:
        stmt = (
            select(models.Message)
            .filter(models.Message.chat_id == chat_id)
            .order_by(models.Message.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        message = result.scalar_one_or_none()
        return UoWModel(message, self.uow) if message else None

    async def count_unread(
        self, chat_id: str, user_id: str, last_read: datetime | None
    ) -> int:
        stmt = select(func.count(models.Message.id)).filter(
            models.Message.chat_id == chat_id,
            models.Message.sender_id != user_id,
        )
        if last_read is not None:
            stmt = stmt.filter(models.Message.created_at > last_read)
        result = await self.session.execute(stmt)
        return result.scalar_one()
