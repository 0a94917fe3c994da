# messenger/gateways/participant_gateway.py
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from messenger.domain.entities import Role, utcnow
from messenger.domain.exceptions import Conflict, NotFound
from messenger.gateways.interfaces import IParticipantGateway
from messenger.infrastructure import models
from messenger.infrastructure.data_mappers import ParticipantMapper
from messenger.infrastructure.uow import UnitOfWork, UoWModel


class ParticipantGateway(IParticipantGateway):
    def __init__(self, session: AsyncSession, uow: UnitOfWork):
        self.session = session
        self.uow = uow
        uow.mappers[models.Participant] = ParticipantMapper(session)

    async def get_participant(self, chat_id: str, user_id: str) -> Optional[UoWModel]:
        stmt = select(models.Participant).filter(
            models.Participant.chat_id == chat_id,
            models.Participant.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        participant = result.scalar_one_or_none()
        return UoWModel(participant, self.uow) if participant else None

    async def get_participants(
        self, chat_id: str
    ) -> List[tuple[UoWModel, Optional[models.Profile]]]:
        stmt = (
            select(models.Participant, models.Profile)
            .outerjoin(
                models.Profile, models.Profile.user_id == models.Participant.user_id
            )
            .filter(models.Participant.chat_id == chat_id)
            .order_by(models.Participant.joined_at)
        )
        result = await self.session.execute(stmt)
        return [
            (UoWModel(participant, self.uow), profile)
            for participant, profile in result.all()
        ]

    async def get_user_participations(self, user_id: str) -> List[UoWModel]:
        stmt = select(models.Participant).filter(models.Participant.user_id == user_id)
        result = await self.session.execute(stmt)
        return [UoWModel(p, self.uow) for p in result.scalars().all()]

    async def add_participant(
        self, chat_id: str, user_id: str, role: Role = Role.MEMBER
    ) -> UoWModel:
        existing = await self.get_participant(chat_id, user_id)
        if existing:
            raise Conflict(f"User {user_id} is already a participant of this chat")
        db_participant = models.Participant(
            id=models.new_id(),
            chat_id=chat_id,
            user_id=user_id,
            role=Role(role).value,
            joined_at=utcnow(),
            last_read=None,
        )
        uow_participant = self.uow.register_new(db_participant)
        await self.uow.commit()
        return uow_participant

    async def remove_participant(self, chat_id: str, user_id: str) -> None:
        await self.session.execute(
            delete(models.Participant).where(
                models.Participant.chat_id == chat_id,
                models.Participant.user_id == user_id,
            )
        )

    async def update_role(self, chat_id: str, user_id: str, role: Role) -> UoWModel:
        participant = await self.get_participant(chat_id, user_id)
        if not participant:
            raise NotFound("Member not found")
        participant.role = Role(role).value
        await self.uow.commit()
        return participant

    async def mark_read(self, chat_id: str, user_id: str) -> Optional[UoWModel]:
        participant = await self.get_participant(chat_id, user_id)
        if not participant:
            return None
        participant.last_read = utcnow()
        await self.uow.commit()
        return participant
