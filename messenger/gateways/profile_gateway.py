# messenger/gateways/profile_gateway.py

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from messenger.domain.entities import Language, utcnow
from messenger.domain.exceptions import Conflict
from messenger.gateways.interfaces import IProfileGateway
from messenger.infrastructure import models
from messenger.infrastructure.data_mappers import ProfileMapper
from messenger.infrastructure.uow import UnitOfWork, UoWModel


class ProfileGateway(IProfileGateway):
    def __init__(self, session: AsyncSession, uow: UnitOfWork):
        self.session = session
        self.uow = uow
        uow.mappers[models.Profile] = ProfileMapper(session)

    async def get_profile(self, user_id: str) -> UoWModel | None:
        stmt = select(models.Profile).filter(models.Profile.user_id == user_id)
        result = await self.session.execute(stmt)
        profile = result.scalar_one_or_none()
        return UoWModel(profile, self.uow) if profile else None

    async def get_by_tag(self, tag: str) -> UoWModel | None:
        stmt = select(models.Profile).filter(models.Profile.tag == tag)
        result = await self.session.execute(stmt)
        profile = result.scalar_one_or_none()
        return UoWModel(profile, self.uow) if profile else None

    async def get_profiles(self, user_ids: list[str]) -> dict[str, UoWModel]:
        if not user_ids:
            return {}
        stmt = select(models.Profile).filter(models.Profile.user_id.in_(set(user_ids)))
        result = await self.session.execute(stmt)
        return {
            profile.user_id: UoWModel(profile, self.uow)
            for profile in result.scalars().all()
        }

    async def create_profile(
        self,
        user_id: str,
        tag: str,
        display_name: str | None = None,
        is_online: bool = True,
    ) -> UoWModel:
        db_profile = models.Profile(
            user_id=user_id,
            tag=tag,
            display_name=display_name,
            bio=None,
            language=Language.EN.value,
            is_online=is_online,
            last_seen=utcnow(),
        )
        uow_profile = self.uow.register_new(db_profile)
        try:
            await self.uow.commit()
        except IntegrityError:
            # a profile insert is the first write of its request
            self.uow.clear()
            await self.session.rollback()
            raise Conflict("Profile or tag already exists")
        return uow_profile

    async def update_profile(self, profile: UoWModel, changes: dict) -> UoWModel:
        for key, value in changes.items():
            setattr(profile, key, value)
        profile.last_seen = utcnow()
        await self.uow.commit()
        return profile

    async def search_profiles(
        self, query: str, exclude_user_id: str, limit: int = 20
    ) -> list[UoWModel]:
        stmt = (
            select(models.Profile)
            .filter(
                or_(
                    models.Profile.tag.icontains(query, autoescape=True),
                    models.Profile.display_name.icontains(query, autoescape=True),
                ),
                models.Profile.user_id != exclude_user_id,
            )
            .order_by(models.Profile.tag)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [UoWModel(profile, self.uow) for profile in result.scalars().all()]
