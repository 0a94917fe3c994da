# messenger/interactors/profile_interactor.py
import logging
import re
import secrets
import string

from messenger.domain.entities import Claims
from messenger.domain.exceptions import Conflict, NotFound
from messenger.gateways.interfaces import IProfileGateway
from messenger.infrastructure import schemas

logger = logging.getLogger("MessengerAPI.profiles")

_TAG_ALPHABET = string.ascii_lowercase + string.digits
_TAG_ATTEMPTS = 5


def generate_tag(email: str | None = None, first_name: str | None = None) -> str:
    """Build a handle like ``alex_k3f9`` from the first name or the e-mail local part."""
    base = re.sub(r"[^a-z0-9]", "", (first_name or "").lower())
    if not base and email:
        base = re.sub(r"[^a-z0-9]", "", email.split("@")[0].lower())
    suffix = "".join(secrets.choice(_TAG_ALPHABET) for _ in range(4))
    return f"{base or 'user'}_{suffix}"


def display_name_from(claims: Claims) -> str | None:
    if claims.first_name and claims.last_name:
        return f"{claims.first_name} {claims.last_name}"
    return claims.first_name or None


class ProfileInteractor:
    def __init__(
        self,
        profile_gateway: IProfileGateway,
        search_min_length: int = 2,
        search_limit: int = 20,
    ):
        self.profile_gateway = profile_gateway
        self.search_min_length = search_min_length
        self.search_limit = search_limit

    async def get_profile(self, user_id: str) -> schemas.Profile:
        profile = await self.profile_gateway.get_profile(user_id)
        if not profile:
            raise NotFound("User not found")
        return schemas.Profile.model_validate(profile)

    async def get_or_create(self, claims: Claims) -> schemas.Profile:
        profile = await self.profile_gateway.get_profile(claims.user_id)
        if profile:
            return schemas.Profile.model_validate(profile)

        for _ in range(_TAG_ATTEMPTS):
            tag = generate_tag(claims.email, claims.first_name)
            if await self.profile_gateway.get_by_tag(tag):
                continue
            try:
                profile = await self.profile_gateway.create_profile(
                    user_id=claims.user_id,
                    tag=tag,
                    display_name=display_name_from(claims),
                    is_online=True,
                )
            except Conflict:
                # a concurrent first request of the same user, or the tag was just taken
                profile = await self.profile_gateway.get_profile(claims.user_id)
                if profile:
                    return schemas.Profile.model_validate(profile)
                continue
            logger.info(f"Created profile @{tag} for user {claims.user_id}")
            return schemas.Profile.model_validate(profile)

        logger.error(f"No free tag for user {claims.user_id} after {_TAG_ATTEMPTS} attempts")
        raise Conflict("Could not allocate a unique tag")

    async def go_online(self, user_id: str) -> schemas.Profile:
        profile = await self.profile_gateway.get_profile(user_id)
        if not profile:
            raise NotFound("User not found")
        updated = await self.profile_gateway.update_profile(profile, {"is_online": True})
        return schemas.Profile.model_validate(updated)

    async def update_profile(
        self, user_id: str, profile_update: schemas.ProfileUpdate
    ) -> schemas.Profile:
        profile = await self.profile_gateway.get_profile(user_id)
        if not profile:
            raise NotFound("User not found")
        changes = profile_update.model_dump(
            exclude_unset=True, exclude_none=True, mode="json"
        )
        updated = await self.profile_gateway.update_profile(profile, changes)
        return schemas.Profile.model_validate(updated)

    async def search(self, query: str, current_user_id: str) -> list[schemas.Profile]:
        query = (query or "").strip()
        if len(query) < self.search_min_length:
            return []
        profiles = await self.profile_gateway.search_profiles(
            query, current_user_id, limit=self.search_limit
        )
        return [schemas.Profile.model_validate(profile) for profile in profiles]
