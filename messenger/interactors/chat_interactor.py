# messenger/interactors/chat_interactor.py
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from messenger.domain.entities import ChatType, Role, as_utc, pair_key
from messenger.domain.exceptions import Forbidden, NotFound, ValidationError
from messenger.domain.policy import Action, require
from messenger.gateways.interfaces import (
    IChatGateway,
    IMessageGateway,
    IParticipantGateway,
    IProfileGateway,
)
from messenger.infrastructure import schemas
from messenger.infrastructure.uow import UoWModel

logger = logging.getLogger("MessengerAPI.chats")


def _activity(view: schemas.ChatWithDetails) -> datetime:
    if view.last_message is not None:
        return as_utc(view.last_message.created_at)
    return as_utc(view.created_at)


class ChatInteractor:
    """Builds conversation views and applies membership changes to chats.

    Views are computed on every call from the chat registry, the membership
    ledger and the message log; nothing is cached or materialized.
    """

    def __init__(
        self,
        chat_gateway: IChatGateway,
        participant_gateway: IParticipantGateway,
        message_gateway: IMessageGateway,
        profile_gateway: IProfileGateway,
    ):
        self.chat_gateway = chat_gateway
        self.participant_gateway = participant_gateway
        self.message_gateway = message_gateway
        self.profile_gateway = profile_gateway

    async def _get_chat(self, chat_id: str) -> UoWModel:
        chat = await self.chat_gateway.get_chat(chat_id)
        if not chat:
            raise NotFound("Chat not found")
        return chat

    async def _build_view(
        self, chat: UoWModel, participation: Optional[UoWModel] = None
    ) -> schemas.ChatWithDetails:
        rows = await self.participant_gateway.get_participants(chat.id)
        participants = [
            schemas.Participant(
                id=participant.id,
                chat_id=participant.chat_id,
                user_id=participant.user_id,
                role=participant.role,
                joined_at=participant.joined_at,
                last_read=participant.last_read,
                profile=schemas.Profile.model_validate(profile) if profile else None,
            )
            for participant, profile in rows
        ]
        last_message = await self.message_gateway.last_message(chat.id)
        unread_count = 0
        if participation is not None:
            unread_count = await self.message_gateway.count_unread(
                chat.id, participation.user_id, participation.last_read
            )
        return schemas.ChatWithDetails(
            **schemas.Chat.model_validate(chat).model_dump(),
            participants=participants,
            last_message=(
                schemas.Message.model_validate(last_message) if last_message else None
            ),
            unread_count=unread_count,
        )

    async def chat_with_details(
        self, chat_id: str, viewer_id: Optional[str] = None
    ) -> schemas.ChatWithDetails:
        """Single-chat aggregate.

        Without a viewer the unread count is 0. With one, the viewer must be a
        participant and gets their own unread count.
        """
        chat = await self._get_chat(chat_id)
        participation = None
        if viewer_id is not None:
            participation = await self.participant_gateway.get_participant(
                chat_id, viewer_id
            )
            require(Action.READ, chat, participation)
        return await self._build_view(chat, participation)

    async def user_chats(self, user_id: str) -> List[schemas.ChatWithDetails]:
        participations = await self.participant_gateway.get_user_participations(user_id)
        views = []
        for participation in participations:
            chat = await self.chat_gateway.get_chat(participation.chat_id)
            if not chat:
                continue
            views.append(await self._build_view(chat, participation))
        views.sort(key=_activity, reverse=True)
        return views

    async def private_chat_between(
        self, user_id: str, other_user_id: str
    ) -> Optional[schemas.Chat]:
        chat = await self.chat_gateway.get_private_chat(pair_key(user_id, other_user_id))
        return schemas.Chat.model_validate(chat) if chat else None

    async def start_private_chat(
        self, current_user_id: str, other_user_id: str
    ) -> schemas.ChatWithDetails:
        if other_user_id == current_user_id:
            raise ValidationError("Cannot start a private chat with yourself")

        existing = await self.private_chat_between(current_user_id, other_user_id)
        if existing:
            return await self.chat_with_details(existing.id, current_user_id)

        if not await self.profile_gateway.get_profile(other_user_id):
            raise NotFound("User not found")

        chat = await self.chat_gateway.create_chat(
            ChatType.PRIVATE.value,
            private_key=pair_key(current_user_id, other_user_id),
        )
        await self.participant_gateway.add_participant(chat.id, current_user_id)
        await self.participant_gateway.add_participant(chat.id, other_user_id)
        logger.info(
            f"Private chat {chat.id} started between {current_user_id} and {other_user_id}"
        )
        return await self.chat_with_details(chat.id, current_user_id)

    async def _ensure_profiles_exist(self, user_ids: Iterable[str]) -> None:
        user_ids = list(user_ids)
        found = await self.profile_gateway.get_profiles(user_ids)
        missing = [user_id for user_id in user_ids if user_id not in found]
        if missing:
            raise NotFound(f"Users not found: {', '.join(missing)}")

    async def create_group(
        self, current_user_id: str, group: schemas.GroupCreate
    ) -> schemas.ChatWithDetails:
        member_ids = list(dict.fromkeys(m for m in group.member_ids if m != current_user_id))
        await self._ensure_profiles_exist(member_ids)

        chat = await self.chat_gateway.create_chat(
            ChatType(group.type).value,
            name=group.name,
            description=group.description or None,
            created_by=current_user_id,
        )
        await self.participant_gateway.add_participant(chat.id, current_user_id, Role.ADMIN)
        for member_id in member_ids:
            await self.participant_gateway.add_participant(chat.id, member_id, Role.MEMBER)
        logger.info(
            f"{group.type.capitalize()} {chat.id} created by {current_user_id} "
            f"with {len(member_ids)} members"
        )
        return await self.chat_with_details(chat.id, current_user_id)

    async def update_group(
        self, chat_id: str, current_user_id: str, group_update: schemas.GroupUpdate
    ) -> schemas.Chat:
        chat = await self._get_chat(chat_id)
        participation = await self.participant_gateway.get_participant(
            chat_id, current_user_id
        )
        require(Action.UPDATE_SETTINGS, chat, participation)
        changes = group_update.model_dump(exclude_unset=True, exclude_none=True)
        updated = await self.chat_gateway.update_chat(chat, changes)
        return schemas.Chat.model_validate(updated)

    async def delete_group(self, chat_id: str, current_user_id: str) -> None:
        chat = await self._get_chat(chat_id)
        participation = await self.participant_gateway.get_participant(
            chat_id, current_user_id
        )
        require(Action.DELETE_CHAT, chat, participation)
        await self.chat_gateway.delete_chat(chat)
        logger.info(f"Chat {chat_id} deleted by {current_user_id}")

    async def add_members(
        self, chat_id: str, current_user_id: str, member_ids: List[str]
    ) -> schemas.ChatWithDetails:
        chat = await self._get_chat(chat_id)
        participation = await self.participant_gateway.get_participant(
            chat_id, current_user_id
        )
        require(Action.ADD_MEMBERS, chat, participation)

        member_ids = list(dict.fromkeys(member_ids))
        await self._ensure_profiles_exist(member_ids)
        added = 0
        for member_id in member_ids:
            if await self.participant_gateway.get_participant(chat_id, member_id):
                continue
            # the creator is an admin whenever they are a participant
            role = Role.ADMIN if member_id == chat.created_by else Role.MEMBER
            await self.participant_gateway.add_participant(chat_id, member_id, role)
            added += 1
        logger.info(f"{current_user_id} added {added} members to chat {chat_id}")
        return await self.chat_with_details(chat_id, current_user_id)

    async def remove_member(
        self, chat_id: str, current_user_id: str, member_id: str
    ) -> None:
        chat = await self._get_chat(chat_id)
        participation = await self.participant_gateway.get_participant(
            chat_id, current_user_id
        )
        if member_id == current_user_id:
            require(Action.LEAVE, chat, participation)
        else:
            require(Action.REMOVE_MEMBER, chat, participation)
            if member_id == chat.created_by:
                logger.warning(
                    f"{current_user_id} tried to remove creator {member_id} from {chat_id}"
                )
                raise Forbidden("Cannot remove the group creator")
            if not await self.participant_gateway.get_participant(chat_id, member_id):
                raise NotFound("Member not found")

        await self.participant_gateway.remove_participant(chat_id, member_id)
        logger.info(f"{member_id} left chat {chat_id} (by {current_user_id})")

    async def change_role(
        self, chat_id: str, current_user_id: str, member_id: str, role: Role
    ) -> schemas.Participant:
        chat = await self._get_chat(chat_id)
        participation = await self.participant_gateway.get_participant(
            chat_id, current_user_id
        )
        require(Action.CHANGE_ROLE, chat, participation)
        if member_id == chat.created_by and role != Role.ADMIN:
            raise Forbidden("The group creator must stay an admin")

        updated = await self.participant_gateway.update_role(chat_id, member_id, role)
        logger.info(f"{current_user_id} set role of {member_id} in {chat_id} to {role}")
        return schemas.Participant.model_validate(updated)

