# messenger/interactors/message_interactor.py
import logging
from typing import List

from messenger.domain.entities import Attachment
from messenger.domain.exceptions import Forbidden, NotFound
from messenger.domain.policy import Action, require
from messenger.gateways.interfaces import (
    IChatGateway,
    IMessageGateway,
    IParticipantGateway,
)
from messenger.infrastructure import schemas

logger = logging.getLogger("MessengerAPI.messages")


class MessageInteractor:
    def __init__(
        self,
        chat_gateway: IChatGateway,
        participant_gateway: IParticipantGateway,
        message_gateway: IMessageGateway,
        page_size: int = 50,
    ):
        self.chat_gateway = chat_gateway
        self.participant_gateway = participant_gateway
        self.message_gateway = message_gateway
        self.page_size = page_size

    async def send_message(
        self, chat_id: str, sender_id: str, message: schemas.MessageCreate
    ) -> schemas.Message:
        chat = await self.chat_gateway.get_chat(chat_id)
        if not chat:
            raise NotFound("Chat not found")
        participation = await self.participant_gateway.get_participant(chat_id, sender_id)
        try:
            require(Action.POST_MESSAGE, chat, participation)
        except Forbidden:
            logger.warning(f"{sender_id} was refused posting to {chat.type} {chat_id}")
            raise

        attachment = None
        if message.attachment_url:
            attachment = Attachment(
                url=message.attachment_url,
                name=message.attachment_name or None,
                size=message.attachment_size or None,
            )
        new_message = await self.message_gateway.append(
            chat_id,
            sender_id,
            message.content,
            message.type.value,
            attachment,
        )
        return schemas.Message.model_validate(new_message)

    async def read_messages(
        self, chat_id: str, user_id: str, limit: int | None = None
    ) -> List[schemas.MessageWithSender]:
        """Mark the chat read for ``user_id``, then return its latest messages, oldest first."""
        chat = await self.chat_gateway.get_chat(chat_id)
        if not chat:
            raise NotFound("Chat not found")
        participation = await self.participant_gateway.get_participant(chat_id, user_id)
        require(Action.READ, chat, participation)

        await self.participant_gateway.mark_read(chat_id, user_id)
        rows = await self.message_gateway.list_messages(chat_id, limit or self.page_size)
        return [
            schemas.MessageWithSender(
                **schemas.Message.model_validate(message).model_dump(),
                sender=schemas.Profile.model_validate(sender) if sender else None,
            )
            for message, sender in rows
        ]
