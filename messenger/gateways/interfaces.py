# messenger/gateways/interfaces.py
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from messenger.domain.entities import Attachment, Role
from messenger.infrastructure import models
from messenger.infrastructure.uow import UoWModel


class IProfileGateway(ABC):
    @abstractmethod
    async def get_profile(self, user_id: str) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def get_by_tag(self, tag: str) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def get_profiles(self, user_ids: List[str]) -> dict[str, UoWModel]:
        pass

    @abstractmethod
    async def create_profile(
        self,
        user_id: str,
        tag: str,
        display_name: Optional[str] = None,
        is_online: bool = True,
    ) -> UoWModel:
        pass

    @abstractmethod
    async def update_profile(self, profile: UoWModel, changes: dict) -> UoWModel:
        pass

    @abstractmethod
    async def search_profiles(
        self, query: str, exclude_user_id: str, limit: int = 20
    ) -> List[UoWModel]:
        pass


class IChatGateway(ABC):
    @abstractmethod
    async def get_chat(self, chat_id: str) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def get_private_chat(self, private_key: str) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def create_chat(
        self,
        chat_type: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        created_by: Optional[str] = None,
        private_key: Optional[str] = None,
    ) -> UoWModel:
        pass

    @abstractmethod
    async def update_chat(self, chat: UoWModel, changes: dict) -> UoWModel:
        pass

    @abstractmethod
    async def delete_chat(self, chat: UoWModel) -> None:
        pass


class IParticipantGateway(ABC):
    @abstractmethod
    async def get_participant(self, chat_id: str, user_id: str) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def get_participants(
        self, chat_id: str
    ) -> List[tuple[UoWModel, Optional[models.Profile]]]:
        pass

    @abstractmethod
    async def get_user_participations(self, user_id: str) -> List[UoWModel]:
        pass

    @abstractmethod
    async def add_participant(
        self, chat_id: str, user_id: str, role: Role = Role.MEMBER
    ) -> UoWModel:
        pass

    @abstractmethod
    async def remove_participant(self, chat_id: str, user_id: str) -> None:
        pass

    @abstractmethod
    async def update_role(self, chat_id: str, user_id: str, role: Role) -> UoWModel:
        pass

    @abstractmethod
    async def mark_read(self, chat_id: str, user_id: str) -> Optional[UoWModel]:
        pass


class IMessageGateway(ABC):
    @abstractmethod
    async def append(
        self,
        chat_id: str,
        sender_id: str,
        content: str,
        message_type: str,
        attachment: Optional[Attachment] = None,
    ) -> UoWModel:
        pass

    @abstractmethod
    async def list_messages(
        self, chat_id: str, limit: int = 50
    ) -> List[tuple[UoWModel, Optional[models.Profile]]]:
        pass

    @abstractmethod
    async def last_message(self, chat_id: str) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def count_unread(
        self, chat_id: str, user_id: str, last_read: Optional[datetime]
    ) -> int:
        pass


class IFriendshipGateway(ABC):
    @abstractmethod
    async def get_friendship(self, friendship_id: str) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def get_between(self, user_id: str, other_user_id: str) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def create_friendship(self, user_id: str, friend_id: str) -> UoWModel:
        pass

    @abstractmethod
    async def update_status(self, friendship: UoWModel, status: str) -> UoWModel:
        pass

    @abstractmethod
    async def get_accepted(self, user_id: str) -> List[UoWModel]:
        pass

    @abstractmethod
    async def get_pending_for(self, user_id: str) -> List[UoWModel]:
        pass
