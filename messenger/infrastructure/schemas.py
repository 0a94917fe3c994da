# messenger/infrastructure/schemas.py
from datetime import datetime
from typing import Annotated, Literal

from pydantic import AfterValidator, AliasChoices, BaseModel, ConfigDict, Field

from messenger.domain.entities import (
    ChatType,
    FriendshipStatus,
    Language,
    MessageType,
    Role,
    as_utc,
)

UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


class Profile(BaseModel):
    user_id: str
    tag: str
    display_name: str | None = None
    bio: str | None = None
    language: Language = Language.EN
    is_online: bool = False
    last_seen: UTCDateTime | None = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    display_name: str | None = Field(None, min_length=1, max_length=50)
    bio: str | None = Field(None, max_length=200)
    language: Language | None = None


class Chat(BaseModel):
    id: str
    type: ChatType
    name: str | None = None
    description: str | None = None
    icon_url: str | None = None
    created_by: str | None = None
    created_at: UTCDateTime
    updated_at: UTCDateTime | None = None

    model_config = ConfigDict(from_attributes=True)


class Participant(BaseModel):
    id: str
    chat_id: str
    user_id: str
    role: Role
    joined_at: UTCDateTime
    last_read: UTCDateTime | None = None
    profile: Profile | None = None

    model_config = ConfigDict(from_attributes=True)


class MessageCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)
    type: MessageType = MessageType.TEXT
    attachment_url: str | None = None
    attachment_name: str | None = None
    attachment_size: int | None = Field(None, ge=0)

    model_config = ConfigDict(str_strip_whitespace=True)


class Message(BaseModel):
    id: str
    chat_id: str
    sender_id: str
    content: str
    type: MessageType
    attachment_url: str | None = None
    attachment_name: str | None = None
    attachment_size: int | None = None
    created_at: UTCDateTime
    is_read: bool = False

    model_config = ConfigDict(from_attributes=True)


class MessageWithSender(Message):
    sender: Profile | None = None


class ChatWithDetails(Chat):
    participants: list[Participant] = Field(default_factory=list)
    last_message: Message | None = None
    unread_count: int = 0


class PrivateChatCreate(BaseModel):
    participant_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("participant_id", "participantId")
    )


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    member_ids: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("member_ids", "memberIds")
    )
    type: Literal["group", "channel"] = "group"


class GroupUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    icon_url: str | None = Field(
        None, validation_alias=AliasChoices("icon_url", "iconUrl")
    )


class MembersAdd(BaseModel):
    member_ids: list[str] = Field(
        ..., min_length=1, validation_alias=AliasChoices("member_ids", "memberIds")
    )


class RoleUpdate(BaseModel):
    role: Role


class FriendshipCreate(BaseModel):
    friend_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("friend_id", "friendId")
    )


class FriendshipUpdate(BaseModel):
    status: Literal["accepted", "rejected"]


class Friendship(BaseModel):
    id: str
    user_id: str
    friend_id: str
    status: FriendshipStatus
    created_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


class FriendWithProfile(Friendship):
    friend: Profile | None = None


class FriendRequest(Friendship):
    user: Profile | None = None


class Success(BaseModel):
    success: bool = True
