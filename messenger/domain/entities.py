# messenger/domain/entities.py
import json
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum


class ChatType(StrEnum):
    PRIVATE = "private"
    GROUP = "group"
    CHANNEL = "channel"


class Role(StrEnum):
    ADMIN = "admin"
    MEMBER = "member"


class MessageType(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"
    VOICE = "voice"


class FriendshipStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Language(StrEnum):
    EN = "en"
    RU = "ru"


@dataclass(frozen=True)
class Claims:
    """Identity asserted by the external identity provider for one request."""

    user_id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None


@dataclass(frozen=True)
class Attachment:
    url: str
    name: str | None = None
    size: int | None = None


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime | None) -> datetime | None:
    # sqlite hands back naive values for timezone-aware columns
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def pair_key(user_id: str, other_user_id: str) -> str:
    """Order-independent key for an unordered pair of user ids."""
    return json.dumps(sorted((user_id, other_user_id)), separators=(",", ":"))
