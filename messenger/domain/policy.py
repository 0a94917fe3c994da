# messenger/domain/policy.py
"""
Membership rules for chats, groups and channels.

Every interactor asks ``can_perform`` (or ``require``) before it touches the
membership ledger or the message log, so the admin/creator checks live in
one place instead of being re-derived per endpoint.
"""
from enum import StrEnum
from typing import Protocol

from messenger.domain.entities import ChatType, Role
from messenger.domain.exceptions import Forbidden


class Action(StrEnum):
    READ = "read"
    POST_MESSAGE = "post_message"
    UPDATE_SETTINGS = "update_settings"
    DELETE_CHAT = "delete_chat"
    ADD_MEMBERS = "add_members"
    REMOVE_MEMBER = "remove_member"
    LEAVE = "leave"
    CHANGE_ROLE = "change_role"


class ChatLike(Protocol):
    type: str
    created_by: str | None


class ParticipationLike(Protocol):
    user_id: str
    role: str


_ADMIN_ACTIONS = {
    Action.UPDATE_SETTINGS,
    Action.ADD_MEMBERS,
    Action.REMOVE_MEMBER,
    Action.CHANGE_ROLE,
}

_DENIED_MESSAGES = {
    Action.READ: "You are not a participant of this chat",
    Action.POST_MESSAGE: "Only admins can post in channels",
    Action.UPDATE_SETTINGS: "Only admins can update group settings",
    Action.DELETE_CHAT: "Only the creator can delete this group",
    Action.ADD_MEMBERS: "Only admins can add members",
    Action.REMOVE_MEMBER: "Only admins can remove members",
    Action.LEAVE: "You cannot leave a private chat",
    Action.CHANGE_ROLE: "Only admins can change roles",
}


def can_perform(
    action: Action, chat: ChatLike, participation: ParticipationLike | None
) -> bool:
    """Decide whether the holder of ``participation`` may perform ``action`` on ``chat``.

    ``participation`` is the caller's membership record, or None when the
    caller is not (or no longer) a participant.
    """
    if participation is None:
        return False

    chat_type = ChatType(chat.type)
    is_admin = chat_type is not ChatType.PRIVATE and participation.role == Role.ADMIN

    if action is Action.READ:
        return True
    if action is Action.POST_MESSAGE:
        return chat_type is not ChatType.CHANNEL or participation.role == Role.ADMIN
    if action in _ADMIN_ACTIONS:
        return is_admin
    if action is Action.DELETE_CHAT:
        return chat.created_by is not None and participation.user_id == chat.created_by
    if action is Action.LEAVE:
        return chat_type is not ChatType.PRIVATE
    return False


def require(
    action: Action, chat: ChatLike, participation: ParticipationLike | None
) -> None:
    if not can_perform(action, chat, participation):
        if participation is None and action is not Action.DELETE_CHAT:
            raise Forbidden(_DENIED_MESSAGES[Action.READ])
        raise Forbidden(_DENIED_MESSAGES[action])
