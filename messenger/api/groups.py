# messenger/api/groups.py

from fastapi import APIRouter, Depends

from messenger.api.dependencies import get_chat_interactor, get_current_user
from messenger.infrastructure import schemas
from messenger.interactors.chat_interactor import ChatInteractor

router = APIRouter()


@router.post("/", response_model=schemas.ChatWithDetails)
async def create_group(
    group: schemas.GroupCreate,
    chat_interactor: ChatInteractor = Depends(get_chat_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    return await chat_interactor.create_group(current_user.user_id, group)


@router.patch("/{chat_id}", response_model=schemas.Chat)
async def update_group(
    chat_id: str,
    group_update: schemas.GroupUpdate,
    chat_interactor: ChatInteractor = Depends(get_chat_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    return await chat_interactor.update_group(chat_id, current_user.user_id, group_update)


@router.delete("/{chat_id}", response_model=schemas.Success)
async def delete_group(
    chat_id: str,
    chat_interactor: ChatInteractor = Depends(get_chat_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    await chat_interactor.delete_group(chat_id, current_user.user_id)
    return schemas.Success()


@router.post("/{chat_id}/members", response_model=schemas.ChatWithDetails)
async def add_members(
    chat_id: str,
    members: schemas.MembersAdd,
    chat_interactor: ChatInteractor = Depends(get_chat_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    return await chat_interactor.add_members(
        chat_id, current_user.user_id, members.member_ids
    )


@router.delete("/{chat_id}/members/{user_id}", response_model=schemas.Success)
async def remove_member(
    chat_id: str,
    user_id: str,
    chat_interactor: ChatInteractor = Depends(get_chat_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    await chat_interactor.remove_member(chat_id, current_user.user_id, user_id)
    return schemas.Success()


@router.patch("/{chat_id}/members/{user_id}/role", response_model=schemas.Participant)
async def change_member_role(
    chat_id: str,
    user_id: str,
    role_update: schemas.RoleUpdate,
    chat_interactor: ChatInteractor = Depends(get_chat_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    return await chat_interactor.change_role(
        chat_id, current_user.user_id, user_id, role_update.role
    )
