# messenger/api/chats.py

from fastapi import APIRouter, Depends

from messenger.api.dependencies import get_chat_interactor, get_current_user
from messenger.infrastructure import schemas
from messenger.interactors.chat_interactor import ChatInteractor

router = APIRouter()


@router.get("/", response_model=list[schemas.ChatWithDetails])
async def read_chats(
    chat_interactor: ChatInteractor = Depends(get_chat_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    return await chat_interactor.user_chats(current_user.user_id)


@router.get("/{chat_id}", response_model=schemas.ChatWithDetails)
async def read_chat(
    chat_id: str,
    chat_interactor: ChatInteractor = Depends(get_chat_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    return await chat_interactor.chat_with_details(chat_id, current_user.user_id)


@router.post("/", response_model=schemas.ChatWithDetails)
async def start_private_chat(
    chat: schemas.PrivateChatCreate,
    chat_interactor: ChatInteractor = Depends(get_chat_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    return await chat_interactor.start_private_chat(
        current_user.user_id, chat.participant_id
    )
