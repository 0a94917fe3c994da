# messenger/api/messages.py

from fastapi import APIRouter, Depends, Query

from messenger.api.dependencies import get_current_user, get_message_interactor
from messenger.infrastructure import schemas
from messenger.interactors.message_interactor import MessageInteractor

router = APIRouter()


@router.get("/{chat_id}/messages", response_model=list[schemas.MessageWithSender])
async def read_messages(
    chat_id: str,
    limit: int | None = Query(None, ge=1, le=500),
    message_interactor: MessageInteractor = Depends(get_message_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    return await message_interactor.read_messages(chat_id, current_user.user_id, limit)


@router.post("/{chat_id}/messages", response_model=schemas.Message)
async def create_message(
    chat_id: str,
    message: schemas.MessageCreate,
    message_interactor: MessageInteractor = Depends(get_message_interactor),
    current_user: schemas.Profile = Depends(get_current_user),
):
    return await message_interactor.send_message(chat_id, current_user.user_id, message)
