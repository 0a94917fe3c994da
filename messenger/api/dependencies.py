# messenger/api/dependencies.py
from typing import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from messenger.config import AppConfig
from messenger.domain.entities import Claims
from messenger.gateways.chat_gateway import ChatGateway
from messenger.gateways.friendship_gateway import FriendshipGateway
from messenger.gateways.message_gateway import MessageGateway
from messenger.gateways.participant_gateway import ParticipantGateway
from messenger.gateways.profile_gateway import ProfileGateway
from messenger.infrastructure import schemas
from messenger.infrastructure.security import SecurityService
from messenger.infrastructure.uow import UnitOfWork
from messenger.interactors.chat_interactor import ChatInteractor
from messenger.interactors.friendship_interactor import FriendshipInteractor
from messenger.interactors.message_interactor import MessageInteractor
from messenger.interactors.profile_interactor import ProfileInteractor

bearer_scheme = HTTPBearer(auto_error=False)


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_security_service(request: Request) -> SecurityService:
    return request.app.state.security_service


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_uow() -> UnitOfWork:
    return UnitOfWork()


async def get_profile_gateway(
    session: AsyncSession = Depends(get_session), uow: UnitOfWork = Depends(get_uow)
):
    return ProfileGateway(session, uow)


async def get_chat_gateway(
    session: AsyncSession = Depends(get_session), uow: UnitOfWork = Depends(get_uow)
):
    return ChatGateway(session, uow)


async def get_participant_gateway(
    session: AsyncSession = Depends(get_session), uow: UnitOfWork = Depends(get_uow)
):
    return ParticipantGateway(session, uow)


async def get_message_gateway(
    session: AsyncSession = Depends(get_session), uow: UnitOfWork = Depends(get_uow)
):
    return MessageGateway(session, uow)


async def get_friendship_gateway(
    session: AsyncSession = Depends(get_session), uow: UnitOfWork = Depends(get_uow)
):
    return FriendshipGateway(session, uow)


async def get_profile_interactor(
    config: AppConfig = Depends(get_config),
    profile_gateway: ProfileGateway = Depends(get_profile_gateway),
):
    return ProfileInteractor(
        profile_gateway,
        search_min_length=config.SEARCH_MIN_QUERY_LENGTH,
        search_limit=config.SEARCH_RESULT_LIMIT,
    )


async def get_chat_interactor(
    chat_gateway: ChatGateway = Depends(get_chat_gateway),
    participant_gateway: ParticipantGateway = Depends(get_participant_gateway),
    message_gateway: MessageGateway = Depends(get_message_gateway),
    profile_gateway: ProfileGateway = Depends(get_profile_gateway),
):
    return ChatInteractor(chat_gateway, participant_gateway, message_gateway, profile_gateway)


async def get_message_interactor(
    config: AppConfig = Depends(get_config),
    chat_gateway: ChatGateway = Depends(get_chat_gateway),
    participant_gateway: ParticipantGateway = Depends(get_participant_gateway),
    message_gateway: MessageGateway = Depends(get_message_gateway),
):
    return MessageInteractor(
        chat_gateway,
        participant_gateway,
        message_gateway,
        page_size=config.MESSAGE_PAGE_SIZE,
    )


async def get_friendship_interactor(
    friendship_gateway: FriendshipGateway = Depends(get_friendship_gateway),
    profile_gateway: ProfileGateway = Depends(get_profile_gateway),
):
    return FriendshipInteractor(friendship_gateway, profile_gateway)


async def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    security_service: SecurityService = Depends(get_security_service),
) -> Claims:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    claims = security_service.decode_access_token(credentials.credentials)
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims


async def get_current_user(
    claims: Claims = Depends(get_current_claims),
    profile_interactor: ProfileInteractor = Depends(get_profile_interactor),
) -> schemas.Profile:
    # first authenticated request of a new user creates their profile
    return await profile_interactor.get_or_create(claims)
