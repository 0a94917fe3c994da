import datetime
from typing import Optional

import jwt
from jwt import ExpiredSignatureError, InvalidTokenError

from messenger.domain.entities import Claims


class SecurityService:
    """Verifies bearer tokens issued by the identity provider.

    Tokens are HS256 JWTs signed with ``IDENTITY_SECRET_KEY``. The ``sub`` claim
    carries the opaque user id; ``email``, ``first_name`` and ``last_name`` are
    optional hints used when a profile is created for a new user.
    """

    def __init__(self, config):
        self.config = config

    def create_access_token(
        self, data: dict, expires_delta: Optional[datetime.timedelta] = None
    ):
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.datetime.now(datetime.timezone.utc) + expires_delta
        else:
            expire = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(
                minutes=self.config.ACCESS_TOKEN_EXPIRE_MINUTES
            )
        to_encode.update({"exp": expire})
        encoded_jwt = jwt.encode(
            to_encode, self.config.IDENTITY_SECRET_KEY, algorithm=self.config.ALGORITHM
        )
        return encoded_jwt, expire

    def decode_access_token(self, token: str) -> Optional[Claims]:
        try:
            payload = jwt.decode(
                token,
                self.config.IDENTITY_SECRET_KEY,
                algorithms=[self.config.ALGORITHM],
            )
        except (ExpiredSignatureError, InvalidTokenError):
            return None
        user_id = payload.get("sub")
        if not user_id:
            return None
        return Claims(
            user_id=str(user_id),
            email=payload.get("email"),
            first_name=payload.get("first_name"),
            last_name=payload.get("last_name"),
        )
