# messenger/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    PROJECT_NAME: str = "Messenger API"
    PROJECT_VERSION: str = "1.0.0"
    PROJECT_DESCRIPTION: str = "Profiles, private chats, groups and channels over REST"
    API_V1_STR: str = "/api/v1"
    IDENTITY_SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"
    MESSAGE_PAGE_SIZE: int = 50
    SEARCH_MIN_QUERY_LENGTH: int = 2
    SEARCH_RESULT_LIMIT: int = 20
    SEED_DEMO_DATA: bool = False
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="allow")
