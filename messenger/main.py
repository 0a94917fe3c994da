# messenger/main.py
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from messenger.api import chats, friends, groups, messages, profile, users
from messenger.config import AppConfig
from messenger.domain.exceptions import (
    Conflict,
    Forbidden,
    MessengerError,
    NotFound,
    ValidationError,
)
from messenger.infrastructure.database import create_database
from messenger.infrastructure.security import SecurityService

ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    Forbidden: status.HTTP_403_FORBIDDEN,
    Conflict: status.HTTP_409_CONFLICT,
}


def status_for(exc: MessengerError) -> int:
    for exc_type, code in ERROR_STATUS.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_400_BAD_REQUEST


class Application:
    def __init__(self, config: AppConfig):
        self.config = config
        self.logger = self.setup_logger()
        self.database = create_database(config.DATABASE_URL)
        self.security_service = SecurityService(config)

    @asynccontextmanager
    async def lifespan(self, app: FastAPI):
        await self.database.connect()
        if self.config.SEED_DEMO_DATA:
            await self.database.seed_demo_data()
        yield
        await self.database.disconnect()

    def setup_logger(self):
        logger = logging.getLogger("MessengerAPI")
        logger.setLevel(self.config.LOG_LEVEL.upper())

        if not logger.handlers:
            c_handler = logging.StreamHandler(sys.stdout)
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
            c_handler.setFormatter(formatter)
            logger.addHandler(c_handler)

        return logger

    def create_app(self) -> FastAPI:
        app = FastAPI(
            title=self.config.PROJECT_NAME,
            version=self.config.PROJECT_VERSION,
            description=self.config.PROJECT_DESCRIPTION,
            openapi_url=f"{self.config.API_V1_STR}/openapi.json",
            lifespan=self.lifespan,
        )

        app.state.config = self.config
        app.state.security_service = self.security_service
        app.state.database = self.database
        app.state.logger = self.logger

        # Create routers
        app.include_router(
            profile.router, prefix=f"{self.config.API_V1_STR}/profile", tags=["profile"]
        )
        app.include_router(
            users.router, prefix=f"{self.config.API_V1_STR}/users", tags=["users"]
        )
        app.include_router(
            chats.router, prefix=f"{self.config.API_V1_STR}/chats", tags=["chats"]
        )
        app.include_router(
            messages.router,
            prefix=f"{self.config.API_V1_STR}/chats",
            tags=["messages"],
        )
        app.include_router(
            groups.router, prefix=f"{self.config.API_V1_STR}/groups", tags=["groups"]
        )
        app.include_router(
            friends.router, prefix=f"{self.config.API_V1_STR}/friends", tags=["friends"]
        )

        logger = self.logger

        @app.exception_handler(MessengerError)
        async def messenger_exception_handler(request: Request, exc: MessengerError):
            return JSONResponse(
                status_code=status_for(exc), content={"message": exc.message}
            )

        @app.exception_handler(RequestValidationError)
        async def validation_exception_handler(
            request: Request, exc: RequestValidationError
        ):
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={
                    "message": "Invalid request data",
                    "errors": jsonable_encoder(exc.errors()),
                },
            )

        @app.exception_handler(Exception)
        async def global_exception_handler(request: Request, exc: Exception):
            logger.exception(f"Unhandled error on {request.method} {request.url.path}")
            return JSONResponse(
                status_code=500,
                content={"message": "An unexpected error occurred"},
            )

        @app.get("/")
        async def root():
            return {"message": f"Welcome to the {self.config.PROJECT_NAME}"}

        return app


def create(config: AppConfig | None = None):
    application = Application(config or AppConfig())
    app = application.create_app()
    application.logger.info("Application created and configured")

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create(), host="127.0.0.1", port=8000)
