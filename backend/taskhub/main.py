import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from taskhub.core.config import Settings, get_settings
from taskhub.core.database import Database
from taskhub.core.errors import (
    TaskhubError,
    taskhub_error_handler,
    unhandled_error_handler,
    validation_error_handler,
)
from taskhub.core.security import CredentialService
from taskhub.core.websocket import BroadcastHub
from taskhub.routers import auth, tasks, ws

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Built here so a bad secret or unreachable database stops startup
        app.state.credentials = CredentialService(
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            expire_hours=settings.ACCESS_TOKEN_EXPIRE_HOURS,
        )
        database = Database(settings.DATABASE_URL, echo=settings.SQL_ECHO)
        await database.connect()
        app.state.database = database
        app.state.hub = BroadcastHub()
        logger.info("Taskhub API started")
        try:
            yield
        finally:
            await database.close()
            logger.info("Taskhub API stopped")

    app = FastAPI(title="Taskhub API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    app.add_exception_handler(TaskhubError, taskhub_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(auth.router)
    app.include_router(tasks.router)
    app.include_router(ws.router)

    @app.get("/")
    async def root():
        return {"message": "Taskhub API is running"}

    return app
