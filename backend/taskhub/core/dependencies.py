from typing import Annotated

from fastapi import Depends, Request, WebSocket
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskhub.core.database import Database
from taskhub.core.errors import Unauthorized
from taskhub.core.security import CredentialService
from taskhub.core.websocket import BroadcastHub
from taskhub.services.auth_service import AuthService
from taskhub.services.task_service import TaskService

bearer_scheme = HTTPBearer(auto_error=False)


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_credentials(request: Request) -> CredentialService:
    return request.app.state.credentials


def get_task_service(database: Database = Depends(get_database)) -> TaskService:
    return TaskService(database.tasks)


def get_auth_service(
    database: Database = Depends(get_database),
    credentials: CredentialService = Depends(get_credentials),
) -> AuthService:
    return AuthService(database.users, credentials)


async def get_current_user(
    bearer: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    auth_service: AuthService = Depends(get_auth_service),
) -> dict:
    if bearer is None:
        raise Unauthorized("Not authenticated")
    return await auth_service.current_user(bearer.credentials)


def get_hub(websocket: WebSocket) -> BroadcastHub:
    return websocket.app.state.hub
