import logging
import uuid
from typing import Any, Dict

from jose.exceptions import JOSEError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from taskhub.core.database import Collection
from taskhub.core.errors import Conflict, Internal, Unauthorized
from taskhub.core.security import CredentialService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, users: Collection, credentials: CredentialService):
        self.users = users
        self.credentials = credentials

    async def register(self, email: str, password: str) -> Dict[str, Any]:
        try:
            existing = await self.users.find_one({"email": email})
        except SQLAlchemyError:
            logger.exception("User lookup failed")
            raise Internal("Registration failed")
        if existing is not None:
            raise Conflict()

        try:
            hashed_password = await run_in_threadpool(self.credentials.hash, password)
        except ValueError:
            logger.exception("Password hashing failed")
            raise Internal("Failed to hash password")

        try:
            user = await self.users.insert_one(
                {"id": uuid.uuid4().hex, "email": email, "hashed_password": hashed_password}
            )
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            raise Conflict()
        except SQLAlchemyError:
            logger.exception("User insert failed")
            raise Internal("Registration failed")

        logger.info("Registered user %s", user["id"])
        return user

    async def login(self, email: str, password: str) -> str:
        try:
            user = await self.users.find_one({"email": email})
        except SQLAlchemyError:
            logger.exception("User lookup failed")
            raise Internal("Login failed")
        if user is None:
            logger.info("Login failed: unknown email")
            raise Unauthorized()
        # bcrypt is CPU-bound; keep it off the event loop
        if not await run_in_threadpool(self.credentials.verify, password, user["hashed_password"]):
            logger.info("Login failed: password mismatch for user %s", user["id"])
            raise Unauthorized()

        try:
            return self.credentials.issue_token(user["id"])
        except JOSEError:
            logger.exception("Token generation failed")
            raise Internal("Failed to generate token")

    async def current_user(self, token: str) -> Dict[str, Any]:
        user_id = self.credentials.decode_token(token)
        try:
            user = await self.users.find_one({"id": user_id})
        except SQLAlchemyError:
            logger.exception("User lookup failed")
            raise Internal()
        if user is None:
            raise Unauthorized("Could not validate credentials")
        return user
