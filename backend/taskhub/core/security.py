"""
Password hashing and token issuance.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from taskhub.core.errors import ConfigurationError, Unauthorized


def get_password_hash(password: str) -> str:
    """
    Hash a plain password using bcrypt.

    bcrypt only looks at the first 72 bytes, so longer input is truncated
    explicitly rather than rejected.
    """
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class CredentialService:
    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_hours: int = 24):
        if not secret_key:
            raise ConfigurationError("SECRET_KEY must be set to issue tokens")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_delta = timedelta(hours=expire_hours)

    def hash(self, plaintext: str) -> str:
        return get_password_hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        return verify_password(plaintext, hashed)

    def issue_token(self, user_id: str, expires_delta: Optional[timedelta] = None) -> str:
        expire = datetime.now(timezone.utc) + (expires_delta or self.expire_delta)
        claims = {"sub": user_id, "exp": expire}
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> str:
        """Return the user id carried by `token`, or raise Unauthorized."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise Unauthorized("Could not validate credentials")
        user_id = payload.get("sub")
        if not user_id:
            raise Unauthorized("Could not validate credentials")
        return user_id
