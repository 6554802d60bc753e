from sqlalchemy import Column, DateTime, String

from taskhub.core.database import Base
from taskhub.models.task import _utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
