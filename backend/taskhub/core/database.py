"""
Persistence gateway.

`Database` owns the async engine and exposes one `Collection` per table.
Collections speak in plain dicts keyed by model attribute names, so the
services above never touch sessions or statements directly.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, inspect, select, text, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


class IExact:
    """Filter value matching a string column case-insensitively."""

    def __init__(self, value: str):
        self.value = value

    def __repr__(self) -> str:
        return f"IExact({self.value!r})"


class Collection:
    def __init__(self, sessionmaker: async_sessionmaker, model):
        self._sessionmaker = sessionmaker
        self.model = model
        self._keys = [attr.key for attr in inspect(model).column_attrs]

    @property
    def name(self) -> str:
        return self.model.__tablename__

    def _where(self, filter: Optional[Dict[str, Any]]):
        clauses = []
        for field, value in (filter or {}).items():
            column = getattr(self.model, field)
            if isinstance(value, IExact):
                clauses.append(func.lower(column) == value.value.lower())
            else:
                clauses.append(column == value)
        return clauses

    def _to_document(self, row) -> Dict[str, Any]:
        return {key: getattr(row, key) for key in self._keys}

    async def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        async with self._sessionmaker() as session:
            result = await session.execute(
                select(self.model).where(*self._where(filter)).limit(1)
            )
            row = result.scalar_one_or_none()
            return self._to_document(row) if row is not None else None

    async def find(self, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        query = select(self.model).where(*self._where(filter))
        if hasattr(self.model, "created_at"):
            query = query.order_by(self.model.created_at)
        async with self._sessionmaker() as session:
            result = await session.execute(query)
            return [self._to_document(row) for row in result.scalars().all()]

    async def insert_one(self, document: Dict[str, Any]) -> Dict[str, Any]:
        async with self._sessionmaker() as session:
            row = self.model(**document)
            async with session.begin():
                session.add(row)
            return self._to_document(row)

    async def update_one(self, filter: Dict[str, Any], values: Dict[str, Any]) -> int:
        """Apply `values` in a single UPDATE statement; returns the matched row count."""
        async with self._sessionmaker() as session:
            async with session.begin():
                result = await session.execute(
                    update(self.model)
                    .where(*self._where(filter))
                    .values(**values)
                    .execution_options(synchronize_session=False)
                )
            return result.rowcount


class Database:
    def __init__(self, url: str, echo: bool = False):
        from taskhub.models.task import Task
        from taskhub.models.user import User

        engine_kwargs: Dict[str, Any] = {"echo": echo}
        if url.startswith("sqlite"):
            # In-memory SQLite only survives on a single shared connection
            engine_kwargs.update(
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )

        self.url = url
        self.engine = create_async_engine(url, **engine_kwargs)
        self.sessionmaker = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )
        self.users = Collection(self.sessionmaker, User)
        self.tasks = Collection(self.sessionmaker, Task)

    async def connect(self) -> None:
        """Ping the server and create missing tables. Failure here is fatal."""
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                await conn.run_sync(Base.metadata.create_all)
        except Exception:
            logger.exception("Database connection failed (%s)", self.engine.url.render_as_string())
            raise
        logger.info("Connected to database %s", self.engine.url.render_as_string())

    async def close(self) -> None:
        await self.engine.dispose()
