"""
Identity repository contract and its SQLAlchemy implementation.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from protoid.kernel.identity.errors import PersistenceError, RepositoryError
from protoid.kernel.models.base import generate_uuid
from protoid.kernel.models.identity import IdentityRecord
from protoid.logging_config import get_logger
from protoid.schemas.identity import Identity

logger = get_logger(__name__)

LOOKUP_FIELDS = ("id", "email", "proto_token")

# Identity fields written on save (id is the key)
STORED_FIELDS = ("email", "password_hash", "session_token", "proto_token", "name", "expiration")


class IdentityRepository(ABC):
    """
    Storage boundary for identities.

    Implementations raise RepositoryError when a lookup fails and
    PersistenceError when a write fails, chaining the underlying error.
    """

    @staticmethod
    def check_field(field: str) -> str:
        if field not in LOOKUP_FIELDS:
            raise ValueError(f"Cannot look up identities by {field!r}")
        return field

    @abstractmethod
    async def find_one(self, field: str, value: Any) -> Optional[Identity]:
        """Return the first identity whose ``field`` equals ``value``."""

    @abstractmethod
    async def save(self, identity: Identity) -> Identity:
        """Insert or update the identity keyed by its id."""

    def new_identity(self) -> Identity:
        """A blank, unsaved identity with a fresh id."""
        return Identity(id=generate_uuid())


class SQLAlchemyIdentityRepository(IdentityRepository):
    """
    Identity repository backed by an async SQLAlchemy session.

    Each save commits. When several rows match a lookup (duplicate proto
    tokens), the first row returned by the database wins.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_one(self, field: str, value: Any) -> Optional[Identity]:
        column = getattr(IdentityRecord, self.check_field(field))
        query = select(IdentityRecord).where(column == value).limit(1)
        try:
            result = await self.session.execute(query)
            record = result.scalars().first()
        except SQLAlchemyError as e:
            logger.error("Identity lookup by %s failed: %s", field, e)
            raise RepositoryError() from e

        if record is None:
            return None
        return Identity.model_validate(record)

    async def save(self, identity: Identity) -> Identity:
        try:
            record = await self.session.get(IdentityRecord, identity.id)
            if record is None:
                record = IdentityRecord(id=identity.id)
                self.session.add(record)

            for field in STORED_FIELDS:
                setattr(record, field, getattr(identity, field))

            await self.session.commit()
        except SQLAlchemyError as e:
            logger.error("Saving identity %s failed: %s", identity.id, e)
            await self.session.rollback()
            raise PersistenceError() from e

        return identity
