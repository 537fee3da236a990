"""
Identity record for persistence.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from protoid.kernel.models.base import Base, TimestampMixin, generate_uuid


class IdentityRecord(Base, TimestampMixin):
    """
    Stored identity row.

    One row per identity, anonymous (proto) or fully registered. A merge
    reuses the proto row, so the id never changes.
    """

    __tablename__ = "identities"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=True,
    )
    password_hash: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    session_token: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    # Not unique: duplicate proto tokens are accepted
    proto_token: Mapped[Optional[str]] = mapped_column(
        String(255),
        index=True,
        nullable=True,
    )
    name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    expiration: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<IdentityRecord {self.id} email={self.email}>"
