"""
Kernel Data Models

SQLAlchemy models backing the identity repository.
"""

from protoid.kernel.models.base import Base, TimestampMixin, generate_uuid
from protoid.kernel.models.identity import IdentityRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "generate_uuid",
    "IdentityRecord",
]
