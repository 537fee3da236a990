"""
Identity schemas.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Identity(BaseModel):
    """
    An identity as seen by the registration and authentication pipelines.

    Frozen: pipeline steps derive updated copies with ``model_copy`` and
    nothing reaches the store until the repository saves it.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: uuid.UUID
    email: Optional[str] = None
    password_hash: Optional[str] = None
    session_token: Optional[str] = None
    proto_token: Optional[str] = None
    name: Optional[str] = None
    expiration: Optional[datetime] = None

    @property
    def is_proto(self) -> bool:
        """Anonymous identity still waiting to be claimed."""
        return self.proto_token is not None and self.email is None

    @property
    def has_session(self) -> bool:
        return self.session_token is not None
