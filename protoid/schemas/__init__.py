"""
Pydantic schemas for identities and credential requests.
"""

from protoid.schemas.auth import (
    Credentials,
    PasswordCredentials,
    ProtoCredentials,
    ProtoRegistrationRequest,
    RegistrationRequest,
    TokenCredentials,
)
from protoid.schemas.identity import Identity

__all__ = [
    "Credentials",
    "PasswordCredentials",
    "ProtoCredentials",
    "ProtoRegistrationRequest",
    "RegistrationRequest",
    "TokenCredentials",
    "Identity",
]
