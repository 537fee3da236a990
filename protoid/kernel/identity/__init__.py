"""
Identity Core - Registration, authentication and session revocation.
"""

from protoid.kernel.identity.authentication import AuthenticationDispatcher, parse_credentials
from protoid.kernel.identity.errors import (
    EmailTakenError,
    IdentityError,
    InvalidEmailError,
    InvalidPasswordError,
    InvalidProtoTokenError,
    InvalidTokenError,
    LogoutError,
    MissingProtoTokenError,
    NoCredentialsProvidedError,
    PersistenceError,
    RepositoryError,
    UserNotFoundError,
)
from protoid.kernel.identity.identity_service import IdentityService
from protoid.kernel.identity.password import PasswordHasher
from protoid.kernel.identity.registration import (
    ProtoRegistration,
    RegistrationPipeline,
    parse_proto_registration_request,
    parse_registration_request,
)
from protoid.kernel.identity.repository import IdentityRepository, SQLAlchemyIdentityRepository
from protoid.kernel.identity.tokens import SessionTokenIssuer
from protoid.kernel.identity.validators import is_alphanumeric, is_valid_email

__all__ = [
    "AuthenticationDispatcher",
    "parse_credentials",
    "EmailTakenError",
    "IdentityError",
    "InvalidEmailError",
    "InvalidPasswordError",
    "InvalidProtoTokenError",
    "InvalidTokenError",
    "LogoutError",
    "MissingProtoTokenError",
    "NoCredentialsProvidedError",
    "PersistenceError",
    "RepositoryError",
    "UserNotFoundError",
    "IdentityService",
    "PasswordHasher",
    "ProtoRegistration",
    "RegistrationPipeline",
    "parse_proto_registration_request",
    "parse_registration_request",
    "IdentityRepository",
    "SQLAlchemyIdentityRepository",
    "SessionTokenIssuer",
    "is_alphanumeric",
    "is_valid_email",
]
