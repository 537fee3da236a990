"""
Authentication by one of three credential shapes.

Raw input is parsed once into a credential variant; the variant alone
decides which check runs. Precedence when several shapes are present:
email + token, then proto token, then email + password.
"""

import hmac
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from protoid.kernel.identity.errors import (
    IdentityError,
    InvalidPasswordError,
    InvalidProtoTokenError,
    InvalidTokenError,
    NoCredentialsProvidedError,
    UserNotFoundError,
    error_for_invalid_fields,
)
from protoid.kernel.identity.password import PasswordHasher
from protoid.kernel.identity.repository import IdentityRepository
from protoid.kernel.identity.tokens import SessionTokenIssuer
from protoid.logging_config import get_logger
from protoid.schemas.auth import (
    Credentials,
    PasswordCredentials,
    ProtoCredentials,
    TokenCredentials,
)
from protoid.schemas.identity import Identity

logger = get_logger(__name__)

CREDENTIAL_TYPES = (TokenCredentials, ProtoCredentials, PasswordCredentials)

# A value of the wrong type fails the same check a wrong value would
_CREDENTIAL_FIELD_ERRORS: Dict[str, Callable[[], IdentityError]] = {
    "user": UserNotFoundError,
    "token": InvalidTokenError,
    "proto_token": InvalidProtoTokenError,
    "password": lambda: InvalidPasswordError("Password incorrect"),
}


def _field(raw: Mapping[str, Any], *names: str) -> Optional[Any]:
    """First non-None value among the given keys."""
    for name in names:
        value = raw.get(name)
        if value is not None:
            return value
    return None


def parse_credentials(raw: Union[Credentials, Mapping[str, Any]]) -> Credentials:
    """
    Turn raw credential input into exactly one credential variant.

    A key counts as present when it holds a non-None value. ``prototoken``
    is accepted as an alias of ``proto_token``. Input that is not a mapping
    is treated as empty.

    Raises:
        NoCredentialsProvidedError: If no known combination is present
        UserNotFoundError, InvalidTokenError, InvalidProtoTokenError,
        InvalidPasswordError: If a selected value is not a string
    """
    if isinstance(raw, CREDENTIAL_TYPES):
        return raw
    if not isinstance(raw, Mapping):
        raise NoCredentialsProvidedError()

    user = _field(raw, "user")
    token = _field(raw, "token")
    proto_token = _field(raw, "proto_token", "prototoken")
    password = _field(raw, "password")

    try:
        if user is not None and token is not None:
            return TokenCredentials(user=user, token=token)
        if proto_token is not None:
            return ProtoCredentials(proto_token=proto_token)
        if user is not None and password is not None:
            return PasswordCredentials(user=user, password=password)
    except ValidationError as e:
        raise error_for_invalid_fields(
            e, _CREDENTIAL_FIELD_ERRORS, NoCredentialsProvidedError
        ) from e

    raise NoCredentialsProvidedError()


class AuthenticationDispatcher:
    """Verifies credentials against stored identities."""

    def __init__(
        self,
        repository: IdentityRepository,
        hasher: PasswordHasher,
        token_issuer: SessionTokenIssuer,
    ):
        self.repository = repository
        self.hasher = hasher
        self.token_issuer = token_issuer
        self._strategies: Dict[str, Callable[[Any], Awaitable[Identity]]] = {
            "token": self.authenticate_token,
            "proto": self.authenticate_proto,
            "password": self.authenticate_password,
        }

    async def authenticate(self, credentials: Union[Credentials, Mapping[str, Any]]) -> Identity:
        """
        Authenticate a caller.

        Args:
            credentials: A credential variant or raw mapping

        Returns:
            The authenticated identity

        Raises:
            NoCredentialsProvidedError, UserNotFoundError, InvalidTokenError,
            InvalidProtoTokenError, InvalidPasswordError, RepositoryError,
            PersistenceError
        """
        parsed = parse_credentials(credentials)
        identity = await self._strategies[parsed.kind](parsed)
        logger.debug("Authenticated %s via %s", identity.id, parsed.kind)
        return identity

    async def authenticate_token(self, credentials: TokenCredentials) -> Identity:
        identity = await self.repository.find_one("email", credentials.user)
        if identity is None:
            raise UserNotFoundError()

        stored = identity.session_token
        if stored is None or not hmac.compare_digest(
            stored.encode("utf-8"), credentials.token.encode("utf-8")
        ):
            raise InvalidTokenError()
        return identity

    async def authenticate_proto(self, credentials: ProtoCredentials) -> Identity:
        # Holding the proto token is the only proof required
        identity = await self.repository.find_one("proto_token", credentials.proto_token)
        if identity is None:
            raise InvalidProtoTokenError()
        return identity

    async def authenticate_password(self, credentials: PasswordCredentials) -> Identity:
        identity = await self.repository.find_one("email", credentials.user)
        if identity is None:
            raise UserNotFoundError()

        if not await self.hasher.compare(credentials.password, identity.password_hash):
            raise InvalidPasswordError("Password incorrect")

        if identity.has_session:
            return identity

        token = await self.token_issuer.issue(identity)
        identity = identity.model_copy(update={"session_token": token})
        saved = await self.repository.save(identity)
        logger.info("Issued session token for %s", saved.id, extra={"identity_id": str(saved.id)})
        return saved
