"""
Identity service: registration, authentication and logout.
"""

from typing import Any, Mapping, Optional, Union

from protoid.config import Settings, get_settings
from protoid.kernel.identity.authentication import AuthenticationDispatcher
from protoid.kernel.identity.errors import (
    IdentityError,
    LogoutError,
    PersistenceError,
    RepositoryError,
)
from protoid.kernel.identity.password import PasswordHasher
from protoid.kernel.identity.registration import (
    ProtoRegistration,
    RegistrationPipeline,
    parse_proto_registration_request,
    parse_registration_request,
)
from protoid.kernel.identity.repository import IdentityRepository
from protoid.kernel.identity.tokens import SessionTokenIssuer
from protoid.logging_config import get_logger
from protoid.schemas.auth import Credentials, ProtoRegistrationRequest, RegistrationRequest
from protoid.schemas.identity import Identity

logger = get_logger(__name__)


class IdentityService:
    """
    Service for identity operations.

    Collaborators are injected; anything not supplied is built from
    settings. The repository is the only shared state.
    """

    def __init__(
        self,
        repository: IdentityRepository,
        hasher: Optional[PasswordHasher] = None,
        token_issuer: Optional[SessionTokenIssuer] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.repository = repository
        self.hasher = hasher or PasswordHasher(rounds=settings.bcrypt_rounds)
        self.token_issuer = token_issuer or SessionTokenIssuer(
            hasher=self.hasher,
            seed=settings.session_token_seed,
        )
        self.registration = RegistrationPipeline(repository, self.hasher, self.token_issuer)
        self.proto_registration = ProtoRegistration(repository)
        self.dispatcher = AuthenticationDispatcher(repository, self.hasher, self.token_issuer)

    async def register(
        self,
        request: Union[RegistrationRequest, Mapping[str, Any]],
    ) -> Identity:
        """
        Register a full identity, merging into a proto identity when its
        token is supplied.

        Args:
            request: RegistrationRequest or mapping with email, password,
                and optional proto_token (alias prototoken) and name

        Returns:
            The saved identity with a fresh session token
        """
        try:
            return await self.registration.run(parse_registration_request(request))
        except (RepositoryError, PersistenceError):
            logger.exception("Registration failed on the identity store")
            raise
        except IdentityError as e:
            logger.warning("Registration rejected: %s", e.message, extra={"error_code": e.code})
            raise

    async def register_proto(
        self,
        request: Union[ProtoRegistrationRequest, Mapping[str, Any]],
    ) -> Identity:
        """Register an anonymous identity keyed by a proto token."""
        try:
            return await self.proto_registration.run(parse_proto_registration_request(request))
        except PersistenceError:
            logger.exception("Proto registration failed on the identity store")
            raise
        except IdentityError as e:
            logger.warning("Proto registration rejected: %s", e.message, extra={"error_code": e.code})
            raise

    async def authenticate(
        self,
        credentials: Union[Credentials, Mapping[str, Any]],
    ) -> Identity:
        """
        Authenticate with email + token, proto token, or email + password.

        A password login issues and stores a session token if the identity
        has none.
        """
        try:
            identity = await self.dispatcher.authenticate(credentials)
        except (RepositoryError, PersistenceError):
            logger.exception("Authentication failed on the identity store")
            raise
        except IdentityError as e:
            logger.warning("Authentication rejected: %s", e.message, extra={"error_code": e.code})
            raise

        logger.info("Authenticated identity %s", identity.id, extra={"identity_id": str(identity.id)})
        return identity

    async def logout(
        self,
        credentials: Union[Credentials, Mapping[str, Any]],
    ) -> Identity:
        """
        Revoke the session token of the authenticated identity.

        Args:
            credentials: Same shapes as authenticate()

        Returns:
            The saved identity with no session token

        Raises:
            LogoutError: Authentication failed (the rejection is on .cause)
            PersistenceError: Clearing the token could not be saved
        """
        try:
            identity = await self.dispatcher.authenticate(credentials)
        except IdentityError as e:
            logger.warning("Logout rejected: %s", e.message, extra={"error_code": e.code})
            raise LogoutError(e) from e

        identity = identity.model_copy(update={"session_token": None})
        try:
            saved = await self.repository.save(identity)
        except PersistenceError:
            logger.exception("Logout failed to clear session for %s", identity.id)
            raise

        logger.info("Logged out identity %s", saved.id, extra={"identity_id": str(saved.id)})
        return saved
