"""
Registration of full and anonymous (proto) identities.

A full registration runs as a fixed sequence of steps over a frozen
Identity. Every step returns an updated copy or raises; the store is only
written once all steps have succeeded.
"""

from typing import Any, Awaitable, Callable, Dict, Mapping, Tuple, Union

from pydantic import ValidationError

from protoid.kernel.identity.errors import (
    EmailTakenError,
    IdentityError,
    InvalidEmailError,
    InvalidPasswordError,
    InvalidProtoTokenError,
    MissingProtoTokenError,
    error_for_invalid_fields,
)
from protoid.kernel.identity.password import PasswordHasher
from protoid.kernel.identity.repository import IdentityRepository
from protoid.kernel.identity.tokens import SessionTokenIssuer
from protoid.kernel.identity.validators import is_alphanumeric, is_valid_email
from protoid.logging_config import get_logger
from protoid.schemas.auth import ProtoRegistrationRequest, RegistrationRequest
from protoid.schemas.identity import Identity

logger = get_logger(__name__)

RegistrationStep = Callable[[Identity, RegistrationRequest], Awaitable[Identity]]

_REGISTRATION_FIELD_ERRORS: Dict[str, Callable[[], IdentityError]] = {
    "email": InvalidEmailError,
    "password": InvalidPasswordError,
    "prototoken": InvalidProtoTokenError,
    "proto_token": InvalidProtoTokenError,
}


def parse_registration_request(
    raw: Union[RegistrationRequest, Mapping[str, Any]],
) -> RegistrationRequest:
    """
    Validate raw registration input.

    A wrongly typed field is rejected with the error its pipeline check
    raises; input that is not a mapping fails like an empty one.
    """
    if isinstance(raw, RegistrationRequest):
        return raw
    try:
        return RegistrationRequest.model_validate(raw)
    except ValidationError as e:
        raise error_for_invalid_fields(e, _REGISTRATION_FIELD_ERRORS, InvalidEmailError) from e


def parse_proto_registration_request(
    raw: Union[ProtoRegistrationRequest, Mapping[str, Any]],
) -> ProtoRegistrationRequest:
    """Validate raw proto registration input."""
    if isinstance(raw, ProtoRegistrationRequest):
        return raw
    try:
        return ProtoRegistrationRequest.model_validate(raw)
    except ValidationError as e:
        raise error_for_invalid_fields(e, _REGISTRATION_FIELD_ERRORS, MissingProtoTokenError) from e


class RegistrationPipeline:
    """
    Full registration, optionally promoting an existing proto identity.

    Steps, in order:
    1. resolve the base identity (proto identity by token, or a new one)
    2. claim the email
    3. hash the password
    4. issue a session token
    5. invalidate the proto token
    6. copy the display name
    7. persist
    """

    def __init__(
        self,
        repository: IdentityRepository,
        hasher: PasswordHasher,
        token_issuer: SessionTokenIssuer,
    ):
        self.repository = repository
        self.hasher = hasher
        self.token_issuer = token_issuer

    @property
    def steps(self) -> Tuple[RegistrationStep, ...]:
        return (
            self.claim_email,
            self.set_password,
            self.issue_session_token,
            self.invalidate_proto_claim,
            self.set_display_name,
        )

    async def run(self, request: RegistrationRequest) -> Identity:
        """
        Register an identity.

        Args:
            request: Email, password, and optional proto token and name

        Returns:
            The saved identity

        Raises:
            InvalidEmailError, EmailTakenError, InvalidPasswordError,
            RepositoryError, PersistenceError
        """
        identity = await self.resolve_base_identity(request)
        merged = identity.proto_token is not None

        for step in self.steps:
            identity = await step(identity, request)
            logger.debug("Registration step %s done for %s", step.__name__, identity.id)

        saved = await self.repository.save(identity)
        logger.info(
            "Registered identity %s",
            saved.id,
            extra={"identity_id": str(saved.id), "merged_proto": merged},
        )
        return saved

    async def resolve_base_identity(self, request: RegistrationRequest) -> Identity:
        """Existing proto identity for the request's token, else a new identity."""
        if request.proto_token is not None:
            proto = await self.repository.find_one("proto_token", request.proto_token)
            if proto is not None:
                return proto
            logger.debug("No proto identity for supplied token; starting fresh")
        return self.repository.new_identity()

    async def claim_email(self, identity: Identity, request: RegistrationRequest) -> Identity:
        if not is_valid_email(request.email):
            raise InvalidEmailError()

        holder = await self.repository.find_one("email", request.email)
        if holder is not None and holder.id != identity.id:
            raise EmailTakenError()

        return identity.model_copy(update={"email": request.email})

    async def set_password(self, identity: Identity, request: RegistrationRequest) -> Identity:
        if not is_alphanumeric(request.password):
            raise InvalidPasswordError()

        password_hash = await self.hasher.hash(request.password)
        return identity.model_copy(update={"password_hash": password_hash})

    async def issue_session_token(self, identity: Identity, request: RegistrationRequest) -> Identity:
        token = await self.token_issuer.issue(identity)
        return identity.model_copy(update={"session_token": token})

    async def invalidate_proto_claim(self, identity: Identity, request: RegistrationRequest) -> Identity:
        return identity.model_copy(update={"proto_token": None})

    async def set_display_name(self, identity: Identity, request: RegistrationRequest) -> Identity:
        return identity.model_copy(update={"name": request.name})


class ProtoRegistration:
    """Creates anonymous identities carrying only a proto token."""

    def __init__(self, repository: IdentityRepository):
        self.repository = repository

    async def run(self, request: ProtoRegistrationRequest) -> Identity:
        """
        Register a proto identity.

        Proto tokens are not checked for uniqueness.

        Raises:
            MissingProtoTokenError, PersistenceError
        """
        if request.proto_token is None:
            raise MissingProtoTokenError()

        identity = self.repository.new_identity().model_copy(
            update={"proto_token": request.proto_token}
        )
        saved = await self.repository.save(identity)
        logger.info("Registered proto identity %s", saved.id, extra={"identity_id": str(saved.id)})
        return saved
