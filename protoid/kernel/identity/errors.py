"""
Identity error taxonomy.

Every failure of a public identity operation is raised as a subclass of
IdentityError. The ``code`` is stable and meant for transport layers that
map errors onto status codes. Schema validation failures on raw input are
translated with error_for_invalid_fields and never escape as pydantic
errors.
"""

from typing import Callable, Mapping, Optional

from pydantic import ValidationError


class IdentityError(Exception):
    """Base class for identity operation failures."""

    code = "identity_error"
    default_message = "Identity operation failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidEmailError(IdentityError):
    code = "invalid_email"
    default_message = "Email invalid"


class EmailTakenError(IdentityError):
    code = "email_taken"
    default_message = "Email is already taken"


class InvalidPasswordError(IdentityError):
    """Password rejected at registration or did not match at login."""

    code = "invalid_password"
    default_message = "Password not valid"


class MissingProtoTokenError(IdentityError):
    code = "missing_proto_token"
    default_message = "Proto-User cannot be created without prototoken"


class UserNotFoundError(IdentityError):
    code = "user_not_found"
    default_message = "User does not exist"


class InvalidTokenError(IdentityError):
    code = "invalid_token"
    default_message = "Invalid token"


class InvalidProtoTokenError(IdentityError):
    code = "invalid_proto_token"
    default_message = "prototoken not valid"


class NoCredentialsProvidedError(IdentityError):
    code = "no_credentials"
    default_message = "No valid authentication information submitted"


class RepositoryError(IdentityError):
    """Lookup against the identity store failed."""

    code = "repository_error"
    default_message = "Problem with the database"


class PersistenceError(IdentityError):
    """Writing an identity to the store failed."""

    code = "persistence_error"
    default_message = "Error saving identity"


class LogoutError(IdentityError):
    """
    Authentication failed while logging out.

    The original authentication error is kept on ``cause`` and chained as
    ``__cause__`` by the raiser.
    """

    code = "logout_failed"
    default_message = "Logout failed"

    def __init__(self, cause: IdentityError):
        self.cause = cause
        super().__init__(f"Logout failed: {cause.message}")


def error_for_invalid_fields(
    exc: ValidationError,
    field_errors: Mapping[str, Callable[[], IdentityError]],
    default: Callable[[], IdentityError],
) -> IdentityError:
    """
    Domain error for the first rejected field of a schema.

    pydantic reports fields in declaration order, and the request schemas
    declare fields in the order the pipelines check them.

    Args:
        exc: The validation failure
        field_errors: Error factory per field name or alias
        default: Factory used when no listed field was rejected

    Returns:
        The error to raise, chained from ``exc`` by the caller
    """
    for error in exc.errors():
        loc = error.get("loc") or ()
        if loc and loc[0] in field_errors:
            return field_errors[loc[0]]()
    return default()
