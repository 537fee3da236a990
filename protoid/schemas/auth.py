"""
Registration and credential schemas.
"""

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegistrationRequest(BaseModel):
    """
    Full registration request.

    Email and password are optional at the schema level; the registration
    pipeline rejects missing values with its own errors.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    password: Optional[str] = None
    proto_token: Optional[str] = Field(default=None, alias="prototoken")
    name: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def display_name_as_text(cls, value: Any) -> Any:
        # Display names are free text; other values are stored as their string form
        if value is None or isinstance(value, str):
            return value
        return str(value)


class ProtoRegistrationRequest(BaseModel):
    """Anonymous registration request."""

    model_config = ConfigDict(populate_by_name=True)

    proto_token: Optional[str] = Field(default=None, alias="prototoken")


class TokenCredentials(BaseModel):
    """Email plus session token."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["token"] = "token"
    user: str
    token: str


class ProtoCredentials(BaseModel):
    """Proto token alone."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["proto"] = "proto"
    proto_token: str


class PasswordCredentials(BaseModel):
    """Email plus plaintext password."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["password"] = "password"
    user: str
    password: str = Field(repr=False)


Credentials = Union[TokenCredentials, ProtoCredentials, PasswordCredentials]
