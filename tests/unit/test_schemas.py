"""Unit tests for identity and request schemas."""

import uuid

import pytest
from pydantic import ValidationError

from protoid.schemas.auth import ProtoRegistrationRequest, RegistrationRequest
from protoid.schemas.identity import Identity


class TestIdentity:

    def test_identity_is_frozen(self):
        identity = Identity(id=uuid.uuid4())

        with pytest.raises(ValidationError):
            identity.email = "x@example.com"

    def test_copies_leave_original_untouched(self):
        identity = Identity(id=uuid.uuid4(), proto_token="p")
        claimed = identity.model_copy(update={"email": "x@example.com", "proto_token": None})

        assert identity.proto_token == "p"
        assert claimed.id == identity.id
        assert claimed.proto_token is None

    def test_is_proto(self):
        assert Identity(id=uuid.uuid4(), proto_token="p").is_proto
        assert not Identity(id=uuid.uuid4(), email="x@example.com").is_proto
        assert not Identity(id=uuid.uuid4()).is_proto


class TestRequests:

    def test_prototoken_alias_and_field_name(self):
        assert RegistrationRequest.model_validate({"prototoken": "p"}).proto_token == "p"
        assert RegistrationRequest(proto_token="p").proto_token == "p"
        assert ProtoRegistrationRequest.model_validate({"prototoken": "p"}).proto_token == "p"

    def test_fields_default_to_none(self):
        request = RegistrationRequest()
        assert request.email is None
        assert request.password is None
        assert request.name is None
