"""Unit tests for session token issuance."""

import uuid
from datetime import datetime, timezone

import pytest

from protoid.kernel.identity.password import PasswordHasher
from protoid.kernel.identity.tokens import SessionTokenIssuer
from protoid.schemas.identity import Identity


class TestSessionTokenIssuer:

    @pytest.mark.asyncio
    async def test_tokens_are_fresh_each_time(self, token_issuer: SessionTokenIssuer):
        identity = Identity(id=uuid.uuid4())
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)

        first = await token_issuer.issue(identity, now=now)
        second = await token_issuer.issue(identity, now=now)

        # Same material, fresh salt
        assert first != second

    @pytest.mark.asyncio
    async def test_token_verifies_against_its_material(
        self,
        token_issuer: SessionTokenIssuer,
        hasher: PasswordHasher,
    ):
        identity = Identity(id=uuid.uuid4())
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)

        token = await token_issuer.issue(identity, now=now)

        assert await hasher.compare(token_issuer.token_material(identity, now), token)

    def test_material_depends_on_id_time_and_seed(self, hasher: PasswordHasher):
        identity = Identity(id=uuid.uuid4())
        other = Identity(id=uuid.uuid4())
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        later = datetime(2026, 1, 2, tzinfo=timezone.utc)

        issuer = SessionTokenIssuer(hasher=hasher, seed="seed-a")
        reseeded = SessionTokenIssuer(hasher=hasher, seed="seed-b")

        base = issuer.token_material(identity, now)
        assert base != issuer.token_material(other, now)
        assert base != issuer.token_material(identity, later)
        assert base != reseeded.token_material(identity, now)
        assert len(base) == 64
