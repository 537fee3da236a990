"""
Session token issuance.

A session token is an opaque bcrypt hash over the identity id, the issue
time and a server-side seed. It is never derived from caller input.
"""

import hashlib
from datetime import datetime, timezone
from typing import Optional

from protoid.config import get_settings
from protoid.kernel.identity.password import PasswordHasher
from protoid.schemas.identity import Identity


class SessionTokenIssuer:
    """Creates fresh session tokens for identities."""

    def __init__(
        self,
        hasher: Optional[PasswordHasher] = None,
        seed: Optional[str] = None,
    ):
        settings = get_settings()
        self.hasher = hasher or PasswordHasher()
        self.seed = seed or settings.session_token_seed

    def token_material(self, identity: Identity, now: datetime) -> str:
        """Digest of id, timestamp and seed."""
        raw = f"{identity.id}:{now.isoformat()}:{self.seed}"
        return hashlib.sha256(raw.encode()).hexdigest()

    async def issue(self, identity: Identity, now: Optional[datetime] = None) -> str:
        """
        Issue a new session token.

        Args:
            identity: Identity the token belongs to
            now: Issue time (defaults to current UTC time)

        Returns:
            Opaque token string
        """
        now = now or datetime.now(timezone.utc)
        return await self.hasher.hash(self.token_material(identity, now))
