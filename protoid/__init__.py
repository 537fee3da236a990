"""
protoid - credential-management core.

Registers anonymous proto identities and full accounts, merges the two,
authenticates by session token, proto token or password, and revokes
session tokens.
"""

from protoid.kernel.identity import IdentityService, SQLAlchemyIdentityRepository

__version__ = "0.1.0"

__all__ = [
    "IdentityService",
    "SQLAlchemyIdentityRepository",
]
