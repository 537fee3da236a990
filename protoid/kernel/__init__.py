"""
Kernel Layer

- Identity Core (registration, authentication, session revocation)
- Identity storage models
"""

from protoid.kernel.models import Base, IdentityRecord

__all__ = [
    "Base",
    "IdentityRecord",
]
