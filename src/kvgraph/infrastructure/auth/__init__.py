"""Password hashing for password fields."""

from kvgraph.infrastructure.auth.password_hasher import (
    hash_password,
    needs_rehash,
    verify_password,
)

__all__ = ["hash_password", "verify_password", "needs_rehash"]
