"""Password hashing and bearer tokens."""

from taskboard.security.passwords import PasswordHasher
from taskboard.security.tokens import TokenService

__all__ = ["PasswordHasher", "TokenService"]
