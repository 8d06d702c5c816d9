"""bcrypt password hashing."""

import bcrypt

# bcrypt only considers the first 72 bytes of input
_MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Hashes and verifies passwords with a fixed bcrypt cost."""

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    def hash(self, plain: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(plain.encode("utf-8")[:_MAX_PASSWORD_BYTES], salt).decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        """Check ``plain`` against a stored hash; a malformed hash never matches."""
        try:
            return bcrypt.checkpw(plain.encode("utf-8")[:_MAX_PASSWORD_BYTES], hashed.encode("utf-8"))
        except ValueError:
            return False
