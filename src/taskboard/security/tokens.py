"""Signed bearer tokens (HS256 JWT)."""

from datetime import timedelta
from uuid import UUID

import jwt

from taskboard.core.errors import TokenExpiredError, TokenMalformedError
from taskboard.models import UserRecord
from taskboard.utils.logging import get_logger
from taskboard.utils.timestamps import utc_now

logger = get_logger(__name__)

ALGORITHM = "HS256"
USER_ID_CLAIM = "userId"


class TokenService:
    """Issues and validates bearer tokens.

    Tokens carry the username as ``sub`` and the user id as ``userId``.
    Validation only proves the token was issued by this service and has
    not expired; it does not look the user up.
    """

    def __init__(self, secret: str, expiration_minutes: int = 1440) -> None:
        self._secret = secret
        self.expiration = timedelta(minutes=expiration_minutes)

    def issue(self, user: UserRecord) -> str:
        now = utc_now()
        claims = {
            "sub": user.username,
            USER_ID_CLAIM: str(user.id),
            "iat": now,
            "exp": now + self.expiration,
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def validate(self, token: str) -> UUID:
        """Return the user id a token was issued for.

        Raises:
            TokenExpiredError: If the token's ``exp`` has passed
            TokenMalformedError: For a bad signature, bad encoding or missing claims
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "sub", USER_ID_CLAIM]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except jwt.PyJWTError as e:
            logger.info("token_rejected", reason=type(e).__name__)
            raise TokenMalformedError(f"Invalid token: {e}") from e

        try:
            return UUID(str(claims[USER_ID_CLAIM]))
        except ValueError as e:
            raise TokenMalformedError("Invalid token: userId is not a valid id") from e
