"""Sign-up and sign-in."""

from taskboard.core.errors import (
    AccountDisabledError,
    AccountExpiredError,
    AccountLockedError,
    BadCredentialsError,
    CredentialsExpiredError,
)
from taskboard.core.user_service import UserService
from taskboard.models import AuthenticationRequest, RegistrationRequest, UserRecord
from taskboard.security import PasswordHasher, TokenService
from taskboard.utils.logging import get_logger
from taskboard.utils.metrics import get_metrics

logger = get_logger(__name__)
metrics = get_metrics()


class AuthService:
    """Registers accounts and exchanges credentials for bearer tokens."""

    def __init__(self, users: UserService, hasher: PasswordHasher, tokens: TokenService) -> None:
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    async def sign_up(self, request: RegistrationRequest) -> UserRecord:
        password_hash = self.hasher.hash(request.password)
        return await self.users.create_user(request, password_hash)

    async def sign_in(self, request: AuthenticationRequest) -> str:
        """Check credentials and account state, then issue a token.

        Account state is checked before the password, except for expired
        credentials which are only reported once the password matched.

        Returns:
            Signed bearer token

        Raises:
            BadCredentialsError: Unknown username or wrong password
            AccountLockedError, AccountDisabledError, AccountExpiredError,
            CredentialsExpiredError: Account state forbids signing in
        """
        user = await self.users.get_user_by_username(request.username)
        if user is None:
            self._reject("unknown_user", request.username)
            raise BadCredentialsError()

        if user.locked:
            self._reject("locked", request.username)
            raise AccountLockedError()
        if not user.enabled:
            self._reject("disabled", request.username)
            raise AccountDisabledError()
        if user.expired:
            self._reject("expired", request.username)
            raise AccountExpiredError()
        if not self.hasher.verify(request.password, user.password_hash):
            self._reject("bad_password", request.username)
            raise BadCredentialsError()
        if user.credentials_expired:
            self._reject("credentials_expired", request.username)
            raise CredentialsExpiredError()

        metrics.record_auth_attempt("success")
        logger.info("user_signed_in", user_id=str(user.id))
        return self.tokens.issue(user)

    def _reject(self, outcome: str, username: str) -> None:
        metrics.record_auth_attempt(outcome)
        logger.info("sign_in_rejected", username=username, outcome=outcome)
