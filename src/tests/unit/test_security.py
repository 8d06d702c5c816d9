"""Unit tests for password hashing and bearer tokens."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from taskboard.core.errors import TokenExpiredError, TokenMalformedError
from taskboard.security import PasswordHasher, TokenService
from taskboard.security.tokens import ALGORITHM
from tests.fixtures import TEST_SECRET, UserFactory


class TestPasswordHasher:
    """Tests for bcrypt hashing."""

    def test_hash_verifies(self, hasher: PasswordHasher) -> None:
        hashed = hasher.hash("Mypass123!")

        assert hashed != "Mypass123!"
        assert hasher.verify("Mypass123!", hashed)

    def test_wrong_password_fails(self, hasher: PasswordHasher) -> None:
        hashed = hasher.hash("Mypass123!")

        assert not hasher.verify("Wrongpass1!", hashed)

    def test_hashes_are_salted(self, hasher: PasswordHasher) -> None:
        assert hasher.hash("Mypass123!") != hasher.hash("Mypass123!")

    def test_malformed_hash_never_matches(self, hasher: PasswordHasher) -> None:
        assert not hasher.verify("Mypass123!", "not-a-bcrypt-hash")

    def test_cost_factor_is_applied(self) -> None:
        hashed = PasswordHasher(rounds=5).hash("Mypass123!")

        assert hashed.startswith("$2b$05$")


class TestTokenService:
    """Tests for token issue and validation."""

    def test_round_trip_returns_user_id(self, token_service: TokenService) -> None:
        user = UserFactory.create()

        token = token_service.issue(user)

        assert token_service.validate(token) == user.id

    def test_claims(self, token_service: TokenService) -> None:
        user = UserFactory.create()

        claims = jwt.decode(token_service.issue(user), TEST_SECRET, algorithms=[ALGORITHM])

        assert claims["sub"] == user.username
        assert claims["userId"] == str(user.id)
        assert claims["exp"] - claims["iat"] == 30 * 60

    def test_expired_token(self, token_service: TokenService) -> None:
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {"sub": "someone", "userId": str(uuid4()), "iat": past, "exp": past + timedelta(minutes=1)},
            TEST_SECRET,
            algorithm=ALGORITHM,
        )

        with pytest.raises(TokenExpiredError):
            token_service.validate(token)

    def test_wrong_signature_is_malformed(self, token_service: TokenService) -> None:
        other = TokenService(secret="another-signing-key-that-is-long-enough", expiration_minutes=30)
        token = other.issue(UserFactory.create())

        with pytest.raises(TokenMalformedError):
            token_service.validate(token)

    def test_garbage_is_malformed(self, token_service: TokenService) -> None:
        with pytest.raises(TokenMalformedError):
            token_service.validate("not.a.token")

    def test_missing_user_id_is_malformed(self, token_service: TokenService) -> None:
        token = jwt.encode(
            {"sub": "someone", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            TEST_SECRET,
            algorithm=ALGORITHM,
        )

        with pytest.raises(TokenMalformedError):
            token_service.validate(token)

    def test_non_uuid_user_id_is_malformed(self, token_service: TokenService) -> None:
        token = jwt.encode(
            {"sub": "someone", "userId": "42", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            TEST_SECRET,
            algorithm=ALGORITHM,
        )

        with pytest.raises(TokenMalformedError):
            token_service.validate(token)

    def test_errors_are_forbidden(self) -> None:
        assert TokenExpiredError.status_code == 403
        assert TokenMalformedError.status_code == 403
