"""Test data factories and API helpers."""

from tests.fixtures.api import API, ApiUser, sign_up_and_in
from tests.fixtures.factories import DEFAULT_PASSWORD, TEST_SECRET, Factory, TaskFactory, UserFactory

__all__ = [
    "API",
    "ApiUser",
    "DEFAULT_PASSWORD",
    "TEST_SECRET",
    "Factory",
    "TaskFactory",
    "UserFactory",
    "sign_up_and_in",
]
