"""User account management."""

from uuid import UUID

from pydantic import BaseModel

from taskboard.core.access import check_self
from taskboard.core.errors import AlreadyExistsError, BadCredentialsError, NotFoundError
from taskboard.core.reconciler import is_present, reconcile
from taskboard.models import DeleteUserRequest, RegistrationRequest, UpdateUserRequest, UserRecord
from taskboard.security import PasswordHasher
from taskboard.storage import UserRepository
from taskboard.utils.logging import get_logger
from taskboard.utils.metrics import get_metrics
from taskboard.utils.timestamps import utc_now

logger = get_logger(__name__)
metrics = get_metrics()

PROFILE_FIELDS = ("username", "password_hash", "name", "email")


class _ProfileChanges(BaseModel):
    username: str | None = None
    password_hash: str | None = None
    name: str | None = None
    email: str | None = None


class UserService:
    """Registers, updates, deletes and looks up users."""

    def __init__(self, users: UserRepository, hasher: PasswordHasher) -> None:
        self.users = users
        self.hasher = hasher

    async def get_user(self, user_id: UUID) -> UserRecord:
        user = await self.users.get(user_id)
        if user is None:
            raise NotFoundError("User", "id", user_id)
        return user

    async def get_user_by_username(self, username: str) -> UserRecord | None:
        return await self.users.get_by_username(username)

    async def get_user_page(self, page: int, size: int) -> list[UserRecord]:
        return await self.users.list_page(page, size)

    async def create_user(self, request: RegistrationRequest, password_hash: str) -> UserRecord:
        """Store a new account.

        Username uniqueness is checked before email; only the first
        collision is reported.

        Args:
            request: Validated registration payload
            password_hash: Already-hashed password

        Raises:
            AlreadyExistsError: If the username or email is taken
        """
        if await self.users.exists_by_username(request.username):
            metrics.record_entity_operation("user", "create", "conflict")
            raise AlreadyExistsError("User", [("username", request.username)])
        if await self.users.exists_by_email(request.email):
            metrics.record_entity_operation("user", "create", "conflict")
            raise AlreadyExistsError("User", [("email", request.email)])

        user = UserRecord(
            username=request.username,
            password_hash=password_hash,
            name=request.name,
            email=request.email,
            created_at=utc_now(),
        )
        await self.users.insert(user)

        metrics.record_entity_operation("user", "create")
        logger.info("user_created", user_id=str(user.id), username=user.username)
        return user

    async def update_user(self, subject_id: UUID, request: UpdateUserRequest) -> UserRecord:
        """Apply a partial update to the subject's own account.

        Raises:
            PermissionDeniedError: If ``request.id`` is not the subject
            NotFoundError: If the account no longer exists
            AlreadyExistsError: If the new username or email belongs to another user
        """
        check_self(subject_id, request.id)
        user = await self.get_user(request.id)

        if is_present(request.username) and request.username != user.username:
            if await self.users.exists_by_username(request.username, exclude_id=user.id):
                raise AlreadyExistsError("User", [("username", request.username)])
        if is_present(request.email) and request.email != user.email:
            if await self.users.exists_by_email(request.email, exclude_id=user.id):
                raise AlreadyExistsError("User", [("email", request.email)])

        password_hash = None
        if is_present(request.password) and not self.hasher.verify(request.password, user.password_hash):
            password_hash = self.hasher.hash(request.password)

        changes = _ProfileChanges(
            username=request.username,
            password_hash=password_hash,
            name=request.name,
            email=request.email,
        )
        updated, changed = reconcile(changes, user, PROFILE_FIELDS)
        if not changed:
            return user

        await self.users.update(updated)
        metrics.record_entity_operation("user", "update")
        logger.info("user_updated", user_id=str(user.id), changed=changed)
        return updated

    async def delete_user(self, subject_id: UUID, request: DeleteUserRequest) -> UUID:
        """Delete the subject's own account after re-checking the password.

        Returns:
            The deleted user's id

        Raises:
            PermissionDeniedError: If ``request.id`` is not the subject
            NotFoundError: If the account does not exist
            BadCredentialsError: If the password does not match
        """
        check_self(subject_id, request.id)
        user = await self.get_user(request.id)

        if not self.hasher.verify(request.password, user.password_hash):
            metrics.record_entity_operation("user", "delete", "bad_credentials")
            raise BadCredentialsError("Invalid password")

        deleted_id = await self.users.delete(user.id)
        if deleted_id is None:
            raise NotFoundError("User", "id", request.id)

        metrics.record_entity_operation("user", "delete")
        logger.info("user_deleted", user_id=str(deleted_id))
        return deleted_id
