"""FastAPI dependencies: services, paging and the authenticated subject."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskboard.config import Settings
from taskboard.core.auth_service import AuthService
from taskboard.core.comment_service import CommentService
from taskboard.core.errors import AuthHeaderMissingError
from taskboard.core.task_service import TaskService
from taskboard.core.user_service import UserService
from taskboard.security import TokenService

BEARER_PREFIX = "Bearer "

# page * size must stay within a signed 64-bit SQLite OFFSET
MAX_PAGE = 2**31 - 1

# Registered for the OpenAPI security scheme; the header itself is checked below
security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_comment_service(request: Request) -> CommentService:
    return request.app.state.comment_service


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def get_current_user_id(
    request: Request,
    _credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> UUID:
    """Resolve the subject id from the ``Authorization: Bearer`` header.

    Raises:
        AuthHeaderMissingError: If the header is absent or not a bearer token
        TokenExpiredError: If the token has expired
        TokenMalformedError: If the token cannot be verified
    """
    header = request.headers.get("Authorization")
    if not header or not header.startswith(BEARER_PREFIX):
        raise AuthHeaderMissingError()
    return tokens.validate(header[len(BEARER_PREFIX):])


class PageParams:
    """``page``/``size`` query parameters bounded by the configured page size."""

    def __init__(
        self,
        request: Request,
        page: Annotated[int, Query(ge=0, le=MAX_PAGE, description="Zero-based page index")] = 0,
        size: Annotated[int | None, Query(ge=1, description="Items per page")] = None,
    ) -> None:
        settings: Settings = request.app.state.settings
        self.page = page
        self.size = min(size or settings.page_default_size, settings.page_max_size)


SubjectId = Annotated[UUID, Depends(get_current_user_id)]
Paging = Annotated[PageParams, Depends()]
