"""
FastAPI dependencies for authentication and service wiring.

This module provides dependency functions that can be used in route handlers to:
- Extract and verify the caller's identity from a bearer token
- Build the core services for the current request's database session
- Translate core failures into HTTP errors
"""

import logging
from typing import NoReturn, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from database import get_db
from failures import Failure, FailureKind
from auth.permissions import OwnershipResolver
from auth.security import TokenService
from auth.service import Authenticator
from repositories import UserRepository, ProjectRepository, TaskRepository
from services.projects import ProjectAggregator, ProjectService
from services.tasks import TaskLifecycle

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme for JWT authentication
security = HTTPBearer(auto_error=False)

_FAILURE_STATUS = {
    FailureKind.already_exists: status.HTTP_400_BAD_REQUEST,
    FailureKind.invalid_credentials: status.HTTP_401_UNAUTHORIZED,
    FailureKind.invalid_token: status.HTTP_401_UNAUTHORIZED,
    FailureKind.not_found: status.HTTP_404_NOT_FOUND,
}


def raise_for_failure(failure: Failure) -> NoReturn:
    """
    Raise the HTTPException that corresponds to a core failure.

    Example:
        >>> result = lifecycle.complete(project_id, task_id, email)
        >>> if isinstance(result, Failure):
        ...     raise_for_failure(result)
    """
    headers = None
    if failure.kind == FailureKind.invalid_token:
        headers = {"WWW-Authenticate": "Bearer"}
    raise HTTPException(
        status_code=_FAILURE_STATUS[failure.kind],
        detail=failure.detail,
        headers=headers,
    )


def get_token_service(request: Request) -> TokenService:
    """TokenService created at startup from the application settings."""
    return request.app.state.token_service


async def get_current_email(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_token_service),
) -> str:
    """
    Extract and verify the caller's email from the bearer token.

    Returns:
        The token subject (the caller's email)

    Raises:
        HTTPException: 401 if no token is sent or the token does not verify

    Example:
        @app.get("/api/protected")
        async def protected_route(email: str = Depends(get_current_email)):
            return {"email": email}
    """
    if credentials is None or not credentials.credentials:
        logger.info("No authentication credentials provided")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    subject = tokens.verify(credentials.credentials)
    if isinstance(subject, Failure):
        logger.info("JWT token verification failed")
        raise_for_failure(subject)

    logger.debug(f"Request authenticated for: {subject}")
    return subject


def get_authenticator(
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> Authenticator:
    return Authenticator(UserRepository(db), tokens)


def get_ownership_resolver(db: Session = Depends(get_db)) -> OwnershipResolver:
    return OwnershipResolver(UserRepository(db), ProjectRepository(db), TaskRepository(db))


def get_project_service(
    db: Session = Depends(get_db),
    resolver: OwnershipResolver = Depends(get_ownership_resolver),
) -> ProjectService:
    return ProjectService(resolver, ProjectRepository(db), ProjectAggregator(TaskRepository(db)))


def get_task_lifecycle(
    db: Session = Depends(get_db),
    resolver: OwnershipResolver = Depends(get_ownership_resolver),
) -> TaskLifecycle:
    return TaskLifecycle(resolver, TaskRepository(db))
