"""
Authentication API endpoints.

This module provides REST API endpoints for:
- User registration
- Login (bearer token issue)
- Current identity lookup
"""

import logging

from fastapi import APIRouter, Depends, status

import schemas
from failures import Failure
from auth.dependencies import get_authenticator, get_current_email, raise_for_failure
from auth.service import Authenticator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=schemas.MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: schemas.RegisterRequest,
    authenticator: Authenticator = Depends(get_authenticator),
):
    """
    Register a new user account.

    Raises:
        HTTPException: 400 if email already registered
    """
    failure = authenticator.register(request.email, request.password, request.name)
    if failure is not None:
        raise_for_failure(failure)
    return {"message": "User registered successfully"}


@router.post("/login", response_model=schemas.LoginResponse)
async def login(
    request: schemas.LoginRequest,
    authenticator: Authenticator = Depends(get_authenticator),
):
    """
    Login with email and password.

    Returns:
        Bearer token plus the user's email and display name

    Raises:
        HTTPException: 401 if the email is unknown or the password is wrong
    """
    result = authenticator.login(request.email, request.password)
    if isinstance(result, Failure):
        raise_for_failure(result)
    return schemas.LoginResponse(token=result.token, email=result.email, name=result.name)


@router.get("/me", response_model=schemas.CurrentUser)
async def get_current_user_info(email: str = Depends(get_current_email)):
    """Return the identity carried by the bearer token."""
    logger.debug(f"Fetching identity for: {email}")
    return {"email": email}
