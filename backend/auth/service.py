"""
Credential checks for registration and login.

Authenticator is the only component that touches password hashes; it hands
successful logins to the TokenService for a session token.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy.exc import IntegrityError

from auth.security import TokenService, hash_password, verify_password
from failures import Failure, EMAIL_IN_USE, INVALID_CREDENTIALS
from repositories import UserRepository

logger = logging.getLogger(__name__)

# Hash checked when the email is unknown, so both login failures cost one Argon2 verify
_unknown_user_hash: Optional[str] = None


def _burn_password_check(password: str) -> None:
    global _unknown_user_hash
    if _unknown_user_hash is None:
        _unknown_user_hash = hash_password("unknown-user-placeholder")
    verify_password(password, _unknown_user_hash)


@dataclass(frozen=True)
class LoginResult:
    token: str
    email: str
    name: str


class Authenticator:
    def __init__(self, users: UserRepository, tokens: TokenService):
        self.users = users
        self.tokens = tokens

    def register(self, email: str, password: str, name: str) -> Optional[Failure]:
        """
        Create a user account.

        Emails are compared exactly (case-sensitive). The plaintext password
        is hashed before it reaches the store and is never logged.

        Returns:
            None on success, EMAIL_IN_USE if the email is already registered
        """
        logger.info(f"Registration attempt for email: {email}")

        if self.users.exists_by_email(email):
            logger.info(f"Registration failed: email already exists: {email}")
            return EMAIL_IN_USE

        password_hash = hash_password(password)
        try:
            user = self.users.add(name=name, email=email, password_hash=password_hash)
        except IntegrityError:
            # Lost a race against a concurrent registration of the same email
            self.users.db.rollback()
            logger.info(f"Registration failed: email inserted concurrently: {email}")
            return EMAIL_IN_USE

        logger.critical(f"User registered successfully: {user.email} (ID: {user.id})")
        return None

    def login(self, email: str, password: str) -> Union[LoginResult, Failure]:
        """
        Check credentials and issue a session token.

        An unknown email and a wrong password produce the same failure, so a
        caller cannot probe which accounts exist.

        Returns:
            LoginResult with a fresh token, or INVALID_CREDENTIALS
        """
        logger.info(f"Login attempt for email: {email}")

        user = self.users.find_by_email(email)
        if user is None:
            _burn_password_check(password)
            logger.info("Login failed: invalid credentials")
            return INVALID_CREDENTIALS

        if not verify_password(password, user.password_hash):
            logger.info("Login failed: invalid credentials")
            return INVALID_CREDENTIALS

        token = self.tokens.issue(user.email)
        logger.critical(f"User logged in successfully: {user.email} (ID: {user.id})")
        return LoginResult(token=token, email=user.email, name=user.name)
