"""
Security utilities for password hashing and identity token management.

This module provides cryptographic functions for:
- Password hashing using Argon2id (memory-hard, GPU-resistant)
- Signed, time-bound JWT identity tokens (TokenService)
"""

import logging
from datetime import timedelta
from typing import Optional, Union

from jose import JWTError, jwt
from passlib.context import CryptContext

from config import Settings, SUPPORTED_ALGORITHMS
from failures import Failure, INVALID_TOKEN
from time_utils import utc_now

logger = logging.getLogger(__name__)


# Password hashing configuration using Argon2id
# Argon2id salts every hash itself, so equal passwords never share a hash
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a password using Argon2id.

    Args:
        password: Plain text password to hash

    Returns:
        Hashed password string

    Example:
        >>> hashed = hash_password("my_secure_password")
        >>> verify_password("my_secure_password", hashed)
        True
    """
    logger.debug("Hashing password")
    hashed = pwd_context.hash(password)
    logger.debug("Password hashed successfully")
    return hashed


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Hashed password to compare against

    Returns:
        True if password matches, False otherwise (including unreadable hashes)
    """
    logger.debug("Verifying password")
    try:
        is_valid = pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.info("Stored password hash could not be identified")
        return False
    logger.debug(f"Password verification result: {is_valid}")
    return is_valid


class TokenService:
    """
    Issue and verify signed identity tokens.

    The signing key is handed in once at startup and never changes while the
    process runs. Tokens are stateless: there is no server-side revocation,
    expiry is the only way a token stops being valid.

    Example:
        >>> tokens = TokenService("secret")
        >>> tokens.verify(tokens.issue("alice@example.com"))
        'alice@example.com'
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
    ):
        if not secret_key:
            raise ValueError("TokenService requires a non-empty secret key")
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"Unsupported JWT algorithm: {algorithm}")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expires_in = timedelta(minutes=expire_minutes)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.access_token_expire_minutes,
        )

    def issue(self, subject: str, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a signed token for a subject (the user's email).

        Args:
            subject: Identity the token vouches for
            expires_delta: Optional lifetime override (defaults to the configured TTL)

        Returns:
            Encoded JWT string carrying sub, iat and exp claims
        """
        issued_at = utc_now()
        expire = issued_at + (expires_delta if expires_delta is not None else self.expires_in)

        to_encode = {"sub": subject, "iat": issued_at, "exp": expire}
        encoded_jwt = jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)
        logger.debug(f"Token issued for {subject}, expires at: {expire}")
        return encoded_jwt

    def verify(self, token: str) -> Union[str, Failure]:
        """
        Verify a token and return its subject.

        Bad signatures, malformed input, expired tokens and tokens without a
        usable subject all produce the INVALID_TOKEN failure; nothing raises.

        Args:
            token: Encoded JWT string

        Returns:
            The subject (email) if the token is valid, INVALID_TOKEN otherwise
        """
        logger.debug("Verifying JWT token")
        if not isinstance(token, str) or not token:
            logger.info("JWT verification failed: empty token")
            return INVALID_TOKEN

        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.info(f"JWT verification failed: {str(e)}")
            return INVALID_TOKEN

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            logger.info("Token payload missing 'sub' claim")
            return INVALID_TOKEN

        logger.debug(f"Token verified successfully for: {subject}")
        return subject
