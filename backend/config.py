"""
Application configuration loaded from environment variables.

Settings are read once at startup by load_settings() and passed explicitly to
create_app(); nothing else in the backend reads os.environ directly.
"""

import logging
import os
import secrets
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)

SUPPORTED_ALGORITHMS = ["HS256", "HS384", "HS512"]
DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES = 60
DEFAULT_DATABASE_URL = "sqlite:///./tasks.db"
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


@dataclass(frozen=True)
class Settings:
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES
    database_url: str = DEFAULT_DATABASE_URL
    environment: str = "development"
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"


def is_production_like(environment: Optional[str] = None) -> bool:
    """
    Check if the environment is production-like (production or staging).

    Args:
        environment: Environment name; defaults to the ENVIRONMENT variable

    Returns:
        True if the environment is "production" or "staging", False otherwise
    """
    env = environment if environment is not None else os.environ.get("ENVIRONMENT", "development")
    return env.lower() in ("production", "staging")


def _parse_expire_minutes(raw: Optional[str]) -> int:
    if raw is None:
        return DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES
    try:
        minutes = int(raw)
    except ValueError:
        logger.warning(
            f"⚠️  Invalid ACCESS_TOKEN_EXPIRE_MINUTES value in environment. "
            f"Using default of {DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES} minutes."
        )
        return DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES

    if minutes < 1 or minutes > 1440:  # 1 min to 24 hours
        logger.warning(
            f"⚠️  ACCESS_TOKEN_EXPIRE_MINUTES={minutes} is outside safe range (1-1440). "
            f"Using default of {DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES} minutes."
        )
        return DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES
    return minutes


def _parse_algorithm(raw: Optional[str]) -> str:
    algorithm = raw or "HS256"
    if algorithm not in SUPPORTED_ALGORITHMS:
        logger.warning(
            f"⚠️  Unsupported JWT_ALGORITHM={algorithm}. Using HS256. "
            f"Supported: {', '.join(SUPPORTED_ALGORITHMS)}"
        )
        return "HS256"
    return algorithm


def _parse_origins(raw: Optional[str]) -> List[str]:
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def load_settings() -> Settings:
    """
    Build Settings from environment variables.

    Invalid numeric or algorithm values fall back to safe defaults with a
    warning. A missing JWT_SECRET_KEY is tolerated in development (a random
    key is generated, so tokens do not survive a restart) but is fatal in
    production-like environments.

    Raises:
        ValueError: If JWT_SECRET_KEY is unset in production or staging
    """
    environment = os.environ.get("ENVIRONMENT", "development")

    secret_key = os.environ.get("JWT_SECRET_KEY")
    if not secret_key:
        if is_production_like(environment):
            raise ValueError(
                "JWT_SECRET_KEY environment variable is required in production. "
                "Generate a secure key with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
            )
        secret_key = "dev-insecure-key-" + secrets.token_urlsafe(32)
        logger.warning(
            "⚠️  JWT_SECRET_KEY not set! Using temporary development key. "
            "This is INSECURE for production. Set JWT_SECRET_KEY environment variable."
        )

    settings = Settings(
        jwt_secret_key=secret_key,
        jwt_algorithm=_parse_algorithm(os.environ.get("JWT_ALGORITHM")),
        access_token_expire_minutes=_parse_expire_minutes(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES")),
        database_url=os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL),
        environment=environment,
        cors_origins=_parse_origins(os.environ.get("CORS_ORIGINS")),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )
    logger.debug(
        f"Settings loaded: environment={settings.environment}, "
        f"algorithm={settings.jwt_algorithm}, "
        f"token_ttl={settings.access_token_expire_minutes}min"
    )
    return settings
