"""
Typed failure values returned by the authentication and ownership core.

Core operations return either their result or a Failure instead of raising,
so callers check with isinstance(result, Failure) before using the value. The HTTP
layer turns a Failure into an HTTPException (see auth.dependencies).
"""

import enum
from dataclasses import dataclass


class FailureKind(str, enum.Enum):
    already_exists = "already_exists"
    invalid_credentials = "invalid_credentials"
    invalid_token = "invalid_token"
    not_found = "not_found"


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    detail: str


# Shared instances: a refused login and an unknown resource must be
# indistinguishable no matter which branch produced them.
EMAIL_IN_USE = Failure(FailureKind.already_exists, "Email is already in use")
INVALID_CREDENTIALS = Failure(FailureKind.invalid_credentials, "Invalid email or password")
INVALID_TOKEN = Failure(FailureKind.invalid_token, "Invalid or expired token")
PROJECT_NOT_FOUND = Failure(FailureKind.not_found, "Project not found")
TASK_NOT_FOUND = Failure(FailureKind.not_found, "Task not found")