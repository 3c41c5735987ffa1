"""
Time utilities for the task backend.

This module provides a single source of truth for time operations, so token
timestamps and due-date checks agree on what "now" and "today" mean.
"""

from datetime import date, datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Get current UTC time.
    Single source of truth for "now" throughout the application.

    Returns:
        timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Current calendar date in UTC."""
    return utc_now().date()


def is_overdue(due_date: Optional[date], status: str) -> bool:
    """
    Check if a task is overdue.

    A task is overdue if its due date is before today and it is not
    completed. Tasks without a due date are never overdue.

    Args:
        due_date: The task's due date
        status: The task's status

    Returns:
        True if the task is overdue, False otherwise
    """
    if not due_date or status == "COMPLETED":
        return False
    return due_date < utc_today()
