"""
Project creation, lookup and completion statistics.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Union

from auth.permissions import OwnershipResolver
from failures import Failure
from models import Project
from repositories import ProjectRepository, TaskRepository

logger = logging.getLogger(__name__)

_TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class ProjectSummary:
    total_tasks: int
    completed_tasks: int
    progress_percentage: float


@dataclass(frozen=True)
class ProjectView:
    id: int
    title: str
    description: Optional[str]
    created_at: datetime
    total_tasks: int
    completed_tasks: int
    progress_percentage: float


def progress_percentage(completed: int, total: int) -> float:
    """Completed share of total as a percentage, rounded half-up to 2 places."""
    if total <= 0:
        return 0.0
    ratio = Decimal(completed * 100) / Decimal(total)
    return float(ratio.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


class ProjectAggregator:
    """Read-only task statistics for a project the caller already resolved."""

    def __init__(self, tasks: TaskRepository):
        self.tasks = tasks

    def summarize(self, project: Project) -> ProjectSummary:
        total, completed = self.tasks.count_total_and_completed(project.id)
        return ProjectSummary(
            total_tasks=total,
            completed_tasks=completed,
            progress_percentage=progress_percentage(completed, total),
        )


class ProjectService:
    def __init__(
        self,
        resolver: OwnershipResolver,
        projects: ProjectRepository,
        aggregator: ProjectAggregator,
    ):
        self.resolver = resolver
        self.projects = projects
        self.aggregator = aggregator

    def _to_view(self, project: Project) -> ProjectView:
        summary = self.aggregator.summarize(project)
        return ProjectView(
            id=project.id,
            title=project.title,
            description=project.description,
            created_at=project.created_at,
            total_tasks=summary.total_tasks,
            completed_tasks=summary.completed_tasks,
            progress_percentage=summary.progress_percentage,
        )

    def create_project(
        self, caller_email: str, title: str, description: Optional[str] = None
    ) -> Union[ProjectView, Failure]:
        user = self.resolver.resolve_caller(caller_email)
        if isinstance(user, Failure):
            return user

        project = self.projects.add(owner_id=user.id, title=title, description=description)
        logger.info(f"Project created: {project.title} (ID: {project.id}) by user {user.id}")
        return self._to_view(project)

    def get_projects(self, caller_email: str) -> Union[List[ProjectView], Failure]:
        user = self.resolver.resolve_caller(caller_email)
        if isinstance(user, Failure):
            return user

        projects = self.projects.find_by_owner_id(user.id)
        logger.info(f"User {user.id} retrieved {len(projects)} projects")
        return [self._to_view(project) for project in projects]

    def get_project(self, caller_email: str, project_id: int) -> Union[ProjectView, Failure]:
        project = self.resolver.resolve_project(caller_email, project_id)
        if isinstance(project, Failure):
            return project
        return self._to_view(project)
