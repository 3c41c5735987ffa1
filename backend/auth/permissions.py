"""
Ownership checks for projects and tasks.

Every project or task a caller reads or changes is resolved here first. Access
follows the ownership chain User -> Project -> Task: a project is visible only
to the user who created it, and a task only through the project it belongs to.

A resource that does not exist and a resource owned by someone else produce
the same NOT_FOUND failure, so callers cannot learn which ids belong to other
users.
"""

import logging
from typing import Tuple, Union

from failures import Failure, PROJECT_NOT_FOUND, TASK_NOT_FOUND
from models import User, Project, Task
from repositories import UserRepository, ProjectRepository, TaskRepository

logger = logging.getLogger(__name__)

# Ids are signed 64-bit integers in every supported database
MAX_ID = 2**63 - 1


def _is_storable_id(value: int) -> bool:
    return 1 <= value <= MAX_ID


class OwnershipResolver:
    def __init__(
        self,
        users: UserRepository,
        projects: ProjectRepository,
        tasks: TaskRepository,
    ):
        self.users = users
        self.projects = projects
        self.tasks = tasks

    def resolve_caller(self, caller_email: str) -> Union[User, Failure]:
        """
        Look up the user behind an already-verified token subject.

        A token can outlive its user, so a missing record is a normal
        NOT_FOUND rather than an error.
        """
        user = self.users.find_by_email(caller_email)
        if user is None:
            logger.info(f"No user record for token subject: {caller_email}")
            return PROJECT_NOT_FOUND
        return user

    def resolve_project(self, caller_email: str, project_id: int) -> Union[Project, Failure]:
        """
        Return the caller's project with the given id.

        The project is fetched by (id, owner) in one query, so a foreign
        project is never loaded and cannot be told apart from a missing one.

        Args:
            caller_email: Verified identity of the caller
            project_id: Requested project id

        Returns:
            The Project, or PROJECT_NOT_FOUND
        """
        logger.debug(f"Resolving project {project_id} for {caller_email}")

        user = self.resolve_caller(caller_email)
        if isinstance(user, Failure):
            return user

        if not _is_storable_id(project_id):
            logger.info(f"Project id {project_id} out of range for user {user.id}")
            return PROJECT_NOT_FOUND

        project = self.projects.find_by_id_and_owner_id(project_id, user.id)
        if project is None:
            logger.info(f"Project {project_id} not found for user {user.id}")
            return PROJECT_NOT_FOUND

        return project

    def resolve_task(
        self, caller_email: str, project_id: int, task_id: int
    ) -> Union[Tuple[Project, Task], Failure]:
        """
        Return the caller's project and the task inside it.

        The task must belong to the resolved project: a task id from another
        project (owned by anyone, including the caller) is reported exactly
        like a task id that does not exist.

        Args:
            caller_email: Verified identity of the caller
            project_id: Project the task is addressed under
            task_id: Requested task id

        Returns:
            (Project, Task), or PROJECT_NOT_FOUND / TASK_NOT_FOUND
        """
        logger.debug(f"Resolving task {task_id} in project {project_id} for {caller_email}")

        project = self.resolve_project(caller_email, project_id)
        if isinstance(project, Failure):
            return project

        if not _is_storable_id(task_id):
            logger.info(f"Task id {task_id} out of range in project {project.id}")
            return TASK_NOT_FOUND

        task = self.tasks.find_by_id_and_project_id(task_id, project.id)
        if task is None:
            logger.info(f"Task {task_id} not found in project {project.id}")
            return TASK_NOT_FOUND

        return project, task
