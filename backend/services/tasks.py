"""
Task lifecycle: create, list, complete, toggle and delete.

Each operation starts by asking the OwnershipResolver for the project (and
task); when that fails the failure is returned unchanged. Nothing here checks
ownership on its own.
"""

import logging
from datetime import date
from typing import List, Optional, Union

from auth.permissions import OwnershipResolver
from failures import Failure
from models import Task, TaskStatus
from repositories import TaskRepository

logger = logging.getLogger(__name__)


class TaskLifecycle:
    def __init__(self, resolver: OwnershipResolver, tasks: TaskRepository):
        self.resolver = resolver
        self.tasks = tasks

    def create(
        self,
        project_id: int,
        title: str,
        caller_email: str,
        description: Optional[str] = None,
        due_date: Optional[date] = None,
    ) -> Union[Task, Failure]:
        """
        Add a PENDING task to one of the caller's projects.

        The request layer rejects due dates in the past; a past date that
        still arrives here is stored as given.
        """
        if due_date is not None and not isinstance(due_date, date):
            raise TypeError(f"due_date must be a date, got {type(due_date).__name__}")

        project = self.resolver.resolve_project(caller_email, project_id)
        if isinstance(project, Failure):
            return project

        task = self.tasks.add(
            project_id=project.id,
            title=title,
            description=description,
            due_date=due_date,
        )
        logger.info(f"Task created: {task.title} (ID: {task.id}) in project {project.id}")
        return task

    def list_tasks(self, project_id: int, caller_email: str) -> Union[List[Task], Failure]:
        project = self.resolver.resolve_project(caller_email, project_id)
        if isinstance(project, Failure):
            return project

        tasks = self.tasks.find_by_project_id(project.id)
        logger.debug(f"Found {len(tasks)} tasks in project {project.id}")
        return tasks

    def complete(self, project_id: int, task_id: int, caller_email: str) -> Union[Task, Failure]:
        """Mark a task COMPLETED; completing a completed task is a no-op."""
        resolved = self.resolver.resolve_task(caller_email, project_id, task_id)
        if isinstance(resolved, Failure):
            return resolved

        _, task = resolved
        task = self.tasks.set_status(task, TaskStatus.COMPLETED)
        logger.info(f"Task {task.id} marked completed")
        return task

    def toggle(self, project_id: int, task_id: int, caller_email: str) -> Union[Task, Failure]:
        resolved = self.resolver.resolve_task(caller_email, project_id, task_id)
        if isinstance(resolved, Failure):
            return resolved

        _, task = resolved
        task = self.tasks.flip_status(task)
        logger.info(f"Task {task.id} toggled to {task.status.value}")
        return task

    def delete(self, project_id: int, task_id: int, caller_email: str) -> Optional[Failure]:
        resolved = self.resolver.resolve_task(caller_email, project_id, task_id)
        if isinstance(resolved, Failure):
            return resolved

        _, task = resolved
        task_id = task.id
        self.tasks.delete(task)
        logger.info(f"Task {task_id} deleted")
        return None
