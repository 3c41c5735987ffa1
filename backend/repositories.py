"""
Data access for users, projects and tasks.

Every lookup is an explicit query; nothing here walks ORM relationships.
There are no project or task lookups by bare id: projects are found by
(id, owner) and tasks by (id, project), and auth.permissions.OwnershipResolver
is the only caller of those lookups.
"""

from typing import List, Optional, Tuple

from sqlalchemy import case, func, literal, update
from sqlalchemy.orm import Session

from models import User, Project, Task, TaskStatus


class UserRepository:
    """Credential store: identity records only, no business rules."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def exists_by_email(self, email: str) -> bool:
        return self.db.query(User.id).filter(User.email == email).first() is not None

    def add(self, name: str, email: str, password_hash: str) -> User:
        user = User(name=name, email=email, password_hash=password_hash)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user


class ProjectRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_id_and_owner_id(self, project_id: int, owner_id: int) -> Optional[Project]:
        return (
            self.db.query(Project)
            .filter(Project.id == project_id, Project.owner_id == owner_id)
            .first()
        )

    def find_by_owner_id(self, owner_id: int) -> List[Project]:
        return (
            self.db.query(Project)
            .filter(Project.owner_id == owner_id)
            .order_by(Project.created_at, Project.id)
            .all()
        )

    def add(self, owner_id: int, title: str, description: Optional[str]) -> Project:
        project = Project(owner_id=owner_id, title=title, description=description)
        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)
        return project

    def delete(self, project: Project) -> None:
        # ORM cascade removes the project's tasks in the same transaction
        self.db.delete(project)
        self.db.commit()


class TaskRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_id_and_project_id(self, task_id: int, project_id: int) -> Optional[Task]:
        return (
            self.db.query(Task)
            .filter(Task.id == task_id, Task.project_id == project_id)
            .first()
        )

    def find_by_project_id(self, project_id: int) -> List[Task]:
        return (
            self.db.query(Task)
            .filter(Task.project_id == project_id)
            .order_by(Task.created_at, Task.id)
            .all()
        )

    def count_total_and_completed(self, project_id: int) -> Tuple[int, int]:
        """
        Count all tasks and completed tasks of a project in one statement.

        Both numbers come from the same row of the same query, so they always
        describe the same snapshot of the table.
        """
        total, completed = (
            self.db.query(
                func.count(Task.id),
                func.coalesce(
                    func.sum(case((Task.status == TaskStatus.COMPLETED, 1), else_=0)),
                    0,
                ),
            )
            .filter(Task.project_id == project_id)
            .one()
        )
        return int(total), int(completed)

    def add(self, project_id: int, title: str, description: Optional[str], due_date) -> Task:
        task = Task(
            project_id=project_id,
            title=title,
            description=description,
            due_date=due_date,
            status=TaskStatus.PENDING,
        )
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def set_status(self, task: Task, status: TaskStatus) -> Task:
        self.db.execute(
            update(Task)
            .where(Task.id == task.id)
            .values(status=status)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        self.db.refresh(task)
        return task

    def flip_status(self, task: Task) -> Task:
        """
        Flip PENDING <-> COMPLETED with a single UPDATE statement.

        The new value is computed by the database from the stored value, so
        two concurrent flips never interleave a read and a write.
        """
        status_type = Task.__table__.c.status.type
        self.db.execute(
            update(Task)
            .where(Task.id == task.id)
            .values(
                status=case(
                    (
                        Task.status == TaskStatus.COMPLETED,
                        literal(TaskStatus.PENDING, status_type),
                    ),
                    else_=literal(TaskStatus.COMPLETED, status_type),
                )
            )
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        self.db.refresh(task)
        return task

    def delete(self, task: Task) -> None:
        self.db.delete(task)
        self.db.commit()
