from fastapi import APIRouter, FastAPI, Depends, Response, status
from fastapi.middleware.cors import CORSMiddleware
from typing import List, Optional
import logging

import schemas
from config import Settings, load_settings
from database import build_engine, build_session_factory, init_db
from failures import Failure
from auth.routes import router as auth_router
from auth.dependencies import (
    get_current_email,
    get_project_service,
    get_task_lifecycle,
    raise_for_failure,
)
from auth.security import TokenService
from services.projects import ProjectService
from services.tasks import TaskLifecycle

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API application.

    Everything process-wide (database engine, session factory, token signing
    key) is created here from the settings and stored on app.state.
    """
    if settings is None:
        settings = load_settings()

    app = FastAPI(
        title="Task Tracker API",
        description="Multi-tenant task tracking: users own projects, projects own tasks",
        version="1.0.0",
    )

    engine = build_engine(settings.database_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_service = TokenService.from_settings(settings)

    # CORS middleware for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def create_tables():
        init_db(app.state.engine)

    app.include_router(auth_router)
    app.include_router(router)
    return app


# ============== Routes ==============

router = APIRouter()


@router.get("/health")
def health_check():
    return {"status": "healthy"}


# ============== Projects ==============


@router.post("/api/projects", response_model=schemas.Project, status_code=status.HTTP_201_CREATED)
def create_project(
    project: schemas.ProjectCreate,
    email: str = Depends(get_current_email),
    service: ProjectService = Depends(get_project_service),
):
    """Create a new project owned by the caller."""
    logger.debug(f"User {email} creating project: {project.title}")
    result = service.create_project(email, project.title, project.description)
    if isinstance(result, Failure):
        raise_for_failure(result)
    return result


@router.get("/api/projects", response_model=List[schemas.Project])
def list_projects(
    email: str = Depends(get_current_email),
    service: ProjectService = Depends(get_project_service),
):
    """List the caller's projects with their task statistics."""
    logger.debug(f"User {email} listing projects")
    result = service.get_projects(email)
    if isinstance(result, Failure):
        raise_for_failure(result)
    return result


@router.get("/api/projects/{project_id}", response_model=schemas.Project)
def get_project(
    project_id: int,
    email: str = Depends(get_current_email),
    service: ProjectService = Depends(get_project_service),
):
    """Get one of the caller's projects with its task statistics."""
    logger.debug(f"User {email} requesting project {project_id}")
    result = service.get_project(email, project_id)
    if isinstance(result, Failure):
        raise_for_failure(result)
    return result


# ============== Tasks ==============


@router.post(
    "/api/projects/{project_id}/tasks",
    response_model=schemas.Task,
    status_code=status.HTTP_201_CREATED,
)
def create_task(
    project_id: int,
    task: schemas.TaskCreate,
    email: str = Depends(get_current_email),
    lifecycle: TaskLifecycle = Depends(get_task_lifecycle),
):
    """Create a PENDING task in one of the caller's projects."""
    logger.debug(f"User {email} creating task in project {project_id}: {task.title}")
    result = lifecycle.create(
        project_id,
        task.title,
        email,
        description=task.description,
        due_date=task.due_date,
    )
    if isinstance(result, Failure):
        raise_for_failure(result)
    return result


@router.get("/api/projects/{project_id}/tasks", response_model=List[schemas.Task])
def list_tasks(
    project_id: int,
    email: str = Depends(get_current_email),
    lifecycle: TaskLifecycle = Depends(get_task_lifecycle),
):
    """List tasks of one of the caller's projects."""
    logger.debug(f"User {email} listing tasks of project {project_id}")
    result = lifecycle.list_tasks(project_id, email)
    if isinstance(result, Failure):
        raise_for_failure(result)
    return result


@router.put("/api/projects/{project_id}/tasks/{task_id}/complete", response_model=schemas.Task)
def complete_task(
    project_id: int,
    task_id: int,
    email: str = Depends(get_current_email),
    lifecycle: TaskLifecycle = Depends(get_task_lifecycle),
):
    """Mark a task completed (idempotent)."""
    logger.debug(f"User {email} completing task {task_id} in project {project_id}")
    result = lifecycle.complete(project_id, task_id, email)
    if isinstance(result, Failure):
        raise_for_failure(result)
    return result


@router.put("/api/projects/{project_id}/tasks/{task_id}/toggle", response_model=schemas.Task)
def toggle_task(
    project_id: int,
    task_id: int,
    email: str = Depends(get_current_email),
    lifecycle: TaskLifecycle = Depends(get_task_lifecycle),
):
    """Flip a task between PENDING and COMPLETED."""
    logger.debug(f"User {email} toggling task {task_id} in project {project_id}")
    result = lifecycle.toggle(project_id, task_id, email)
    if isinstance(result, Failure):
        raise_for_failure(result)
    return result


@router.delete("/api/projects/{project_id}/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    project_id: int,
    task_id: int,
    email: str = Depends(get_current_email),
    lifecycle: TaskLifecycle = Depends(get_task_lifecycle),
):
    """Delete a task."""
    logger.debug(f"User {email} deleting task {task_id} in project {project_id}")
    failure = lifecycle.delete(project_id, task_id, email)
    if failure is not None:
        raise_for_failure(failure)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
