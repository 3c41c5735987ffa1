from pydantic import BaseModel, ConfigDict, EmailStr, Field, computed_field, field_validator
from datetime import date, datetime
from typing import Optional

from models import TaskStatus
from time_utils import is_overdue, utc_today


# Auth schemas
class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    email: str
    name: str


class MessageResponse(BaseModel):
    message: str


class CurrentUser(BaseModel):
    email: str


# Project schemas
class ProjectCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title is required")
        return v.strip()


class Project(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    total_tasks: int
    completed_tasks: int
    progress_percentage: float


# Task schemas
class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    due_date: Optional[date] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v.strip()

    @field_validator("due_date")
    @classmethod
    def due_date_not_in_past(cls, v: Optional[date]) -> Optional[date]:
        if v is not None and v < utc_today():
            raise ValueError("The due date must be in the present day or in the future")
        return v


class Task(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: TaskStatus
    created_at: Optional[datetime] = None

    @computed_field
    @property
    def overdue(self) -> bool:
        return is_overdue(self.due_date, self.status)
