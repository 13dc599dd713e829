from datetime import date, datetime
from typing import List, Optional

from sqlmodel import SQLModel

from .models import Reminder, TodoBase


class Message(SQLModel):
    """Body of acknowledgement responses (deletes, dismissals, registration)."""
    message: str


# Auth & profile

class UserCreate(SQLModel):
    """Schema for registration requests.

    Fields are optional here so that missing values reach the auth service and
    come back as a 400 with a readable message.
    """
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(SQLModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ProfileRead(SQLModel):
    id: int
    email: str
    display_name: Optional[str] = None
    created_at: datetime


class ProfileUpdate(SQLModel):
    display_name: Optional[str] = None


class PasswordChange(SQLModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class AccountDelete(SQLModel):
    password: Optional[str] = None


# Todos

class TodoCreate(SQLModel):
    """Schema for todo creation requests."""
    text: Optional[str] = None
    due_date: Optional[date] = None
    priority: Optional[str] = None
    category: Optional[str] = None


class TodoUpdate(SQLModel):
    """Schema for todo update requests. Unset fields keep their value."""
    text: Optional[str] = None
    due_date: Optional[date] = None
    completed: Optional[bool] = None
    priority: Optional[str] = None
    category: Optional[str] = None


class TodoRead(TodoBase):
    id: int
    owner_id: int
    created_at: datetime


# Categories & tags

class NameIn(SQLModel):
    """Request body shared by category and tag create/update."""
    name: Optional[str] = None


class CategoryRead(SQLModel):
    id: int
    name: str
    created_at: datetime


class TagRead(SQLModel):
    id: int
    name: str
    created_at: datetime


# Comments

class CommentIn(SQLModel):
    text: Optional[str] = None


class CommentRead(SQLModel):
    id: int
    todo_id: int
    owner_id: int
    text: str
    created_at: datetime


# Reminders

class ReminderCreate(SQLModel):
    title: Optional[str] = None
    remind_at: Optional[datetime] = None
    todo_id: Optional[int] = None


class ReminderUpdate(SQLModel):
    title: Optional[str] = None
    remind_at: Optional[datetime] = None
    todo_id: Optional[int] = None


class ReminderRead(SQLModel):
    id: int
    owner_id: int
    todo_id: Optional[int] = None
    title: str
    remind_at: datetime
    dismissed: bool
    created_at: datetime
    todo_text: Optional[str] = None

    @classmethod
    def from_reminder(cls, reminder: Reminder) -> "ReminderRead":
        """Build the response, annotated with the linked todo's text."""
        return cls(
            **reminder.model_dump(),
            todo_text=reminder.todo.text if reminder.todo is not None else None,
        )


# Dashboard

class PriorityCount(SQLModel):
    priority: str
    count: int


class CategoryCount(SQLModel):
    category: str
    count: int


class DashboardRead(SQLModel):
    total: int
    completed: int
    pending: int
    overdue: int
    due_today: int
    completion_rate: int
    by_priority: List[PriorityCount] = []
    by_category: List[CategoryCount] = []
    recent: List[TodoRead] = []
