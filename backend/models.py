from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, Relationship, SQLModel

PRIORITIES = ("low", "medium", "high")
DEFAULT_PRIORITY = "medium"
DEFAULT_CATEGORY = "General"


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime, the form every timestamp is kept in."""
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Convert to aware UTC; naive values are assumed to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC column.

    SQLite drops the offset on the way in, so values are normalized to UTC
    before binding and tagged as UTC again when loaded.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        return to_utc(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        return to_utc(value)


class User(SQLModel, table=True):
    """Registered account. Owns every other row in the database."""
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    hashed_password: str = Field()
    display_name: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def verify_password(self, password: str) -> bool:
        """Verify password against the stored hash."""
        # Import here to avoid circular imports
        from .security import verify_password
        return verify_password(password, self.hashed_password)


class TagLink(SQLModel, table=True):
    """Many-to-many link between a tag and a todo."""
    tag_id: int = Field(foreign_key="tag.id", primary_key=True)
    todo_id: int = Field(foreign_key="todo.id", primary_key=True)


class TodoBase(SQLModel):
    text: str
    completed: bool = Field(default=False)
    due_date: Optional[date] = Field(default=None)
    priority: str = Field(default=DEFAULT_PRIORITY)
    category: str = Field(default=DEFAULT_CATEGORY)


class Todo(TodoBase, table=True):
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)


class Category(SQLModel, table=True):
    """User-managed category name. Not a constraint on ``Todo.category``."""
    __table_args__ = (UniqueConstraint("owner_id", "name"), {"sqlite_autoincrement": True})

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="user.id", index=True)
    name: str
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)


class Tag(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("owner_id", "name"), {"sqlite_autoincrement": True})

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="user.id", index=True)
    name: str
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)


class Comment(SQLModel, table=True):
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    todo_id: int = Field(foreign_key="todo.id", index=True)
    owner_id: int = Field(foreign_key="user.id", index=True)
    text: str
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)


class Reminder(SQLModel, table=True):
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="user.id", index=True)
    todo_id: Optional[int] = Field(default=None, foreign_key="todo.id")
    title: str
    remind_at: datetime = Field(index=True, sa_type=UTCDateTime)
    dismissed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    todo: Optional[Todo] = Relationship()

    def is_due(self, now: Optional[datetime] = None) -> bool:
        """A reminder is due once its time has passed, until it is dismissed.

        This is the only definition of "due"; it is never stored.
        """
        if now is None:
            now = utc_now()
        return not self.dismissed and to_utc(self.remind_at) <= to_utc(now)
