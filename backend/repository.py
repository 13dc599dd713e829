from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, cast

from sqlalchemy import delete, or_, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.sql.selectable import Select
from sqlmodel import Session, SQLModel, col, select

from . import errors
from .models import (
    DEFAULT_CATEGORY, DEFAULT_PRIORITY, PRIORITIES,
    Category, Comment, Reminder, Tag, TagLink, Todo, User,
    to_utc,
)

# Generic type variable
T = TypeVar('T', bound=SQLModel)


def _required_text(value: Optional[str], message: str) -> str:
    """Trim ``value`` and reject it when nothing is left."""
    if value is None or not value.strip():
        raise errors.ValidationError(message)
    return value.strip()


class BaseRepository(Generic[T]):
    """Generic base repository for CRUD operations."""

    def __init__(self, session: Session, model_class: Type[T]):
        self.session = session
        self.model_class = model_class

    def get(self, id: int) -> Optional[T]:
        """Get an item by ID."""
        return self.session.get(self.model_class, id)

    def _save(self, db_obj: T) -> T:
        """Add, commit and refresh ``db_obj``, rolling back on failure."""
        try:
            self.session.add(db_obj)
            self.session.commit()
            self.session.refresh(db_obj)
            return db_obj
        except SQLAlchemyError:
            self.session.rollback()
            raise


class OwnedRepository(BaseRepository[T]):
    """Repository for rows partitioned by owning user.

    Every lookup goes through ``_owned``, so a row belonging to someone else is
    indistinguishable from a missing one. Subclasses customise validation,
    ordering and dependent-row cleanup through the underscore hooks.
    """

    not_found_message = "Not found."

    def _owned(self, owner_id: int) -> Select:
        return cast(Select, select(self.model_class).where(self.model_class.owner_id == owner_id))

    def _ordering(self) -> tuple:
        return (self.model_class.id,)

    def _prepare_create(self, owner_id: int, values: Dict[str, Any]) -> Dict[str, Any]:
        return values

    def _prepare_update(self, db_obj: T, values: Dict[str, Any]) -> Dict[str, Any]:
        return values

    def _delete_dependents(self, db_obj: T) -> None:
        pass

    def list_for_owner(self, owner_id: int) -> List[T]:
        """All rows owned by ``owner_id`` in resource-specific order."""
        query = self._owned(owner_id).order_by(*self._ordering())
        return cast(List[T], self.session.exec(query).all())

    def get_owned(self, id: int, owner_id: int) -> Optional[T]:
        query = self._owned(owner_id).where(self.model_class.id == id)
        return self.session.exec(query).first()

    def get_owned_or_404(self, id: int, owner_id: int) -> T:
        db_obj = self.get_owned(id, owner_id)
        if db_obj is None:
            raise errors.NotFound(self.not_found_message)
        return db_obj

    def create(self, owner_id: int, data: SQLModel) -> T:
        """Validate ``data`` and insert a new row owned by ``owner_id``."""
        values = self._prepare_create(owner_id, data.model_dump(exclude_unset=True))
        db_obj = self.model_class(**values, owner_id=owner_id)
        return self._save(db_obj)

    def update(self, owner_id: int, id: int, data: SQLModel) -> T:
        """Apply the fields set in ``data``; everything else keeps its value."""
        db_obj = self.get_owned_or_404(id, owner_id)
        values = self._prepare_update(db_obj, data.model_dump(exclude_unset=True))
        for key, value in values.items():
            setattr(db_obj, key, value)
        return self._save(db_obj)

    def delete(self, owner_id: int, id: int) -> T:
        db_obj = self.get_owned_or_404(id, owner_id)
        try:
            self._delete_dependents(db_obj)
            self.session.delete(db_obj)
            self.session.commit()
            return db_obj
        except SQLAlchemyError:
            self.session.rollback()
            raise


class TodoRepository(OwnedRepository[Todo]):
    """Repository for Todo entity."""

    not_found_message = "Todo not found."

    def __init__(self, session: Session):
        super().__init__(session, Todo)

    def _ordering(self) -> tuple:
        return (col(Todo.created_at).desc(), col(Todo.id).desc())

    def _prepare_create(self, owner_id: int, values: Dict[str, Any]) -> Dict[str, Any]:
        priority = values.get("priority")
        category = values.get("category")
        return {
            "text": _required_text(values.get("text"), "Todo text is required."),
            "due_date": values.get("due_date"),
            "priority": priority if priority in PRIORITIES else DEFAULT_PRIORITY,
            "category": category.strip() if category and category.strip() else DEFAULT_CATEGORY,
        }

    def _prepare_update(self, db_obj: Todo, values: Dict[str, Any]) -> Dict[str, Any]:
        if "text" in values:
            values["text"] = _required_text(values["text"], "Todo text is required.")
        if values.get("completed") is None:
            values.pop("completed", None)
        if values.get("priority") not in PRIORITIES:
            values.pop("priority", None)
        category = values.pop("category", None)
        if category and category.strip():
            values["category"] = category.strip()
        return values

    def _delete_dependents(self, db_obj: Todo) -> None:
        # Reminders belong to the user, so they outlive the todo and are unlinked
        self.session.execute(delete(TagLink).where(col(TagLink.todo_id) == db_obj.id))
        self.session.execute(delete(Comment).where(col(Comment.todo_id) == db_obj.id))
        self.session.execute(
            update(Reminder).where(col(Reminder.todo_id) == db_obj.id).values(todo_id=None)
        )


class NamedRepository(OwnedRepository[T]):
    """Owned rows whose ``name`` is unique per owner (categories and tags)."""

    label = "item"

    def _ordering(self) -> tuple:
        return (col(self.model_class.name).asc(), col(self.model_class.id).asc())

    def _duplicate(self) -> errors.Conflict:
        return errors.Conflict(f"A {self.label} with that name already exists.")

    def _ensure_unique(self, owner_id: int, name: str, exclude_id: Optional[int] = None) -> None:
        query = self._owned(owner_id).where(self.model_class.name == name)
        existing = self.session.exec(query).first()
        if existing is not None and existing.id != exclude_id:
            raise self._duplicate()

    def _prepare_create(self, owner_id: int, values: Dict[str, Any]) -> Dict[str, Any]:
        name = _required_text(values.get("name"), f"{self.label.capitalize()} name is required.")
        self._ensure_unique(owner_id, name)
        return {"name": name}

    def _prepare_update(self, db_obj: T, values: Dict[str, Any]) -> Dict[str, Any]:
        name = _required_text(values.get("name"), f"{self.label.capitalize()} name is required.")
        self._ensure_unique(db_obj.owner_id, name, exclude_id=db_obj.id)
        return {"name": name}

    def _save(self, db_obj: T) -> T:
        try:
            return super()._save(db_obj)
        except IntegrityError:
            # Lost a race against a concurrent insert of the same name
            raise self._duplicate()


class CategoryRepository(NamedRepository[Category]):
    """Repository for Category entity."""

    not_found_message = "Category not found."
    label = "category"

    def __init__(self, session: Session):
        super().__init__(session, Category)


class TagRepository(NamedRepository[Tag]):
    """Repository for Tag entity and its links to todos."""

    not_found_message = "Tag not found."
    label = "tag"

    def __init__(self, session: Session):
        super().__init__(session, Tag)

    def _delete_dependents(self, db_obj: Tag) -> None:
        self.session.execute(delete(TagLink).where(col(TagLink.tag_id) == db_obj.id))

    def _get_link(self, tag_id: int, todo_id: int) -> Optional[TagLink]:
        return self.session.get(TagLink, (tag_id, todo_id))

    def attach(self, owner_id: int, tag_id: int, todo_id: int) -> TagLink:
        """Link an owned tag to an owned todo."""
        self.get_owned_or_404(tag_id, owner_id)
        TodoRepository(self.session).get_owned_or_404(todo_id, owner_id)
        if self._get_link(tag_id, todo_id) is not None:
            raise errors.Conflict("Tag is already attached to this todo.")
        try:
            link = TagLink(tag_id=tag_id, todo_id=todo_id)
            self.session.add(link)
            self.session.commit()
            return link
        except IntegrityError:
            self.session.rollback()
            raise errors.Conflict("Tag is already attached to this todo.")
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def detach(self, owner_id: int, tag_id: int, todo_id: int) -> None:
        link = self._get_link(tag_id, todo_id)
        if link is None or self.get_owned(tag_id, owner_id) is None:
            raise errors.NotFound("Tag is not attached to this todo.")
        try:
            self.session.delete(link)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def tags_for_todo(self, owner_id: int, todo_id: int) -> List[Tag]:
        TodoRepository(self.session).get_owned_or_404(todo_id, owner_id)
        query = (self._owned(owner_id)
                 .join(TagLink, col(TagLink.tag_id) == col(Tag.id))
                 .where(TagLink.todo_id == todo_id)
                 .order_by(*self._ordering()))
        return cast(List[Tag], self.session.exec(query).all())


class CommentRepository(OwnedRepository[Comment]):
    """Repository for comments; ownership follows the parent todo."""

    not_found_message = "Comment not found."

    def __init__(self, session: Session):
        super().__init__(session, Comment)

    def _owned(self, owner_id: int) -> Select:
        return cast(Select, select(Comment)
                    .join(Todo, col(Comment.todo_id) == col(Todo.id))
                    .where(Todo.owner_id == owner_id))

    def _ordering(self) -> tuple:
        return (col(Comment.created_at).desc(), col(Comment.id).desc())

    def _prepare_update(self, db_obj: Comment, values: Dict[str, Any]) -> Dict[str, Any]:
        return {"text": _required_text(values.get("text"), "Comment text is required.")}

    def list_for_todo(self, owner_id: int, todo_id: int) -> List[Comment]:
        TodoRepository(self.session).get_owned_or_404(todo_id, owner_id)
        query = self._owned(owner_id).where(Comment.todo_id == todo_id).order_by(*self._ordering())
        return cast(List[Comment], self.session.exec(query).all())

    def create_for_todo(self, owner_id: int, todo_id: int, data: SQLModel) -> Comment:
        TodoRepository(self.session).get_owned_or_404(todo_id, owner_id)
        text = _required_text(data.model_dump().get("text"), "Comment text is required.")
        return self._save(Comment(todo_id=todo_id, owner_id=owner_id, text=text))


class ReminderRepository(OwnedRepository[Reminder]):
    """Repository for reminders, including the due-check and dismissal."""

    not_found_message = "Reminder not found."

    def __init__(self, session: Session):
        super().__init__(session, Reminder)

    def _ordering(self) -> tuple:
        return (col(Reminder.remind_at).asc(), col(Reminder.id).asc())

    def _check_todo(self, owner_id: int, todo_id: Optional[int]) -> None:
        if todo_id is not None:
            TodoRepository(self.session).get_owned_or_404(todo_id, owner_id)

    def _prepare_create(self, owner_id: int, values: Dict[str, Any]) -> Dict[str, Any]:
        title = _required_text(values.get("title"), "Reminder title is required.")
        remind_at = values.get("remind_at")
        if remind_at is None:
            raise errors.ValidationError("Reminder date/time is required.")
        self._check_todo(owner_id, values.get("todo_id"))
        return {
            "title": title,
            "remind_at": to_utc(remind_at),
            "todo_id": values.get("todo_id"),
            "dismissed": False,
        }

    def _prepare_update(self, db_obj: Reminder, values: Dict[str, Any]) -> Dict[str, Any]:
        changes: Dict[str, Any] = {"dismissed": False}
        if values.get("title") is not None:
            changes["title"] = _required_text(values["title"], "Reminder title is required.")
        if values.get("remind_at") is not None:
            changes["remind_at"] = to_utc(values["remind_at"])
        if "todo_id" in values:
            self._check_todo(db_obj.owner_id, values["todo_id"])
            changes["todo_id"] = values["todo_id"]
        return changes

    def get_due(self, owner_id: int, now: Optional[datetime] = None) -> List[Reminder]:
        """Undismissed reminders whose time has come, earliest first. Read-only."""
        return [reminder for reminder in self.list_for_owner(owner_id) if reminder.is_due(now)]

    def dismiss(self, owner_id: int, id: int) -> Reminder:
        """Mark a reminder as acknowledged. Dismissing twice is harmless."""
        reminder = self.get_owned_or_404(id, owner_id)
        reminder.dismissed = True
        return self._save(reminder)


class UserRepository(BaseRepository[User]):
    """Repository for User entity."""

    def __init__(self, session: Session):
        super().__init__(session, User)

    def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email (exact, case-sensitive match)."""
        query = cast(Select, select(User).where(User.email == email))
        return self.session.exec(query).first()

    def create(self, email: str, hashed_password: str) -> User:
        try:
            return self._save(User(email=email, hashed_password=hashed_password))
        except IntegrityError:
            raise errors.Conflict("An account with this email already exists.")

    def update_display_name(self, user: User, display_name: str) -> User:
        user.display_name = display_name
        return self._save(user)

    def set_password_hash(self, user: User, hashed_password: str) -> User:
        user.hashed_password = hashed_password
        return self._save(user)

    def delete_with_owned_data(self, user: User) -> None:
        """Remove the user and everything they own in a single transaction.

        Children go before parents: tag links, comments, reminders, tags,
        categories, todos, then the user row.
        """
        uid = user.id
        todo_ids = select(Todo.id).where(Todo.owner_id == uid)
        tag_ids = select(Tag.id).where(Tag.owner_id == uid)
        statements = [
            delete(TagLink).where(or_(col(TagLink.todo_id).in_(todo_ids),
                                      col(TagLink.tag_id).in_(tag_ids))),
            delete(Comment).where(or_(col(Comment.owner_id) == uid,
                                      col(Comment.todo_id).in_(todo_ids))),
            delete(Reminder).where(col(Reminder.owner_id) == uid),
            delete(Tag).where(col(Tag.owner_id) == uid),
            delete(Category).where(col(Category.owner_id) == uid),
            delete(Todo).where(col(Todo.owner_id) == uid),
            delete(User).where(col(User.id) == uid),
        ]
        try:
            for statement in statements:
                self.session.execute(statement, execution_options={"synchronize_session": False})
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
