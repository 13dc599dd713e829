from typing import Annotated, List

from fastapi import APIRouter, Body, Depends, Path, status
from sqlmodel import Session

from logger import logger
from ..database import get_session
from ..repository import ReminderRepository
from ..schemas import Message, ReminderCreate, ReminderRead, ReminderUpdate
from ..security import TokenData, get_current_user

# Reminders without a linked todo are rendered without todo_id/todo_text
router = APIRouter(prefix="/api/reminders", tags=["reminders"])


@router.get("", response_model=List[ReminderRead], response_model_exclude_none=True,
            summary="List reminders")
async def list_reminders(
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> List[ReminderRead]:
    """
    Get all reminders of the current user, earliest first, dismissed ones included.
    """
    reminders = ReminderRepository(session).list_for_owner(current_user.user_id)
    return [ReminderRead.from_reminder(reminder) for reminder in reminders]


@router.get("/due", response_model=List[ReminderRead], response_model_exclude_none=True,
            summary="List due reminders")
async def due_reminders(
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> List[ReminderRead]:
    """
    Get reminders whose time has passed and that have not been dismissed.

    This does not mark anything as delivered: the client dismisses each
    reminder after showing it, so a reminder that was fetched but never
    dismissed is returned again on the next poll.
    """
    due = ReminderRepository(session).get_due(current_user.user_id)
    if due:
        logger.info(f"{len(due)} due reminder(s) for user {current_user.user_id}")
    return [ReminderRead.from_reminder(reminder) for reminder in due]


@router.post("", response_model=ReminderRead, response_model_exclude_none=True,
             status_code=status.HTTP_201_CREATED, summary="Create reminder")
async def create_reminder(
        reminder: Annotated[ReminderCreate, Body(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> ReminderRead:
    db_reminder = ReminderRepository(session).create(current_user.user_id, reminder)
    return ReminderRead.from_reminder(db_reminder)


@router.put("/{reminder_id}", response_model=ReminderRead, response_model_exclude_none=True,
            summary="Reschedule reminder")
async def update_reminder(
        reminder_id: Annotated[int, Path(...)],
        reminder: Annotated[ReminderUpdate, Body(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> ReminderRead:
    """
    Update a reminder. Any update makes the reminder active again.
    """
    db_reminder = ReminderRepository(session).update(current_user.user_id, reminder_id, reminder)
    return ReminderRead.from_reminder(db_reminder)


@router.put("/{reminder_id}/dismiss", response_model=Message, summary="Dismiss reminder")
async def dismiss_reminder(
        reminder_id: Annotated[int, Path(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> Message:
    ReminderRepository(session).dismiss(current_user.user_id, reminder_id)
    logger.info(f"User {current_user.user_id} dismissed reminder {reminder_id}")
    return Message(message="Reminder dismissed.")


@router.delete("/{reminder_id}", response_model=Message, summary="Delete reminder")
async def delete_reminder(
        reminder_id: Annotated[int, Path(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> Message:
    ReminderRepository(session).delete(current_user.user_id, reminder_id)
    return Message(message="Reminder deleted.")
