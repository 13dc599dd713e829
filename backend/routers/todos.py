from typing import Annotated, List

from fastapi import APIRouter, Body, Depends, Path, status
from sqlmodel import Session

from logger import logger
from ..database import get_session
from ..repository import TodoRepository
from ..schemas import Message, TodoCreate, TodoRead, TodoUpdate
from ..security import TokenData, get_current_user

router = APIRouter(prefix="/api/todos", tags=["todos"])


@router.get("", response_model=List[TodoRead], summary="List todos")
async def list_todos(
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> List[TodoRead]:
    """
    Get todos for the current user, newest first.
    """
    return TodoRepository(session).list_for_owner(current_user.user_id)


@router.post("", response_model=TodoRead, status_code=status.HTTP_201_CREATED, summary="Create todo")
async def create_todo(
        todo: Annotated[TodoCreate, Body(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> TodoRead:
    """
    Create a new todo. Priority defaults to "medium" and category to "General".
    """
    db_todo = TodoRepository(session).create(current_user.user_id, todo)
    logger.info(f"User {current_user.user_id} created todo {db_todo.id}")
    return db_todo


@router.get("/{todo_id}", response_model=TodoRead, summary="Get todo by ID")
async def read_todo(
        todo_id: Annotated[int, Path(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> TodoRead:
    return TodoRepository(session).get_owned_or_404(todo_id, current_user.user_id)


@router.put("/{todo_id}", response_model=TodoRead, summary="Update todo")
async def update_todo(
        todo_id: Annotated[int, Path(...)],
        todo_update: Annotated[TodoUpdate, Body(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> TodoRead:
    """
    Update a todo owned by the current user. Omitted fields are left unchanged.
    """
    return TodoRepository(session).update(current_user.user_id, todo_id, todo_update)


@router.delete("/{todo_id}", response_model=Message, summary="Delete todo")
async def delete_todo(
        todo_id: Annotated[int, Path(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> Message:
    """
    Delete a todo together with its comments and tag links.
    Reminders pointing at it are kept but unlinked.
    """
    TodoRepository(session).delete(current_user.user_id, todo_id)
    logger.info(f"User {current_user.user_id} deleted todo {todo_id}")
    return Message(message="Todo deleted.")
