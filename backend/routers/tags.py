from typing import Annotated, List

from fastapi import APIRouter, Body, Depends, Path, status
from sqlmodel import Session

from logger import logger
from ..database import get_session
from ..repository import TagRepository
from ..schemas import Message, NameIn, TagRead
from ..security import TokenData, get_current_user

router = APIRouter(prefix="/api/tags", tags=["tags"])


@router.get("", response_model=List[TagRead], summary="List tags")
async def list_tags(
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> List[TagRead]:
    return TagRepository(session).list_for_owner(current_user.user_id)


@router.post("", response_model=TagRead, status_code=status.HTTP_201_CREATED, summary="Create tag")
async def create_tag(
        tag: Annotated[NameIn, Body(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> TagRead:
    return TagRepository(session).create(current_user.user_id, tag)


@router.delete("/{tag_id}", response_model=Message, summary="Delete tag")
async def delete_tag(
        tag_id: Annotated[int, Path(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> Message:
    """
    Delete a tag and detach it from every todo.
    """
    TagRepository(session).delete(current_user.user_id, tag_id)
    return Message(message="Tag deleted.")


@router.post("/{tag_id}/todos/{todo_id}", response_model=Message,
             status_code=status.HTTP_201_CREATED, summary="Attach tag to todo")
async def attach_tag(
        tag_id: Annotated[int, Path(...)],
        todo_id: Annotated[int, Path(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> Message:
    TagRepository(session).attach(current_user.user_id, tag_id, todo_id)
    logger.info(f"User {current_user.user_id} tagged todo {todo_id} with tag {tag_id}")
    return Message(message="Tag attached.")


@router.delete("/{tag_id}/todos/{todo_id}", response_model=Message, summary="Detach tag from todo")
async def detach_tag(
        tag_id: Annotated[int, Path(...)],
        todo_id: Annotated[int, Path(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> Message:
    TagRepository(session).detach(current_user.user_id, tag_id, todo_id)
    return Message(message="Tag detached.")


@router.get("/todo/{todo_id}", response_model=List[TagRead], summary="List tags of a todo")
async def tags_for_todo(
        todo_id: Annotated[int, Path(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> List[TagRead]:
    return TagRepository(session).tags_for_todo(current_user.user_id, todo_id)
