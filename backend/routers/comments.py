from typing import Annotated, List

from fastapi import APIRouter, Body, Depends, Path, status
from sqlmodel import Session

from ..database import get_session
from ..repository import CommentRepository
from ..schemas import CommentIn, CommentRead, Message
from ..security import TokenData, get_current_user

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.get("/todo/{todo_id}", response_model=List[CommentRead], summary="List comments of a todo")
async def list_comments(
        todo_id: Annotated[int, Path(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> List[CommentRead]:
    """
    Get the comments on one of the current user's todos, newest first.
    """
    return CommentRepository(session).list_for_todo(current_user.user_id, todo_id)


@router.post("/todo/{todo_id}", response_model=CommentRead, status_code=status.HTTP_201_CREATED,
             summary="Comment on a todo")
async def create_comment(
        todo_id: Annotated[int, Path(...)],
        comment: Annotated[CommentIn, Body(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> CommentRead:
    return CommentRepository(session).create_for_todo(current_user.user_id, todo_id, comment)


@router.put("/{comment_id}", response_model=CommentRead, summary="Edit comment")
async def update_comment(
        comment_id: Annotated[int, Path(...)],
        comment: Annotated[CommentIn, Body(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> CommentRead:
    return CommentRepository(session).update(current_user.user_id, comment_id, comment)


@router.delete("/{comment_id}", response_model=Message, summary="Delete comment")
async def delete_comment(
        comment_id: Annotated[int, Path(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> Message:
    CommentRepository(session).delete(current_user.user_id, comment_id)
    return Message(message="Comment deleted.")
