from typing import Annotated

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..dashboard import summarize
from ..database import get_session
from ..repository import TodoRepository
from ..schemas import DashboardRead
from ..security import TokenData, get_current_user

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardRead, summary="Dashboard statistics")
async def get_dashboard(
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> DashboardRead:
    """
    Aggregate counts, breakdowns and recent items over the current user's todos.
    """
    todos = TodoRepository(session).list_for_owner(current_user.user_id)
    return summarize(todos)
