from typing import Annotated, List

from fastapi import APIRouter, Body, Depends, Path, status
from sqlmodel import Session

from ..database import get_session
from ..repository import CategoryRepository
from ..schemas import CategoryRead, Message, NameIn
from ..security import TokenData, get_current_user

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=List[CategoryRead], summary="List categories")
async def list_categories(
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> List[CategoryRead]:
    return CategoryRepository(session).list_for_owner(current_user.user_id)


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED,
             summary="Create category")
async def create_category(
        category: Annotated[NameIn, Body(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> CategoryRead:
    """
    Add a category name. Names are unique per user.
    """
    return CategoryRepository(session).create(current_user.user_id, category)


@router.put("/{category_id}", response_model=CategoryRead, summary="Rename category")
async def update_category(
        category_id: Annotated[int, Path(...)],
        category: Annotated[NameIn, Body(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> CategoryRead:
    return CategoryRepository(session).update(current_user.user_id, category_id, category)


@router.delete("/{category_id}", response_model=Message, summary="Delete category")
async def delete_category(
        category_id: Annotated[int, Path(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> Message:
    """
    Delete a category. Todos that use its name keep their category string.
    """
    CategoryRepository(session).delete(current_user.user_id, category_id)
    return Message(message="Category deleted.")
