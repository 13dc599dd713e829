from typing import Annotated

from fastapi import APIRouter, Body, Depends
from sqlmodel import Session

from ..auth import AuthService
from ..database import get_session
from ..schemas import AccountDelete, Message, PasswordChange, ProfileRead, ProfileUpdate
from ..security import TokenData, get_current_user

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("", response_model=ProfileRead, summary="Get current user")
async def read_profile(
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> ProfileRead:
    return AuthService(session).get_user(current_user.user_id)


@router.put("", response_model=ProfileRead, summary="Update display name")
async def update_profile(
        profile: Annotated[ProfileUpdate, Body(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> ProfileRead:
    return AuthService(session).update_profile(current_user.user_id, profile.display_name)


@router.put("/password", response_model=Message, summary="Change password")
async def change_password(
        passwords: Annotated[PasswordChange, Body(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> Message:
    """
    Replace the password after verifying the current one.
    Tokens issued earlier stay valid until they expire.
    """
    AuthService(session).change_password(
        current_user.user_id, passwords.current_password, passwords.new_password)
    return Message(message="Password updated successfully.")


@router.delete("", response_model=Message, summary="Delete account")
async def delete_account(
        confirmation: Annotated[AccountDelete, Body(...)],
        current_user: Annotated[TokenData, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)]
) -> Message:
    """
    Permanently delete the account and everything it owns.
    """
    AuthService(session).delete_account(current_user.user_id, confirmation.password)
    return Message(message="Account deleted.")
