from typing import Annotated

from fastapi import APIRouter, Body, Depends, status
from sqlmodel import Session

from ..auth import AuthService
from ..database import get_session
from ..schemas import LoginRequest, Message, UserCreate
from ..security import Token

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=Message, status_code=status.HTTP_201_CREATED,
             summary="Create new account")
async def register(
        user: Annotated[UserCreate, Body(...)],
        session: Annotated[Session, Depends(get_session)]
) -> Message:
    """
    Register a new account. No token is issued; log in afterwards.
    """
    AuthService(session).register(user.email, user.password)
    return Message(message="Account created successfully!")


@router.post("/login", response_model=Token, summary="Create access token")
async def login(
        credentials: Annotated[LoginRequest, Body(...)],
        session: Annotated[Session, Depends(get_session)]
) -> Token:
    """
    Exchange email and password for a bearer token.
    """
    token = AuthService(session).login(credentials.email, credentials.password)
    return Token(token=token)
