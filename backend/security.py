import os
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
from sqlmodel import Session

from logger import logger
from . import errors
from .database import get_session
from .models import User

load_dotenv()

# Configuration loaded from environment variables with fallback to a generated key
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    SECRET_KEY = secrets.token_hex(32)
    logger.warning("No SECRET_KEY found in environment. Using a generated key; "
                   "tokens will not survive a restart. Set SECRET_KEY in your .env file.")

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7))
BCRYPT_ROUNDS = max(10, int(os.getenv("BCRYPT_ROUNDS", 12)))

MISSING_TOKEN = "You must be logged in."
INVALID_TOKEN = "Token is invalid or expired. Please log in again."

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)
bearer_scheme = HTTPBearer(auto_error=False)


class Token(BaseModel):
    token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    """Identity claim carried by a verified token."""
    user_id: int
    email: str


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def create_user_token(user_id: int, email: str, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a token embedding the identity claim ``{user_id, email}``."""
    return create_access_token({"sub": str(user_id), "email": email}, expires_delta)


def decode_access_token(token: str) -> TokenData:
    """Verify signature and expiry and return the identity claim."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        sub = payload.get("sub")
        email = payload.get("email")
        if sub is None or email is None:
            raise errors.Unauthenticated(INVALID_TOKEN)
        return TokenData(user_id=int(sub), email=email)
    except (JWTError, ValueError):
        raise errors.Unauthenticated(INVALID_TOKEN)


async def get_current_user(
        session: Session = Depends(get_session),
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> TokenData:
    """Access guard: resolve the bearer token to an identity or reject the request.

    The account named by the token must still exist under the same email, so a
    token issued before an account was deleted never resolves to anyone.
    """
    if credentials is None or not credentials.credentials:
        raise errors.Unauthenticated(MISSING_TOKEN)
    token_data = decode_access_token(credentials.credentials)

    user = session.get(User, token_data.user_id)
    if user is None or user.email != token_data.email:
        raise errors.Unauthenticated(INVALID_TOKEN)
    return token_data
