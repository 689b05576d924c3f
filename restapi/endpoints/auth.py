"""Authentication endpoints for user login and registration."""

from typing import Any
from fastapi import APIRouter, Depends, HTTPException, Query, WebSocketException, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.database import DatabaseManager
from components.core.init_db import get_db, get_db_manager
from components.core.security import create_access_token, verify_token
from components.user.models import User
from components.user.repository import UserRepository
from components.user.schemas import UserCreate, User as UserSchema, UserWithToken

router = APIRouter(prefix="/auth", tags=["authentication"])
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


async def _user_from_token(db: AsyncSession, token: str):
    payload = verify_token(token)
    if payload is None or payload.get("sub") is None:
        return None
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        return None
    return await UserRepository(db).get_by_id(user_id)


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token: str = Depends(oauth2_scheme)
) -> User:
    """Get current user from JWT token."""
    user = await _user_from_token(db, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_websocket_user(
    token: str = Query(...),
    db_manager: DatabaseManager = Depends(get_db_manager),
) -> User:
    """
    Get current user from the ``token`` query parameter of a websocket.

    The lookup uses its own short session, so an open socket holds no
    pooled connection.
    """
    async with db_manager.get_db() as db:
        user = await _user_from_token(db, token)
    if user is None:
        raise WebSocketException(code=status.WS_1008_POLICY_VIOLATION, reason="Invalid token")
    return user


def _with_token(user: User) -> UserWithToken:
    access_token = create_access_token(data={"sub": str(user.id)})
    return UserWithToken(
        **UserSchema.model_validate(user).model_dump(),
        access_token=access_token,
    )


@router.post("/register", response_model=UserWithToken)
async def create_user(
    user_in: UserCreate,
    db: AsyncSession = Depends(get_db)
) -> Any:
    """Create new user and return JWT token."""
    repo = UserRepository(db)
    if await repo.exists(user_in.login):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Login already registered",
        )
    user = await repo.create(user_in)
    return _with_token(user)


@router.post("/login", response_model=UserWithToken)
async def login(
    db: AsyncSession = Depends(get_db),
    form_data: OAuth2PasswordRequestForm = Depends()
) -> Any:
    """Login user and return JWT token."""
    user = await UserRepository(db).authenticate(form_data.username, form_data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect login or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _with_token(user)


@router.get("/me", response_model=UserSchema)
async def read_current_user(current_user: User = Depends(get_current_user)) -> Any:
    """Get the authenticated user."""
    return current_user
