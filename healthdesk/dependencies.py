import logging
import os
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from google.cloud.firestore import Client
from jose import JWTError, jwt
from starlette.concurrency import run_in_threadpool

from healthdesk.database import get_db

logger = logging.getLogger(__name__)

security = HTTPBearer()

SECRET_KEY = os.getenv("JWT_SECRET", "healthdesk-dev-secret-change-me")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 30

ADMIN_COLLECTION = "admin_users"


async def auth_middleware(request: Request, call_next):
    """Extract user_id from the bearer token into request.state for rate limiting."""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        try:
            token = auth_header.split(" ")[1]
            payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
            user_id = payload.get("sub")
            if user_id:
                request.state.user_id = user_id
        except JWTError:
            # Rejected later by get_current_user on protected routes.
            pass

    return await call_next(request)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str) -> dict:
    """Verify and decode JWT token."""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> dict:
    """Get current authenticated user from JWT token."""
    payload = verify_token(credentials.credentials)

    user_id: str | None = payload.get("sub")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )

    request.state.user_id = user_id
    return {"user_id": user_id, "email": payload.get("email")}


async def verify_user_access(
    user_id: str,
    current_user: dict = Depends(get_current_user)
) -> str:
    """Verify that authenticated user matches the requested user_id."""
    if current_user.get("user_id") != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access your own data"
        )
    return user_id


def is_admin(db: Client, user_id: str) -> bool:
    """Admin membership is a document in admin_users keyed by user id."""
    return db.collection(ADMIN_COLLECTION).document(user_id).get().exists


async def require_admin(
    current_user: dict = Depends(get_current_user),
    db: Client = Depends(get_db)
) -> dict:
    """Allow the request only for users listed in admin_users."""
    if not await run_in_threadpool(is_admin, db, current_user["user_id"]):
        logger.warning(f"Admin access denied for user {current_user['user_id']}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required"
        )
    return current_user
