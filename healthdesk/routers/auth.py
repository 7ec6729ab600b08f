"""
Authentication endpoints for login and registration.
Creates JWT tokens for authenticated users.
"""
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status

from healthdesk.dependencies import ACCESS_TOKEN_EXPIRE_MINUTES, create_access_token, get_current_user
from healthdesk.models.user import CreateUser, Login, Profile, Token
from healthdesk.services.user_service import (
    InvalidCredentialsError,
    UserAlreadyExistsError,
    UserNotFoundError,
    UserService,
    get_user_service,
)

auth_router = APIRouter(prefix="/auth", tags=["auth"])


def issue_token(user_id: str, email: str) -> Token:
    access_token = create_access_token(
        data={"sub": user_id, "email": email},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return Token(
        access_token=access_token,
        token_type="Bearer",
        expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60
    )


@auth_router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: CreateUser,
    user_service: UserService = Depends(get_user_service)
):
    """
    Register a new user and return a JWT token.

    Passwords are hashed using bcrypt before storage.
    """
    try:
        profile = await user_service.create_user(user_data)
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return issue_token(profile.id, profile.email)


@auth_router.post("/login", response_model=Token)
async def login(
    credentials: Login,
    user_service: UserService = Depends(get_user_service)
):
    """Login with email and password, returns a JWT token."""
    try:
        user = await user_service.verify_user_credentials(credentials.email, credentials.password)
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return issue_token(user["id"], user["email"])


@auth_router.get("/me", response_model=Profile)
async def get_current_user_info(
    current_user: dict = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """Profile of the authenticated user."""
    try:
        return await user_service.get_profile(current_user["user_id"])
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
