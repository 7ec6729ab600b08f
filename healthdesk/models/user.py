from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    """Base profile model with common fields."""
    full_name: str = Field(..., min_length=2, max_length=100, description="User full name")
    email: EmailStr = Field(..., description="User email address")


class CreateUser(UserBase):
    """Model for registering a new user."""
    password: str = Field(..., min_length=8, max_length=100, description="User password")

    model_config = {
        "json_schema_extra": {
            "example": {
                "full_name": "Jane Doe",
                "email": "jane.doe@example.com",
                "password": "SecurePassword123!"
            }
        }
    }


class Login(BaseModel):
    """Login request model (users and admins)."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


class Profile(UserBase):
    """Profile returned to clients (password hash never leaves the service)."""
    id: str = Field(..., description="User unique identifier")
    saved_diseases: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None


class SavedDiseases(BaseModel):
    """Diseases a user bookmarked on the disease management page."""
    diseases: List[str] = Field(default_factory=list, max_length=200)


class Token(BaseModel):
    """JWT token response model."""
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="Bearer", description="Token type")
    expires_in: Optional[int] = Field(default=0, description="Token expiration time in seconds")


class AdminUser(BaseModel):
    user_id: str
    created_at: Optional[datetime] = None


class AdminUserCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
