import uuid
from datetime import datetime, timezone
from typing import List

import bcrypt
from fastapi import Depends
from google.cloud.firestore import Client
from google.cloud.firestore_v1.base_query import FieldFilter
from starlette.concurrency import run_in_threadpool

from healthdesk.database import get_db
from healthdesk.models.user import CreateUser, Profile
from healthdesk.services.health_service import snapshot_to_dict


class UserNotFoundError(Exception):
    pass


class UserAlreadyExistsError(Exception):
    pass


class InvalidCredentialsError(Exception):
    pass


def _to_profile(data: dict) -> Profile:
    return Profile(
        id=data["id"],
        full_name=data.get("full_name", ""),
        email=data["email"],
        saved_diseases=data.get("saved_diseases") or [],
        created_at=data["created_at"],
        updated_at=data.get("updated_at"),
    )


class UserService:
    """Profiles, credentials and per-user preferences."""

    COLLECTION_NAME = "profiles"

    def __init__(self, db: Client):
        self.db = db
        self.collection = self.db.collection(self.COLLECTION_NAME)

    async def create_user(self, user_data: CreateUser) -> Profile:
        """Create a profile with a bcrypt password hash."""
        existing = await self.get_user_by_email(user_data.email)
        if existing:
            raise UserAlreadyExistsError(f"Email {user_data.email} already registered")

        user_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc)
        password_hash = bcrypt.hashpw(user_data.password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

        user_doc = {
            "full_name": user_data.full_name,
            "email": user_data.email,
            "password_hash": password_hash,
            "saved_diseases": [],
            "created_at": now,
        }
        await run_in_threadpool(self.collection.document(user_id).set, user_doc)

        return _to_profile({**user_doc, "id": user_id})

    async def get_user_by_email(self, email: str) -> dict | None:
        query = self.collection.where(filter=FieldFilter("email", "==", email)).limit(1).stream()
        docs = await run_in_threadpool(list, query)
        if not docs:
            return None
        return snapshot_to_dict(docs[0])

    async def verify_user_credentials(self, email: str, password: str) -> dict:
        """Return the stored user when the password matches its hash."""
        user = await self.get_user_by_email(email)
        if not user or not user.get("password_hash"):
            raise InvalidCredentialsError("Invalid email or password")

        if not bcrypt.checkpw(password.encode('utf-8'), user["password_hash"].encode('utf-8')):
            raise InvalidCredentialsError("Invalid email or password")
        return user

    async def get_user_by_id(self, user_id: str) -> dict | None:
        doc = await run_in_threadpool(self.collection.document(user_id).get)
        if not doc.exists:
            return None
        return snapshot_to_dict(doc)

    async def get_profile(self, user_id: str) -> Profile:
        user = await self.get_user_by_id(user_id)
        if not user:
            raise UserNotFoundError(f"User {user_id} not found")
        return _to_profile(user)

    async def get_saved_diseases(self, user_id: str) -> List[str]:
        profile = await self.get_profile(user_id)
        return profile.saved_diseases

    async def set_saved_diseases(self, user_id: str, diseases: List[str]) -> List[str]:
        """Replace the saved disease list, dropping blanks and duplicates in order."""
        await self.get_profile(user_id)

        cleaned = list(dict.fromkeys(d.strip() for d in diseases if d and d.strip()))
        await run_in_threadpool(
            self.collection.document(user_id).update,
            {"saved_diseases": cleaned, "updated_at": datetime.now(timezone.utc)},
        )
        return cleaned


def get_user_service(db: Client = Depends(get_db)) -> UserService:
    return UserService(db)
