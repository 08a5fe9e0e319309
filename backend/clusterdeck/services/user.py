"""User provisioning."""
from typing import List, Optional
import logging

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import SQLAlchemyError

from clusterdeck.errors import ConflictError, StorageError
from clusterdeck.models.user import User
from clusterdeck.repositories.user import UserRepository

logger = logging.getLogger(__name__)


class UserInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email_id: str = Field(alias="emailId")
    roles: List[str] = Field(default_factory=list)
    user_id: Optional[int] = Field(None, exclude=True)


def normalize_email(email_id: str) -> str:
    return email_id.strip().lower()


class UserService:
    """Creates users with their role grants and resolves them by email."""

    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    async def get_by_email(self, email_id: str) -> Optional[User]:
        return await self.user_repository.get_by_email(normalize_email(email_id))

    async def create_user(self, user_info: UserInfo) -> User:
        email_id = normalize_email(user_info.email_id)
        existing = await self.user_repository.get_by_email(email_id)
        if existing is not None:
            raise ConflictError(f"user {email_id} already exists", "User already exists")

        try:
            user = await self.user_repository.create_with_roles(email_id, user_info.roles, user_info.user_id)
        except SQLAlchemyError as e:
            logger.error(f"error in creating user {email_id}: {e}")
            raise StorageError("user failed to create in db", "user failed to create in db") from e
        logger.info(f"Created user {email_id} with roles {user_info.roles}")
        return user
