"""Storage access for users and their roles."""
from sqlalchemy import select
from datetime import datetime
from typing import List, Optional

from clusterdeck.models.user import User, UserRole
from clusterdeck.repositories.base import BaseRepository


class UserRepository(BaseRepository):

    async def get_by_email(self, email_id: str) -> Optional[User]:
        stmt = select(User).where(User.email_id == email_id, User.active == True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create_with_roles(self, email_id: str, roles: List[str], created_by: Optional[int] = None) -> User:
        """Insert the user and one role row per role in a single commit."""
        now = datetime.utcnow()
        user = User(
            email_id=email_id,
            active=True,
            created_on=now,
            created_by=created_by,
            updated_on=now,
            updated_by=created_by,
            roles=[
                UserRole(role=role, created_on=now, created_by=created_by, updated_on=now, updated_by=created_by)
                for role in roles
            ],
        )
        self.session.add(user)
        await self._commit()
        return user
