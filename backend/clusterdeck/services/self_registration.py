"""Default roles for users who register themselves on first login."""
from typing import List
import logging

from sqlalchemy.exc import SQLAlchemyError

from clusterdeck.repositories.self_registration_role import SelfRegistrationRoleRepository
from clusterdeck.services.user import UserInfo, UserService

logger = logging.getLogger(__name__)


class SelfRegistrationRoleService:

    def __init__(self, role_repository: SelfRegistrationRoleRepository, user_service: UserService):
        self.role_repository = role_repository
        self.user_service = user_service

    async def get_all(self) -> List[str]:
        """Configured default roles, empty entries dropped."""
        try:
            entries = await self.role_repository.get_all()
        except SQLAlchemyError as e:
            logger.error(f"error fetching all roles: {e}")
            raise
        return [entry.role for entry in entries if entry.role]

    async def check(self) -> bool:
        """True if self-registration would grant at least one role."""
        return len(await self.get_all()) > 0

    async def self_register(self, email_id: str) -> None:
        """Create the user with every default role.

        Callers cannot observe the outcome: a failed role lookup or an empty
        catalog does nothing, and provisioning failures are only logged.
        """
        try:
            roles = await self.get_all()
        except SQLAlchemyError:
            return
        if not roles:
            return

        user_info = UserInfo(email_id=email_id, roles=roles)
        try:
            await self.user_service.create_user(user_info)
        except Exception as e:
            logger.error(f"error while registering user {email_id}: {e}")
