"""Storage access for the default self-registration role catalog."""
from sqlalchemy import select
from typing import List

from clusterdeck.models.self_registration_role import SelfRegistrationRole
from clusterdeck.repositories.base import BaseRepository


class SelfRegistrationRoleRepository(BaseRepository):

    async def get_all(self) -> List[SelfRegistrationRole]:
        result = await self.session.execute(select(SelfRegistrationRole))
        return list(result.scalars().all())
