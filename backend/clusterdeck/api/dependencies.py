"""Authentication and service dependencies for the API routers."""
from fastapi import Depends, HTTPException, Header
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

import jwt

from clusterdeck.config import settings
from clusterdeck.database import get_db
from clusterdeck.repositories import (
    ExternalLinkRepository,
    ExternalLinkClusterRepository,
    MonitoringToolRepository,
    SelfRegistrationRoleRepository,
    UserRepository,
)
from clusterdeck.services.external_link import ExternalLinkService
from clusterdeck.services.self_registration import SelfRegistrationRoleService
from clusterdeck.services.user import UserService

logger = logging.getLogger(__name__)


def get_external_link_service(db: AsyncSession = Depends(get_db)) -> ExternalLinkService:
    return ExternalLinkService(
        ExternalLinkRepository(db),
        ExternalLinkClusterRepository(db),
        MonitoringToolRepository(db),
    )


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(UserRepository(db))


def get_self_registration_service(
    db: AsyncSession = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> SelfRegistrationRoleService:
    return SelfRegistrationRoleService(SelfRegistrationRoleRepository(db), user_service)


async def verify_authentication(
    authorization: Optional[str] = Header(None),
    user_service: UserService = Depends(get_user_service),
    self_registration: SelfRegistrationRoleService = Depends(get_self_registration_service),
) -> dict:
    """Resolve the calling user.

    - If auth is disabled: every caller acts as the system user
    - If auth is enabled: require a valid JWT whose email claim maps to a user.
      Unknown users are self-registered when default roles are configured.
    """
    if not settings.AUTH_ENABLED:
        return {"user_id": settings.SYSTEM_USER_ID, "email": "system"}

    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Authentication required.")

    token = authorization.replace("Bearer ", "")
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.PyJWTError as e:
        logger.warning(f"Token validation failed with error: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid or expired token. Please login again.")

    email = claims.get("email")
    if not email:
        raise HTTPException(status_code=401, detail="Token has no email claim.")

    user = await user_service.get_by_email(email)
    if user is None and await self_registration.check():
        await self_registration.self_register(email)
        user = await user_service.get_by_email(email)

    if user is None:
        logger.info(f"Rejected unregistered user {email}")
        raise HTTPException(status_code=403, detail="User is not registered.")

    return {"user_id": user.id, "email": user.email_id}
