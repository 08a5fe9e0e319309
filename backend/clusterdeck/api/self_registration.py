"""Self-registration endpoints."""
from fastapi import APIRouter, Depends
from typing import List

from clusterdeck.api.dependencies import verify_authentication, get_self_registration_service
from clusterdeck.services.self_registration import SelfRegistrationRoleService

router = APIRouter(prefix="/v1/self-register", tags=["Self Registration"])


@router.get("/check")
async def check_self_registration(
    service: SelfRegistrationRoleService = Depends(get_self_registration_service),
):
    """Whether the login page should offer self-registration. No auth required."""
    return {"enabled": await service.check()}


@router.get("/roles", response_model=List[str], dependencies=[Depends(verify_authentication)])
async def list_default_roles(
    service: SelfRegistrationRoleService = Depends(get_self_registration_service),
):
    """Default roles granted to self-registered users."""
    return await service.get_all()
