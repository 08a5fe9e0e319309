"""External link endpoints."""
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from typing import List
import logging

from clusterdeck.api.dependencies import verify_authentication, get_external_link_service
from clusterdeck.services.external_link import (
    ExternalLinkRequest,
    ExternalLinkService,
    MonitoringToolResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/external-links", tags=["External Links"])


class DeleteResponse(BaseModel):
    message: str
    cleanupComplete: bool
    cleanupFailures: List[int]


@router.post("", response_model=List[ExternalLinkRequest])
async def create_links(
    data: List[ExternalLinkRequest],
    user: dict = Depends(verify_authentication),
    service: ExternalLinkService = Depends(get_external_link_service),
):
    """Create links and map each to its clusters."""
    for request in data:
        request.user_id = user["user_id"]
    return await service.create(data)


@router.get("/tools", response_model=List[MonitoringToolResponse])
async def list_tools(
    user: dict = Depends(verify_authentication),
    service: ExternalLinkService = Depends(get_external_link_service),
):
    """List active monitoring tools."""
    return await service.get_all_active_tools()


@router.get("", response_model=List[ExternalLinkRequest])
async def list_links(
    cluster_id: int = Query(0, alias="clusterId"),
    user: dict = Depends(verify_authentication),
    service: ExternalLinkService = Depends(get_external_link_service),
):
    """List active links. clusterId=0 lists every link; result order is unspecified."""
    return await service.fetch_all_active_links(cluster_id)


@router.put("", response_model=ExternalLinkRequest)
async def update_link(
    data: ExternalLinkRequest,
    user: dict = Depends(verify_authentication),
    service: ExternalLinkService = Depends(get_external_link_service),
):
    """Update a link and replace its cluster mappings."""
    data.user_id = user["user_id"]
    result = await service.update(data)
    if not result.cleanup.complete:
        logger.warning(f"Link {data.id} updated with incomplete mapping cleanup: {result.cleanup.failed}")
    return result.link


@router.delete("", response_model=DeleteResponse)
async def delete_link(
    link_id: int = Query(..., alias="id"),
    user: dict = Depends(verify_authentication),
    service: ExternalLinkService = Depends(get_external_link_service),
):
    """Soft-delete a link and its cluster mappings."""
    result = await service.delete_link(link_id, user["user_id"])
    return DeleteResponse(
        message="External link deleted successfully",
        cleanupComplete=result.cleanup.complete,
        cleanupFailures=sorted(result.cleanup.failed),
    )
