"""External link management.

Links are named URLs shown in the UI next to a cluster's apps. A link mapped
to no cluster at all is treated as relevant to every cluster.

Nothing here runs inside a transaction: each row write is committed on its
own, so a failure part way through leaves the earlier writes in place.
Association cleanup during update/delete is best effort; its failures are
logged and handed back in ``AssociationCleanup`` instead of being raised.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional
import logging

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import SQLAlchemyError

from clusterdeck.errors import NotFoundError, StorageError
from clusterdeck.models.external_link import ExternalLink, ExternalLinkCluster
from clusterdeck.repositories.external_link import (
    ExternalLinkRepository,
    ExternalLinkClusterRepository,
    MonitoringToolRepository,
)

logger = logging.getLogger(__name__)

LINK_CREATE_FAILED = "external link failed to create in db"
CLUSTER_CREATE_FAILED = "cluster id failed to create in db"


class ExternalLinkRequest(BaseModel):
    """Link as sent by and returned to the UI."""
    model_config = ConfigDict(populate_by_name=True)

    id: int = 0
    name: str
    url: str
    active: bool = True
    monitoring_tool_id: int = Field(0, alias="monitoringToolId")
    cluster_ids: List[int] = Field(default_factory=list, alias="clusterIds")
    # Acting user, filled in from the authenticated caller, never serialized
    user_id: Optional[int] = Field(None, exclude=True)


class MonitoringToolResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(alias="Id")
    name: str
    icon: Optional[str] = None


@dataclass
class AssociationCleanup:
    """Outcome of deactivating a link's cluster mappings.

    ``failed`` maps cluster id to the error text of its failed deactivation.
    ``lookup_error`` is set when the mapped cluster ids could not be read.
    """
    link_id: int
    deactivated: List[int] = field(default_factory=list)
    failed: Dict[int, str] = field(default_factory=dict)
    lookup_error: Optional[str] = None

    @property
    def complete(self) -> bool:
        return not self.failed and self.lookup_error is None


@dataclass
class LinkWriteResult:
    """Primary result of an update/delete plus its advisory cleanup outcome."""
    link: Optional[ExternalLinkRequest]
    cleanup: AssociationCleanup


def _unique(cluster_ids: List[int]) -> List[int]:
    return list(dict.fromkeys(cluster_ids))


def _to_response(link: ExternalLink, cluster_ids: List[int]) -> ExternalLinkRequest:
    return ExternalLinkRequest(
        id=link.id,
        name=link.name,
        url=link.url,
        active=link.active,
        monitoring_tool_id=link.monitoring_tool_id or 0,
        cluster_ids=cluster_ids,
    )


class ExternalLinkService:
    """Create, list, update and soft-delete external links."""

    def __init__(
        self,
        link_repository: ExternalLinkRepository,
        link_cluster_repository: ExternalLinkClusterRepository,
        monitoring_tool_repository: MonitoringToolRepository,
    ):
        self.link_repository = link_repository
        self.link_cluster_repository = link_cluster_repository
        self.monitoring_tool_repository = monitoring_tool_repository

    async def create(self, requests: List[ExternalLinkRequest]) -> List[ExternalLinkRequest]:
        """Persist every link and its cluster mappings, stopping at the first failure.

        Rows written before the failure stay committed. The input list is
        returned unchanged on success.
        """
        logger.debug(f"external link create request: {requests}")
        for request in requests:
            now = datetime.utcnow()
            link = ExternalLink(
                name=request.name,
                url=request.url,
                active=True,
                monitoring_tool_id=request.monitoring_tool_id or None,
                created_on=now,
                created_by=request.user_id,
                updated_on=now,
                updated_by=request.user_id,
            )
            try:
                await self.link_repository.save(link)
            except SQLAlchemyError as e:
                logger.error(f"error in saving link {request.name!r} ({request.url}): {e}")
                raise StorageError(LINK_CREATE_FAILED, LINK_CREATE_FAILED) from e
            link_id = link.id

            for cluster_id in _unique(request.cluster_ids):
                mapping = ExternalLinkCluster(
                    external_link_id=link_id,
                    cluster_id=cluster_id,
                    active=True,
                    created_on=datetime.utcnow(),
                    created_by=request.user_id,
                    updated_on=datetime.utcnow(),
                    updated_by=request.user_id,
                )
                try:
                    await self.link_cluster_repository.save(mapping)
                except SQLAlchemyError as e:
                    logger.error(f"error in saving cluster id {cluster_id} for link {link_id}: {e}")
                    raise StorageError(CLUSTER_CREATE_FAILED, CLUSTER_CREATE_FAILED) from e
        return requests

    async def get_all_active_tools(self) -> List[MonitoringToolResponse]:
        logger.debug("fetch all monitoring tools from db")
        try:
            tools = await self.monitoring_tool_repository.find_all_active()
        except SQLAlchemyError as e:
            logger.error(f"error in fetch all tools: {e}")
            raise
        return [MonitoringToolResponse(id=tool.id, name=tool.name, icon=tool.icon) for tool in tools]

    async def fetch_all_active_links(self, cluster_id: int = 0) -> List[ExternalLinkRequest]:
        """List active links, optionally for one cluster.

        cluster_id == 0 gives one entry per mapped link with all of its active
        cluster ids. Any other value gives one entry per mapping row of that
        cluster, each carrying just that cluster id.

        Unmapped links are appended in both modes and are computed against
        the mappings of every cluster, not just the requested one. This is
        long-standing behaviour that may not be what the product wants; it is
        kept so link visibility does not change under existing callers.

        The order of the returned list is not part of the contract.
        """
        logger.debug(f"fetch all active links, cluster_id={cluster_id}")
        try:
            all_active = await self.link_cluster_repository.find_all_active()
            mapped_link_ids = list(dict.fromkeys(m.external_link_id for m in all_active))

            if cluster_id == 0:
                mappings = all_active
            else:
                mappings = await self.link_cluster_repository.find_all_active_by_cluster(cluster_id)
        except SQLAlchemyError as e:
            logger.error(f"error in fetch all links: {e}")
            raise

        responses: List[ExternalLinkRequest] = []
        if cluster_id != 0:
            for mapping in mappings:
                responses.append(_to_response(mapping.link, [mapping.cluster_id]))
        else:
            by_link: Dict[int, ExternalLinkRequest] = {}
            for mapping in mappings:
                if mapping.external_link_id not in by_link:
                    by_link[mapping.external_link_id] = _to_response(mapping.link, [])
                by_link[mapping.external_link_id].cluster_ids.append(mapping.cluster_id)
            responses.extend(by_link.values())

        # now add all the links which are not mapped to any cluster
        try:
            unmapped = await self.link_repository.find_all_non_mapped(mapped_link_ids)
        except SQLAlchemyError as e:
            logger.error(f"error in fetch all non mapped links: {e}")
            raise
        responses.extend(_to_response(link, []) for link in unmapped)
        return responses

    async def update(self, request: ExternalLinkRequest) -> LinkWriteResult:
        """Overwrite the link and make its active mappings equal request.cluster_ids.

        Mappings for clusters dropped from the request are left in place with
        active=False.
        """
        logger.debug(f"link update request: {request}")
        link = await self.link_repository.find_one(request.id)
        if link is None:
            logger.error(f"No matching entry found for update. id={request.id}")
            raise NotFoundError(f"external link {request.id} not found", "No matching entry found for update.")

        link.name = request.name
        link.url = request.url
        link.active = request.active
        link.monitoring_tool_id = request.monitoring_tool_id or None
        link.updated_by = request.user_id
        link.updated_on = datetime.utcnow()
        try:
            await self.link_repository.update(link)
        except SQLAlchemyError as e:
            logger.error(f"error in updating link {request.id}: {e}")
            raise

        try:
            existing_cluster_ids = await self.link_cluster_repository.find_all_clusters(request.id)
        except SQLAlchemyError as e:
            logger.error(f"error in fetching clusters of link {request.id}: {e}")
            raise

        cleanup = await self._deactivate_mappings(request.id, existing_cluster_ids, request.user_id)

        existing = set(existing_cluster_ids)
        for cluster_id in _unique(request.cluster_ids):
            now = datetime.utcnow()
            mapping = ExternalLinkCluster(
                external_link_id=request.id,
                cluster_id=cluster_id,
                active=True,
                updated_on=now,
                updated_by=request.user_id,
            )
            try:
                if cluster_id in existing:
                    await self.link_cluster_repository.update(mapping)
                else:
                    mapping.created_on = now
                    mapping.created_by = request.user_id
                    await self.link_cluster_repository.save(mapping)
            except SQLAlchemyError as e:
                logger.error(f"error in saving cluster id {cluster_id} for link {request.id}: {e}")
                raise StorageError(CLUSTER_CREATE_FAILED, CLUSTER_CREATE_FAILED) from e
        return LinkWriteResult(link=request, cleanup=cleanup)

    async def delete_link(self, link_id: int, user_id: Optional[int] = None) -> LinkWriteResult:
        """Deactivate every mapping of the link, then the link itself.

        Only the failure to deactivate the link row is raised. A link id with
        no row raises NotFoundError once the (empty) mapping cleanup is done.
        """
        logger.debug(f"link delete request: {link_id}")
        try:
            cluster_ids = await self.link_cluster_repository.find_all_clusters(link_id)
        except SQLAlchemyError as e:
            logger.error(f"error in fetching clusters of link {link_id}: {e}")
            cleanup = AssociationCleanup(link_id=link_id, lookup_error=str(e))
        else:
            cleanup = await self._deactivate_mappings(link_id, cluster_ids, user_id)

        link = await self.link_repository.find_one(link_id)
        if link is None:
            logger.error(f"No matching entry found for delete. id={link_id}")
            raise NotFoundError(f"external link {link_id} not found", "No matching entry found for delete.")

        link.active = False
        link.updated_by = user_id
        link.updated_on = datetime.utcnow()
        try:
            await self.link_repository.update(link)
        except SQLAlchemyError as e:
            logger.error(f"error in deleting link {link_id}: {e}")
            raise
        return LinkWriteResult(link=None, cleanup=cleanup)

    async def _deactivate_mappings(
        self, link_id: int, cluster_ids: List[int], user_id: Optional[int]
    ) -> AssociationCleanup:
        cleanup = AssociationCleanup(link_id=link_id)
        for cluster_id in cluster_ids:
            mapping = ExternalLinkCluster(
                external_link_id=link_id,
                cluster_id=cluster_id,
                active=False,
                updated_on=datetime.utcnow(),
                updated_by=user_id,
            )
            try:
                await self.link_cluster_repository.update(mapping)
            except SQLAlchemyError as e:
                logger.error(f"error in setting cluster {cluster_id} of link {link_id} inactive: {e}")
                cleanup.failed[cluster_id] = str(e)
            else:
                cleanup.deactivated.append(cluster_id)
        return cleanup
