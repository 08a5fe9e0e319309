"""Storage access for external links, their cluster mappings and monitoring tools."""
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional, Sequence

from clusterdeck.models.external_link import ExternalLink, ExternalLinkCluster, MonitoringTool
from clusterdeck.repositories.base import BaseRepository


class ExternalLinkRepository(BaseRepository):
    """external_links table."""

    async def save(self, link: ExternalLink) -> ExternalLink:
        self.session.add(link)
        await self._commit()
        return link

    async def update(self, link: ExternalLink) -> ExternalLink:
        self.session.add(link)
        await self._commit()
        return link

    async def find_one(self, link_id: int) -> Optional[ExternalLink]:
        return await self.session.get(ExternalLink, link_id)

    async def find_all_non_mapped(self, excluded_ids: Sequence[int]) -> List[ExternalLink]:
        """Active links whose id is not in excluded_ids."""
        stmt = select(ExternalLink).where(ExternalLink.active == True)
        if excluded_ids:
            stmt = stmt.where(ExternalLink.id.notin_(list(excluded_ids)))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class ExternalLinkClusterRepository(BaseRepository):
    """external_link_clusters table. Rows are addressed by (link id, cluster id)."""

    async def save(self, mapping: ExternalLinkCluster) -> ExternalLinkCluster:
        self.session.add(mapping)
        await self._commit()
        return mapping

    async def update(self, mapping: ExternalLinkCluster) -> int:
        """Write active flag and audit fields onto the existing (link, cluster) row.

        Returns the number of rows touched.
        """
        stmt = (
            update(ExternalLinkCluster)
            .where(
                ExternalLinkCluster.external_link_id == mapping.external_link_id,
                ExternalLinkCluster.cluster_id == mapping.cluster_id,
            )
            .values(
                active=mapping.active,
                updated_on=mapping.updated_on,
                updated_by=mapping.updated_by,
            )
            .execution_options(synchronize_session="fetch")
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        touched = result.rowcount
        await self._commit()
        return touched

    async def find_all_active(self) -> List[ExternalLinkCluster]:
        """Active mappings of active links, any cluster. Link rows come eagerly loaded."""
        stmt = (
            select(ExternalLinkCluster)
            .join(ExternalLinkCluster.link)
            .where(ExternalLinkCluster.active == True, ExternalLink.active == True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_all_active_by_cluster(self, cluster_id: int) -> List[ExternalLinkCluster]:
        stmt = (
            select(ExternalLinkCluster)
            .join(ExternalLinkCluster.link)
            .where(
                ExternalLinkCluster.cluster_id == cluster_id,
                ExternalLinkCluster.active == True,
                ExternalLink.active == True,
            )
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_all_clusters(self, link_id: int) -> List[int]:
        """Every cluster id ever mapped to the link, active or not."""
        stmt = (
            select(ExternalLinkCluster.cluster_id)
            .where(ExternalLinkCluster.external_link_id == link_id)
            .distinct()
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class MonitoringToolRepository(BaseRepository):
    """external_link_monitoring_tools table (read-only)."""

    async def find_all_active(self) -> List[MonitoringTool]:
        stmt = select(MonitoringTool).where(MonitoringTool.active == True).order_by(MonitoringTool.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
