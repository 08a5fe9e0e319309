"""External link models."""
from sqlalchemy import Column, String, Boolean, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from clusterdeck.database import Base
from clusterdeck.models.audit import AuditMixin


class MonitoringTool(Base):
    """Monitoring tool catalog entry (Grafana, Kibana, ...). Read-only."""

    __tablename__ = "external_link_monitoring_tools"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    icon = Column(String(512), nullable=True)
    active = Column(Boolean, default=True, nullable=False)


class ExternalLink(AuditMixin, Base):
    """Named URL surfaced in the UI for one or more clusters."""

    __tablename__ = "external_links"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    url = Column(String(2048), nullable=False)
    active = Column(Boolean, default=True, nullable=False)  # soft-delete flag
    monitoring_tool_id = Column(Integer, ForeignKey("external_link_monitoring_tools.id"), nullable=True)

    def __repr__(self):
        return f"<ExternalLink(id={self.id}, name='{self.name}', active={self.active})>"


class ExternalLinkCluster(AuditMixin, Base):
    """Link to cluster mapping. Rows are deactivated, never removed."""

    __tablename__ = "external_link_clusters"
    __table_args__ = (
        UniqueConstraint("external_link_id", "cluster_id", name="external_link_clusters_link_cluster_uc"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_link_id = Column(Integer, ForeignKey("external_links.id"), nullable=False, index=True)
    cluster_id = Column(Integer, nullable=False, index=True)
    active = Column(Boolean, default=True, nullable=False)

    link = relationship("ExternalLink", lazy="joined")

    def __repr__(self):
        return f"<ExternalLinkCluster(link={self.external_link_id}, cluster={self.cluster_id}, active={self.active})>"
