"""Database models."""
from clusterdeck.models.external_link import MonitoringTool, ExternalLink, ExternalLinkCluster
from clusterdeck.models.self_registration_role import SelfRegistrationRole
from clusterdeck.models.user import User, UserRole

__all__ = [
    "MonitoringTool",
    "ExternalLink",
    "ExternalLinkCluster",
    "SelfRegistrationRole",
    "User",
    "UserRole",
]
