"""Repositories over the async database session."""
from clusterdeck.repositories.external_link import (
    ExternalLinkRepository,
    ExternalLinkClusterRepository,
    MonitoringToolRepository,
)
from clusterdeck.repositories.self_registration_role import SelfRegistrationRoleRepository
from clusterdeck.repositories.user import UserRepository

__all__ = [
    "ExternalLinkRepository",
    "ExternalLinkClusterRepository",
    "MonitoringToolRepository",
    "SelfRegistrationRoleRepository",
    "UserRepository",
]
