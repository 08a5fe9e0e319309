"""Default roles granted to self-registered users."""
from sqlalchemy import Column, String, Integer

from clusterdeck.database import Base
from clusterdeck.models.audit import AuditMixin


class SelfRegistrationRole(AuditMixin, Base):
    """One default role string. Empty strings are stored but ignored."""

    __tablename__ = "self_registration_roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    role = Column(String(255), nullable=False, default="")
