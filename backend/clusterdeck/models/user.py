"""User database models."""
from sqlalchemy import Column, String, Boolean, Integer, ForeignKey
from sqlalchemy.orm import relationship

from clusterdeck.database import Base
from clusterdeck.models.audit import AuditMixin


class User(AuditMixin, Base):
    """Platform user, identified by email."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email_id = Column(String(255), unique=True, nullable=False, index=True)
    active = Column(Boolean, default=True, nullable=False)

    roles = relationship("UserRole", lazy="selectin", back_populates="user")

    def to_dict(self):
        """Convert model to dictionary."""
        return {
            "id": self.id,
            "email_id": self.email_id,
            "active": self.active,
            "roles": [r.role for r in self.roles],
        }


class UserRole(AuditMixin, Base):
    """Role granted to a user."""
    __tablename__ = "user_roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role = Column(String(255), nullable=False)

    user = relationship("User", back_populates="roles")
