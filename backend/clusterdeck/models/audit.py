"""Audit columns shared by the write-tracked models."""
from sqlalchemy import Column, Integer, DateTime
from datetime import datetime


class AuditMixin:
    """created/updated timestamps and acting user ids.

    Timestamps are stamped explicitly by the repositories at the call site,
    the column defaults only cover rows inserted outside of them (seeding).
    """

    created_on = Column(DateTime, default=datetime.utcnow, nullable=False)
    created_by = Column(Integer, nullable=True)
    updated_on = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_by = Column(Integer, nullable=True)
