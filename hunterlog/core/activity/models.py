from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Uuid, func

from hunterlog.database.base import Base, JSONType


class ActivityLog(Base):
    """Append-only audit row; never updated or deleted by the service."""

    __tablename__ = "activity_log"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    action = Column(String, nullable=False)
    xp_gained = Column(Integer, nullable=False, default=0)
    details = Column(JSONType, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


Index(
    "ix_activity_log_user_created_at",
    ActivityLog.user_id,
    ActivityLog.created_at.desc(),
)


__all__ = ["ActivityLog"]
