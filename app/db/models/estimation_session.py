# design_poker/app/db/models/estimation_session.py

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base


class EstimationSession(Base):
    """A planning session participants join with a short code."""

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(12), unique=True, index=True, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    participants = relationship(
        "Participant",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="Participant.joined_at",
    )
    tasks = relationship(
        "Task",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="Task.created_at",
    )
