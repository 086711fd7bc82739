# design_poker/app/db/models/participant.py

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base


class Participant(Base):
    __tablename__ = "participants"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("sessions.id"), nullable=False, index=True)

    nickname = Column(String(100), nullable=False)
    is_moderator = Column(Boolean, nullable=False, default=False)
    avatar_emoji = Column(String(16), nullable=True)

    joined_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    session = relationship("EstimationSession", back_populates="participants")
    votes = relationship("Vote", back_populates="participant", cascade="all, delete-orphan")
