# design_poker/app/db/models/vote.py

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base


class Vote(Base):
    """One participant's estimate for one task.

    value is the point total computed at submission time; factors keeps the
    raw selection so results can be recomputed later.
    """

    __tablename__ = "votes"
    __table_args__ = (UniqueConstraint("task_id", "participant_id", name="uq_votes_task_participant"),)

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=False, index=True)
    participant_id = Column(Integer, ForeignKey("participants.id"), nullable=False, index=True)

    value = Column(Integer, nullable=False)
    factors = Column(JSON, nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    task = relationship("Task", back_populates="votes")
    participant = relationship("Participant", back_populates="votes")
