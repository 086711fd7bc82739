# design_poker/app/db/models/task.py

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base


TASK_STATUS_PENDING = "pending"
TASK_STATUS_VOTING = "voting"
TASK_STATUS_VOTING_COMPLETED = "voting_completed"
TASK_STATUS_COMPLETED = "completed"


class Task(Base):
    """A design task estimated within a session.

    final_estimate / meeting_buffer / iteration_multiplier are set by the
    moderator at finalize time and are independent of individual votes.
    """

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("sessions.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), index=True, nullable=False, default=TASK_STATUS_PENDING)

    # Moderator-applied outcome
    final_estimate = Column(Integer, nullable=True)
    meeting_buffer = Column(Float, nullable=True)
    iteration_multiplier = Column(Float, nullable=True)
    voting_duration_seconds = Column(Integer, nullable=True)

    # Sequencing board placement (None -> backlog)
    quarter = Column(String(20), nullable=True)
    sprint_number = Column(Integer, nullable=True)
    sequence_order = Column(Integer, nullable=True)

    # [{"label": ..., "color": ...}], labels unique case-insensitively
    tags = Column(JSON, nullable=True, default=list)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    session = relationship("EstimationSession", back_populates="tasks")
    votes = relationship("Vote", back_populates="task", cascade="all, delete-orphan", order_by="Vote.id")
