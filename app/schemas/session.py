from datetime import datetime
from typing import Dict, Optional
from pydantic import BaseModel, Field


class ParticipantCreate(BaseModel):
    nickname: str = Field(..., min_length=1, max_length=100)
    avatar_emoji: Optional[str] = None


class ParticipantRead(BaseModel):
    id: int
    session_id: int
    nickname: str
    is_moderator: bool
    avatar_emoji: Optional[str] = None
    joined_at: datetime

    model_config = {"from_attributes": True}


class SessionRead(BaseModel):
    id: int
    code: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class SessionCreateResponse(BaseModel):
    session: SessionRead
    moderator: ParticipantRead


class SessionSummary(BaseModel):
    session_code: str
    participants: int
    tasks_total: int
    tasks_completed: int
    total_points: int
    # sprint number -> points; the backlog is reported separately
    sprint_totals: Dict[int, int] = Field(default_factory=dict)
    backlog_points: int = 0
    task_totals: Dict[int, int] = Field(default_factory=dict)
