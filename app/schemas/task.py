from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class TaskTagCreate(BaseModel):
    label: str = Field(..., min_length=1, max_length=50)
    color: Optional[str] = None


class TaskTagRead(BaseModel):
    label: str
    color: str


class TaskRead(BaseModel):
    id: int
    session_id: int
    title: str
    description: Optional[str] = None
    status: str
    final_estimate: Optional[int] = None
    meeting_buffer: Optional[float] = None
    iteration_multiplier: Optional[float] = None
    voting_duration_seconds: Optional[int] = None
    quarter: Optional[str] = None
    sprint_number: Optional[int] = None
    sequence_order: Optional[int] = None
    tags: List[TaskTagRead] = Field(default_factory=list)
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("tags", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class TaskFinalizeRequest(BaseModel):
    base_estimate: int = Field(..., gt=0)
    meeting_buffer: float = Field(default=0.0, ge=0)
    iteration_multiplier: float = Field(default=1.0, gt=0)


class TaskFinalizeResponse(BaseModel):
    task: TaskRead
    buffer_points: int
    total_points: int
    t_shirt: str


class VotingCompleteRequest(BaseModel):
    duration_seconds: Optional[int] = Field(default=None, ge=0)


class SprintAssignRequest(BaseModel):
    sprint_number: Optional[int] = Field(default=None, gt=0)
    quarter: Optional[str] = None
    sequence_order: Optional[int] = Field(default=None, ge=0)
