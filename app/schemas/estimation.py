from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from app.services.estimation import EstimationFactors, FactorKind


class CatalogOptionRead(BaseModel):
    value: float
    label: str
    description: str


class ActivityRead(BaseModel):
    id: str
    label: str
    description: str
    impact: int


class ActivitySectionRead(BaseModel):
    name: str
    activities: List[ActivityRead]


class CatalogsResponse(BaseModel):
    max_points: int
    factors: Dict[str, List[CatalogOptionRead]]
    discovery_activities: List[ActivityRead]
    design_activity_sections: List[ActivitySectionRead]


class EstimateResponse(BaseModel):
    complete: bool
    points: Optional[int] = None
    raw_points: Optional[int] = None
    capped: bool = False
    hours: Optional[str] = None
    t_shirt: Optional[str] = None
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    components: Dict[str, Any] = Field(default_factory=dict)


class MarginalRequest(BaseModel):
    kind: FactorKind
    baseline: Optional[EstimationFactors] = None


class MarginalResponse(BaseModel):
    kind: FactorKind
    # catalog value (or activity id) rendered as a string -> points added
    hints: Dict[str, int]


class VoteSubmitRequest(BaseModel):
    participant_id: int
    factors: Dict[str, Any]


class VoteRead(BaseModel):
    id: int
    task_id: int
    participant_id: int
    value: int
    factors: Optional[Dict[str, Any]] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ResolvedVoteRead(BaseModel):
    vote_id: Optional[int] = None
    participant_id: Optional[int] = None
    points: int
    source: str
    hours: str
    t_shirt: str


class VoteSummaryRead(BaseModel):
    average: int
    min: int
    max: int
    count: int


class RevealResponse(BaseModel):
    task_id: int
    summary: VoteSummaryRead
    distribution: Dict[int, int]
    votes: List[ResolvedVoteRead]
