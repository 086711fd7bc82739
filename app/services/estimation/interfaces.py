# design_poker/app/services/estimation/interfaces.py

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class EstimationFactors(BaseModel):
    """One participant's factor selection.

    Every field is optional so a half-built selection can be previewed live;
    the engine decides whether the selection is complete. Stored votes use the
    camelCase field names (designerCount, designerLevels, ...), so both the
    alias and the attribute name are accepted on input.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    effort: Optional[float] = None
    sprints: Optional[float] = None
    designer_count: Optional[int] = None
    designer_levels: List[float] = Field(default_factory=list)
    breakpoints: Optional[float] = None
    fidelity: Optional[float] = None

    meeting_buffer: Optional[float] = None  # None -> 0
    iteration_multiplier: Optional[float] = None  # None -> 1

    discovery_activities: List[str] = Field(default_factory=list)
    design_activities: List[str] = Field(default_factory=list)

    @field_validator("designer_levels", "discovery_activities", "design_activities", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    def to_record(self) -> Dict[str, Any]:
        """Serialized form persisted on Vote.factors."""
        return self.model_dump(by_alias=True)


class EstimateResult(BaseModel):
    """Outcome of one engine evaluation.

    points: value shown to users, never above MAX_POINTS
    raw_points: value before the ceiling was applied
    capped: True only when raw_points exceeded the ceiling
    components: intermediate values (for audit / transparency)
    warnings: non-fatal notes (e.g. unknown activity ids ignored)
    """
    points: int
    raw_points: int
    capped: bool = False

    base: int = 0
    activity_points: int = 0

    components: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)


__all__ = ["EstimationFactors", "EstimateResult"]
