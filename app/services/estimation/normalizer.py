# design_poker/app/services/estimation/normalizer.py
"""Normalize stored vote factor payloads into EstimationFactors.

Votes written by older clients used different field layouts:
- a single ``designerLevel`` applied to every designer;
- ``designers`` (a bare count) plus ``prototypes`` (a 1-5 scale) instead of
  per-designer levels and activity checklists.

normalize_factors() never raises; it either returns usable factors tagged with
the shape they came from, or an UNRECOVERABLE tag with a reason.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from app.services.estimation.catalogs import DEFAULT_DESIGNER_LEVEL, DESIGNER_COUNT_OPTIONS, find_option
from app.services.estimation.interfaces import EstimationFactors


class FactorShape(str, Enum):
    CURRENT = "current"
    LEGACY_SINGLE_LEVEL = "legacy_single_level"
    LEGACY_DESIGNERS = "legacy_designers"
    UNRECOVERABLE = "unrecoverable"


# Legacy "prototypes" scale -> design activities it implied
LEGACY_PROTOTYPE_ACTIVITIES: Dict[int, List[str]] = {
    1: [],
    2: ["visual_design"],
    3: ["interactive_prototype"],
    4: ["interactive_prototype", "usability_testing"],
    5: ["interactive_prototype", "usability_testing", "motion_design"],
}


@dataclass(frozen=True)
class NormalizedFactors:
    shape: FactorShape
    factors: Optional[EstimationFactors] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.factors is not None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def detect_shape(raw: Mapping[str, Any]) -> FactorShape:
    if "designerLevels" in raw or "designer_levels" in raw:
        return FactorShape.CURRENT
    if "designers" in raw and "designerCount" not in raw and "designer_count" not in raw:
        return FactorShape.LEGACY_DESIGNERS
    if "designerLevel" in raw or "designer_level" in raw:
        return FactorShape.LEGACY_SINGLE_LEVEL
    return FactorShape.CURRENT


def _known_count(value: Any) -> bool:
    # out-of-catalog counts are left for validation to reject, never expanded
    return _is_number(value) and find_option(DESIGNER_COUNT_OPTIONS, value) is not None


def _upgrade_single_level(raw: Mapping[str, Any]) -> Dict[str, Any]:
    data = dict(raw)
    level = data.pop("designerLevel", data.pop("designer_level", None))
    count = data.get("designerCount", data.get("designer_count"))
    if _known_count(count) and _is_number(level):
        data["designerLevels"] = [level] * int(count)
    return data


def _upgrade_designers(raw: Mapping[str, Any]) -> Dict[str, Any]:
    data = dict(raw)
    count = data.pop("designers", None)
    prototypes = data.pop("prototypes", None)
    data["designerCount"] = count
    if _known_count(count):
        data["designerCount"] = int(count)
        data["designerLevels"] = [DEFAULT_DESIGNER_LEVEL] * int(count)
    if _is_number(prototypes) and "designActivities" not in data:
        data["designActivities"] = list(LEGACY_PROTOTYPE_ACTIVITIES.get(prototypes, []))
    return data


def normalize_factors(raw: Any) -> NormalizedFactors:
    """Map any stored factor payload onto the current EstimationFactors shape."""
    if isinstance(raw, EstimationFactors):
        return NormalizedFactors(FactorShape.CURRENT, raw)
    if not isinstance(raw, Mapping):
        return NormalizedFactors(
            FactorShape.UNRECOVERABLE,
            reason=f"factors must be an object, got {type(raw).__name__}",
        )

    shape = detect_shape(raw)
    if shape == FactorShape.LEGACY_SINGLE_LEVEL:
        data: Mapping[str, Any] = _upgrade_single_level(raw)
    elif shape == FactorShape.LEGACY_DESIGNERS:
        data = _upgrade_designers(raw)
    else:
        data = raw

    try:
        factors = EstimationFactors.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        return NormalizedFactors(FactorShape.UNRECOVERABLE, reason=f"invalid fields: {fields}")

    return NormalizedFactors(shape, factors)


__all__ = [
    "FactorShape",
    "LEGACY_PROTOTYPE_ACTIVITIES",
    "NormalizedFactors",
    "detect_shape",
    "normalize_factors",
]
