# design_poker/app/services/estimation/engine.py
"""Estimate engine: factor selection -> story points.

Formula (order matters, totals must match what users have already seen):
    designer_weight = sum(designer_levels)
    base     = round(effort * (sprints + designer_weight + breakpoints + fidelity) / 4)
    subtotal = base + sum(discovery impacts) + sum(design impacts)
    buffered = subtotal + subtotal * meeting_buffer
    raw      = round(buffered * iteration_multiplier)
    points   = min(raw, MAX_POINTS)

All functions are pure; nothing here reads the clock, randomness or settings.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from app.services.estimation.catalogs import (
    DEFAULT_DESIGNER_LEVEL,
    DESIGN_ACTIVITIES,
    DESIGNER_COUNT_OPTIONS,
    DESIGNER_LEVEL_OPTIONS,
    DISCOVERY_ACTIVITIES,
    MAX_POINTS,
    ActivityOption,
    FactorKind,
    activity_catalog_for,
    catalog_for,
    find_activity,
    find_option,
    is_activity_kind,
)
from app.services.estimation.interfaces import EstimateResult, EstimationFactors
from app.services.estimation.utils import clamp, is_finite_number, round_half_up


FactorsInput = Union[EstimationFactors, Mapping[str, Any]]

REQUIRED_FIELDS: Tuple[str, ...] = ("effort", "sprints", "designer_count", "breakpoints", "fidelity")

# Upper bounds are exclusive; anything at or above the last bound gets the final label.
HOURS_BUCKETS: Tuple[Tuple[int, str], ...] = (
    (2, "1-2 hours"),
    (4, "2-4 hours"),
    (8, "4-8 hours"),
    (16, "1-2 days"),
    (32, "2-4 days"),
)
HOURS_OVERFLOW_LABEL = "1+ weeks"

TSHIRT_BUCKETS: Tuple[Tuple[int, str], ...] = (
    (2, "XS"),
    (4, "S"),
    (8, "M"),
    (16, "L"),
    (32, "XL"),
)
TSHIRT_OVERFLOW_LABEL = "XXL"

# Baseline used for the "this option adds N pts" hints: Medium effort, half a
# sprint, one Mid designer, Desktop + Mobile, Mid-fi, no buffer, no iteration.
NEUTRAL_FACTORS = EstimationFactors(
    effort=3,
    sprints=0.5,
    designer_count=1,
    designer_levels=[DEFAULT_DESIGNER_LEVEL],
    breakpoints=2,
    fidelity=2,
    meeting_buffer=0,
    iteration_multiplier=1,
)


def _coerce(factors: Optional[FactorsInput]) -> Optional[EstimationFactors]:
    if factors is None:
        return None
    if isinstance(factors, EstimationFactors):
        return factors
    if not isinstance(factors, Mapping):
        return None
    try:
        return EstimationFactors.model_validate(factors)
    except ValidationError:
        return None


def is_complete(factors: Optional[FactorsInput]) -> bool:
    """True when every required factor is set and there is one level per designer."""
    f = _coerce(factors)
    if f is None:
        return False
    for name in REQUIRED_FIELDS:
        if not is_finite_number(getattr(f, name)):
            return False
    if len(f.designer_levels) != f.designer_count:
        return False
    return all(is_finite_number(level) for level in f.designer_levels)


def validate_factors(factors: Optional[FactorsInput]) -> List[str]:
    """Boundary check for user-submitted selections.

    Returns a list of human-readable problems; an empty list means the
    selection is complete and every value belongs to its catalog.
    """
    f = _coerce(factors)
    if f is None:
        return ["Factors are missing or not a valid factor object"]

    errors: List[str] = []
    for name in REQUIRED_FIELDS:
        if getattr(f, name) is None:
            errors.append(f"{name} is required")

    if f.designer_count is not None:
        if f.designer_count < 1:
            errors.append("designer_count must be at least 1")
        elif len(f.designer_levels) != f.designer_count:
            errors.append(
                f"designer_levels must have {f.designer_count} entries (got {len(f.designer_levels)})"
            )

    for kind, value in (
        (FactorKind.EFFORT, f.effort),
        (FactorKind.SPRINTS, f.sprints),
        (FactorKind.DESIGNER_COUNT, f.designer_count),
        (FactorKind.BREAKPOINTS, f.breakpoints),
        (FactorKind.FIDELITY, f.fidelity),
    ):
        if value is not None and find_option(catalog_for(kind), value) is None:
            errors.append(f"{kind.value}={value} is not a known option")

    for idx, level in enumerate(f.designer_levels):
        if find_option(DESIGNER_LEVEL_OPTIONS, level) is None:
            errors.append(f"designer_levels[{idx}]={level} is not a known level")

    for label, ids, catalog in (
        ("discovery", f.discovery_activities, DISCOVERY_ACTIVITIES),
        ("design", f.design_activities, DESIGN_ACTIVITIES),
    ):
        for activity_id in dict.fromkeys(ids):
            if find_activity(catalog, activity_id) is None:
                errors.append(f"{label} activity '{activity_id}' is not a known activity")

    if f.meeting_buffer is not None and (not is_finite_number(f.meeting_buffer) or f.meeting_buffer < 0):
        errors.append("meeting_buffer must be a non-negative number")
    if f.iteration_multiplier is not None and (
        not is_finite_number(f.iteration_multiplier) or f.iteration_multiplier <= 0
    ):
        errors.append("iteration_multiplier must be a positive number")

    return errors


def _activity_points(
    ids: Sequence[str], catalog: Sequence[ActivityOption], label: str, warnings: List[str]
) -> int:
    total = 0
    for activity_id in dict.fromkeys(ids):  # de-dupe, keep order
        activity = find_activity(catalog, activity_id)
        if activity is None:
            warnings.append(f"Unknown {label} activity '{activity_id}' ignored")
            continue
        total += activity.impact
    return total


def evaluate_estimate(factors: Optional[FactorsInput]) -> Optional[EstimateResult]:
    """Full engine evaluation; None when the selection is not yet computable.

    Values that overflow to infinity along the way also yield None.
    """
    if not is_complete(factors):
        return None
    f = _coerce(factors)
    if f is None:
        return None

    warnings: List[str] = []

    buffer = f.meeting_buffer
    if buffer is None:
        buffer = 0.0
    elif not is_finite_number(buffer) or buffer < 0:
        warnings.append(f"meeting_buffer={buffer} ignored; using 0")
        buffer = 0.0

    multiplier = f.iteration_multiplier
    if multiplier is None:
        multiplier = 1.0
    elif not is_finite_number(multiplier) or multiplier <= 0:
        warnings.append(f"iteration_multiplier={multiplier} ignored; using 1")
        multiplier = 1.0

    designer_weight = sum(f.designer_levels)
    complexity = (f.sprints + designer_weight + f.breakpoints + f.fidelity) / 4
    weighted = f.effort * complexity
    if not math.isfinite(weighted):
        return None
    base = round_half_up(weighted)

    discovery_points = _activity_points(f.discovery_activities, DISCOVERY_ACTIVITIES, "discovery", warnings)
    design_points = _activity_points(f.design_activities, DESIGN_ACTIVITIES, "design", warnings)
    activity_points = discovery_points + design_points

    subtotal = base + activity_points
    buffered = subtotal + subtotal * buffer
    total = buffered * multiplier
    if not math.isfinite(total):
        return None
    raw = round_half_up(total)
    points = int(clamp(raw, 0, MAX_POINTS))

    return EstimateResult(
        points=points,
        raw_points=raw,
        capped=raw > MAX_POINTS,
        base=base,
        activity_points=activity_points,
        components={
            "designer_weight": designer_weight,
            "complexity": complexity,
            "discovery_points": discovery_points,
            "design_points": design_points,
            "subtotal": subtotal,
            "meeting_buffer": buffer,
            "buffered": buffered,
            "iteration_multiplier": multiplier,
        },
        warnings=warnings,
    )


def compute_estimate(factors: Optional[FactorsInput]) -> Optional[int]:
    """Point value for a complete selection, or None when incomplete."""
    result = evaluate_estimate(factors)
    return result.points if result is not None else None


def bucket_index(points: float, buckets: Sequence[Tuple[int, str]]) -> int:
    """Index of the first bucket whose (exclusive) upper bound exceeds points."""
    for idx, (upper, _label) in enumerate(buckets):
        if points < upper:
            return idx
    return len(buckets)


def _bucket_label(points: float, buckets: Sequence[Tuple[int, str]], overflow: str) -> str:
    idx = bucket_index(points, buckets)
    return buckets[idx][1] if idx < len(buckets) else overflow


def estimate_to_hours(points: float) -> str:
    return _bucket_label(points, HOURS_BUCKETS, HOURS_OVERFLOW_LABEL)


def estimate_to_tshirt_size(points: float) -> str:
    return _bucket_label(points, TSHIRT_BUCKETS, TSHIRT_OVERFLOW_LABEL)


def _designer_count(value: Any) -> int:
    # levels are materialized per designer, so only catalog counts are accepted
    if find_option(DESIGNER_COUNT_OPTIONS, value) is None:
        raise ValueError(f"designer_count={value!r} is not a known option")
    return int(value)


def _with_candidate(baseline: EstimationFactors, kind: FactorKind, candidate: Any) -> EstimationFactors:
    if kind == FactorKind.DESIGNER_COUNT:
        count = _designer_count(candidate)
        level = baseline.designer_levels[0] if baseline.designer_levels else DEFAULT_DESIGNER_LEVEL
        return baseline.model_copy(update={"designer_count": count, "designer_levels": [level] * count})
    if kind == FactorKind.DESIGNER_LEVEL:
        count = _designer_count(baseline.designer_count or 1)
        return baseline.model_copy(update={"designer_count": count, "designer_levels": [candidate] * count})
    if kind == FactorKind.DISCOVERY_ACTIVITY:
        ids = list(baseline.discovery_activities)
        if candidate not in ids:
            ids.append(candidate)
        return baseline.model_copy(update={"discovery_activities": ids})
    if kind == FactorKind.DESIGN_ACTIVITY:
        ids = list(baseline.design_activities)
        if candidate not in ids:
            ids.append(candidate)
        return baseline.model_copy(update={"design_activities": ids})

    field = {
        FactorKind.EFFORT: "effort",
        FactorKind.SPRINTS: "sprints",
        FactorKind.BREAKPOINTS: "breakpoints",
        FactorKind.FIDELITY: "fidelity",
        FactorKind.MEETING_BUFFER: "meeting_buffer",
        FactorKind.ITERATION_MULTIPLIER: "iteration_multiplier",
    }[kind]
    return baseline.model_copy(update={field: candidate})


def marginal_contribution(
    kind: FactorKind,
    candidate: Any,
    baseline: Optional[FactorsInput] = None,
) -> int:
    """Advisory "this choice adds N pts" hint.

    Diffs the estimate with the candidate swapped into the baseline against
    the baseline itself (NEUTRAL_FACTORS unless given). Never negative; 0 when
    either side cannot be computed.
    """
    base_factors = _coerce(baseline) if baseline is not None else NEUTRAL_FACTORS
    if base_factors is None:
        return 0

    try:
        candidate_factors = _with_candidate(base_factors, kind, candidate)
    except (TypeError, ValueError):
        return 0

    with_candidate = compute_estimate(candidate_factors)
    without = compute_estimate(base_factors)
    if with_candidate is None or without is None:
        return 0
    return max(0, with_candidate - without)


def option_hints(kind: FactorKind, baseline: Optional[FactorsInput] = None) -> Dict[Any, int]:
    """Marginal contribution of every option of one catalog, keyed by value or id."""
    if is_activity_kind(kind):
        return {a.id: marginal_contribution(kind, a.id, baseline) for a in activity_catalog_for(kind)}
    return {o.value: marginal_contribution(kind, o.value, baseline) for o in catalog_for(kind)}


__all__ = [
    "FactorsInput",
    "REQUIRED_FIELDS",
    "HOURS_BUCKETS",
    "TSHIRT_BUCKETS",
    "NEUTRAL_FACTORS",
    "is_complete",
    "validate_factors",
    "evaluate_estimate",
    "compute_estimate",
    "bucket_index",
    "estimate_to_hours",
    "estimate_to_tshirt_size",
    "marginal_contribution",
    "option_hints",
]
