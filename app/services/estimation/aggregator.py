# design_poker/app/services/estimation/aggregator.py

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from app.services.estimation.engine import compute_estimate, estimate_to_tshirt_size, is_complete
from app.services.estimation.normalizer import normalize_factors
from app.services.estimation.utils import is_finite_number, round_half_up

logger = logging.getLogger("app.services.estimation.aggregator")


SOURCE_RECOMPUTED = "recomputed"
SOURCE_STORED = "stored"


class VoteRecord(BaseModel):
    """Read-side view of a stored vote (ORM rows validate directly into it)."""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    task_id: Optional[int] = None
    participant_id: Optional[int] = None
    value: int = 0
    factors: Optional[Any] = None
    created_at: Optional[datetime] = None


class VoteSummary(BaseModel):
    average: int = 0
    min: int = 0
    max: int = 0
    count: int = 0


class FinalizedEstimate(BaseModel):
    base: int
    meeting_buffer: float
    iteration_multiplier: float
    buffer_points: int
    total: int
    t_shirt: str


@dataclass(frozen=True)
class ResolvedVote:
    vote: VoteRecord
    points: int
    source: str


def _as_record(vote: Any) -> VoteRecord:
    if isinstance(vote, VoteRecord):
        return vote
    if isinstance(vote, dict):
        return VoteRecord.model_validate(vote)
    return VoteRecord.model_validate(vote, from_attributes=True)


def resolve_vote_points(vote: Any) -> ResolvedVote:
    """Point value for one vote.

    Recomputed from the stored factors when they describe a complete
    selection; otherwise the stored value is used. Falling back because the
    factors are malformed is logged as a warning, never raised.
    """
    record = _as_record(vote)
    if record.factors is None:
        return ResolvedVote(record, record.value, SOURCE_STORED)

    normalized = normalize_factors(record.factors)
    if not normalized.ok:
        reason = normalized.reason
    elif not is_complete(normalized.factors):
        reason = "incomplete factors"
    else:
        points = compute_estimate(normalized.factors)
        if points is not None:
            return ResolvedVote(record, points, SOURCE_RECOMPUTED)
        reason = "not computable"

    logger.warning(
        "aggregate.vote_fallback",
        extra={
            "vote_id": record.id,
            "task_id": record.task_id,
            "participant_id": record.participant_id,
            "shape": normalized.shape.value,
            "reason": reason,
            "points": record.value,
        },
    )
    return ResolvedVote(record, record.value, SOURCE_STORED)


def resolve_votes(votes: Iterable[Any]) -> List[ResolvedVote]:
    """Resolve every vote; a record that cannot be read at all is left out with a warning."""
    resolved: List[ResolvedVote] = []
    for vote in votes:
        try:
            record = _as_record(vote)
        except ValidationError as e:
            vote_id = vote.get("id") if isinstance(vote, dict) else getattr(vote, "id", None)
            logger.warning(
                "aggregate.vote_skipped",
                extra={"vote_id": vote_id, "reason": f"unreadable vote record: {e.error_count()} error(s)"},
            )
            continue
        resolved.append(resolve_vote_points(record))
    return resolved


def summarize(resolved: List[ResolvedVote]) -> VoteSummary:
    if not resolved:
        return VoteSummary()
    points = [r.points for r in resolved]
    return VoteSummary(
        average=round_half_up(sum(points) / len(points)),
        min=min(points),
        max=max(points),
        count=len(points),
    )


def aggregate(votes: Iterable[Any]) -> VoteSummary:
    """Average / min / max / count over each vote's resolved points.

    The average is rounded once, after summing. No votes -> all zeros.
    """
    return summarize(resolve_votes(votes))


def vote_distribution(votes: Iterable[Any]) -> Dict[int, int]:
    """points -> number of votes with that value, ascending by points."""
    counts = Counter(r.points for r in resolve_votes(votes))
    return dict(sorted(counts.items()))


def finalize(base_estimate: float, meeting_buffer: float, iteration_multiplier: float) -> int:
    """Total effort points for a task: round((base + base * buffer) * multiplier).

    Every "total points" figure (task cards, history, exports, sequencing)
    goes through here.
    """
    for name, value in (
        ("base_estimate", base_estimate),
        ("meeting_buffer", meeting_buffer),
        ("iteration_multiplier", iteration_multiplier),
    ):
        if not is_finite_number(value):
            raise ValueError(f"{name} must be a finite number, got {value!r}")
    return round_half_up((base_estimate + base_estimate * meeting_buffer) * iteration_multiplier)


def finalize_breakdown(base_estimate: float, meeting_buffer: float, iteration_multiplier: float) -> FinalizedEstimate:
    total = finalize(base_estimate, meeting_buffer, iteration_multiplier)
    return FinalizedEstimate(
        base=round_half_up(base_estimate),
        meeting_buffer=meeting_buffer,
        iteration_multiplier=iteration_multiplier,
        buffer_points=round_half_up(base_estimate * meeting_buffer),
        total=total,
        t_shirt=estimate_to_tshirt_size(total),
    )


def task_total_points(task: Any) -> int:
    """finalize() applied to a stored task; unset fields fall back to 0 / 0 / 1."""
    base = getattr(task, "final_estimate", None) or 0
    buffer = getattr(task, "meeting_buffer", None) or 0
    multiplier = getattr(task, "iteration_multiplier", None) or 1
    return finalize(base, buffer, multiplier)


def session_total_points(tasks: Iterable[Any]) -> int:
    """Sum of totals over tasks that have a final estimate."""
    return sum(task_total_points(t) for t in tasks if getattr(t, "final_estimate", None))


def sprint_totals(tasks: Iterable[Any]) -> Dict[Optional[int], int]:
    """Total points per sprint number; unassigned tasks are grouped under None (backlog)."""
    totals: Dict[Optional[int], int] = {}
    for task in tasks:
        sprint = getattr(task, "sprint_number", None)
        totals[sprint] = totals.get(sprint, 0) + task_total_points(task)
    return totals


__all__ = [
    "SOURCE_RECOMPUTED",
    "SOURCE_STORED",
    "VoteRecord",
    "VoteSummary",
    "FinalizedEstimate",
    "ResolvedVote",
    "resolve_vote_points",
    "resolve_votes",
    "summarize",
    "aggregate",
    "vote_distribution",
    "finalize",
    "finalize_breakdown",
    "task_total_points",
    "session_total_points",
    "sprint_totals",
]
