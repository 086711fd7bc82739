# design_poker/app/services/vote_service.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.db.models.participant import Participant
from app.db.models.task import TASK_STATUS_VOTING, TASK_STATUS_VOTING_COMPLETED, Task
from app.db.models.vote import Vote
from app.services.errors import InvalidVoteError, NotFoundError
from app.services.estimation import (
    ResolvedVote,
    VoteSummary,
    compute_estimate,
    normalize_factors,
    validate_factors,
)
from app.services.estimation.aggregator import resolve_votes, summarize

logger = logging.getLogger("app.services.vote")


@dataclass(frozen=True)
class RevealResult:
    task_id: int
    summary: VoteSummary
    distribution: Dict[int, int]
    votes: List[ResolvedVote]


class VoteService:
    """Vote submission (upsert) and reveal-time aggregation.

    Responsibilities:
    - Validate a participant's factor selection at the input boundary
    - Store the computed value together with the raw factors
    - Keep at most one vote per (task, participant)
    - Flip the task to voting_completed once everyone has voted
    """

    def __init__(self, db: Session):
        self.db = db

    def _get_task(self, task_id: int) -> Task:
        task = self.db.get(Task, task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")
        return task

    def _get_participant(self, participant_id: int, session_id: int) -> Participant:
        participant = self.db.get(Participant, participant_id)
        if participant is None or participant.session_id != session_id:
            raise NotFoundError(f"Participant {participant_id} not found in this session")
        return participant

    def get_vote(self, task_id: int, participant_id: int) -> Optional[Vote]:
        stmt = select(Vote).where(Vote.task_id == task_id, Vote.participant_id == participant_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_votes(self, task_id: int) -> List[Vote]:
        stmt = select(Vote).where(Vote.task_id == task_id).order_by(Vote.id)
        return list(self.db.execute(stmt).scalars())

    def submit_vote(self, task_id: int, participant_id: int, factors: Any) -> Vote:
        """Create or replace the participant's vote for a task; commits.

        Raises:
            NotFoundError: unknown task, or participant outside the task's session
            InvalidVoteError: voting closed, or the factor selection is invalid
        """
        task = self._get_task(task_id)
        self._get_participant(participant_id, task.session_id)  # type: ignore[arg-type]
        if task.status != TASK_STATUS_VOTING:
            raise InvalidVoteError([f"Voting is not open for task {task_id} (status={task.status})"])

        normalized = normalize_factors(factors)
        if not normalized.ok:
            raise InvalidVoteError([normalized.reason or "unreadable factors"])
        errors = validate_factors(normalized.factors)
        if errors:
            raise InvalidVoteError(errors)

        value = compute_estimate(normalized.factors)
        if value is None:
            raise InvalidVoteError(["Estimate could not be computed from the given factors"])
        record = normalized.factors.to_record()  # type: ignore[union-attr]

        vote = self.get_vote(task_id, participant_id)
        event = "vote.replaced"
        if vote is None:
            vote = Vote(task_id=task_id, participant_id=participant_id, value=value, factors=record)
            self.db.add(vote)
            event = "vote.submitted"
            try:
                self.db.flush()
            except IntegrityError:
                # a concurrent first submission from the same participant got there first
                self.db.rollback()
                logger.info("vote.insert_conflict", extra={"task_id": task_id, "participant_id": participant_id})
                vote = self.get_vote(task_id, participant_id)
                if vote is None:
                    raise
                event = "vote.replaced"

        if event == "vote.replaced":
            vote.value = value  # type: ignore[assignment]
            vote.factors = record  # type: ignore[assignment]
            vote.created_at = datetime.now(timezone.utc)  # type: ignore[assignment]
            self.db.flush()

        if settings.VOTING_AUTO_COMPLETE:
            self._complete_if_everyone_voted(task)

        self.db.commit()
        self.db.refresh(vote)

        logger.info(
            event,
            extra={"task_id": task_id, "participant_id": participant_id, "vote_id": vote.id, "points": value},
        )
        return vote

    def _complete_if_everyone_voted(self, task: Task) -> None:
        participants = self.db.execute(
            select(func.count(Participant.id)).where(Participant.session_id == task.session_id)
        ).scalar_one()
        votes = self.db.execute(select(func.count(Vote.id)).where(Vote.task_id == task.id)).scalar_one()
        if participants and votes >= participants:
            task.status = TASK_STATUS_VOTING_COMPLETED  # type: ignore[assignment]
            logger.info("task.voting_completed", extra={"task_id": task.id, "count": votes})

    def reveal(self, task_id: int) -> RevealResult:
        """Summary statistics over recomputed vote points."""
        self._get_task(task_id)
        resolved = resolve_votes(self.list_votes(task_id))
        distribution: Dict[int, int] = {}
        for r in resolved:
            distribution[r.points] = distribution.get(r.points, 0) + 1
        return RevealResult(
            task_id=task_id,
            summary=summarize(resolved),
            distribution=dict(sorted(distribution.items())),
            votes=resolved,
        )


__all__ = ["RevealResult", "VoteService"]
