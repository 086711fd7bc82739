# design_poker/app/services/task_service.py

from __future__ import annotations

import logging
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models.estimation_session import EstimationSession
from app.db.models.task import (
    TASK_STATUS_COMPLETED,
    TASK_STATUS_PENDING,
    TASK_STATUS_VOTING,
    TASK_STATUS_VOTING_COMPLETED,
    Task,
)
from app.services.errors import DuplicateTagError, InvalidTransitionError, NotFoundError
from app.services.estimation import (
    finalize,
    session_total_points,
    sprint_totals,
    task_total_points,
)
from app.services.estimation.utils import is_finite_number

logger = logging.getLogger("app.services.task")


# pending -> voting -> [voting_completed] -> completed; a finished round may be re-opened
ALLOWED_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    TASK_STATUS_PENDING: frozenset({TASK_STATUS_VOTING}),
    TASK_STATUS_VOTING: frozenset({TASK_STATUS_VOTING_COMPLETED, TASK_STATUS_COMPLETED}),
    TASK_STATUS_VOTING_COMPLETED: frozenset({TASK_STATUS_VOTING, TASK_STATUS_COMPLETED}),
    TASK_STATUS_COMPLETED: frozenset(),
}


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


TAG_COLORS: Tuple[str, ...] = (
    "pastel-blue",
    "pastel-pink",
    "pastel-green",
    "pastel-purple",
    "pastel-yellow",
    "pastel-orange",
    "pastel-teal",
    "pastel-rose",
    "pastel-indigo",
    "pastel-cyan",
)
DEFAULT_TAG_COLOR = TAG_COLORS[0]


class TaskService:
    """Task lifecycle and moderator finalization."""

    def __init__(self, db: Session):
        self.db = db

    def get_task(self, task_id: int) -> Task:
        task = self.db.get(Task, task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")
        return task

    def list_tasks(self, session_id: int) -> List[Task]:
        stmt = select(Task).where(Task.session_id == session_id).order_by(Task.created_at, Task.id)
        return list(self.db.execute(stmt).scalars())

    def create_task(self, session: EstimationSession, title: str, description: Optional[str] = None) -> Task:
        task = Task(session_id=session.id, title=title, description=description, status=TASK_STATUS_PENDING)
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        logger.info("task.created", extra={"session_code": session.code, "task_id": task.id})
        return task

    def _transition(self, task: Task, target: str) -> None:
        current = str(task.status)
        if not can_transition(current, target):
            raise InvalidTransitionError(task.id, current, target)  # type: ignore[arg-type]
        task.status = target  # type: ignore[assignment]
        logger.info("task.status_changed", extra={"task_id": task.id, "status": target, "reason": f"from {current}"})

    def start_voting(self, task_id: int) -> Task:
        task = self.get_task(task_id)
        self._transition(task, TASK_STATUS_VOTING)
        self.db.commit()
        self.db.refresh(task)
        return task

    def complete_voting(self, task_id: int, duration_seconds: Optional[int] = None) -> Task:
        task = self.get_task(task_id)
        self._transition(task, TASK_STATUS_VOTING_COMPLETED)
        if duration_seconds is not None and duration_seconds > 0:
            task.voting_duration_seconds = duration_seconds  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(task)
        return task

    def finalize_task(
        self,
        task_id: int,
        base_estimate: int,
        meeting_buffer: Optional[float] = None,
        iteration_multiplier: Optional[float] = None,
    ) -> Task:
        """Persist the moderator's base estimate and adjustments; task -> completed.

        Raises ValueError for a non-positive base, a negative buffer or a
        non-positive multiplier.
        """
        buffer = 0.0 if meeting_buffer is None else meeting_buffer
        multiplier = 1.0 if iteration_multiplier is None else iteration_multiplier
        if not is_finite_number(base_estimate) or base_estimate <= 0:
            raise ValueError("base_estimate must be a positive number")
        if not is_finite_number(buffer) or buffer < 0:
            raise ValueError("meeting_buffer must be a non-negative number")
        if not is_finite_number(multiplier) or multiplier <= 0:
            raise ValueError("iteration_multiplier must be a positive number")

        task = self.get_task(task_id)
        self._transition(task, TASK_STATUS_COMPLETED)
        task.final_estimate = base_estimate  # type: ignore[assignment]
        task.meeting_buffer = buffer  # type: ignore[assignment]
        task.iteration_multiplier = multiplier  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(task)

        logger.info(
            "task.finalized",
            extra={"task_id": task.id, "points": finalize(base_estimate, buffer, multiplier)},
        )
        return task

    def assign_sprint(
        self,
        task_id: int,
        sprint_number: Optional[int],
        quarter: Optional[str] = None,
        sequence_order: Optional[int] = None,
    ) -> Task:
        """Place a task in a sprint, or back in the backlog when sprint_number is None."""
        task = self.get_task(task_id)
        task.sprint_number = sprint_number  # type: ignore[assignment]
        task.quarter = quarter if sprint_number is not None else None  # type: ignore[assignment]
        task.sequence_order = sequence_order if sprint_number is not None else None  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(task)
        return task

    def add_tag(self, task_id: int, label: str, color: Optional[str] = None) -> Task:
        """Append a colored tag. Labels are trimmed and must be unique per task, ignoring case.

        Raises:
            ValueError: blank label or a color outside TAG_COLORS
            DuplicateTagError: the task already has a tag with that label
        """
        cleaned = (label or "").strip()
        if not cleaned:
            raise ValueError("tag label must not be blank")
        color = color or DEFAULT_TAG_COLOR
        if color not in TAG_COLORS:
            raise ValueError(f"unknown tag color '{color}'")

        task = self.get_task(task_id)
        tags = list(task.tags or [])
        if any(t.get("label", "").lower() == cleaned.lower() for t in tags):
            raise DuplicateTagError(task.id, cleaned)  # type: ignore[arg-type]

        # reassign so the JSON column is marked dirty
        task.tags = tags + [{"label": cleaned, "color": color}]  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(task)
        logger.info("task.tag_added", extra={"task_id": task.id, "count": len(task.tags)})
        return task

    def remove_tag(self, task_id: int, label: str) -> Task:
        """Drop the tag whose label matches, ignoring case; NotFoundError when there is none."""
        task = self.get_task(task_id)
        tags = list(task.tags or [])
        wanted = (label or "").strip().lower()
        kept = [t for t in tags if t.get("label", "").lower() != wanted]
        if len(kept) == len(tags):
            raise NotFoundError(f"Task {task_id} has no tag '{label}'")

        task.tags = kept  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(task)
        logger.info("task.tag_removed", extra={"task_id": task.id, "count": len(kept)})
        return task

    def session_summary(self, session: EstimationSession) -> Dict[str, Any]:
        """Figures shown on the session review page."""
        tasks = self.list_tasks(session.id)  # type: ignore[arg-type]
        completed = [t for t in tasks if t.status == TASK_STATUS_COMPLETED]
        return {
            "session_code": session.code,
            "participants": len(session.participants),
            "tasks_total": len(tasks),
            "tasks_completed": len(completed),
            "total_points": session_total_points(tasks),
            "sprint_totals": sprint_totals(completed),
            "task_totals": {t.id: task_total_points(t) for t in completed},
        }


__all__ = ["ALLOWED_TRANSITIONS", "can_transition", "TAG_COLORS", "DEFAULT_TAG_COLOR", "TaskService"]
