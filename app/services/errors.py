# design_poker/app/services/errors.py

from __future__ import annotations

from typing import List, Optional


class DomainError(Exception):
    """Base class for recoverable service-layer errors."""


class NotFoundError(DomainError):
    pass


class InvalidTransitionError(DomainError):
    """Task status change not allowed from the current status."""

    def __init__(self, task_id: int, current: str, target: str):
        self.task_id = task_id
        self.current = current
        self.target = target
        super().__init__(f"Task {task_id} cannot move from '{current}' to '{target}'")


class InvalidVoteError(DomainError):
    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("Invalid estimation factors: " + "; ".join(errors))


class DuplicateTagError(DomainError):
    def __init__(self, task_id: int, label: str):
        self.task_id = task_id
        self.label = label
        super().__init__(f"Task {task_id} already has a tag named '{label}'")


class SessionCodeExhaustedError(DomainError):
    def __init__(self, attempts: int, last_code: Optional[str] = None):
        self.attempts = attempts
        self.last_code = last_code
        super().__init__(f"Could not generate a unique session code after {attempts} attempts")


__all__ = [
    "DomainError",
    "NotFoundError",
    "InvalidTransitionError",
    "InvalidVoteError",
    "DuplicateTagError",
    "SessionCodeExhaustedError",
]
