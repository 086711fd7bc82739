# app/db/models/__init__.py

from .estimation_session import EstimationSession
from .participant import Participant
from .task import Task
from .vote import Vote

__all__ = [
    "EstimationSession",
    "Participant",
    "Task",
    "Vote",
]
