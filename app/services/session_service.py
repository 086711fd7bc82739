# design_poker/app/services/session_service.py

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings
from app.db.models.estimation_session import EstimationSession
from app.db.models.participant import Participant
from app.services.errors import NotFoundError, SessionCodeExhaustedError
from app.services.session_code import generate_session_code, normalize_session_code

logger = logging.getLogger("app.services.session")


class SessionService:
    """Create / join estimation sessions.

    Responsibilities:
    - Pick a join code that is not already taken (the generator itself gives no
      uniqueness guarantee)
    - Register the moderator and later participants
    """

    def __init__(self, db: Session):
        self.db = db

    def _code_exists(self, code: str) -> bool:
        stmt = select(EstimationSession.id).where(EstimationSession.code == code)
        return self.db.execute(stmt).first() is not None

    def _unique_code(self) -> str:
        attempts = settings.SESSION_CODE_MAX_RETRIES
        code: Optional[str] = None
        for attempt in range(1, attempts + 1):
            code = generate_session_code(settings.SESSION_CODE_LENGTH)
            if not self._code_exists(code):
                return code
            logger.info("session.code_collision", extra={"session_code": code, "attempt": attempt})
        raise SessionCodeExhaustedError(attempts, code)

    def create_session(
        self,
        moderator_nickname: str,
        avatar_emoji: Optional[str] = None,
    ) -> Tuple[EstimationSession, Participant]:
        """Create a session plus its moderator participant; commits."""
        session = EstimationSession(code=self._unique_code(), is_active=True)
        self.db.add(session)
        self.db.flush()

        moderator = Participant(
            session_id=session.id,
            nickname=moderator_nickname,
            is_moderator=True,
            avatar_emoji=avatar_emoji,
        )
        self.db.add(moderator)
        self.db.commit()
        self.db.refresh(session)
        self.db.refresh(moderator)

        logger.info("session.created", extra={"session_code": session.code, "participant_id": moderator.id})
        return session, moderator

    def get_session_by_code(self, code: str) -> EstimationSession:
        normalized = normalize_session_code(code)
        stmt = select(EstimationSession).where(EstimationSession.code == normalized)
        session = self.db.execute(stmt).scalar_one_or_none()
        if session is None:
            raise NotFoundError(f"Session '{normalized}' not found")
        return session

    def join_session(self, code: str, nickname: str, avatar_emoji: Optional[str] = None) -> Participant:
        session = self.get_session_by_code(code)
        if not session.is_active:
            raise NotFoundError(f"Session '{session.code}' is no longer active")

        participant = Participant(
            session_id=session.id,
            nickname=nickname,
            is_moderator=False,
            avatar_emoji=avatar_emoji,
        )
        self.db.add(participant)
        self.db.commit()
        self.db.refresh(participant)

        logger.info("session.joined", extra={"session_code": session.code, "participant_id": participant.id})
        return participant

    def list_participants(self, session_id: int) -> List[Participant]:
        stmt = select(Participant).where(Participant.session_id == session_id).order_by(Participant.joined_at, Participant.id)
        return list(self.db.execute(stmt).scalars())


__all__ = ["SessionService"]
