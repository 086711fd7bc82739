# design_poker/app/api/routes/sessions.py

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.session import (
    ParticipantCreate,
    ParticipantRead,
    SessionCreateResponse,
    SessionRead,
    SessionSummary,
)
from app.schemas.task import TaskCreate, TaskRead
from app.services.errors import NotFoundError, SessionCodeExhaustedError
from app.services.session_service import SessionService
from app.services.task_service import TaskService


router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionCreateResponse, status_code=201)
def create_session(req: ParticipantCreate, db: Session = Depends(get_db)) -> SessionCreateResponse:
    """
    Create a session; the caller becomes its moderator.
    """
    try:
        session, moderator = SessionService(db).create_session(req.nickname, avatar_emoji=req.avatar_emoji)
    except SessionCodeExhaustedError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    return SessionCreateResponse(
        session=SessionRead.model_validate(session),
        moderator=ParticipantRead.model_validate(moderator),
    )


@router.get("/{code}", response_model=SessionRead)
def get_session(code: str, db: Session = Depends(get_db)) -> SessionRead:
    try:
        session = SessionService(db).get_session_by_code(code)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return SessionRead.model_validate(session)


@router.post("/{code}/participants", response_model=ParticipantRead, status_code=201)
def join_session(code: str, req: ParticipantCreate, db: Session = Depends(get_db)) -> ParticipantRead:
    try:
        participant = SessionService(db).join_session(code, req.nickname, avatar_emoji=req.avatar_emoji)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return ParticipantRead.model_validate(participant)


@router.post("/{code}/tasks", response_model=TaskRead, status_code=201)
def create_task(code: str, req: TaskCreate, db: Session = Depends(get_db)) -> TaskRead:
    try:
        session = SessionService(db).get_session_by_code(code)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    task = TaskService(db).create_task(session, req.title, req.description)
    return TaskRead.model_validate(task)


@router.get("/{code}/summary", response_model=SessionSummary)
def get_summary(code: str, db: Session = Depends(get_db)) -> SessionSummary:
    """
    Session review figures: completed tasks and total effort points.
    """
    try:
        session = SessionService(db).get_session_by_code(code)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    summary = TaskService(db).session_summary(session)
    sprints = dict(summary.pop("sprint_totals"))
    backlog = sprints.pop(None, 0)
    return SessionSummary(**summary, sprint_totals=sprints, backlog_points=backlog)
