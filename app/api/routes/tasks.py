# design_poker/app/api/routes/tasks.py

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.estimation import (
    ResolvedVoteRead,
    RevealResponse,
    VoteRead,
    VoteSubmitRequest,
    VoteSummaryRead,
)
from app.schemas.task import (
    SprintAssignRequest,
    TaskFinalizeRequest,
    TaskFinalizeResponse,
    TaskRead,
    TaskTagCreate,
    VotingCompleteRequest,
)
from app.services.errors import DuplicateTagError, InvalidTransitionError, InvalidVoteError, NotFoundError
from app.services.estimation import estimate_to_hours, estimate_to_tshirt_size, finalize_breakdown
from app.services.task_service import TaskService
from app.services.vote_service import VoteService


router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("/{task_id}", response_model=TaskRead)
def get_task(task_id: int, db: Session = Depends(get_db)) -> TaskRead:
    try:
        return TaskRead.model_validate(TaskService(db).get_task(task_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.post("/{task_id}/start", response_model=TaskRead)
def start_voting(task_id: int, db: Session = Depends(get_db)) -> TaskRead:
    try:
        return TaskRead.model_validate(TaskService(db).start_voting(task_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.post("/{task_id}/complete-voting", response_model=TaskRead)
def complete_voting(task_id: int, req: VotingCompleteRequest, db: Session = Depends(get_db)) -> TaskRead:
    try:
        return TaskRead.model_validate(TaskService(db).complete_voting(task_id, req.duration_seconds))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.post("/{task_id}/votes", response_model=VoteRead)
def submit_vote(task_id: int, req: VoteSubmitRequest, db: Session = Depends(get_db)) -> VoteRead:
    """
    Create or replace the participant's vote (one vote per participant per task).
    """
    try:
        vote = VoteService(db).submit_vote(task_id, req.participant_id, req.factors)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except InvalidVoteError as e:
        raise HTTPException(status_code=400, detail=e.errors) from e
    return VoteRead.model_validate(vote)


@router.get("/{task_id}/results", response_model=RevealResponse)
def get_results(task_id: int, db: Session = Depends(get_db)) -> RevealResponse:
    try:
        result = VoteService(db).reveal(task_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    return RevealResponse(
        task_id=result.task_id,
        summary=VoteSummaryRead(**result.summary.model_dump()),
        distribution=result.distribution,
        votes=[
            ResolvedVoteRead(
                vote_id=r.vote.id,
                participant_id=r.vote.participant_id,
                points=r.points,
                source=r.source,
                hours=estimate_to_hours(r.points),
                t_shirt=estimate_to_tshirt_size(r.points),
            )
            for r in result.votes
        ],
    )


@router.post("/{task_id}/finalize", response_model=TaskFinalizeResponse)
def finalize_task(task_id: int, req: TaskFinalizeRequest, db: Session = Depends(get_db)) -> TaskFinalizeResponse:
    """
    Moderator sets the base estimate plus buffer / iteration; task -> completed.
    """
    try:
        task = TaskService(db).finalize_task(
            task_id,
            req.base_estimate,
            meeting_buffer=req.meeting_buffer,
            iteration_multiplier=req.iteration_multiplier,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    breakdown = finalize_breakdown(req.base_estimate, req.meeting_buffer, req.iteration_multiplier)
    return TaskFinalizeResponse(
        task=TaskRead.model_validate(task),
        buffer_points=breakdown.buffer_points,
        total_points=breakdown.total,
        t_shirt=breakdown.t_shirt,
    )


@router.put("/{task_id}/sprint", response_model=TaskRead)
def assign_sprint(task_id: int, req: SprintAssignRequest, db: Session = Depends(get_db)) -> TaskRead:
    """
    Place a task in a sprint, or move it to the backlog with sprint_number=null.
    """
    try:
        task = TaskService(db).assign_sprint(task_id, req.sprint_number, req.quarter, req.sequence_order)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return TaskRead.model_validate(task)


@router.post("/{task_id}/tags", response_model=TaskRead, status_code=201)
def add_tag(task_id: int, req: TaskTagCreate, db: Session = Depends(get_db)) -> TaskRead:
    """
    Add a colored tag; labels are unique per task regardless of case.
    """
    try:
        task = TaskService(db).add_tag(task_id, req.label, req.color)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except DuplicateTagError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return TaskRead.model_validate(task)


@router.delete("/{task_id}/tags/{label}", response_model=TaskRead)
def remove_tag(task_id: int, label: str, db: Session = Depends(get_db)) -> TaskRead:
    try:
        task = TaskService(db).remove_tag(task_id, label)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return TaskRead.model_validate(task)
