# design_poker/test_scripts/test_session_services.py

from __future__ import annotations

import pytest

from app.config import settings
from app.db.models import Vote
from app.db.models.task import TASK_STATUS_COMPLETED, TASK_STATUS_VOTING, TASK_STATUS_VOTING_COMPLETED
from app.services import session_service as session_service_module
from app.services.errors import (
    DuplicateTagError,
    InvalidTransitionError,
    InvalidVoteError,
    NotFoundError,
    SessionCodeExhaustedError,
)
from app.services.estimation import task_total_points
from app.services.session_service import SessionService
from app.services.task_service import DEFAULT_TAG_COLOR, TaskService, can_transition
from app.services.vote_service import VoteService


@pytest.fixture()
def room(db):
    """Session with a moderator, two participants and one task open for voting."""
    sessions = SessionService(db)
    session, moderator = sessions.create_session("Mod")
    ana = sessions.join_session(session.code, "Ana")
    ben = sessions.join_session(session.code, "Ben")
    tasks = TaskService(db)
    task = tasks.create_task(session, "Checkout redesign")
    tasks.start_voting(task.id)
    return {"session": session, "moderator": moderator, "ana": ana, "ben": ben, "task": task}


def test_create_session_registers_moderator(db):
    session, moderator = SessionService(db).create_session("Mod", avatar_emoji="🦊")
    assert len(session.code) == settings.SESSION_CODE_LENGTH
    assert moderator.is_moderator is True
    assert moderator.session_id == session.id
    assert moderator.avatar_emoji == "🦊"


def test_create_session_retries_on_collision(db, monkeypatch):
    codes = iter(["AAAAAA", "AAAAAA", "BBBBBB"])
    monkeypatch.setattr(session_service_module, "generate_session_code", lambda length: next(codes))
    service = SessionService(db)
    first, _ = service.create_session("First")
    second, _ = service.create_session("Second")
    assert first.code == "AAAAAA"
    assert second.code == "BBBBBB"


def test_create_session_gives_up_after_max_retries(db, monkeypatch):
    monkeypatch.setattr(session_service_module, "generate_session_code", lambda length: "CCCCCC")
    service = SessionService(db)
    service.create_session("First")
    with pytest.raises(SessionCodeExhaustedError) as exc:
        service.create_session("Second")
    assert exc.value.attempts == settings.SESSION_CODE_MAX_RETRIES


def test_join_is_case_insensitive_and_unknown_code_fails(db):
    service = SessionService(db)
    session, _ = service.create_session("Mod")
    participant = service.join_session(session.code.lower(), "Ana")
    assert participant.session_id == session.id
    assert participant.is_moderator is False
    assert [p.nickname for p in service.list_participants(session.id)] == ["Mod", "Ana"]
    with pytest.raises(NotFoundError):
        service.join_session("not-a-code", "Ghost")


def test_status_transition_table():
    assert can_transition("pending", "voting")
    assert can_transition("voting", "voting_completed")
    assert can_transition("voting_completed", "completed")
    assert not can_transition("pending", "completed")
    assert not can_transition("completed", "voting")


def test_vote_upsert_keeps_one_vote_per_participant(db, room, complete_factors):
    votes = VoteService(db)
    task, ana = room["task"], room["ana"]

    first = votes.submit_vote(task.id, ana.id, complete_factors)
    assert first.value == 13

    second = votes.submit_vote(task.id, ana.id, dict(complete_factors, effort=8))
    stored = db.query(Vote).filter(Vote.task_id == task.id, Vote.participant_id == ana.id).all()
    assert len(stored) == 1
    assert second.id == first.id
    # 8 * 2.625 = 21
    assert stored[0].value == 21
    assert stored[0].factors["effort"] == 8


def test_vote_stores_camel_case_factors(db, room, complete_factors):
    vote = VoteService(db).submit_vote(room["task"].id, room["ben"].id, complete_factors)
    assert vote.factors["designerLevels"] == [1.5, 2]
    assert vote.factors["designerCount"] == 2


def test_legacy_shaped_vote_is_normalized(db, room):
    legacy = {"effort": 5, "sprints": 1, "designers": 2, "breakpoints": 3, "prototypes": 1, "fidelity": 3}
    vote = VoteService(db).submit_vote(room["task"].id, room["ana"].id, legacy)
    assert vote.value == 13
    assert vote.factors["designerLevels"] == [1.5, 1.5]


def test_invalid_factors_rejected(db, room, complete_factors):
    votes = VoteService(db)
    with pytest.raises(InvalidVoteError) as exc:
        votes.submit_vote(room["task"].id, room["ana"].id, dict(complete_factors, effort=7))
    assert any("effort" in e for e in exc.value.errors)
    with pytest.raises(InvalidVoteError):
        votes.submit_vote(room["task"].id, room["ana"].id, "effort=5")
    assert votes.list_votes(room["task"].id) == []


def test_vote_requires_open_voting_and_known_participant(db, room, complete_factors):
    tasks = TaskService(db)
    pending = tasks.create_task(room["session"], "Empty state illustrations")
    votes = VoteService(db)
    with pytest.raises(InvalidVoteError):
        votes.submit_vote(pending.id, room["ana"].id, complete_factors)
    with pytest.raises(NotFoundError):
        votes.submit_vote(room["task"].id, 9999, complete_factors)
    with pytest.raises(NotFoundError):
        votes.submit_vote(9999, room["ana"].id, complete_factors)


def test_voting_completes_when_everyone_voted(db, room, complete_factors):
    votes = VoteService(db)
    task = room["task"]
    for key in ("moderator", "ana"):
        votes.submit_vote(task.id, room[key].id, complete_factors)
        db.refresh(task)
        assert task.status == TASK_STATUS_VOTING
    votes.submit_vote(task.id, room["ben"].id, complete_factors)
    db.refresh(task)
    assert task.status == TASK_STATUS_VOTING_COMPLETED


def test_reveal_recomputes_from_factors(db, room, complete_factors):
    votes = VoteService(db)
    task = room["task"]
    votes.submit_vote(task.id, room["ana"].id, complete_factors)
    votes.submit_vote(task.id, room["ben"].id, dict(complete_factors, effort=8))
    # simulate a stale stored value
    stale = votes.get_vote(task.id, room["ana"].id)
    stale.value = 1
    db.commit()

    result = votes.reveal(task.id)
    assert result.summary.model_dump() == {"average": 17, "min": 13, "max": 21, "count": 2}
    assert result.distribution == {13: 1, 21: 1}


def test_finalize_task_and_totals(db, room):
    tasks = TaskService(db)
    task = tasks.finalize_task(room["task"].id, 100, meeting_buffer=0.2, iteration_multiplier=2)
    assert task.status == TASK_STATUS_COMPLETED
    assert task.final_estimate == 100
    assert task_total_points(task) == 240

    with pytest.raises(InvalidTransitionError):
        tasks.finalize_task(task.id, 50)


def test_finalize_validates_inputs(db, room):
    tasks = TaskService(db)
    with pytest.raises(ValueError):
        tasks.finalize_task(room["task"].id, 0)
    with pytest.raises(ValueError):
        tasks.finalize_task(room["task"].id, 10, meeting_buffer=-0.1)
    with pytest.raises(ValueError):
        tasks.finalize_task(room["task"].id, 10, iteration_multiplier=0)


def test_pending_task_cannot_be_finalized(db, room):
    tasks = TaskService(db)
    pending = tasks.create_task(room["session"], "Onboarding copy")
    with pytest.raises(InvalidTransitionError):
        tasks.finalize_task(pending.id, 5)


def test_session_summary(db, room):
    tasks = TaskService(db)
    first = tasks.finalize_task(room["task"].id, 100, meeting_buffer=0.2, iteration_multiplier=2)
    second = tasks.create_task(room["session"], "Settings page")
    tasks.start_voting(second.id)
    tasks.complete_voting(second.id, duration_seconds=95)
    tasks.finalize_task(second.id, 8)
    tasks.assign_sprint(second.id, 154, quarter="Q1 2027", sequence_order=1)
    tasks.create_task(room["session"], "Still pending")

    db.refresh(room["session"])
    summary = tasks.session_summary(room["session"])
    assert summary["participants"] == 3
    assert summary["tasks_total"] == 3
    assert summary["tasks_completed"] == 2
    assert summary["total_points"] == 248
    assert summary["sprint_totals"] == {None: 240, 154: 8}
    assert summary["task_totals"] == {first.id: 240, second.id: 8}
    assert tasks.get_task(second.id).voting_duration_seconds == 95


def test_unknown_activity_ids_are_rejected(db, room, complete_factors):
    votes = VoteService(db)
    with pytest.raises(InvalidVoteError) as exc:
        votes.submit_vote(room["task"].id, room["ana"].id, dict(complete_factors, designActivities=["crystal_ball"]))
    assert exc.value.errors == ["design activity 'crystal_ball' is not a known activity"]
    assert votes.list_votes(room["task"].id) == []


def test_huge_designer_count_is_rejected_without_expanding(db, room, complete_factors):
    factors = dict(complete_factors, designerCount=1_000_000_000, designerLevel=1.5)
    del factors["designerLevels"]
    with pytest.raises(InvalidVoteError) as exc:
        VoteService(db).submit_vote(room["task"].id, room["ana"].id, factors)
    assert any("designerCount=1000000000" in e for e in exc.value.errors)


def test_concurrent_first_vote_becomes_a_replace(db, room, complete_factors, monkeypatch):
    votes = VoteService(db)
    task_id, ana_id = room["task"].id, room["ana"].id
    # the other request's insert lands first
    votes.submit_vote(task_id, ana_id, complete_factors)

    real_get_vote = votes.get_vote
    lookups = []

    def stale_get_vote(t_id, p_id):
        lookups.append((t_id, p_id))
        return None if len(lookups) == 1 else real_get_vote(t_id, p_id)

    monkeypatch.setattr(votes, "get_vote", stale_get_vote)
    vote = votes.submit_vote(task_id, ana_id, dict(complete_factors, effort=8))

    assert len(lookups) == 2
    assert vote.value == 21
    stored = VoteService(db).list_votes(task_id)
    assert len(stored) == 1
    assert stored[0].value == 21


def test_task_tags_are_unique_ignoring_case(db, room):
    tasks = TaskService(db)
    task_id = room["task"].id
    assert room["task"].tags == []

    task = tasks.add_tag(task_id, "  Mobile ", "pastel-green")
    task = tasks.add_tag(task_id, "Onboarding")
    assert task.tags == [
        {"label": "Mobile", "color": "pastel-green"},
        {"label": "Onboarding", "color": DEFAULT_TAG_COLOR},
    ]

    with pytest.raises(DuplicateTagError):
        tasks.add_tag(task_id, "MOBILE", "pastel-pink")
    with pytest.raises(ValueError):
        tasks.add_tag(task_id, "   ")
    with pytest.raises(ValueError):
        tasks.add_tag(task_id, "Web", "neon-green")
    assert len(tasks.get_task(task_id).tags) == 2


def test_remove_tag_matches_label_ignoring_case(db, room):
    tasks = TaskService(db)
    task_id = room["task"].id
    tasks.add_tag(task_id, "Mobile")
    tasks.add_tag(task_id, "Web")

    task = tasks.remove_tag(task_id, "mobile")
    assert [t["label"] for t in task.tags] == ["Web"]
    with pytest.raises(NotFoundError):
        tasks.remove_tag(task_id, "mobile")
