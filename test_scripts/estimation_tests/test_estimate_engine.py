# design_poker/test_scripts/estimation_tests/test_estimate_engine.py

from __future__ import annotations

import math

import pytest

from app.services.estimation import (
    MAX_POINTS,
    EstimationFactors,
    FactorKind,
    compute_estimate,
    evaluate_estimate,
    is_complete,
    marginal_contribution,
    option_hints,
    validate_factors,
)
from app.services.estimation.catalogs import catalog_for
from app.services.estimation.engine import NEUTRAL_FACTORS


def test_complete_selection_points(complete_factors):
    # (1 + 3.5 + 3 + 3) / 4 = 2.625 ; 5 * 2.625 = 13.125 -> 13
    res = evaluate_estimate(complete_factors)
    assert res is not None
    assert res.base == 13
    assert res.points == 13
    assert res.raw_points == 13
    assert res.capped is False
    assert res.warnings == []
    assert compute_estimate(complete_factors) == 13


def test_accepts_model_and_snake_case_names(complete_factors):
    model = EstimationFactors.model_validate(complete_factors)
    snake = {
        "effort": 5,
        "sprints": 1,
        "designer_count": 2,
        "designer_levels": [1.5, 2],
        "breakpoints": 3,
        "fidelity": 3,
    }
    assert compute_estimate(model) == compute_estimate(snake) == 13


def test_base_rounds_half_up():
    # 3 * (0.5 + 1.5 + 2 + 2) / 4 = 4.5 -> 5 (banker's rounding would give 4)
    assert compute_estimate(NEUTRAL_FACTORS) == 5


def test_activities_buffer_and_iteration_order(complete_factors):
    factors = dict(
        complete_factors,
        discoveryActivities=["user_research", "competitive_analysis"],
        designActivities=["wireframes", "usability_testing"],
        meetingBuffer=0.2,
        iterationMultiplier=2,
    )
    # subtotal 13 + 7 + 7 = 27 ; 27 * 1.2 = 32.4 ; * 2 = 64.8 -> 65
    res = evaluate_estimate(factors)
    assert res is not None
    assert res.activity_points == 14
    assert res.components["subtotal"] == 27
    assert res.points == 65


def test_unknown_activity_contributes_zero(complete_factors):
    factors = dict(complete_factors, discoveryActivities=["user_research", "crystal_ball"])
    res = evaluate_estimate(factors)
    assert res is not None
    assert res.points == 13 + 5
    assert any("crystal_ball" in w for w in res.warnings)


def test_duplicate_activity_ids_count_once(complete_factors):
    factors = dict(complete_factors, designActivities=["wireframes", "wireframes"])
    assert compute_estimate(factors) == 15


def test_optional_fields_default(complete_factors):
    factors = dict(complete_factors)
    for key in ("meetingBuffer", "iterationMultiplier", "discoveryActivities", "designActivities"):
        factors.pop(key)
    assert compute_estimate(factors) == 13

    factors.update(meetingBuffer=None, iterationMultiplier=None, discoveryActivities=None, designActivities=None)
    assert compute_estimate(factors) == 13


def test_malformed_optional_fields_do_not_raise(complete_factors):
    factors = dict(complete_factors, meetingBuffer=-1, iterationMultiplier=0)
    res = evaluate_estimate(factors)
    assert res is not None
    assert res.points == 13
    assert len(res.warnings) == 2

    nan_factors = dict(complete_factors, meetingBuffer=math.nan)
    assert compute_estimate(nan_factors) == 13


@pytest.mark.parametrize("missing", ["effort", "sprints", "designerCount", "breakpoints", "fidelity"])
def test_missing_required_field_is_not_computable(complete_factors, missing):
    factors = dict(complete_factors)
    factors.pop(missing)
    assert is_complete(factors) is False
    assert compute_estimate(factors) is None
    assert evaluate_estimate(factors) is None


def test_designer_level_count_mismatch_returns_none(complete_factors):
    too_few = dict(complete_factors, designerCount=2, designerLevels=[1.5])
    too_many = dict(complete_factors, designerCount=1, designerLevels=[1.5, 2])
    assert compute_estimate(too_few) is None
    assert compute_estimate(too_many) is None


def test_garbage_input_is_not_computable():
    assert compute_estimate(None) is None
    assert compute_estimate({}) is None
    assert compute_estimate({"effort": "a lot"}) is None
    assert compute_estimate(["not", "a", "mapping"]) is None  # type: ignore[arg-type]


def test_determinism(complete_factors):
    factors = dict(complete_factors, designActivities=["visual_design"], meetingBuffer=0.3, iterationMultiplier=3)
    first = evaluate_estimate(factors)
    second = evaluate_estimate(factors)
    assert first == second


@pytest.mark.parametrize(
    "kind,field",
    [
        (FactorKind.EFFORT, "effort"),
        (FactorKind.SPRINTS, "sprints"),
        (FactorKind.BREAKPOINTS, "breakpoints"),
        (FactorKind.FIDELITY, "fidelity"),
    ],
)
def test_monotonic_in_each_catalog_factor(complete_factors, kind, field):
    values = sorted(o.value for o in catalog_for(kind))
    raws = []
    for v in values:
        res = evaluate_estimate(dict(complete_factors, **{field: v}))
        assert res is not None
        raws.append(res.raw_points)
    assert raws == sorted(raws)


def test_monotonic_in_designer_level(complete_factors):
    raws = []
    for level in sorted(o.value for o in catalog_for(FactorKind.DESIGNER_LEVEL)):
        res = evaluate_estimate(dict(complete_factors, designerLevels=[level, level]))
        assert res is not None
        raws.append(res.raw_points)
    assert raws == sorted(raws)


def test_clamped_when_raw_exceeds_ceiling():
    factors = {
        "effort": 8,
        "sprints": 3,
        "designerCount": 4,
        "designerLevels": [2, 2, 2, 2],
        "breakpoints": 4,
        "fidelity": 4,
        "iterationMultiplier": 4,
    }
    # 8 * (3 + 8 + 4 + 4) / 4 = 38 ; * 4 = 152
    res = evaluate_estimate(factors)
    assert res is not None
    assert res.raw_points == 152
    assert res.points == MAX_POINTS
    assert res.capped is True


def test_exactly_at_ceiling_is_not_capped(complete_factors):
    factors = dict(
        complete_factors,
        discoveryActivities=["user_research"],
        designActivities=["usability_testing", "wireframes"],
        iterationMultiplier=4,
    )
    # (13 + 12) * 4 = 100
    res = evaluate_estimate(factors)
    assert res is not None
    assert res.raw_points == MAX_POINTS
    assert res.points == MAX_POINTS
    assert res.capped is False


def test_validate_factors_accepts_complete_selection(complete_factors):
    assert validate_factors(complete_factors) == []


def test_validate_factors_reports_problems():
    errors = validate_factors(
        {
            "effort": 7,
            "sprints": 1,
            "designerCount": 0,
            "designerLevels": [],
            "breakpoints": 3,
            "meetingBuffer": -0.1,
            "iterationMultiplier": 0,
        }
    )
    joined = " | ".join(errors)
    assert "fidelity is required" in joined
    assert "designer_count must be at least 1" in joined
    assert "effort=7" in joined
    assert "meeting_buffer" in joined
    assert "iteration_multiplier" in joined


def test_validate_factors_flags_unknown_level(complete_factors):
    errors = validate_factors(dict(complete_factors, designerLevels=[1.5, 3]))
    assert errors == ["designer_levels[1]=3.0 is not a known level"]


def test_marginal_contribution_against_neutral_baseline():
    # neutral baseline is 5 points
    assert marginal_contribution(FactorKind.EFFORT, 5) == 3  # 7.5 -> 8
    assert marginal_contribution(FactorKind.EFFORT, 8) == 7  # 12
    assert marginal_contribution(FactorKind.DESIGNER_COUNT, 2) == 1  # 5.625 -> 6
    assert marginal_contribution(FactorKind.ITERATION_MULTIPLIER, 2) == 5
    assert marginal_contribution(FactorKind.MEETING_BUFFER, 0.2) == 1
    assert marginal_contribution(FactorKind.DISCOVERY_ACTIVITY, "user_research") == 5
    assert marginal_contribution(FactorKind.DESIGN_ACTIVITY, "wireframes") == 2


def test_marginal_contribution_never_negative():
    assert marginal_contribution(FactorKind.EFFORT, 1) == 0
    assert marginal_contribution(FactorKind.DESIGNER_LEVEL, 1) == 0
    assert marginal_contribution(FactorKind.DISCOVERY_ACTIVITY, "crystal_ball") == 0


def test_marginal_contribution_uncomputable_baseline_is_zero():
    assert marginal_contribution(FactorKind.EFFORT, 8, baseline={"effort": 1}) == 0


def test_option_hints_cover_whole_catalog():
    hints = option_hints(FactorKind.EFFORT)
    assert set(hints) == {1, 2, 3, 5, 8}
    assert hints[3] == 0
    assert hints[5] == 3

    activity_hints = option_hints(FactorKind.DESIGN_ACTIVITY)
    assert activity_hints["usability_testing"] == 5


def test_validate_factors_flags_unknown_activities(complete_factors):
    errors = validate_factors(
        dict(complete_factors, designActivities=["wireframes", "crystal_ball"], discoveryActivities=["nope", "nope"])
    )
    assert errors == [
        "discovery activity 'nope' is not a known activity",
        "design activity 'crystal_ball' is not a known activity",
    ]


OVERFLOWING = {
    "effort": 1e300,
    "sprints": 1e300,
    "designerCount": 1,
    "designerLevels": [1],
    "breakpoints": 1,
    "fidelity": 1,
}


def test_overflowing_selection_is_not_computable():
    assert is_complete(OVERFLOWING)
    assert evaluate_estimate(OVERFLOWING) is None
    assert compute_estimate(OVERFLOWING) is None


def test_overflow_after_buffer_and_multiplier_is_not_computable():
    factors = dict(OVERFLOWING, effort=1e154, sprints=1e154, iterationMultiplier=1e300)
    assert compute_estimate(factors) is None


def test_marginal_contribution_rejects_out_of_catalog_designer_counts():
    baseline = NEUTRAL_FACTORS.model_copy(update={"designer_count": 5_000_000})
    assert marginal_contribution(FactorKind.DESIGNER_LEVEL, 2, baseline) == 0
    assert marginal_contribution(FactorKind.DESIGNER_COUNT, 5_000_000) == 0
