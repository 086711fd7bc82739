from .catalogs import (
    MAX_POINTS,
    UNKNOWN_LABEL,
    ActivityOption,
    FactorKind,
    FactorOption,
    find_activity,
    find_option,
    option_label,
)
from .interfaces import EstimateResult, EstimationFactors
from .engine import (
    NEUTRAL_FACTORS,
    compute_estimate,
    estimate_to_hours,
    estimate_to_tshirt_size,
    evaluate_estimate,
    is_complete,
    marginal_contribution,
    option_hints,
    validate_factors,
)
from .normalizer import FactorShape, NormalizedFactors, normalize_factors
from .aggregator import (
    FinalizedEstimate,
    ResolvedVote,
    VoteRecord,
    VoteSummary,
    aggregate,
    finalize,
    finalize_breakdown,
    resolve_vote_points,
    session_total_points,
    sprint_totals,
    task_total_points,
    vote_distribution,
)

__all__ = [
    "MAX_POINTS",
    "UNKNOWN_LABEL",
    "ActivityOption",
    "FactorKind",
    "FactorOption",
    "find_activity",
    "find_option",
    "option_label",
    "EstimateResult",
    "EstimationFactors",
    "NEUTRAL_FACTORS",
    "compute_estimate",
    "estimate_to_hours",
    "estimate_to_tshirt_size",
    "evaluate_estimate",
    "is_complete",
    "marginal_contribution",
    "option_hints",
    "validate_factors",
    "FactorShape",
    "NormalizedFactors",
    "normalize_factors",
    "FinalizedEstimate",
    "ResolvedVote",
    "VoteRecord",
    "VoteSummary",
    "aggregate",
    "finalize",
    "finalize_breakdown",
    "resolve_vote_points",
    "session_total_points",
    "sprint_totals",
    "task_total_points",
    "vote_distribution",
]
