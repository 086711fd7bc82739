# design_poker/app/api/routes/estimates.py

from __future__ import annotations

from fastapi import APIRouter

from app.schemas.estimation import (
    ActivityRead,
    ActivitySectionRead,
    CatalogOptionRead,
    CatalogsResponse,
    EstimateResponse,
    MarginalRequest,
    MarginalResponse,
)
from app.services.estimation import (
    MAX_POINTS,
    EstimationFactors,
    FactorKind,
    estimate_to_hours,
    estimate_to_tshirt_size,
    evaluate_estimate,
    option_hints,
    validate_factors,
)
from app.services.estimation.catalogs import (
    DESIGN_ACTIVITY_SECTIONS,
    DISCOVERY_ACTIVITIES,
    catalog_for,
    is_activity_kind,
)


router = APIRouter(prefix="/estimates", tags=["estimates"])


@router.get("/catalogs", response_model=CatalogsResponse)
def get_catalogs() -> CatalogsResponse:
    """
    All selectable options, for building the voting form.
    """
    factors = {
        kind.value: [CatalogOptionRead(value=o.value, label=o.label, description=o.description) for o in catalog_for(kind)]
        for kind in FactorKind
        if not is_activity_kind(kind)
    }
    return CatalogsResponse(
        max_points=MAX_POINTS,
        factors=factors,
        discovery_activities=[ActivityRead(**a.__dict__) for a in DISCOVERY_ACTIVITIES],
        design_activity_sections=[
            ActivitySectionRead(name=s.name, activities=[ActivityRead(**a.__dict__) for a in s.activities])
            for s in DESIGN_ACTIVITY_SECTIONS
        ],
    )


@router.post("/compute", response_model=EstimateResponse)
def compute(factors: EstimationFactors) -> EstimateResponse:
    """
    Live estimate for a (possibly partial) factor selection.
    Incomplete selections are not an error: complete=False and points=None.
    """
    result = evaluate_estimate(factors)
    errors = validate_factors(factors)
    if result is None:
        return EstimateResponse(complete=False, errors=errors)
    return EstimateResponse(
        complete=True,
        points=result.points,
        raw_points=result.raw_points,
        capped=result.capped,
        hours=estimate_to_hours(result.points),
        t_shirt=estimate_to_tshirt_size(result.points),
        errors=errors,
        warnings=result.warnings,
        components=result.components,
    )


@router.post("/marginal", response_model=MarginalResponse)
def marginal(req: MarginalRequest) -> MarginalResponse:
    """
    "+N pts" hints for every option of one factor kind.
    """
    hints = option_hints(req.kind, req.baseline)
    return MarginalResponse(kind=req.kind, hints={str(k): v for k, v in hints.items()})
