from .estimation import (
    ActivityRead,
    ActivitySectionRead,
    CatalogOptionRead,
    CatalogsResponse,
    EstimateResponse,
    MarginalRequest,
    MarginalResponse,
    ResolvedVoteRead,
    RevealResponse,
    VoteRead,
    VoteSubmitRequest,
    VoteSummaryRead,
)
from .session import (
    ParticipantCreate,
    ParticipantRead,
    SessionCreateResponse,
    SessionRead,
    SessionSummary,
)
from .task import (
    SprintAssignRequest,
    TaskCreate,
    TaskFinalizeRequest,
    TaskFinalizeResponse,
    TaskRead,
    TaskTagCreate,
    TaskTagRead,
    VotingCompleteRequest,
)

__all__ = [
	"ActivityRead",
	"ActivitySectionRead",
	"CatalogOptionRead",
	"CatalogsResponse",
	"EstimateResponse",
	"MarginalRequest",
	"MarginalResponse",
	"ResolvedVoteRead",
	"RevealResponse",
	"VoteRead",
	"VoteSubmitRequest",
	"VoteSummaryRead",
	"ParticipantCreate",
	"ParticipantRead",
	"SessionCreateResponse",
	"SessionRead",
	"SessionSummary",
	"SprintAssignRequest",
	"TaskCreate",
	"TaskFinalizeRequest",
	"TaskFinalizeResponse",
	"TaskRead",
	"TaskTagCreate",
	"TaskTagRead",
	"VotingCompleteRequest",
]
