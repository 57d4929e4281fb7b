# API/serialization schemas live here
from app.schemas.ratings import (
    LgdRange,
    ConsensusMetrics,
    CredoraMetrics,
    AssetRating,
    SubmissionEntry,
    SubmitRequest,
    SubmitResponse,
    ErrorResponse,
)

__all__ = [
    "LgdRange",
    "ConsensusMetrics",
    "CredoraMetrics",
    "AssetRating",
    "SubmissionEntry",
    "SubmitRequest",
    "SubmitResponse",
    "ErrorResponse",
]
