"""
Pydantic schemas for asset ratings and submissions.
Wire names follow the Credora GraphQL fields (camelCase); Python attributes are snake_case.
"""
from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


# --- Asset ratings (as returned by getAssetRatings.items) ---

class LgdRange(_WireModel):
    min: float | None = None
    max: float | None = None


class ConsensusMetrics(_WireModel):
    consensus_rating: str | None = Field(default=None, alias="consensusRating")
    consensus_pd: float | None = Field(default=None, alias="consensusPd", description="Probability of default")
    consensus_score: float | None = Field(default=None, alias="consensusScore")


class CredoraMetrics(_WireModel):
    rating: str | None = None
    pd: float | None = Field(default=None, description="Probability of default")
    score: float | None = None
    status: str | None = None
    publish_date: str | None = Field(default=None, alias="publishDate")
    valid_until: str | None = Field(default=None, alias="validUntil")
    under_review: bool | None = Field(default=None, alias="underReview")
    methodology: str | None = None
    report: str | None = None
    lgd: LgdRange | None = None


class AssetRating(_WireModel):
    """One asset record. Immutable for the session."""
    id: str | int
    address: str | None = None
    symbol: str
    chain_id: str | int | None = Field(default=None, alias="chainId")
    consensus_metrics: ConsensusMetrics = Field(default_factory=ConsensusMetrics, alias="consensusMetrics")
    credora_metrics: CredoraMetrics = Field(default_factory=CredoraMetrics, alias="credoraMetrics")

    @property
    def consensus_rating(self) -> str | None:
        return self.consensus_metrics.consensus_rating

    @property
    def credora_rating(self) -> str | None:
        return self.credora_metrics.rating


# --- Submission ---

class SubmissionEntry(_WireModel):
    id: str | int
    symbol: str
    selected_rating: str = Field(alias="selectedRating")
    consensus_rating: str | None = Field(default=None, alias="consensusRating")
    credora_rating: str | None = Field(default=None, alias="credoraRating")


class SubmitRequest(BaseModel):
    name: str = ""
    email: str = ""
    ratings: list[SubmissionEntry] = Field(default_factory=list)


class SubmitResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
