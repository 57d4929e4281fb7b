"""
Rating reconciliation: single-user review session over fetched asset ratings.

Holds the assets, a sparse override map (asset id -> rating), the reviewer's
name and email, and the lifecycle of the two network exchanges (load once,
submit on demand). The submission payload falls back to the consensus rating
wherever no override exists.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Iterable

from app.core.errors import RatingsFormError, ValidationFailed
from app.core.rating_scale import RatingSignal, compare_ratings, is_known_rating, sort_key
from app.schemas.ratings import AssetRating, SubmissionEntry
from app.services.api_gateway import RatingsGateway

log = logging.getLogger(__name__)

VALIDATION_MESSAGE = "Please fill all fields and rate at least one asset."
SUCCESS_MESSAGE = "Ratings submitted successfully!"


class ViewState(str, enum.Enum):
    LOADING = "loading"
    READY = "ready"
    READY_EMPTY = "ready_empty"


class RequestState(str, enum.Enum):
    IDLE = "idle"
    PENDING = "pending"
    SETTLED = "settled"


@dataclass(frozen=True)
class Notice:
    message: str
    severity: str  # "success" | "error"


def sort_assets(assets: Iterable[AssetRating]) -> list[AssetRating]:
    """Best consensus rating first; off-scale ratings last. Stable."""
    return sorted(assets, key=lambda a: sort_key(a.consensus_rating))


def build_submission_payload(
    assets: Iterable[AssetRating],
    overrides: dict[str | int, str],
) -> list[SubmissionEntry]:
    return [
        SubmissionEntry(
            id=asset.id,
            symbol=asset.symbol,
            selected_rating=overrides.get(asset.id) or asset.consensus_rating or "",
            consensus_rating=asset.consensus_rating,
            credora_rating=asset.credora_rating,
        )
        for asset in assets
    ]


class ReviewSession:
    def __init__(self, gateway: RatingsGateway):
        self.gateway = gateway
        self.view_state = ViewState.LOADING
        self.load_state = RequestState.IDLE
        self.submit_state = RequestState.IDLE
        self.name = ""
        self.email = ""
        self.notice: Notice | None = None
        self._assets: list[AssetRating] = []
        self._overrides: dict[str | int, str] = {}

    # --- Loading ---

    async def load(self) -> None:
        """Fetch assets once. A failure leaves the session READY_EMPTY with an error notice."""
        if self.load_state != RequestState.IDLE:
            raise ValidationFailed("Assets have already been loaded for this session.")
        self.load_state = RequestState.PENDING
        try:
            assets = await self.gateway.fetch_assets()
        except RatingsFormError as e:
            log.error("Failed to load assets: %s", e.message)
            self._assets = []
            self.view_state = ViewState.READY_EMPTY
            self.notice = Notice(e.message or "Failed to load assets.", "error")
        else:
            self._assets = sort_assets(assets)
            self.view_state = ViewState.READY
        finally:
            self.load_state = RequestState.SETTLED

    # --- Asset table ---

    @property
    def assets(self) -> list[AssetRating]:
        return list(self._assets)

    @property
    def overrides(self) -> dict[str | int, str]:
        return dict(self._overrides)

    def sorted_assets(self) -> list[AssetRating]:
        return sort_assets(self._assets)

    def _find(self, asset_id: str | int) -> AssetRating | None:
        for asset in self._assets:
            if asset.id == asset_id:
                return asset
        return None

    def set_override(self, asset_id: str | int, rating: str) -> None:
        if self._find(asset_id) is None:
            raise ValidationFailed(f"Unknown asset: {asset_id}")
        if not is_known_rating(rating):
            raise ValidationFailed(f"Unknown rating: {rating}")
        self._overrides[asset_id] = rating

    def get_override(self, asset_id: str | int) -> str | None:
        return self._overrides.get(asset_id)

    def remove_asset(self, asset_id: str | int) -> None:
        """Drop the asset and its override together. There is no way back short of a new session."""
        self._assets = [a for a in self._assets if a.id != asset_id]
        self._overrides.pop(asset_id, None)

    def selected_rating(self, asset: AssetRating) -> str | None:
        return self._overrides.get(asset.id) or asset.consensus_rating

    def color_signal(self, asset: AssetRating) -> RatingSignal:
        return compare_ratings(self.selected_rating(asset), asset.consensus_rating)

    # --- Reviewer ---

    def set_reviewer(self, name: str, email: str) -> None:
        self.name = name
        self.email = email

    # --- Submission ---

    def build_payload(self) -> list[SubmissionEntry]:
        return build_submission_payload(self.sorted_assets(), self._overrides)

    def dismiss_notice(self) -> None:
        self.notice = None

    async def submit(self) -> list[SubmissionEntry]:
        """
        Send the current ratings. Returns the payload that was accepted.

        Raises:
            ValidationFailed: empty name/email, no assets, or a submit already pending (no network call)
            RatingsFormError: the gateway's failure; all local state is left as it was
        """
        if self.submit_state == RequestState.PENDING:
            raise ValidationFailed("A submission is already in progress.")
        payload = self.build_payload()
        if not self.name or not self.email or not payload:
            self.notice = Notice(VALIDATION_MESSAGE, "error")
            raise ValidationFailed(VALIDATION_MESSAGE)

        self.submit_state = RequestState.PENDING
        try:
            await self.gateway.submit(self.name, self.email, payload)
        except RatingsFormError as e:
            log.error("Error submitting ratings: %s", e.message)
            self.notice = Notice(e.message or "Submission failed.", "error")
            raise
        finally:
            self.submit_state = RequestState.SETTLED

        self._overrides.clear()
        self.name = ""
        self.email = ""
        self.notice = Notice(SUCCESS_MESSAGE, "success")
        return payload
