"""
Review client gateway: the two request/response exchanges the review session
makes against this service (GET /api/assets, POST /api/submit).
"""
from __future__ import annotations

import logging
from typing import Protocol, Sequence

import httpx
from pydantic import ValidationError

from app.core.errors import DeliverySendError, SourceUnavailable
from app.schemas.ratings import AssetRating, SubmissionEntry

log = logging.getLogger(__name__)


class RatingsGateway(Protocol):
    async def fetch_assets(self) -> list[AssetRating]: ...

    async def submit(self, name: str, email: str, ratings: Sequence[SubmissionEntry]) -> None: ...


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        data = response.json()
    except ValueError:
        return default
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return default


class HttpRatingsGateway:
    """Talks to the ratings API over HTTP. Pass a client to share a connection pool or inject a transport."""

    def __init__(self, base_url: str, client: httpx.AsyncClient | None = None):
        self.base_url = base_url.rstrip("/")
        self._client = client

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self.base_url}{path}"
        if self._client is not None:
            return await self._client.request(method, url, **kwargs)
        async with httpx.AsyncClient() as client:
            return await client.request(method, url, **kwargs)

    async def fetch_assets(self) -> list[AssetRating]:
        try:
            response = await self._request("GET", "/api/assets")
        except httpx.HTTPError as e:
            log.error("Error fetching /api/assets: %s", e)
            raise SourceUnavailable("Failed to load assets.") from e
        if response.is_error:
            raise SourceUnavailable(_error_message(response, "Failed to load assets."))
        try:
            data = response.json()
        except ValueError as e:
            raise SourceUnavailable("Failed to load assets.") from e
        if not isinstance(data, list):
            raise SourceUnavailable(_error_message(response, "Failed to load assets."))
        try:
            return [AssetRating.model_validate(item) for item in data]
        except ValidationError as e:
            raise SourceUnavailable("Failed to load assets.") from e

    async def submit(self, name: str, email: str, ratings: Sequence[SubmissionEntry]) -> None:
        body = {
            "name": name,
            "email": email,
            "ratings": [r.model_dump(by_alias=True) for r in ratings],
        }
        try:
            response = await self._request("POST", "/api/submit", json=body)
        except httpx.HTTPError as e:
            log.error("Error submitting ratings: %s", e)
            raise DeliverySendError("Submission failed.") from e
        if response.is_error:
            raise DeliverySendError(_error_message(response, "Submission failed."))
