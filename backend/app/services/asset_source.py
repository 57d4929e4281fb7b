"""
Asset source: one GraphQL query to Credora for asset ratings with consensus and Credora metrics.
No retry, pagination or caching. A failed call is terminal for the request.
"""
from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from app.config import Settings
from app.core.errors import MissingSourceCredentials, SourceUnavailable
from app.schemas.ratings import AssetRating
from app.services.request_logging import mask_secret, upstream_call

log = logging.getLogger(__name__)

PROVIDER = "credora"

ASSET_RATINGS_QUERY = """
query AssetRatings($limit: Int!) {
  getAssetRatings(limit: $limit) {
    totalCount
    items {
      id
      address
      symbol
      chainId
      consensusMetrics {
        consensusRating
        consensusPd
        consensusScore
      }
      credoraMetrics {
        rating
        pd
        score
        status
        publishDate
        validUntil
        underReview
        methodology
        report
        lgd {
          min
          max
        }
      }
    }
  }
}
"""


def _credentials_headers(settings: Settings) -> dict[str, str]:
    if not settings.credora_client_id or not settings.credora_client_secret:
        log.error(
            "Missing Credora API credentials (client_id=%s, client_secret=%s)",
            settings.credora_client_id or None,
            mask_secret(settings.credora_client_secret),
        )
        raise MissingSourceCredentials("Missing Credora API credentials")
    return {
        "clientId": settings.credora_client_id,
        "clientSecret": settings.credora_client_secret,
    }


def _parse_items(body: object) -> list[AssetRating]:
    """Pull getAssetRatings.items out of a GraphQL response body."""
    if not isinstance(body, dict):
        raise SourceUnavailable("Unexpected response from Credora API")
    errors = body.get("errors")
    if errors:
        first = errors[0] if isinstance(errors, list) and errors else errors
        message = first.get("message") if isinstance(first, dict) else str(first)
        raise SourceUnavailable(f"Credora API error: {message}")
    data = body.get("data") or {}
    result = data.get("getAssetRatings") if isinstance(data, dict) else None
    items = result.get("items") if isinstance(result, dict) else None
    if not isinstance(items, list):
        raise SourceUnavailable("Unexpected response from Credora API")
    try:
        return [AssetRating.model_validate(item) for item in items]
    except ValidationError as e:
        raise SourceUnavailable(f"Unexpected asset record from Credora API: {e.error_count()} invalid field(s)") from e


async def fetch_asset_ratings(
    settings: Settings,
    client: httpx.AsyncClient | None = None,
) -> list[AssetRating]:
    """
    Fetch up to settings.credora_page_size asset ratings.

    Raises:
        MissingSourceCredentials: client id or secret absent (no call is made);
            both a ConfigurationMissing and a SourceUnavailable
        SourceUnavailable: transport error, non-2xx status, GraphQL errors or unexpected shape
    """
    headers = _credentials_headers(settings)
    payload = {
        "query": ASSET_RATINGS_QUERY,
        "variables": {"limit": settings.credora_page_size},
    }
    with upstream_call(
        PROVIDER,
        "getAssetRatings",
        secret=settings.credora_client_secret,
        client_id=settings.credora_client_id,
        limit=settings.credora_page_size,
    ) as call:
        own_client = client is None
        if own_client:
            client = httpx.AsyncClient()
        try:
            response = await client.post(settings.credora_api_url, json=payload, headers=headers)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            call.status = e.response.status_code
            raise SourceUnavailable(f"Credora API returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise SourceUnavailable(f"Credora API request failed: {str(e) or type(e).__name__}") from e
        except ValueError as e:
            raise SourceUnavailable("Unexpected response from Credora API") from e
        finally:
            if own_client:
                await client.aclose()

        assets = _parse_items(body)
        call.counts["items"] = len(assets)
    return assets
