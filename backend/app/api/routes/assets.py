"""
Assets: passthrough to the Credora rating provider for the review form.
"""
import httpx
from fastapi import APIRouter, Depends

from app.api.deps import get_app_settings, get_http_client
from app.config import Settings
from app.schemas.ratings import AssetRating, ErrorResponse
from app.services.asset_source import fetch_asset_ratings

router = APIRouter(prefix="/assets", tags=["assets"])


@router.get(
    "",
    response_model=list[AssetRating],
    response_model_by_alias=True,
    responses={500: {"model": ErrorResponse}},
)
async def list_assets(
    settings: Settings = Depends(get_app_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Asset ratings with consensus and Credora metrics (up to one page)."""
    return await fetch_asset_ratings(settings, client=client)
