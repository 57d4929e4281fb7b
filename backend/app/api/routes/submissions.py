"""
Submissions: email a reviewer's ratings to the fixed recipient.
"""
import logging

import httpx
from fastapi import APIRouter, Depends

from app.api.deps import get_app_settings, get_http_client
from app.config import Settings
from app.schemas.ratings import ErrorResponse, SubmitRequest, SubmitResponse
from app.services.submission_notifier import send_submission

log = logging.getLogger(__name__)

router = APIRouter(prefix="/submit", tags=["submissions"])


@router.post(
    "",
    response_model=SubmitResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def submit_ratings(
    data: SubmitRequest,
    settings: Settings = Depends(get_app_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    log.info("Ratings submission from %s (%d ratings)", data.email, len(data.ratings))
    await send_submission(settings, data.name, data.email, data.ratings, client=client)
    return SubmitResponse(success=True)
