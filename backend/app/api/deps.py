from typing import AsyncIterator

import httpx

from app.config import Settings, get_settings


def get_app_settings() -> Settings:
    return get_settings()


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """One outbound client per request; transport default timeouts apply."""
    async with httpx.AsyncClient() as client:
        yield client
