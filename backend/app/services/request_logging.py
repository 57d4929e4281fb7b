"""
Structured logging for outbound provider calls: one start event, then either a
complete event (runtime, counts) or an error event carrying the failure message.
"""
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator

from app.config import Settings
from app.core.errors import RatingsFormError

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def mask_secret(value: str | None) -> str | None:
    """First four characters only."""
    if not value:
        return None
    return value[:4] + "..."


@dataclass
class UpstreamCall:
    provider: str
    operation: str
    fields: dict[str, Any] = field(default_factory=dict)
    counts: dict[str, int] = field(default_factory=dict)
    status: int | None = None

    def event(self, name: str, **extra: Any) -> dict[str, Any]:
        payload = {"provider": self.provider, "operation": self.operation, "event": name, **self.fields, **extra}
        if self.status is not None:
            payload["status"] = self.status
        return payload


@contextmanager
def upstream_call(provider: str, operation: str, secret: str | None = None, **fields: Any) -> Iterator[UpstreamCall]:
    """
    Log one provider call. The caller fills call.counts on success and call.status
    on an HTTP failure; a RatingsFormError leaving the block is logged and re-raised.
    """
    if secret is not None:
        fields["credential"] = mask_secret(secret)
    call = UpstreamCall(provider, operation, fields)
    logger.info("upstream_call_start", extra=call.event("call_start"))
    started = time.monotonic()
    try:
        yield call
    except RatingsFormError as e:
        logger.error("upstream_call_error", extra=call.event("call_error", error=e.message[:500]))
        raise
    duration_ms = int((time.monotonic() - started) * 1000)
    logger.info(
        "upstream_call_complete",
        extra=call.event("call_complete", duration_ms=duration_ms, counts=dict(call.counts)),
    )
