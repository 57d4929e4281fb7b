"""Tests for upstream call logging."""
import logging

import pytest

from app.core.errors import SourceUnavailable
from app.services.request_logging import mask_secret, upstream_call


def test_mask_secret():
    assert mask_secret("secret-value") == "secr..."
    assert mask_secret("") is None
    assert mask_secret(None) is None


def test_successful_call_logs_start_and_complete(caplog):
    caplog.set_level(logging.INFO, logger="app.services.request_logging")
    with upstream_call("credora", "getAssetRatings", secret="secret-value", limit=100) as call:
        call.counts["items"] = 3

    start, complete = caplog.records
    assert start.event == "call_start"
    assert start.credential == "secr..."
    assert "secret-value" not in repr(start.__dict__)
    assert start.limit == 100
    assert complete.event == "call_complete"
    assert complete.counts == {"items": 3}
    assert complete.duration_ms >= 0


def test_failed_call_logs_error_and_reraises(caplog):
    caplog.set_level(logging.INFO, logger="app.services.request_logging")
    with pytest.raises(SourceUnavailable):
        with upstream_call("credora", "getAssetRatings") as call:
            call.status = 502
            raise SourceUnavailable("Credora API returned HTTP 502")

    start, error = caplog.records
    assert error.levelno == logging.ERROR
    assert error.event == "call_error"
    assert error.status == 502
    assert error.error == "Credora API returned HTTP 502"
    assert not hasattr(start, "credential")
