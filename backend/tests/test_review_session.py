"""Tests for the rating reconciliation session: sorting, overrides, removal, submission."""
import asyncio

import pytest

from app.core.errors import DeliverySendError, SourceUnavailable, ValidationFailed
from app.core.rating_scale import RatingSignal
from app.schemas.ratings import AssetRating
from app.services.review_session import (
    VALIDATION_MESSAGE,
    RequestState,
    ReviewSession,
    ViewState,
    sort_assets,
)


def _asset(id, symbol, consensus, credora=None) -> AssetRating:
    return AssetRating.model_validate(
        {
            "id": id,
            "symbol": symbol,
            "consensusMetrics": {"consensusRating": consensus},
            "credoraMetrics": {"rating": credora},
        }
    )


class FakeGateway:
    def __init__(self, assets=None, fetch_error=None, submit_error=None):
        self.assets = assets or []
        self.fetch_error = fetch_error
        self.submit_error = submit_error
        self.fetch_calls = 0
        self.submissions = []

    async def fetch_assets(self):
        self.fetch_calls += 1
        if self.fetch_error:
            raise self.fetch_error
        return list(self.assets)

    async def submit(self, name, email, ratings):
        self.submissions.append((name, email, list(ratings)))
        if self.submit_error:
            raise self.submit_error


def _loaded(assets, **kwargs) -> tuple[ReviewSession, FakeGateway]:
    gateway = FakeGateway(assets, **kwargs)
    session = ReviewSession(gateway)
    asyncio.run(session.load())
    return session, gateway


def test_sort_best_consensus_first():
    assets = [_asset(2, "XYZ", "D"), _asset(1, "BTC", "AAA")]
    assert [a.symbol for a in sort_assets(assets)] == ["BTC", "XYZ"]


def test_sort_is_stable_and_unknown_last():
    assets = [
        _asset(1, "U1", "NR"),
        _asset(2, "B1", "BB"),
        _asset(3, "U2", None),
        _asset(4, "A1", "A"),
        _asset(5, "B2", "BB"),
    ]
    assert [a.symbol for a in sort_assets(assets)] == ["A1", "B1", "B2", "U1", "U2"]


def test_load_success_is_ready_and_sorted():
    session, gateway = _loaded([_asset(2, "XYZ", "D"), _asset(1, "BTC", "AAA")])
    assert session.view_state == ViewState.READY
    assert session.load_state == RequestState.SETTLED
    assert [a.symbol for a in session.sorted_assets()] == ["BTC", "XYZ"]
    assert gateway.fetch_calls == 1


def test_load_failure_is_ready_empty_with_error():
    session, _ = _loaded([], fetch_error=SourceUnavailable("Missing Credora API credentials"))
    assert session.view_state == ViewState.READY_EMPTY
    assert session.assets == []
    assert session.notice.severity == "error"
    assert session.notice.message == "Missing Credora API credentials"


def test_load_only_once():
    session, gateway = _loaded([_asset(1, "BTC", "AAA")])
    with pytest.raises(ValidationFailed):
        asyncio.run(session.load())
    assert gateway.fetch_calls == 1


def test_selected_rating_falls_back_to_consensus():
    session, _ = _loaded([_asset(1, "BTC", "AAA"), _asset(2, "ETH", "AA")])
    session.set_override(1, "A")
    btc, eth = session.sorted_assets()
    assert session.selected_rating(btc) == "A"
    assert session.selected_rating(eth) == "AA"


def test_override_does_not_change_order():
    session, _ = _loaded([_asset(1, "BTC", "AAA"), _asset(2, "ETH", "AA")])
    session.set_override(1, "D")
    assert [a.symbol for a in session.sorted_assets()] == ["BTC", "ETH"]


def test_override_colour_signal():
    session, _ = _loaded([_asset(1, "BTC", "AAA"), _asset(2, "ETH", "BB"), _asset(3, "ODD", "NR")])
    btc, eth, odd = session.sorted_assets()
    assert session.color_signal(btc) == RatingSignal.NEUTRAL
    session.set_override(1, "A")
    session.set_override(2, "BBB")
    session.set_override(3, "AAA")
    assert session.color_signal(btc) == RatingSignal.DOWNGRADED
    assert session.color_signal(eth) == RatingSignal.IMPROVED
    assert session.color_signal(odd) == RatingSignal.NEUTRAL


def test_override_rejects_unknown_asset_or_grade():
    session, _ = _loaded([_asset(1, "BTC", "AAA")])
    with pytest.raises(ValidationFailed):
        session.set_override(99, "A")
    with pytest.raises(ValidationFailed):
        session.set_override(1, "Z")
    assert session.get_override(1) is None


def test_remove_asset_drops_override():
    session, _ = _loaded([_asset(1, "BTC", "AAA"), _asset(2, "ETH", "AA")])
    session.set_override(1, "A")
    session.remove_asset(1)
    assert [a.symbol for a in session.assets] == ["ETH"]
    assert session.get_override(1) is None
    assert [e.symbol for e in session.build_payload()] == ["ETH"]


@pytest.mark.parametrize(
    "name,email,keep_assets",
    [("", "j@x.com", True), ("Jane", "", True), ("Jane", "j@x.com", False)],
)
def test_submit_precondition_makes_no_call(name, email, keep_assets):
    session, gateway = _loaded([_asset(1, "BTC", "AAA")])
    if not keep_assets:
        session.remove_asset(1)
    session.set_reviewer(name, email)
    with pytest.raises(ValidationFailed):
        asyncio.run(session.submit())
    assert gateway.submissions == []
    assert session.notice.message == VALIDATION_MESSAGE
    assert session.submit_state == RequestState.IDLE


def test_submit_success_clears_reviewer_and_overrides():
    session, gateway = _loaded([_asset(1, "ETH", "BB", credora="BB+"), _asset(2, "BTC", "AAA")])
    session.set_override(2, "AA")
    session.set_reviewer("Jane", "j@x.com")
    payload = asyncio.run(session.submit())

    assert [(e.symbol, e.selected_rating) for e in payload] == [("BTC", "AA"), ("ETH", "BB")]
    eth = payload[1]
    assert eth.consensus_rating == "BB"
    assert eth.credora_rating == "BB+"
    assert len(gateway.submissions) == 1
    assert gateway.submissions[0][:2] == ("Jane", "j@x.com")
    assert session.name == "" and session.email == ""
    assert session.overrides == {}
    assert len(session.assets) == 2
    assert session.notice.severity == "success"


def test_submit_failure_preserves_state():
    session, gateway = _loaded(
        [_asset(1, "BTC", "AAA")],
        submit_error=DeliverySendError("Resend is down"),
    )
    session.set_override(1, "A")
    session.set_reviewer("Jane", "j@x.com")
    with pytest.raises(DeliverySendError):
        asyncio.run(session.submit())
    assert session.name == "Jane"
    assert session.email == "j@x.com"
    assert session.overrides == {1: "A"}
    assert session.notice.message == "Resend is down"
    assert session.submit_state == RequestState.SETTLED


class SlowGateway(FakeGateway):
    async def submit(self, name, email, ratings):
        await asyncio.sleep(0.01)
        await super().submit(name, email, ratings)


def test_no_overlapping_submit():
    gateway = SlowGateway([_asset(1, "BTC", "AAA")])
    session = ReviewSession(gateway)

    async def go():
        await session.load()
        session.set_reviewer("Jane", "j@x.com")
        return await asyncio.gather(session.submit(), session.submit(), return_exceptions=True)

    first, second = asyncio.run(go())
    assert [e.symbol for e in first] == ["BTC"]
    assert isinstance(second, ValidationFailed)
    assert second.message == "A submission is already in progress."
    assert len(gateway.submissions) == 1
    assert session.submit_state == RequestState.SETTLED


def test_dismiss_notice():
    session, _ = _loaded([], fetch_error=SourceUnavailable("Failed to load assets."))
    session.dismiss_notice()
    assert session.notice is None
