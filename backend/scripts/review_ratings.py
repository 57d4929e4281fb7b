#!/usr/bin/env python3
"""
Review asset ratings from the command line: list assets (best consensus first),
apply overrides and removals, then submit to the ratings API.

    python scripts/review_ratings.py --list
    python scripts/review_ratings.py --rate BTC=A --remove XYZ
    python scripts/review_ratings.py --name Jane --email j@x.com --rate BTC=A --remove XYZ --submit
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.config import get_settings
from app.core.errors import RatingsFormError, ValidationFailed
from app.core.rating_scale import RatingSignal
from app.services.api_gateway import HttpRatingsGateway, RatingsGateway
from app.services.review_session import ReviewSession, ViewState

SIGNAL_MARKS = {
    RatingSignal.IMPROVED: "+",
    RatingSignal.DOWNGRADED: "-",
    RatingSignal.NEUTRAL: " ",
}


def _pct(value: float | None) -> str:
    if not isinstance(value, (int, float)):
        return ""
    return f"{value * 100:.2f}%"


def render_table(session: ReviewSession) -> str:
    lines = [f"{'':1} {'Symbol':<10} {'Selected':<8} {'Consensus':<9} {'Cons PD':>8} {'Credora':<8} {'Credora PD':>10}"]
    for asset in session.sorted_assets():
        mark = SIGNAL_MARKS[session.color_signal(asset)]
        lines.append(
            f"{mark:1} {asset.symbol:<10} {session.selected_rating(asset) or '':<8} "
            f"{asset.consensus_rating or '':<9} {_pct(asset.consensus_metrics.consensus_pd):>8} "
            f"{asset.credora_rating or '':<8} {_pct(asset.credora_metrics.pd):>10}"
        )
    return "\n".join(lines)


def _resolve(session: ReviewSession, symbol: str):
    for asset in session.assets:
        if asset.symbol.upper() == symbol.strip().upper():
            return asset
    raise ValidationFailed(f"Unknown asset symbol: {symbol}")


def apply_edits(session: ReviewSession, remove: list[str], rate: list[str]) -> None:
    """Removals first, then SYMBOL=RATING overrides."""
    for symbol in remove:
        session.remove_asset(_resolve(session, symbol).id)
    for item in rate:
        symbol, sep, rating = item.partition("=")
        if not sep:
            raise ValidationFailed(f"Expected SYMBOL=RATING, got {item!r}")
        session.set_override(_resolve(session, symbol).id, rating.strip().upper())


async def run(args: argparse.Namespace, gateway: RatingsGateway | None = None) -> int:
    """Exit codes: 0 ok, 1 load or submit failure, 2 bad command-line edits."""
    if gateway is None:
        gateway = HttpRatingsGateway(args.api_url or get_settings().ratings_api_url)
    session = ReviewSession(gateway)
    await session.load()
    if session.view_state == ViewState.READY_EMPTY:
        print(f"error: {session.notice.message}", file=sys.stderr)
        return 1

    if args.list:
        print(render_table(session))
        return 0

    try:
        apply_edits(session, args.remove, args.rate)
    except RatingsFormError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 2

    print(render_table(session))
    if not args.submit:
        return 0

    session.set_reviewer(args.name or "", args.email or "")
    try:
        await session.submit()
    except RatingsFormError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    print(session.notice.message)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Review and submit asset ratings")
    ap.add_argument("--api-url", default=None, help="Ratings API base URL (default: RATINGS_API_URL)")
    ap.add_argument("--name", help="Reviewer name")
    ap.add_argument("--email", help="Reviewer email")
    ap.add_argument("--rate", action="append", default=[], metavar="SYMBOL=RATING", help="Override a rating")
    ap.add_argument("--remove", action="append", default=[], metavar="SYMBOL", help="Exclude an asset")
    ap.add_argument("--submit", action="store_true", help="Submit the ratings")
    ap.add_argument("--list", action="store_true", help="Print the fetched assets and exit, ignoring edits")
    return ap


def main() -> None:
    args = build_parser().parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
