"""Print the weather statistics document for the configured database."""

from __future__ import annotations

import argparse
import json

from weather_relay.core.config import settings
from weather_relay.core.errors import WeatherRelayError
from weather_relay.db.session import build_engine, get_session
from weather_relay.services.aggregation import StatsService
from weather_relay.services.store import ReadingStore


def main() -> int:
    parser = argparse.ArgumentParser(description="Aggregate cached weather readings into statistics.")
    parser.add_argument("--count", action="append", default=[], help="query and/or labels (repeatable)")
    parser.add_argument("--summary", action="append", default=[], help="day")
    parser.add_argument("--temp", action="append", default=[], help="lows, highs and/or avgs (repeatable)")
    parser.add_argument("--database-url", type=str, default=None, help="Override DATABASE_URL.")
    args = parser.parse_args()

    if not (args.count or args.summary or args.temp):
        parser.error("request at least one of --count, --summary or --temp")

    engine = build_engine(args.database_url or settings.database_url)
    with get_session(engine) as session:
        try:
            stats = StatsService(ReadingStore(session)).build(
                count=args.count, summary=args.summary, temp=args.temp
            )
        except WeatherRelayError as exc:
            print(f"error: {exc.message}")
            return 1

    print(json.dumps(stats, indent=2, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
