# scripts/replay_frame.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from snooker.config import ALLOWED_RED_COUNTS, DEFAULT_REDS, settings
from snooker.exceptions import SnookerError
from snooker.logging_setup import bind_frame_context, configure_logging
from snooker.match_session import MatchSession
from snooker.models import MatchSnapshot
from snooker.repository import MatchRepository
from snooker.storage import save_frame

log = structlog.get_logger(__name__)


def format_scoreboard(snapshot: MatchSnapshot, names: List[str]) -> str:
    lines = [
        f"{names[0]} {snapshot.score_1} : {snapshot.score_2} {names[1]}",
        f"On turn: {names[snapshot.active_player - 1]}",
        f"Current break: {snapshot.current_break}  |  Highest break: {snapshot.highest_break}",
    ]

    if snapshot.is_finished:
        lines.append("Frame complete")
    elif snapshot.next_colour_value is not None:
        lines.append(f"Clearance: next colour value {snapshot.next_colour_value}")
    else:
        lines.append(f"Reds remaining: {snapshot.reds_remaining}, next: {snapshot.awaiting_ball.value}")

    return "\n".join(lines)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Replay a snooker frame from a JSON list of moves.")
    ap.add_argument("moves", type=Path, help='JSON file: [{"kind": "pot", "value": 1}, {"kind": "miss"}, ...]')
    ap.add_argument("--reds", type=int, default=DEFAULT_REDS, choices=ALLOWED_RED_COUNTS)
    ap.add_argument("--save", type=Path, default=None, help="Write the frame file to this path")
    ap.add_argument("--record", nargs=2, metavar=("PLAYER1", "PLAYER2"), default=None,
                    help="Store the finished frame in the match history database")
    ap.add_argument("--db", default=settings.database_url, help="SQLAlchemy database URL")
    ap.add_argument("--log-level", default=settings.log_level)
    ap.add_argument("--plain-logs", action="store_true", default=not settings.log_json,
                    help="Human-readable logs instead of JSON")
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(level=args.log_level, json_logs=not args.plain_logs)
    bind_frame_context(starting_reds=args.reds, source=str(args.moves), players=args.record)

    try:
        moves = json.loads(args.moves.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        log.error("moves_unreadable", error=str(e))
        return 2

    names = list(args.record) if args.record else ["Player 1", "Player 2"]

    try:
        session = MatchSession(starting_reds=args.reds)
        session.load_moves(moves)

        if args.save is not None:
            save_frame(args.save, session)

        if not session.get_timeline():
            print("No moves played")
            return 0

        print(format_scoreboard(session.get_snapshot(), names))

        if args.record:
            if not session.is_finished:
                log.warning("frame_not_finished_not_recorded")
                return 1

            repo = MatchRepository(args.db)
            repo.init_db()
            match_id = session.finish(lambda result: repo.record_result(names[0], names[1], result))
            print(f"Saved as match #{match_id}")

    except ValueError as e:
        log.error("invalid_moves", error=str(e))
        return 2
    except SnookerError as e:
        log.error("replay_failed", error=str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
