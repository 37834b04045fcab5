import json
from pathlib import Path

import structlog

from snooker.config import SCHEMA_VERSION
from snooker.exceptions import FrameFileError
from snooker.match_session import MatchSession

log = structlog.get_logger(__name__)


def save_frame(path: Path, session: MatchSession):
    result = None
    if session.is_finished:
        r = session.result()
        result = {
            "score_1": r.score_1,
            "score_2": r.score_2,
            "highest_break": r.highest_break,
            "highest_break_player": r.highest_break_player,
        }

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump({
            "schema_version": SCHEMA_VERSION,
            "starting_reds": session.starting_reds,
            "moves": session.export_moves(),
            "result": result,
        }, f, indent=4)

    log.info("frame_saved", path=str(path), moves=len(session.export_moves()))


def load_frame(path: Path) -> MatchSession:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FrameFileError(f"Frame file is not valid JSON: {path}") from e
    except OSError as e:
        raise FrameFileError(f"Cannot read frame file {path}: {e}") from e

    if not isinstance(data, dict):
        raise FrameFileError("Frame file must contain a JSON object")

    missing = {"schema_version", "starting_reds", "moves"} - set(data.keys())
    if missing:
        raise FrameFileError(f"Missing field(s): {sorted(missing)}")

    if data["schema_version"] != SCHEMA_VERSION:
        raise FrameFileError(f"Unsupported schema_version: {data['schema_version']}")

    try:
        session = MatchSession(starting_reds=data["starting_reds"])
        session.load_moves(data["moves"])
    except ValueError as e:
        raise FrameFileError(f"Invalid frame file {path}: {e}") from e

    log.info("frame_loaded", path=str(path), finished=session.is_finished)
    return session
