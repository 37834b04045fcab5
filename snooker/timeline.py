from typing import Dict, List

from snooker.engine import ScoreEngine
from snooker.match_session import apply_move, parse_move
from snooker.models import MatchSnapshot


def build_frame_timeline(starting_reds: int, moves: List[Dict]) -> List[MatchSnapshot]:
    """
    Replays a frame from scratch using a list of move dicts.
    Returns the snapshot after each move, stopping once the frame is complete.
    Does NOT mutate external state.
    """

    engine = ScoreEngine(starting_reds)

    timeline: List[MatchSnapshot] = []

    for data in moves:

        apply_move(engine, parse_move(data))

        timeline.append(engine.snapshot())

        if engine.is_finished:
            break

    return timeline
