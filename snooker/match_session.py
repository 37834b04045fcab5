from copy import deepcopy
from typing import Any, Callable, Dict, List, Optional

import structlog

from snooker.engine import ScoreEngine
from snooker.exceptions import InvalidMoveError
from snooker.models import MatchResult, MatchSnapshot, Move

log = structlog.get_logger(__name__)

MOVE_KINDS = ("pot", "miss", "foul")


def parse_move(data: Dict[str, Any]) -> Move:
    if not isinstance(data, dict) or "kind" not in data:
        raise InvalidMoveError("invalid move format")

    kind = data["kind"]
    if kind not in MOVE_KINDS:
        raise InvalidMoveError(f"Unknown move kind: {kind!r}")

    if kind != "pot":
        return Move(kind=kind)

    value = data.get("value")
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidMoveError(f"pot move needs an integer value, got {value!r}")

    return Move(kind="pot", value=value)


def apply_move(engine: ScoreEngine, move: Move) -> bool:
    if move.kind == "pot":
        return engine.pot(move.value)
    if move.kind == "miss":
        return engine.end_turn()
    return engine.foul_plus_four()


class MatchSession:
    """
    Single local frame session.

    Responsibilities:
    - Manage one ScoreEngine instance
    - Record applied moves and a snapshot after each of them
    - Bulk replay moves (atomic)
    - Hand the final result to persistence once the frame is complete
    """

    def __init__(self, starting_reds: int):
        self._starting_reds = starting_reds
        self._engine = ScoreEngine(starting_reds)
        self._timeline: List[MatchSnapshot] = []
        self._moves: List[Move] = []
        self._handed_off = False
        self._handoff_value: Any = None

    # ---------------------------------------------------------
    # Live moves
    # ---------------------------------------------------------

    def pot(self, value: int) -> bool:
        return self._apply(Move(kind="pot", value=value))

    def end_turn(self) -> bool:
        return self._apply(Move(kind="miss"))

    def foul_plus_four(self) -> bool:
        return self._apply(Move(kind="foul"))

    def _apply(self, move: Move) -> bool:
        if self._engine.is_finished:
            log.info("move_ignored_frame_complete", kind=move.kind, value=move.value)
            return False

        ok = apply_move(self._engine, move)
        self._moves.append(move)
        self._timeline.append(self._engine.snapshot())

        if not ok:
            log.info(
                "turn_ended",
                kind=move.kind,
                value=move.value,
                next_player=self._engine.active_player,
            )

        if self._engine.is_finished:
            log.info(
                "frame_complete",
                score_1=self._engine.score(1),
                score_2=self._engine.score(2),
                highest_break=self._engine.highest_break.value,
            )

        return ok

    # ---------------------------------------------------------
    # Bulk replay
    # ---------------------------------------------------------

    def load_moves(self, moves: List[Dict]) -> List[MatchSnapshot]:
        """
        Replay a list of move dicts on a fresh engine.
        Atomic: if any move is malformed -> no state mutation.
        """
        if not isinstance(moves, list):
            raise ValueError("moves must be a list")

        parsed = [parse_move(m) for m in moves]

        temp_engine = ScoreEngine(self._starting_reds)
        temp_timeline: List[MatchSnapshot] = []
        temp_moves: List[Move] = []

        for move in parsed:
            if temp_engine.is_finished:
                break
            apply_move(temp_engine, move)
            temp_moves.append(move)
            temp_timeline.append(temp_engine.snapshot())

        self._engine = temp_engine
        self._timeline = temp_timeline
        self._moves = temp_moves
        self._handed_off = False
        self._handoff_value = None

        log.debug("moves_loaded", count=len(temp_moves), skipped=len(parsed) - len(temp_moves))

        return deepcopy(self._timeline)

    # ---------------------------------------------------------
    # Read side
    # ---------------------------------------------------------

    @property
    def engine(self) -> ScoreEngine:
        return self._engine

    @property
    def starting_reds(self) -> int:
        return self._starting_reds

    @property
    def is_finished(self) -> bool:
        return self._engine.is_finished

    def get_snapshot(self) -> MatchSnapshot:
        if not self._timeline:
            raise RuntimeError("No moves played")

        return self._timeline[-1]

    def get_timeline(self) -> List[MatchSnapshot]:
        return deepcopy(self._timeline)

    def export_moves(self) -> List[Dict]:
        exported = []
        for m in self._moves:
            if m.kind == "pot":
                exported.append({"kind": "pot", "value": m.value})
            else:
                exported.append({"kind": m.kind})
        return exported

    def result(self) -> MatchResult:
        return self._engine.result()

    # ---------------------------------------------------------
    # Completion
    # ---------------------------------------------------------

    def finish(self, on_complete: Callable[[MatchResult], Any]) -> Optional[Any]:
        """
        Pass the final result to on_complete exactly once.

        Raises MatchNotFinishedError while the frame is in progress.
        Later calls return the first call's return value.
        """
        result = self._engine.result()

        if self._handed_off:
            return self._handoff_value

        self._handoff_value = on_complete(result)
        self._handed_off = True
        log.info("result_handed_off", score_1=result.score_1, score_2=result.score_2)
        return self._handoff_value

    def reset(self):
        self._engine = ScoreEngine(self._starting_reds)
        self._timeline = []
        self._moves = []
        self._handed_off = False
        self._handoff_value = None
