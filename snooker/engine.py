from typing import Optional, Tuple

from snooker.exceptions import InvalidRedCountError, MatchNotFinishedError
from snooker.models import (
    FOUL_PENALTY,
    Ball,
    BallClass,
    Clearance,
    Complete,
    HighestBreak,
    MatchResult,
    MatchSnapshot,
    MatchState,
    Phase,
    RedPhase,
)


class ScoreEngine:
    """
    Snooker frame score engine.

    Responsibilities:
    - Enforce red/colour alternation and the ascending clearance order
    - Accumulate breaks and track the highest break of the frame
    - Apply fouls and turn changes through a single miss transition
    - Freeze all state once the black is potted in the clearance

    Illegal pots are a normal outcome: they end the turn and report False.
    The engine performs no I/O and is not thread-safe.
    """

    def __init__(self, starting_reds: int):
        self._validate_starting_reds(starting_reds)
        self.match = MatchState(reds_remaining=starting_reds)
        self._moves = 0

    # =========================================================
    # PUBLIC API
    # =========================================================

    def pot(self, value: int) -> bool:
        """
        Register a potted ball by value (1 = red, 2..7 = yellow..black).

        Returns True for a legal pot. Anything else, including values
        outside 1..7, ends the turn and returns False.
        """
        phase = self.match.phase

        if isinstance(phase, Complete):
            return False

        self._moves += 1
        ball = self._as_ball(value)

        if isinstance(phase, Clearance):
            return self._pot_in_clearance(phase, ball)

        if phase.awaiting_ball is BallClass.RED:
            if ball == Ball.RED:
                self._award(1)
                self.match.reds_remaining -= 1

                if self.match.reds_remaining == 0:
                    self.match.phase = Clearance(next_colour=int(Ball.YELLOW))
                else:
                    self.match.phase = RedPhase(awaiting_ball=BallClass.COLOUR)
                return True
        elif ball is not None and ball != Ball.RED:
            self._award(ball)
            self.match.phase = RedPhase(awaiting_ball=BallClass.RED)
            return True

        self._miss_transition()
        return False

    def end_turn(self) -> bool:
        """Explicit miss. Returns False once the frame is complete."""
        if self.is_finished:
            return False

        self._moves += 1
        self._miss_transition()
        return True

    def foul_plus_four(self) -> bool:
        """
        Award the foul penalty to the non-active player and end the turn.

        The penalty does not count towards any break.
        """
        if self.is_finished:
            return False

        self._moves += 1
        opponent = self._opponent()
        self.match.scores[opponent - 1] += FOUL_PENALTY
        self._miss_transition()
        return True

    def snapshot(self) -> MatchSnapshot:
        return self._build_snapshot()

    def result(self) -> MatchResult:
        if not self.is_finished:
            raise MatchNotFinishedError("Frame is still in progress")

        highest = self.match.highest_break
        return MatchResult(
            score_1=self.match.scores[0],
            score_2=self.match.scores[1],
            highest_break=highest.value,
            highest_break_player=highest.player,
        )

    # =========================================================
    # ACCESSORS
    # =========================================================

    @property
    def reds_remaining(self) -> int:
        return self.match.reds_remaining

    @property
    def scores(self) -> Tuple[int, int]:
        return self.match.scores[0], self.match.scores[1]

    def score(self, player: int) -> int:
        if player not in (1, 2):
            raise ValueError(f"Invalid player: {player}")
        return self.match.scores[player - 1]

    @property
    def active_player(self) -> int:
        return self.match.active_player

    @property
    def phase(self) -> Phase:
        return self.match.phase

    @property
    def phase_name(self) -> str:
        return self.match.phase.name

    @property
    def awaiting_ball(self) -> Optional[BallClass]:
        phase = self.match.phase
        if isinstance(phase, RedPhase):
            return phase.awaiting_ball
        return None

    @property
    def next_colour_value(self) -> Optional[int]:
        phase = self.match.phase
        if isinstance(phase, Clearance):
            return phase.next_colour
        return None

    @property
    def current_break(self) -> int:
        return self.match.current_break

    @property
    def highest_break(self) -> HighestBreak:
        return self.match.highest_break

    @property
    def is_clearance(self) -> bool:
        return isinstance(self.match.phase, Clearance)

    @property
    def is_finished(self) -> bool:
        return isinstance(self.match.phase, Complete)

    # =========================================================
    # VALIDATION
    # =========================================================

    @staticmethod
    def _validate_starting_reds(starting_reds):
        if isinstance(starting_reds, bool) or not isinstance(starting_reds, int):
            raise InvalidRedCountError(
                f"starting_reds must be an integer, got {starting_reds!r}"
            )

        if starting_reds <= 0:
            raise InvalidRedCountError("starting_reds must be positive")

    @staticmethod
    def _as_ball(value) -> Optional[Ball]:
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        if Ball.RED <= value <= Ball.BLACK:
            return Ball(value)
        return None

    # =========================================================
    # TURN LOGIC
    # =========================================================

    def _pot_in_clearance(self, phase: Clearance, ball: Optional[Ball]) -> bool:
        if ball is None or ball != phase.next_colour:
            self._miss_transition()
            return False

        self._award(ball)

        if ball == Ball.BLACK:
            self.match.phase = Complete()
        else:
            self.match.phase = Clearance(next_colour=phase.next_colour + 1)

        return True

    def _award(self, points: int):
        match = self.match
        match.scores[match.active_player - 1] += int(points)
        match.current_break += int(points)

        if match.current_break > match.highest_break.value:
            match.highest_break = HighestBreak(
                value=match.current_break,
                player=match.active_player,
            )

    def _miss_transition(self):
        match = self.match
        if isinstance(match.phase, Complete):
            return

        match.current_break = 0
        match.active_player = self._opponent()

        if isinstance(match.phase, RedPhase):
            match.phase = RedPhase(awaiting_ball=BallClass.RED)

    def _opponent(self) -> int:
        return 2 if self.match.active_player == 1 else 1

    # =========================================================
    # SNAPSHOT
    # =========================================================

    def _build_snapshot(self) -> MatchSnapshot:
        match = self.match
        awaiting = self.awaiting_ball
        next_colour = self.next_colour_value

        return MatchSnapshot(
            move_index=self._moves,
            score_1=match.scores[0],
            score_2=match.scores[1],
            active_player=match.active_player,
            phase=self.phase_name,
            reds_remaining=match.reds_remaining,
            awaiting_ball=awaiting,
            next_colour_value=next_colour,
            current_break=match.current_break,
            highest_break=match.highest_break.value,
            highest_break_player=match.highest_break.player,
            is_finished=self.is_finished,
        )
