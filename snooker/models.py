from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional, Union


FOUL_PENALTY = 4


class Ball(IntEnum):
    RED = 1
    YELLOW = 2
    GREEN = 3
    BROWN = 4
    BLUE = 5
    PINK = 6
    BLACK = 7


class BallClass(str, Enum):
    RED = "red"
    COLOUR = "colour"


# --- PHASES (tagged union) ---

@dataclass(frozen=True)
class RedPhase:
    awaiting_ball: BallClass = BallClass.RED
    name = "red_phase"


@dataclass(frozen=True)
class Clearance:
    next_colour: int = 2
    name = "clearance"


@dataclass(frozen=True)
class Complete:
    name = "complete"


Phase = Union[RedPhase, Clearance, Complete]


@dataclass(frozen=True)
class HighestBreak:
    value: int = 0
    player: Optional[int] = None


@dataclass
class MatchState:
    reds_remaining: int
    scores: List[int] = field(default_factory=lambda: [0, 0])
    active_player: int = 1
    current_break: int = 0
    highest_break: HighestBreak = field(default_factory=HighestBreak)
    phase: Phase = field(default_factory=RedPhase)


# --- OUTPUT TYPES ---

@dataclass(frozen=True)
class MatchSnapshot:
    move_index: int
    score_1: int
    score_2: int
    active_player: int
    phase: str
    reds_remaining: int
    awaiting_ball: Optional[BallClass]
    next_colour_value: Optional[int]
    current_break: int
    highest_break: int
    highest_break_player: Optional[int]
    is_finished: bool


@dataclass(frozen=True)
class MatchResult:
    score_1: int
    score_2: int
    highest_break: int
    highest_break_player: Optional[int]

    @property
    def winner(self) -> Optional[int]:
        if self.score_1 > self.score_2:
            return 1
        if self.score_2 > self.score_1:
            return 2
        return None


@dataclass(frozen=True)
class Move:
    kind: str
    value: Optional[int] = None
