"""
Solver bridge for the Klotski puzzle engine.
Builds requests for an external solver and turns its responses into
solutions. Waiting, timeouts and retries belong to the transport.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, List, Optional

from config import config
from grid import Direction
from model import GameData, Step


class SolveError(Enum):
    """Error codes reported by the solver."""
    NO_SOLUTION = "noSolution"
    TOO_COMPLEX = "tooComplex"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: str) -> 'SolveError':
        for member in cls:
            if member.value == code:
                return member
        return cls.UNKNOWN


@dataclass
class SolveOutcome:
    """One solver answer: a solution, or an error code plus message."""
    success: bool
    error_code: Optional[SolveError] = None
    message: str = ""
    solution: List[Step] = field(default_factory=list)


def build_request(game: GameData) -> Dict:
    """Request payload for the solver (the puzzle without any solution)."""
    if game.king_piece_index is None:
        raise ValueError("Cannot solve a puzzle without a king piece")
    payload = game.to_dict()
    payload.pop("solution", None)
    return payload


def _parse_step(data: Dict) -> List[Step]:
    """
    Parse one solver step.

    The solver merges consecutive moves of the same piece, so a direction
    such as [0, 3] is expanded into three unit steps.
    """
    index = int(data["pieceIndex"])
    dr, dc = int(data["direction"][0]), int(data["direction"][1])
    if (dr == 0) == (dc == 0):
        raise ValueError(f"Step direction must move along one axis: {data['direction']!r}")
    distance = abs(dr) + abs(dc)
    unit = Direction.from_vector((dr // distance if dr else 0, dc // distance if dc else 0))
    return [Step(piece_index=index, direction=unit) for _ in range(distance)]


def expand_solution(raw_steps: List[Dict]) -> List[Step]:
    """Unit steps for a list of raw solver steps."""
    steps = []
    for data in raw_steps:
        steps.extend(_parse_step(data))
    return steps


def parse_response(payload: Dict) -> SolveOutcome:
    """Interpret a solver response dict."""
    if payload.get("success"):
        return SolveOutcome(success=True, solution=expand_solution(payload.get("solution") or []))
    code = payload.get("errMessage") or SolveError.UNKNOWN.value
    return SolveOutcome(
        success=False,
        error_code=SolveError.from_code(code),
        message=str(payload.get("message", code)),
    )


def attach_solution(game: GameData, outcome: SolveOutcome) -> GameData:
    """Copy of the game carrying the outcome's solution."""
    if not outcome.success:
        raise ValueError(f"Cannot attach a failed solve ({outcome.error_code.value})")
    return replace(game, solution=list(outcome.solution))


class SolverBridge:
    """Sends one puzzle to an external solver and reads back the outcome."""

    def __init__(self, transport: Callable[[Dict], Dict]):
        """
        Args:
            transport: callable taking the request dict and returning the
                response dict ({"success", "errMessage", "solution"})
        """
        self.transport = transport
        self.last_outcome: Optional[SolveOutcome] = None

    def solve(self, game: GameData) -> SolveOutcome:
        request = build_request(game)
        if config.DEBUG:
            print(f"[SOLVER] solving {game.board_rows}x{game.board_cols} with {len(game.piece_list)} pieces")
        outcome = parse_response(self.transport(request))
        if config.DEBUG:
            if outcome.success:
                print(f"[SOLVER] solution with {len(outcome.solution)} steps")
            else:
                print(f"[SOLVER] failed: {outcome.error_code.value}")
        self.last_outcome = outcome
        return outcome

    def solve_and_attach(self, game: GameData) -> Optional[GameData]:
        """Solved copy of the game, or None when the solver reported an error."""
        outcome = self.solve(game)
        if not outcome.success:
            return None
        return attach_solution(game, outcome)
