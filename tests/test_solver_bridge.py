"""
Unit tests for the solver bridge (request building, response parsing).
"""
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from grid import Direction
from model import Door, Piece, Placement, Step, make_game_data
from moves import is_won, replay
from solver_bridge import (
    SolveError, SolveOutcome, SolverBridge, attach_solution, build_request,
    expand_solution, parse_response,
)


def small_game():
    king = Piece.single((0, 0), 3, 3)
    blocker = Piece.single((0, 1), 3, 3)
    door = Door(placement=Placement.BOTTOM, start_index=2, x_size=1, y_size=1)
    return make_game_data(3, 3, [king, blocker], 0, door)


class FakeTransport:
    """Records requests and answers with a canned response."""

    def __init__(self, response):
        self.response = response
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return self.response


def test_build_request_drops_solution():
    game = small_game()
    game.solution = [Step(0, Direction.DOWN)]
    request = build_request(game)
    assert "solution" not in request
    assert request["kingPieceIndex"] == 0
    assert request["door"] == {"placement": "bottom", "startIndex": 2, "xSize": 1, "ySize": 1}


def test_build_request_without_king():
    game = small_game()
    game.king_piece_index = None
    with pytest.raises(ValueError):
        build_request(game)


def test_expand_merged_steps():
    steps = expand_solution([
        {"pieceIndex": 1, "direction": [0, 2]},
        {"pieceIndex": 0, "direction": [-1, 0]},
    ])
    assert steps == [
        Step(1, Direction.RIGHT), Step(1, Direction.RIGHT), Step(0, Direction.UP),
    ]


def test_expand_rejects_diagonal():
    with pytest.raises(ValueError):
        expand_solution([{"pieceIndex": 0, "direction": [1, 1]}])
    with pytest.raises(ValueError):
        expand_solution([{"pieceIndex": 0, "direction": [0, 0]}])


@pytest.mark.parametrize("code,expected", [
    ("noSolution", SolveError.NO_SOLUTION),
    ("timeout", SolveError.TIMEOUT),
    ("something else", SolveError.UNKNOWN),
])
def test_parse_error_codes(code, expected):
    outcome = parse_response({"success": False, "errMessage": code})
    assert not outcome.success
    assert outcome.error_code == expected
    assert outcome.solution == []


def test_solve_and_attach():
    response = {
        "success": True,
        "solution": [
            {"pieceIndex": 0, "direction": [2, 0]},
            {"pieceIndex": 0, "direction": [0, 2]},
        ],
    }
    transport = FakeTransport(response)
    bridge = SolverBridge(transport)
    game = small_game()

    solved = bridge.solve_and_attach(game)
    assert len(transport.requests) == 1
    assert len(solved.solution) == 4
    assert game.solution is None
    assert is_won(solved, replay(solved.piece_list, solved.solution, 3, 3))


def test_solve_failure():
    bridge = SolverBridge(FakeTransport({"success": False, "errMessage": "noSolution"}))
    assert bridge.solve_and_attach(small_game()) is None
    assert bridge.last_outcome.error_code == SolveError.NO_SOLUTION


def test_attach_failed_outcome():
    with pytest.raises(ValueError):
        attach_solution(small_game(), SolveOutcome(success=False, error_code=SolveError.UNKNOWN))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
