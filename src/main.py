"""
Command line entry point for the Klotski puzzle engine.
Inspect saved layouts, list legal slides, render previews and replay solutions.
"""
import argparse
import json
import sys

import codec
from config import config
from model import GameData
from moves import is_won, reachable_positions
from render import save_preview
from session import SolutionPlayer


def load_game(path: str) -> GameData:
    """
    Load a puzzle from JSON.

    Accepts a bare flat grid, a saved session ({"gameShape": ...}) or a
    GameData object ({"boardRows": ...}).
    """
    with open(path, 'r') as f:
        data = json.load(f)
    if isinstance(data, list):
        return codec.decode(data)
    if "gameShape" in data:
        shape = data["gameShape"]
        return codec.loads(shape) if isinstance(shape, str) else codec.decode(shape)
    return GameData.from_dict(data)


def cmd_show(args) -> int:
    game = load_game(args.file)
    print(f"Board: {game.board_rows}x{game.board_cols}, {len(game.piece_list)} pieces")
    print(codec.board_text(game))
    door = game.door
    print(f"Door: {door.placement.value} at {door.start_index} (span {door.span})")
    print(f"King: piece {game.king_piece_index} at {game.king.position}, wins at {game.king_win_pos}")
    print(f"Hash: {codec.identity_hash(game)}")
    if is_won(game):
        print("Already solved.")
    return 0


def cmd_moves(args) -> int:
    game = load_game(args.file)
    indices = [args.piece] if args.piece is not None else range(len(game.piece_list))
    for i in indices:
        reach = reachable_positions(game.piece_list, i, game.board_rows, game.board_cols)
        stops = ', '.join(f"{d.name.lower()}: {reach[d]}" for d in reach if reach[d])
        print(f"Piece {i} at {game.piece_list[i].position}: {stops or 'boxed in'}")
    return 0


def cmd_render(args) -> int:
    game = load_game(args.file)
    if not save_preview(game, args.output, grid_size=args.grid_size):
        print(f"ERROR: could not write {args.output}")
        return 1
    print(f"✓ Saved preview to {args.output}")
    return 0


def cmd_replay(args) -> int:
    game = load_game(args.file)
    if game.solution is None:
        print("ERROR: puzzle has no solution")
        return 1
    player = SolutionPlayer(game)
    print(codec.board_text(game, player.pieces))
    while player.next_step():
        step = game.solution[player.step_index - 1]
        print(f"\nStep {player.step_index}/{player.total}: piece {step.piece_index} {step.direction.name.lower()}")
        print(codec.board_text(game, player.pieces))
    print("\nSolved!" if player.is_won() else "\nSolution ends without reaching the door.")
    return 0


def cmd_hash(args) -> int:
    for path in args.files:
        print(f"{codec.identity_hash(load_game(path))}  {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Klotski puzzle engine")
    parser.add_argument("--debug", action="store_true", help="print diagnostic output")
    parser.add_argument("--config", default="config.json", help="settings file to load")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("show", help="print a puzzle")
    p.add_argument("file")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("moves", help="list reachable positions")
    p.add_argument("file")
    p.add_argument("--piece", type=int, default=None)
    p.set_defaults(func=cmd_moves)

    p = sub.add_parser("render", help="write a PNG preview")
    p.add_argument("file")
    p.add_argument("output")
    p.add_argument("--grid-size", type=int, default=None)
    p.set_defaults(func=cmd_render)

    p = sub.add_parser("replay", help="step through a solution")
    p.add_argument("file")
    p.set_defaults(func=cmd_replay)

    p = sub.add_parser("hash", help="print identity hashes")
    p.add_argument("files", nargs="+")
    p.set_defaults(func=cmd_hash)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config.load(args.config)
    if args.debug:
        config.DEBUG = True
    try:
        return args.func(args)
    except (ValueError, KeyError, OSError) as e:
        print(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
