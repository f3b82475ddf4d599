#!/usr/bin/env python3
"""
Terminal client for the pawns-and-knights variant.

Play against the search, check a single move, or watch the search play
itself.
"""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from skirmish.core.board import BoardState, Color, code_to_symbol
from skirmish.core.squares import FILES, RANKS, FILE_NAMES
from skirmish.core.moves import SimpleMove, generate_simple_moves
from skirmish.core.notation import interpret
from skirmish.ai.mcts import MCTS, MCTSConfig
from skirmish.ai.time_manager import create_time_manager

logger = logging.getLogger(__name__)

# ANSI color codes
GREEN = '\033[92m'
DIM = '\033[2m'
RESET = '\033[0m'


def render_board(board: BoardState, last_move: Optional[SimpleMove] = None, color: bool = True) -> str:
    """Render the board, marking the last move's origin ( ) and destination [ ]."""
    origin = destination = None
    if last_move is not None:
        origin = (last_move.from_file, last_move.from_rank)
        destination = (last_move.to_file, last_move.to_rank)

    lines = ["  +" + "-" * (FILES * 3) + "+"]
    for rank in range(RANKS - 1, -1, -1):
        line = f"{rank + 1} |"
        for file in range(FILES):
            sym = code_to_symbol(board.code_at(file, rank))
            if (file, rank) == origin:
                cell = f"({sym})"
                line += f"{DIM}{cell}{RESET}" if color else cell
            elif (file, rank) == destination:
                cell = f"[{sym}]"
                line += f"{GREEN}{cell}{RESET}" if color else cell
            else:
                line += f" {sym} "
        line += "|"
        lines.append(line)
    lines.append("  +" + "-" * (FILES * 3) + "+")
    lines.append("   " + "".join(f" {f} " for f in FILE_NAMES))
    if last_move is not None:
        lines.append("  ( ) origin  [ ] destination")
    return "\n".join(lines)


def show_moves(board: BoardState, side: Color) -> None:
    """Display all moves available to side."""
    moves = generate_simple_moves(board, side)
    if not moves:
        print("No moves available!")
        return
    print(f"{side} moves:", ", ".join(str(m) for m in moves))


def check_single_move(move_text: str, color: bool = True) -> int:
    """Interpret one move for White from the starting position."""
    outcome = interpret(move_text, Color.WHITE, BoardState.initial())
    if not outcome:
        print("(No move made: unsupported or illegal under simplified rules "
              "from the initial position.)")
        return 1
    print(f"White plays: {outcome.move}")
    print(render_board(outcome.board, outcome.move, color))
    return 0


def play_human_vs_ai(
    human: Color = Color.WHITE,
    think_ms: int = 300,
    total_time: Optional[float] = None,
    seed: Optional[int] = None,
    color: bool = True,
    start: Optional[BoardState] = None
) -> None:
    """Play a game: human vs search. Rejected input never passes the turn."""
    board = start if start is not None else BoardState.initial()
    side = Color.WHITE
    history: list[tuple[BoardState, Color]] = []
    last_move: Optional[SimpleMove] = None

    mcts = MCTS(config=MCTSConfig(seed=seed))
    time_manager = create_time_manager(total_time=total_time, move_time_ms=think_ms)

    print("\n=== Pawns & Knights ===")
    print(f"You play {human}. Enter moves like e4, exd5, Nf3.")
    print("Commands: 'm' for moves, 'u' undo, 'h' help, 'q' quit")

    while True:
        print(render_board(board, last_move, color))

        if side != human:
            print(f"{side} thinking...")
            root, info = mcts.search_timed(board, side, time_manager)
            if not root.children:
                print(f"{side} has no moves under the simplified rules. Your turn again.")
                side = human
                continue

            best = mcts.select_move(root)
            logger.debug(f"Search info: {info}")
            for m in mcts.analyze(root, top_k=3):
                logger.info(f"  {m['algebraic']}: {m['visits']} visits, value={m['value']:.1f}")

            history.append((board, side))
            board, last_move = best.board, best.move
            print(f"{side} plays: {best.move}")
            side = side.opponent
            continue

        try:
            user_input = input(f"{side} > ").strip()
        except EOFError:
            break

        if user_input in ('', 'q', 'quit', 'exit'):
            break
        if user_input in ('h', 'help', '?'):
            print("Pawn pushes: e4, d3   Pawn captures: exd5   Knights: Nf3, Nxe5")
            print("'m' to see moves, 'u' to undo, 'q' to quit")
            continue
        if user_input in ('m', 'moves'):
            show_moves(board, side)
            continue
        if user_input in ('u', 'undo'):
            # Rewind to the human's previous turn
            turns = [i for i, (_, s) in enumerate(history) if s == human]
            if not turns:
                print("Nothing to undo.")
                continue
            board, side = history[turns[-1]]
            del history[turns[-1]:]
            last_move = None
            print("Move undone.")
            continue

        outcome = interpret(user_input, side, board)
        if not outcome:
            print("(No move made: unsupported or illegal under simplified rules. "
                  "Try a pawn push like e4/e5 or a knight move like Nf3/Nf6.)")
            continue

        history.append((board, side))
        board, last_move = outcome.board, outcome.move
        side = side.opponent

    logger.debug(f"Time manager stats: {time_manager.stats()}")
    print("Goodbye.")


def watch_ai_vs_ai(
    think_ms: int = 300,
    max_moves: int = 40,
    seed: Optional[int] = None,
    color: bool = True,
    start: Optional[BoardState] = None
) -> None:
    """Watch the search play both sides."""
    board = start if start is not None else BoardState.initial()
    side = Color.WHITE
    mcts = MCTS(config=MCTSConfig(seed=seed))

    print("\n=== Search vs Search ===")
    for ply in range(max_moves):
        root, info = mcts.search(board, side, think_ms)
        if not root.children:
            print(f"{side} has no moves. Stopping.")
            break
        best = mcts.select_move(root)
        board = best.board
        print(f"{ply + 1}. {side} plays {best.move} ({info['iterations']} iterations)")
        print(render_board(board, best.move, color))
        side = side.opponent


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Pawns & Knights terminal client')
    parser.add_argument('--move', type=str, help='Check one White move from the initial position')
    parser.add_argument('--play-as', choices=['white', 'black'], default='white',
                        help='Side played by the human')
    parser.add_argument('--think-ms', type=int, default=300, help='Search time per move (ms)')
    parser.add_argument('--total-time', type=float, default=None,
                        help='Game clock for the search in seconds (overrides --think-ms)')
    parser.add_argument('--watch', action='store_true', help='Watch search vs search')
    parser.add_argument('--max-moves', type=int, default=40, help='Plies to play with --watch')
    parser.add_argument('--fen', type=str, default=None,
                        help='Start from this FEN piece placement (White moves first)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for the search')
    parser.add_argument('--no-color', action='store_true', help='Disable ANSI colors')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    color = not args.no_color

    if args.move is not None:
        move = args.move.strip()
        if not move or ' ' in move:
            print("Please provide exactly one move (no spaces), e.g., e4 or Nf6.")
            return 2
        return check_single_move(move, color)

    start = None
    if args.fen is not None:
        try:
            start = BoardState.from_fen(args.fen)
        except ValueError as e:
            print(f"Invalid position: {e}")
            return 2

    if args.watch:
        watch_ai_vs_ai(args.think_ms, args.max_moves, args.seed, color, start)
    else:
        human = Color.WHITE if args.play_as == 'white' else Color.BLACK
        play_human_vs_ai(human, args.think_ms, args.total_time, args.seed, color, start)
    return 0


if __name__ == '__main__':
    sys.exit(main())
