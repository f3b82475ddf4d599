"""
Move interpreter: reads a short algebraic move for one side and validates it
against a BoardState.

Supported subset:
- Knight moves: "Nf3", "Nxe5" (no disambiguation: exactly one knight must reach)
- Pawn captures: "exd5" (no en passant)
- Pawn pushes: "e4", "e3" (one or two squares)

Everything else (other pieces, castling, promotion) is rejected. A single
trailing '+' or '#' is ignored and '0' is read as 'O'. Bad input is never an
exception: it is a rejected MoveOutcome.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import re

from .squares import RANKS, is_valid_square, parse_square, is_knight_jump, FILE_NAMES
from .board import BoardState, Color, Piece, EMPTY, encode
from .moves import SimpleMove

PAWN_CAPTURE_PATTERN = re.compile(r'([a-h])[xX]([a-h])([1-8])', re.IGNORECASE)
PAWN_PUSH_PATTERN = re.compile(r'([a-h])([1-8])', re.IGNORECASE)


@dataclass(frozen=True)
class MoveOutcome:
    """
    Result of interpreting a move.

    Rejected outcomes carry no squares and no board.
    """
    accepted: bool
    from_file: int = -1
    from_rank: int = -1
    to_file: int = -1
    to_rank: int = -1
    board: Optional[BoardState] = None

    @classmethod
    def rejected(cls) -> MoveOutcome:
        return cls(accepted=False)

    @classmethod
    def legal(cls, move: SimpleMove, board: BoardState) -> MoveOutcome:
        return cls(True, move.from_file, move.from_rank, move.to_file, move.to_rank, board)

    @property
    def move(self) -> Optional[SimpleMove]:
        if not self.accepted:
            return None
        return SimpleMove(self.from_file, self.from_rank, self.to_file, self.to_rank)

    def __bool__(self) -> bool:
        return self.accepted


def normalize(move_text: str) -> str:
    """Trim, read '0' as 'O' and drop one trailing check/mate marker."""
    san = move_text.strip().replace('0', 'O')
    if san.endswith('+') or san.endswith('#'):
        san = san[:-1]
    return san


def interpret(move_text: Optional[str], side_to_move: Color, board: BoardState) -> MoveOutcome:
    """
    Interpret move_text for side_to_move on board.

    Returns an accepted MoveOutcome with the new board, or a rejection.
    The input board is never modified.
    """
    if not move_text:
        return MoveOutcome.rejected()
    san = normalize(move_text)
    if not san:
        return MoveOutcome.rejected()

    if san[0].upper() == 'N':
        return _interpret_knight(san, side_to_move, board)

    match = PAWN_CAPTURE_PATTERN.fullmatch(san)
    if match:
        # Bxc3 is a bishop capture, never the b-pawn
        if san[0] == 'B':
            return MoveOutcome.rejected()
        return _interpret_pawn_capture(match, side_to_move, board)

    match = PAWN_PUSH_PATTERN.fullmatch(san)
    if match:
        return _interpret_pawn_push(match, side_to_move, board)

    return MoveOutcome.rejected()


def _interpret_knight(san: str, side: Color, board: BoardState) -> MoveOutcome:
    wants_capture = 'x' in san[1:] or 'X' in san[1:]
    dest = san[1:].replace('x', '').replace('X', '')
    if not is_valid_square(dest):
        return MoveOutcome.rejected()
    to_file, to_rank = parse_square(dest)

    # Occupancy must match the capture marker
    target = board.color_at(to_file, to_rank)
    if wants_capture:
        if target is None or target == side:
            return MoveOutcome.rejected()
    elif target is not None:
        return MoveOutcome.rejected()

    candidates = [
        (file, rank) for file, rank in board.find(side, Piece.KNIGHT)
        if is_knight_jump(file, rank, to_file, to_rank)
    ]
    if len(candidates) != 1:
        return MoveOutcome.rejected()  # none or ambiguous

    from_file, from_rank = candidates[0]
    move = SimpleMove(from_file, from_rank, to_file, to_rank)
    return MoveOutcome.legal(move, board.move_piece(*move))


def _interpret_pawn_capture(match: re.Match, side: Color, board: BoardState) -> MoveOutcome:
    from_file = FILE_NAMES.index(match.group(1).lower())
    to_file = FILE_NAMES.index(match.group(2).lower())
    to_rank = int(match.group(3)) - 1
    from_rank = to_rank - side.sign

    if not 0 <= from_rank < RANKS:
        return MoveOutcome.rejected()
    if abs(to_file - from_file) != 1:
        return MoveOutcome.rejected()
    if board.code_at(from_file, from_rank) != encode(side, Piece.PAWN):
        return MoveOutcome.rejected()

    target = board.color_at(to_file, to_rank)
    if target is None or target == side:
        return MoveOutcome.rejected()

    move = SimpleMove(from_file, from_rank, to_file, to_rank)
    return MoveOutcome.legal(move, board.move_piece(*move))


def _interpret_pawn_push(match: re.Match, side: Color, board: BoardState) -> MoveOutcome:
    to_file = FILE_NAMES.index(match.group(1).lower())
    to_rank = int(match.group(2)) - 1
    pawn = encode(side, Piece.PAWN)
    direction = side.sign

    if board.code_at(to_file, to_rank) != EMPTY:
        return MoveOutcome.rejected()

    # One step
    from_rank = to_rank - direction
    if 0 <= from_rank < RANKS and board.code_at(to_file, from_rank) == pawn:
        move = SimpleMove(to_file, from_rank, to_file, to_rank)
        return MoveOutcome.legal(move, board.move_piece(*move))

    # Two steps from the starting rank over an empty square
    from_rank = to_rank - 2 * direction
    mid_rank = to_rank - direction
    if (from_rank == side.pawn_start_rank
            and board.code_at(to_file, from_rank) == pawn
            and board.code_at(to_file, mid_rank) == EMPTY):
        move = SimpleMove(to_file, from_rank, to_file, to_rank)
        return MoveOutcome.legal(move, board.move_piece(*move))

    return MoveOutcome.rejected()
