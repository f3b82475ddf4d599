"""
Pseudo-legal move generation for the pawns-and-knights variant.

Pawns push one or two squares and capture diagonally; knights jump. There
is no check detection, no en passant and no promotion. Bishops, rooks,
queens and kings stay on the board but never move.
"""

from __future__ import annotations
from typing import NamedTuple

from .squares import RANKS, FILES, KNIGHT_TARGETS, square_name, parse_square
from .board import BoardState, Color, Piece, EMPTY, encode


class SimpleMove(NamedTuple):
    """Origin and destination squares; carries no legality judgment."""
    from_file: int
    from_rank: int
    to_file: int
    to_rank: int

    @classmethod
    def from_algebraic(cls, s: str) -> SimpleMove:
        """Parse 'e2-e4'."""
        parts = s.strip().split('-')
        if len(parts) != 2:
            raise ValueError(f"Invalid move format: {s}")
        from_file, from_rank = parse_square(parts[0])
        to_file, to_rank = parse_square(parts[1])
        return cls(from_file, from_rank, to_file, to_rank)

    def __str__(self) -> str:
        return f"{square_name(self.from_file, self.from_rank)}-{square_name(self.to_file, self.to_rank)}"


def apply_move(board: BoardState, move: SimpleMove) -> BoardState:
    """Return the board after moving the occupant of the origin square."""
    return board.move_piece(move.from_file, move.from_rank, move.to_file, move.to_rank)


class MoveGenerator:
    """Enumerates pseudo-legal pawn and knight moves for one side."""

    @staticmethod
    def get_pawn_moves(cells: list[list[int]], file: int, rank: int, side: Color) -> list[SimpleMove]:
        """
        Moves for the pawn at (file, rank).

        cells is the board grid as nested lists ([rank][file]).
        """
        moves = []
        direction = side.sign
        to_rank = rank + direction
        if not 0 <= to_rank < RANKS:
            return moves

        if cells[to_rank][file] == EMPTY:
            moves.append(SimpleMove(file, rank, file, to_rank))
            if rank == side.pawn_start_rank and cells[rank + 2 * direction][file] == EMPTY:
                moves.append(SimpleMove(file, rank, file, rank + 2 * direction))

        for to_file in (file - 1, file + 1):
            if 0 <= to_file < FILES and cells[to_rank][to_file] * direction < 0:
                moves.append(SimpleMove(file, rank, to_file, to_rank))

        return moves

    @staticmethod
    def get_knight_moves(cells: list[list[int]], file: int, rank: int, side: Color) -> list[SimpleMove]:
        """Moves for the knight at (file, rank): empty or opposing targets."""
        direction = side.sign
        return [
            SimpleMove(file, rank, to_file, to_rank)
            for to_file, to_rank in KNIGHT_TARGETS[file][rank]
            if cells[to_rank][to_file] * direction <= 0
        ]

    @staticmethod
    def get_moves(board: BoardState, side: Color) -> list[SimpleMove]:
        """
        All pseudo-legal moves for side.

        Squares are scanned by file then rank, so the order is deterministic.
        """
        cells = board.grid.tolist()
        pawn = encode(side, Piece.PAWN)
        knight = encode(side, Piece.KNIGHT)

        moves = []
        for file in range(FILES):
            for rank in range(RANKS):
                code = cells[rank][file]
                if code == pawn:
                    moves.extend(MoveGenerator.get_pawn_moves(cells, file, rank, side))
                elif code == knight:
                    moves.extend(MoveGenerator.get_knight_moves(cells, file, rank, side))
        return moves


# Convenience functions
def generate_simple_moves(board: BoardState, side: Color) -> list[SimpleMove]:
    """Get all pseudo-legal moves for side."""
    return MoveGenerator.get_moves(board, side)


def is_pseudo_legal(board: BoardState, side: Color, move: SimpleMove) -> bool:
    """Check if a move is pseudo-legal for side."""
    return move in MoveGenerator.get_moves(board, side)


def get_move_count(board: BoardState, side: Color) -> int:
    """Get number of pseudo-legal moves."""
    return len(MoveGenerator.get_moves(board, side))
