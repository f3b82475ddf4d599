"""
Material evaluation for search rollouts.

Scores are in centipawns from White's point of view: positive means White
is ahead. Kings are worth nothing because the game has no mate detection.
"""

from __future__ import annotations
import numpy as np

from ..core.board import BoardState, Piece

PIECE_VALUES = {
    Piece.PAWN: 100,
    Piece.KNIGHT: 320,
    Piece.BISHOP: 330,
    Piece.ROOK: 500,
    Piece.QUEEN: 900,
    Piece.KING: 0,
}

# Signed value per cell code, indexed by code + CODE_OFFSET
CODE_OFFSET = int(Piece.KING)
CODE_VALUES = np.zeros(2 * CODE_OFFSET + 1, dtype=np.int32)
for _piece, _value in PIECE_VALUES.items():
    CODE_VALUES[CODE_OFFSET + int(_piece)] = _value
    CODE_VALUES[CODE_OFFSET - int(_piece)] = -_value


def evaluate_material(board: BoardState) -> int:
    """Sum of piece values, White minus Black."""
    return int(CODE_VALUES[board.grid.astype(np.intp) + CODE_OFFSET].sum())


class MaterialEvaluator:
    """
    Evaluator used by the search: material balance only.

    Counts calls so benchmarks and tests can see how many rollouts ended in
    an evaluation.
    """

    def __init__(self):
        self.total_evals = 0

    def evaluate(self, board: BoardState) -> int:
        """Return the White-relative material score."""
        self.total_evals += 1
        return evaluate_material(board)

    def stats(self) -> dict:
        """Get evaluation statistics."""
        return {'total_evals': self.total_evals}
