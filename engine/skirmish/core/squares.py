"""
Square geometry for the pawns-and-knights board.

Board layout (8 files x 8 ranks), addressed as (file, rank):

  8 | a8 b8 c8 d8 e8 f8 g8 h8
  7 | a7 b7 c7 d7 e7 f7 g7 h7
  ...
  2 | a2 b2 c2 d2 e2 f2 g2 h2
  1 | a1 b1 c1 d1 e1 f1 g1 h1
    +------------------------
      a  b  c  d  e  f  g  h

file 0 = 'a', rank 0 = '1'. The backing grid is stored [rank][file].
"""

from __future__ import annotations

# Board dimensions
FILES = 8
RANKS = 8
NUM_SQUARES = FILES * RANKS

FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"

# Knight offsets (file_delta, rank_delta)
KNIGHT_DELTAS = [
    (1, 2), (2, 1), (2, -1), (1, -2),
    (-1, -2), (-2, -1), (-2, 1), (-1, 2)
]

# Precomputed knight targets, indexed [file][rank] -> list of (file, rank)
KNIGHT_TARGETS: list[list[list[tuple[int, int]]]] = [
    [[] for _ in range(RANKS)] for _ in range(FILES)
]


def on_board(file: int, rank: int) -> bool:
    """Check if (file, rank) is on the board."""
    return 0 <= file < FILES and 0 <= rank < RANKS


def is_valid_square(s: str) -> bool:
    """Check that s is a two-character square name like 'e4' (file case-insensitive)."""
    if len(s) != 2:
        return False
    return s[0].lower() in FILE_NAMES and s[1] in RANK_NAMES


def square_name(file: int, rank: int) -> str:
    """Convert (file, rank) to algebraic notation (e.g., 'e4')."""
    return FILE_NAMES[file] + RANK_NAMES[rank]


def parse_square(s: str) -> tuple[int, int]:
    """Convert algebraic notation to (file, rank)."""
    if not is_valid_square(s):
        raise ValueError(f"Invalid square: {s!r}")
    return FILE_NAMES.index(s[0].lower()), RANK_NAMES.index(s[1])


def is_knight_jump(from_file: int, from_rank: int, to_file: int, to_rank: int) -> bool:
    """True if the two squares are one knight move apart."""
    df = abs(to_file - from_file)
    dr = abs(to_rank - from_rank)
    return (df == 1 and dr == 2) or (df == 2 and dr == 1)


def _init_knight_targets() -> None:
    """Precompute on-board knight targets for all squares."""
    for file in range(FILES):
        for rank in range(RANKS):
            KNIGHT_TARGETS[file][rank] = [
                (file + df, rank + dr)
                for df, dr in KNIGHT_DELTAS
                if on_board(file + df, rank + dr)
            ]


# Initialize lookup tables at module load
_init_knight_targets()
