"""
Board state representation for the pawns-and-knights variant.

A BoardState is an immutable 8x8 occupancy snapshot backed by a read-only
numpy array. Every move application returns a new BoardState.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Mapping, Optional
import numpy as np

from .squares import FILES, RANKS, FILE_NAMES, parse_square


class Color(IntEnum):
    """Side to move. White pawns advance towards rank 8."""
    WHITE = 0
    BLACK = 1

    @property
    def opponent(self) -> Color:
        return Color(1 - self)

    @property
    def sign(self) -> int:
        """+1 for White, -1 for Black (also the pawn push direction)."""
        return 1 if self == Color.WHITE else -1

    @property
    def pawn_start_rank(self) -> int:
        return 1 if self == Color.WHITE else RANKS - 2

    def __str__(self) -> str:
        return self.name.capitalize()

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)


class Piece(IntEnum):
    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    @property
    def symbol(self) -> str:
        """FEN letter (upper case)."""
        return "PNBRQK"[self - 1]


Occupant = Optional[tuple[Color, Piece]]

EMPTY = 0

BACK_RANK = [
    Piece.ROOK, Piece.KNIGHT, Piece.BISHOP, Piece.QUEEN,
    Piece.KING, Piece.BISHOP, Piece.KNIGHT, Piece.ROOK
]


def encode(color: Color, piece: Piece) -> int:
    """Cell code: +piece for White, -piece for Black, 0 for empty."""
    return color.sign * int(piece)


def decode(code: int) -> Occupant:
    """Inverse of encode."""
    if code == EMPTY:
        return None
    color = Color.WHITE if code > 0 else Color.BLACK
    return color, Piece(abs(code))


def symbol_to_code(symbol: str) -> int:
    """FEN letter to cell code ('P' -> +1, 'n' -> -2)."""
    upper = symbol.upper()
    if len(symbol) != 1 or upper not in "PNBRQK":
        raise ValueError(f"Unknown piece symbol: {symbol!r}")
    color = Color.WHITE if symbol.isupper() else Color.BLACK
    return encode(color, Piece("PNBRQK".index(upper) + 1))


def code_to_symbol(code: int) -> str:
    """Cell code to FEN letter, '.' for empty."""
    occupant = decode(code)
    if occupant is None:
        return "."
    color, piece = occupant
    return piece.symbol if color == Color.WHITE else piece.symbol.lower()


def _empty_grid() -> np.ndarray:
    return np.zeros((RANKS, FILES), dtype=np.int8)


@dataclass(frozen=True, eq=False)
class BoardState:
    """
    Immutable board snapshot.

    Attributes:
        grid: (8, 8) int8 array indexed [rank][file]; read-only after construction
    """
    grid: np.ndarray = field(default_factory=_empty_grid)

    def __post_init__(self) -> None:
        grid = np.array(self.grid, dtype=np.int8)
        if grid.shape != (RANKS, FILES):
            raise ValueError(f"Board grid must be {RANKS}x{FILES}, got {grid.shape}")
        if np.abs(grid.astype(np.int16)).max() > int(Piece.KING):
            raise ValueError("Board grid contains an unknown piece code")
        grid.flags.writeable = False
        object.__setattr__(self, "grid", grid)

    @classmethod
    def empty(cls) -> BoardState:
        """Board with no pieces."""
        return cls()

    @classmethod
    def initial(cls) -> BoardState:
        """Standard chess starting position."""
        grid = _empty_grid()
        for file, piece in enumerate(BACK_RANK):
            grid[0, file] = encode(Color.WHITE, piece)
            grid[1, file] = encode(Color.WHITE, Piece.PAWN)
            grid[RANKS - 2, file] = encode(Color.BLACK, Piece.PAWN)
            grid[RANKS - 1, file] = encode(Color.BLACK, piece)
        return cls(grid)

    @classmethod
    def from_fen(cls, placement: str) -> BoardState:
        """
        Parse the piece-placement field of a FEN string.

        Only the first whitespace-separated field is read, so a full FEN is
        accepted too (side to move, castling etc. are ignored).
        """
        fields = placement.split()
        if not fields:
            raise ValueError("Empty FEN placement")
        rows = fields[0].split("/")
        if len(rows) != RANKS:
            raise ValueError(f"FEN placement needs {RANKS} ranks: {placement!r}")

        grid = _empty_grid()
        for i, row in enumerate(rows):
            rank = RANKS - 1 - i
            file = 0
            for ch in row:
                if ch.isdigit():
                    file += int(ch)
                else:
                    if file >= FILES:
                        raise ValueError(f"Too many squares in FEN rank {rank + 1}: {row!r}")
                    grid[rank, file] = symbol_to_code(ch)
                    file += 1
            if file != FILES:
                raise ValueError(f"FEN rank {rank + 1} does not have {FILES} squares: {row!r}")
        return cls(grid)

    @classmethod
    def from_placement(cls, pieces: Mapping[str, str]) -> BoardState:
        """Build a board from {'e4': 'P', 'd5': 'p', ...}."""
        grid = _empty_grid()
        for square, symbol in pieces.items():
            file, rank = parse_square(square)
            grid[rank, file] = symbol_to_code(symbol)
        return cls(grid)

    def code_at(self, file: int, rank: int) -> int:
        """Raw cell code at (file, rank)."""
        return int(self.grid[rank, file])

    def piece_at(self, file: int, rank: int) -> Occupant:
        """(color, piece) at (file, rank), or None when empty."""
        return decode(self.code_at(file, rank))

    def color_at(self, file: int, rank: int) -> Optional[Color]:
        code = self.code_at(file, rank)
        if code == EMPTY:
            return None
        return Color.WHITE if code > 0 else Color.BLACK

    def is_empty(self, file: int, rank: int) -> bool:
        return self.code_at(file, rank) == EMPTY

    def find(self, color: Color, piece: Piece) -> list[tuple[int, int]]:
        """All (file, rank) squares holding the given piece, ordered by file then rank."""
        ranks, files = np.nonzero(self.grid == encode(color, piece))
        return sorted(zip(files.tolist(), ranks.tolist()))

    def move_piece(self, from_file: int, from_rank: int, to_file: int, to_rank: int) -> BoardState:
        """Return a new board with the origin occupant moved onto the destination."""
        grid = self.grid.copy()
        grid[to_rank, to_file] = grid[from_rank, from_file]
        grid[from_rank, from_file] = EMPTY
        return BoardState(grid)

    def with_piece(self, file: int, rank: int, occupant: Occupant) -> BoardState:
        """Return a new board with one square replaced (None clears it)."""
        grid = self.grid.copy()
        grid[rank, file] = EMPTY if occupant is None else encode(*occupant)
        return BoardState(grid)

    def to_fen(self) -> str:
        """Piece-placement field of FEN."""
        rows = []
        for rank in range(RANKS - 1, -1, -1):
            row = ""
            gap = 0
            for file in range(FILES):
                code = self.code_at(file, rank)
                if code == EMPTY:
                    gap += 1
                    continue
                if gap:
                    row += str(gap)
                    gap = 0
                row += code_to_symbol(code)
            if gap:
                row += str(gap)
            rows.append(row)
        return "/".join(rows)

    def __hash__(self) -> int:
        return hash(self.grid.tobytes())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoardState):
            return False
        return bool(np.array_equal(self.grid, other.grid))

    def __str__(self) -> str:
        """Text diagram, rank 8 at the top."""
        lines = []
        for rank in range(RANKS - 1, -1, -1):
            row = f"{rank + 1} |"
            for file in range(FILES):
                row += " " + code_to_symbol(self.code_at(file, rank))
            lines.append(row)
        lines.append("   +" + "-" * (FILES * 2))
        lines.append("    " + " ".join(FILE_NAMES))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"BoardState.from_fen({self.to_fen()!r})"
