"""Core game logic: squares, board state, move generation and notation."""

from .squares import *
from .board import BoardState, Color, Piece
from .moves import SimpleMove, MoveGenerator, generate_simple_moves, apply_move
from .notation import MoveOutcome, interpret
