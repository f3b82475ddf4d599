"""Tests for pseudo-legal move generation."""

import pytest
import sys
from pathlib import Path
import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from skirmish.core.board import BoardState, Color, Piece
from skirmish.core.moves import (
    SimpleMove, MoveGenerator, generate_simple_moves,
    apply_move, is_pseudo_legal, get_move_count
)


def mv(s: str) -> SimpleMove:
    return SimpleMove.from_algebraic(s)


def move_set(board: BoardState, side: Color) -> set[str]:
    return {str(m) for m in generate_simple_moves(board, side)}


class TestSimpleMove:
    def test_from_algebraic(self):
        assert mv('e2-e4') == SimpleMove(4, 1, 4, 3)

    def test_str(self):
        assert str(SimpleMove(6, 0, 5, 2)) == 'g1-f3'

    @pytest.mark.parametrize('bad', ['e2e4', 'e2-', 'e2-e9', 'z1-a1', 'e2-e4-e5'])
    def test_invalid_format(self, bad):
        with pytest.raises(ValueError):
            SimpleMove.from_algebraic(bad)


class TestInitialPosition:
    @pytest.mark.parametrize('side', [Color.WHITE, Color.BLACK])
    def test_twenty_moves(self, side):
        moves = generate_simple_moves(BoardState.initial(), side)
        assert len(moves) == 20
        assert len(set(moves)) == 20

    def test_white_breakdown(self):
        board = BoardState.initial()
        moves = generate_simple_moves(board, Color.WHITE)
        pawn_moves = [m for m in moves if board.piece_at(m.from_file, m.from_rank)[1] == Piece.PAWN]
        knight_moves = [m for m in moves if board.piece_at(m.from_file, m.from_rank)[1] == Piece.KNIGHT]
        assert len([m for m in pawn_moves if m.to_rank == 2]) == 8
        assert len([m for m in pawn_moves if m.to_rank == 3]) == 8
        assert {str(m) for m in knight_moves} == {'b1-a3', 'b1-c3', 'g1-f3', 'g1-h3'}

    def test_black_pushes_go_down(self):
        moves = move_set(BoardState.initial(), Color.BLACK)
        assert 'e7-e6' in moves
        assert 'e7-e5' in moves
        assert 'b8-c6' in moves
        assert 'g8-f6' in moves

    def test_move_count_helper(self):
        assert get_move_count(BoardState.initial(), Color.WHITE) == 20

    def test_order_is_deterministic(self):
        board = BoardState.initial()
        assert generate_simple_moves(board, Color.WHITE) == generate_simple_moves(board, Color.WHITE)
        # Scan is by file then rank: a-pawn moves come first
        assert str(generate_simple_moves(board, Color.WHITE)[0]) == 'a2-a3'


class TestPawnMoves:
    def test_blocked_pawn_has_no_push(self):
        board = BoardState.from_placement({'e4': 'P', 'e5': 'p'})
        assert move_set(board, Color.WHITE) == set()
        assert move_set(board, Color.BLACK) == set()

    def test_double_push_needs_empty_intermediate(self):
        board = BoardState.from_placement({'e2': 'P', 'e3': 'n'})
        assert move_set(board, Color.WHITE) == set()

    def test_double_push_needs_empty_destination(self):
        board = BoardState.from_placement({'e2': 'P', 'e4': 'n'})
        assert move_set(board, Color.WHITE) == {'e2-e3'}

    def test_no_double_push_off_start_rank(self):
        board = BoardState.from_placement({'e3': 'P'})
        assert move_set(board, Color.WHITE) == {'e3-e4'}

    def test_black_double_push(self):
        board = BoardState.from_placement({'d7': 'p'})
        assert move_set(board, Color.BLACK) == {'d7-d6', 'd7-d5'}

    def test_captures_both_diagonals(self):
        board = BoardState.from_placement({'e4': 'P', 'd5': 'p', 'f5': 'n', 'e5': 'b'})
        assert move_set(board, Color.WHITE) == {'e4-d5', 'e4-f5'}

    def test_no_capture_of_own_piece(self):
        board = BoardState.from_placement({'e4': 'P', 'd5': 'N', 'f5': 'B'})
        assert 'e4-d5' not in move_set(board, Color.WHITE)
        assert 'e4-f5' not in move_set(board, Color.WHITE)

    def test_no_diagonal_move_to_empty(self):
        board = BoardState.from_placement({'e4': 'P'})
        assert move_set(board, Color.WHITE) == {'e4-e5'}

    def test_edge_file_capture(self):
        board = BoardState.from_placement({'a4': 'P', 'b5': 'p'})
        assert move_set(board, Color.WHITE) == {'a4-a5', 'a4-b5'}

    def test_black_captures_downwards(self):
        board = BoardState.from_placement({'d5': 'p', 'e4': 'P', 'c6': 'P'})
        assert move_set(board, Color.BLACK) == {'d5-d4', 'd5-e4'}

    def test_pawn_on_last_rank_is_stuck(self):
        board = BoardState.from_placement({'e8': 'P', 'd1': 'p'})
        assert move_set(board, Color.WHITE) == set()
        assert move_set(board, Color.BLACK) == set()


class TestKnightMoves:
    def test_corner_knight(self):
        board = BoardState.from_placement({'a1': 'N'})
        assert move_set(board, Color.WHITE) == {'a1-b3', 'a1-c2'}

    def test_center_knight(self):
        board = BoardState.from_placement({'d4': 'N'})
        assert len(generate_simple_moves(board, Color.WHITE)) == 8

    def test_knight_captures_and_blocks(self):
        board = BoardState.from_placement({'d4': 'N', 'e6': 'p', 'c6': 'P'})
        moves = move_set(board, Color.WHITE)
        assert 'd4-e6' in moves
        assert 'd4-c6' not in moves
        # c6 pawn pushes too
        assert 'c6-c7' in moves

    def test_knights_jump_over_pieces(self):
        board = BoardState.initial()
        assert 'g1-f3' in move_set(board, Color.WHITE)


class TestOtherPieces:
    def test_other_pieces_never_move(self):
        board = BoardState.from_placement({
            'd4': 'Q', 'a1': 'R', 'c1': 'B', 'e1': 'K',
            'd5': 'q', 'a8': 'r', 'c8': 'b', 'e8': 'k',
        })
        assert generate_simple_moves(board, Color.WHITE) == []
        assert generate_simple_moves(board, Color.BLACK) == []

    def test_empty_board(self):
        assert generate_simple_moves(BoardState.empty(), Color.WHITE) == []


class TestApplyMove:
    def test_apply_returns_new_board(self):
        board = BoardState.initial()
        before = board.grid.copy()
        after = apply_move(board, mv('g1-f3'))
        assert np.array_equal(board.grid, before)
        assert after.piece_at(5, 2) == (Color.WHITE, Piece.KNIGHT)
        assert after.is_empty(6, 0)

    def test_apply_every_initial_move_leaves_original_unchanged(self):
        board = BoardState.initial()
        for side in Color:
            for move in generate_simple_moves(board, side):
                apply_move(board, move)
        assert board == BoardState.initial()

    def test_capture_removes_victim(self):
        board = BoardState.from_placement({'d4': 'N', 'e6': 'p'})
        after = apply_move(board, mv('d4-e6'))
        assert after.piece_at(4, 5) == (Color.WHITE, Piece.KNIGHT)
        assert after.find(Color.BLACK, Piece.PAWN) == []

    def test_is_pseudo_legal(self):
        board = BoardState.initial()
        assert is_pseudo_legal(board, Color.WHITE, mv('e2-e4'))
        assert not is_pseudo_legal(board, Color.WHITE, mv('e2-e5'))
        assert not is_pseudo_legal(board, Color.BLACK, mv('e2-e4'))


class TestGeneratorInternals:
    def test_pawn_moves_from_cells(self):
        board = BoardState.from_placement({'b2': 'P', 'c3': 'p'})
        cells = board.grid.tolist()
        moves = MoveGenerator.get_pawn_moves(cells, 1, 1, Color.WHITE)
        assert {str(m) for m in moves} == {'b2-b3', 'b2-b4', 'b2-c3'}

    def test_knight_moves_from_cells(self):
        board = BoardState.from_placement({'b1': 'N', 'd2': 'P', 'c3': 'p'})
        cells = board.grid.tolist()
        moves = MoveGenerator.get_knight_moves(cells, 1, 0, Color.WHITE)
        assert {str(m) for m in moves} == {'b1-a3', 'b1-c3'}
