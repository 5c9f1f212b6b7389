"""Tests for board representation."""

import pytest

from powerchess.game.board import Board, check_square, on_board
from powerchess.game.pieces import Color, Obstacle, Piece, PieceType


class TestBoardCreation:
    """Tests for board creation."""

    def test_create_standard_board(self):
        """Test standard 8x8 board has all 32 pieces."""
        board = Board.create_standard()

        assert len(list(board.pieces())) == 32
        assert len(list(board.pieces(Color.WHITE))) == 16
        assert len(list(board.pieces(Color.BLACK))) == 16
        assert len(board.empty_squares()) == 32

    def test_standard_board_kings(self):
        """Test kings are in their starting squares."""
        board = Board.create_standard()

        assert board.king_square(Color.WHITE) == (7, 4)
        assert board.king_square(Color.BLACK) == (0, 4)

    def test_standard_board_pawns(self):
        """Test pawns fill the second rows."""
        board = Board.create_standard()

        for col in range(8):
            white = board.get_piece_at(6, col)
            black = board.get_piece_at(1, col)
            assert white is not None and white.type == PieceType.PAWN
            assert white.color == Color.WHITE
            assert black is not None and black.type == PieceType.PAWN
            assert black.color == Color.BLACK

    def test_create_empty_board(self):
        board = Board.create_empty()

        assert list(board.pieces()) == []
        assert len(board.empty_squares()) == 64


class TestBoardAccess:
    """Tests for reading and writing cells."""

    def test_put_get_clear(self):
        board = Board.create_empty()
        rook = Piece.create(PieceType.ROOK, Color.WHITE, 7, 0)
        board.put(4, 4, rook)

        assert board.get(4, 4) is rook
        assert board.get_piece_at(4, 4) is rook
        assert board.clear(4, 4) is rook
        assert board.is_empty(4, 4)

    def test_obstacle_is_not_a_piece(self):
        """Test obstacles are occupants but not pieces."""
        board = Board.create_empty()
        board.put(3, 3, Obstacle(remaining_half_moves=4))

        assert board.get_piece_at(3, 3) is None
        assert board.get_obstacle_at(3, 3) is not None
        assert not board.is_empty(3, 3)
        assert list(board.obstacles())[0][0] == (3, 3)

    def test_find_piece(self):
        board = Board.create_standard()

        assert board.find_piece("N:w:7:1") == (7, 1)
        assert board.find_piece("missing") is None

    def test_pieces_in_scan_order(self):
        """Test pieces are yielded row by row, left to right."""
        board = Board.create_standard()
        squares = [square for square, _ in board.pieces(Color.BLACK)]

        assert squares == sorted(squares)


class TestBoardCopy:
    """Tests for board copies."""

    def test_copy_is_deep(self):
        """Test a deep copy does not share pieces."""
        board = Board.create_standard()
        clone = board.copy()
        piece = clone.get_piece_at(7, 4)
        assert piece is not None
        piece.shielded = True
        clone.clear(6, 4)

        original = board.get_piece_at(7, 4)
        assert original is not None
        assert original.shielded is False
        assert board.get_piece_at(6, 4) is not None

    def test_scratch_shares_occupants(self):
        """Test a scratch board shares pieces but not cells."""
        board = Board.create_standard()
        scratch = board.scratch()
        scratch.clear(6, 4)

        assert board.get_piece_at(6, 4) is not None
        assert scratch.get_piece_at(7, 4) is board.get_piece_at(7, 4)


class TestSpawnCopy:
    """Tests for spawning copies with fresh identities."""

    def test_spawn_copy_identity(self):
        board = Board.create_empty()
        knight = Piece.create(PieceType.KNIGHT, Color.WHITE, 7, 1)
        knight.shielded = True
        knight.passive_charge = 1

        first = board.spawn_copy(knight)
        second = board.spawn_copy(knight)

        assert first.id == "N:w:x1"
        assert second.id == "N:w:x2"
        assert board.next_serial == 3
        assert first.type == PieceType.KNIGHT
        assert first.color == Color.WHITE
        assert first.shielded is False
        assert first.passive_charge == 0


class TestSquareChecks:
    """Tests for coordinate helpers."""

    def test_on_board(self):
        assert on_board(0, 0)
        assert on_board(7, 7)
        assert not on_board(-1, 0)
        assert not on_board(0, 8)

    def test_check_square_raises(self):
        """Test out-of-board coordinates are a contract violation."""
        with pytest.raises(ValueError):
            check_square(8, 0)
