"""Tests for move generation and validation."""

from powerchess.game.board import Board
from powerchess.game.moves import (
    CastleSide,
    CastlingRights,
    Move,
    any_legal_move,
    apply_move,
    is_in_check,
    is_square_attacked,
    legal_moves,
    pseudo_moves,
    simulate,
    square_name,
    to_algebraic,
    update_castling_rights,
)
from powerchess.game.pieces import Color, Obstacle, Piece, PieceType


def _place(board: Board, piece_type: PieceType, color: Color, row: int, col: int) -> Piece:
    piece = Piece.create(piece_type, color, row, col)
    board.put(row, col, piece)
    return piece


def _destinations(moves: list[Move]) -> set[tuple[int, int]]:
    return {move.to_square for move in moves}


class TestMove:
    """Tests for the Move dataclass."""

    def test_capture_square(self):
        """Test en passant captures beside the origin."""
        normal = Move((3, 4), (2, 3))
        en_passant = Move((3, 4), (2, 3), en_passant=True)

        assert normal.capture_square == (2, 3)
        assert en_passant.capture_square == (3, 3)


class TestPawnMoves:
    """Tests for pawn movement."""

    def test_pawn_from_start(self):
        """Test pawn may advance one or two squares from its start row."""
        board = Board.create_standard()
        moves = pseudo_moves(board, 6, 4, None, None)

        assert _destinations(moves) == {(5, 4), (4, 4)}

    def test_pawn_blocked(self):
        """Test a pawn cannot push into an occupied square."""
        board = Board.create_empty()
        _place(board, PieceType.PAWN, Color.WHITE, 6, 4)
        _place(board, PieceType.KNIGHT, Color.BLACK, 5, 4)

        assert pseudo_moves(board, 6, 4, None, None) == []

    def test_pawn_diagonal_capture(self):
        board = Board.create_empty()
        _place(board, PieceType.PAWN, Color.WHITE, 4, 4)
        _place(board, PieceType.PAWN, Color.BLACK, 3, 3)

        assert _destinations(pseudo_moves(board, 4, 4, None, None)) == {(3, 4), (3, 3)}

    def test_en_passant_needs_adjacent_pawn(self):
        """Test en passant is offered only while the double-stepped pawn is beside us."""
        board = Board.create_empty()
        _place(board, PieceType.PAWN, Color.WHITE, 3, 4)
        _place(board, PieceType.PAWN, Color.BLACK, 3, 3)

        moves = pseudo_moves(board, 3, 4, (2, 3), None)
        assert Move((3, 4), (2, 3), en_passant=True) in moves

        board.clear(3, 3)
        moves = pseudo_moves(board, 3, 4, (2, 3), None)
        assert (2, 3) not in _destinations(moves)

    def test_promotion_flag(self):
        """Test a pawn reaching the last row is flagged for promotion."""
        board = Board.create_empty()
        _place(board, PieceType.PAWN, Color.WHITE, 1, 0)

        moves = pseudo_moves(board, 1, 0, None, None)
        assert moves == [Move((1, 0), (0, 0), promotion=True)]

    def test_super_pawn_steps_any_direction(self):
        """Test a super pawn moves like a king."""
        board = Board.create_empty()
        pawn = _place(board, PieceType.PAWN, Color.WHITE, 4, 4)
        pawn.super_pawn = True

        assert len(pseudo_moves(board, 4, 4, None, None)) == 8
        assert is_square_attacked(board, 5, 4, Color.WHITE)


class TestSlidingAndObstacles:
    """Tests for sliders, knights and obstacles."""

    def test_rook_may_land_on_obstacle(self):
        """Test a slider can end on an obstacle but not pass it."""
        board = Board.create_empty()
        _place(board, PieceType.ROOK, Color.WHITE, 7, 0)
        board.put(4, 0, Obstacle(remaining_half_moves=5))

        destinations = _destinations(pseudo_moves(board, 7, 0, None, None))
        assert (4, 0) in destinations
        assert (3, 0) not in destinations

    def test_knight_cannot_land_on_obstacle(self):
        board = Board.create_empty()
        _place(board, PieceType.KNIGHT, Color.WHITE, 7, 1)
        board.put(5, 2, Obstacle(remaining_half_moves=5))

        assert _destinations(pseudo_moves(board, 7, 1, None, None)) == {(5, 0), (6, 3)}

    def test_obstacle_blocks_attack(self):
        board = Board.create_empty()
        _place(board, PieceType.ROOK, Color.WHITE, 7, 0)
        board.put(4, 0, Obstacle(remaining_half_moves=5))

        assert is_square_attacked(board, 5, 0, Color.WHITE)
        assert not is_square_attacked(board, 2, 0, Color.WHITE)

    def test_king_is_never_a_capture_target(self):
        board = Board.create_empty()
        _place(board, PieceType.ROOK, Color.WHITE, 7, 0)
        _place(board, PieceType.KING, Color.BLACK, 0, 0)

        destinations = _destinations(pseudo_moves(board, 7, 0, None, None))
        assert (1, 0) in destinations
        assert (0, 0) not in destinations
        assert is_square_attacked(board, 0, 0, Color.WHITE)


class TestLegalMoves:
    """Tests for self-check filtering."""

    def test_pinned_rook_stays_on_file(self):
        """Test a pinned piece may only move along the pin."""
        board = Board.create_empty()
        _place(board, PieceType.KING, Color.WHITE, 7, 4)
        _place(board, PieceType.ROOK, Color.WHITE, 6, 4)
        _place(board, PieceType.ROOK, Color.BLACK, 0, 4)
        _place(board, PieceType.KING, Color.BLACK, 0, 0)

        moves = legal_moves(board, 6, 4, None, None)
        assert moves
        assert all(move.to_square[1] == 4 for move in moves)
        assert (0, 4) in _destinations(moves)

    def test_king_cannot_step_into_attack(self):
        board = Board.create_empty()
        _place(board, PieceType.KING, Color.WHITE, 7, 4)
        _place(board, PieceType.ROOK, Color.BLACK, 0, 3)
        _place(board, PieceType.KING, Color.BLACK, 0, 7)

        destinations = _destinations(legal_moves(board, 7, 4, None, None))
        assert (7, 3) not in destinations
        assert (6, 3) not in destinations
        assert (7, 5) in destinations

    def test_check_detection(self):
        board = Board.create_empty()
        _place(board, PieceType.KING, Color.WHITE, 7, 4)
        _place(board, PieceType.ROOK, Color.BLACK, 0, 4)

        assert is_in_check(board, Color.WHITE)
        assert not is_in_check(board, Color.BLACK)

    def test_any_legal_move_standard(self):
        board = Board.create_standard()

        assert any_legal_move(board, Color.WHITE, None, CastlingRights())
        assert any_legal_move(board, Color.BLACK, None, CastlingRights())

    def test_simulate_against_shield_keeps_board(self):
        """Test a capture against a shielded piece changes nothing."""
        board = Board.create_empty()
        _place(board, PieceType.ROOK, Color.WHITE, 7, 0)
        target = _place(board, PieceType.KNIGHT, Color.BLACK, 3, 0)
        target.shielded = True

        assert simulate(board, Move((7, 0), (3, 0))) is board


class TestCastling:
    """Tests for castling."""

    def _castling_board(self) -> Board:
        board = Board.create_empty()
        _place(board, PieceType.KING, Color.WHITE, 7, 4)
        _place(board, PieceType.ROOK, Color.WHITE, 7, 7)
        _place(board, PieceType.ROOK, Color.WHITE, 7, 0)
        _place(board, PieceType.KING, Color.BLACK, 0, 0)
        return board

    def test_both_sides_available(self):
        board = self._castling_board()
        moves = legal_moves(board, 7, 4, None, CastlingRights())

        castles = {move.castle: move.to_square for move in moves if move.castle}
        assert castles == {CastleSide.KINGSIDE: (7, 6), CastleSide.QUEENSIDE: (7, 2)}

    def test_cannot_castle_through_attack(self):
        """Test the king may not pass an attacked square."""
        board = self._castling_board()
        _place(board, PieceType.ROOK, Color.BLACK, 0, 5)

        moves = legal_moves(board, 7, 4, None, CastlingRights())
        castles = {move.castle for move in moves if move.castle}
        assert castles == {CastleSide.QUEENSIDE}

    def test_cannot_castle_out_of_check(self):
        board = self._castling_board()
        _place(board, PieceType.ROOK, Color.BLACK, 0, 4)

        moves = legal_moves(board, 7, 4, None, CastlingRights())
        assert all(move.castle is None for move in moves)

    def test_revoked_rights(self):
        board = self._castling_board()
        rights = CastlingRights()
        rights.revoke(Color.WHITE, CastleSide.KINGSIDE)

        moves = legal_moves(board, 7, 4, None, rights)
        castles = {move.castle for move in moves if move.castle}
        assert castles == {CastleSide.QUEENSIDE}

    def test_apply_castle_moves_rook(self):
        board = self._castling_board()
        apply_move(board, Move((7, 4), (7, 6), castle=CastleSide.KINGSIDE))

        king = board.get_piece_at(7, 6)
        rook = board.get_piece_at(7, 5)
        assert king is not None and king.type == PieceType.KING
        assert rook is not None and rook.type == PieceType.ROOK
        assert board.is_empty(7, 7)

    def test_king_move_revokes_both_sides(self):
        board = self._castling_board()
        rights = CastlingRights()
        update_castling_rights(rights, board, Move((7, 4), (6, 4)))

        assert not rights.allows(Color.WHITE, CastleSide.KINGSIDE)
        assert not rights.allows(Color.WHITE, CastleSide.QUEENSIDE)
        assert rights.allows(Color.BLACK, CastleSide.KINGSIDE)

    def test_capture_on_rook_corner_revokes(self):
        """Test capturing on a rook's home square revokes that side."""
        board = Board.create_empty()
        _place(board, PieceType.BISHOP, Color.WHITE, 1, 6)
        rights = CastlingRights()
        update_castling_rights(rights, board, Move((1, 6), (0, 7)))

        assert not rights.allows(Color.BLACK, CastleSide.KINGSIDE)
        assert rights.allows(Color.BLACK, CastleSide.QUEENSIDE)


class TestApplyMove:
    """Tests for applying moves."""

    def test_promotion_keeps_identity(self):
        board = Board.create_empty()
        pawn = _place(board, PieceType.PAWN, Color.WHITE, 1, 0)
        pawn.shielded = True

        apply_move(board, Move((1, 0), (0, 0), promotion=True), PieceType.ROOK)

        promoted = board.get_piece_at(0, 0)
        assert promoted is pawn
        assert promoted.type == PieceType.ROOK
        assert promoted.shielded is True

    def test_en_passant_removes_pawn(self):
        board = Board.create_empty()
        _place(board, PieceType.PAWN, Color.WHITE, 3, 4)
        victim = _place(board, PieceType.PAWN, Color.BLACK, 3, 3)

        captured = apply_move(board, Move((3, 4), (2, 3), en_passant=True))

        assert captured is victim
        assert board.is_empty(3, 3)
        assert board.get_piece_at(2, 3) is not None


class TestNotation:
    """Tests for algebraic notation."""

    def test_square_name(self):
        assert square_name((7, 4)) == "e1"
        assert square_name((0, 0)) == "a8"

    def test_quiet_moves(self):
        board = Board.create_standard()

        assert to_algebraic(board, Move((6, 4), (4, 4))) == "e4"
        assert to_algebraic(board, Move((7, 6), (5, 5))) == "Nf3"

    def test_capture_and_castle(self):
        board = Board.create_empty()
        _place(board, PieceType.PAWN, Color.WHITE, 4, 4)
        _place(board, PieceType.PAWN, Color.BLACK, 3, 3)
        _place(board, PieceType.KING, Color.WHITE, 7, 4)

        assert to_algebraic(board, Move((4, 4), (3, 3))) == "exd5"
        assert to_algebraic(board, Move((7, 4), (7, 6), castle=CastleSide.KINGSIDE)) == "O-O"
        assert (
            to_algebraic(board, Move((7, 4), (7, 2), castle=CastleSide.QUEENSIDE)) == "O-O-O"
        )
