"""Move generation and validation for Power Chess.

Pseudo-moves are generated per piece type, then filtered by simulating
each candidate on a scratch copy of the board and discarding any that
leave the mover's own king attacked.
"""

from dataclasses import dataclass
from enum import Enum

from powerchess.game.board import Board, Square, on_board
from powerchess.game.pieces import Color, Obstacle, Piece, PieceType

_ROOK_DIRS = [(0, 1), (0, -1), (1, 0), (-1, 0)]
_BISHOP_DIRS = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
_QUEEN_DIRS = _ROOK_DIRS + _BISHOP_DIRS
_KING_DIRS = _QUEEN_DIRS

_KNIGHT_OFFSETS = [
    (-2, -1), (-2, 1), (-1, -2), (-1, 2),
    (1, -2), (1, 2), (2, -1), (2, 1),
]

FILES = "abcdefgh"


class CastleSide(Enum):
    """Castling direction."""

    KINGSIDE = "kingside"
    QUEENSIDE = "queenside"


# (rook start col, rook end col, square the king passes through, squares that must be empty)
CASTLE_GEOMETRY: dict[CastleSide, tuple[int, int, int, tuple[int, ...]]] = {
    CastleSide.KINGSIDE: (7, 5, 5, (5, 6)),
    CastleSide.QUEENSIDE: (0, 3, 3, (1, 2, 3)),
}


@dataclass(frozen=True)
class Move:
    """A candidate half-move.

    Attributes:
        from_square: Origin (row, col)
        to_square: Destination (row, col)
        en_passant: Captures the pawn beside the origin instead of at the destination
        castle: Castling side if this is a castling king move
        promotion: Pawn lands on row 0 or 7 and needs a promotion choice
    """

    from_square: Square
    to_square: Square
    en_passant: bool = False
    castle: CastleSide | None = None
    promotion: bool = False

    @property
    def capture_square(self) -> Square:
        """Square of the piece this move would capture."""
        if self.en_passant:
            return (self.from_square[0], self.to_square[1])
        return self.to_square


@dataclass
class CastlingRights:
    """Per-color castling rights. Once revoked they never come back."""

    white_kingside: bool = True
    white_queenside: bool = True
    black_kingside: bool = True
    black_queenside: bool = True

    def allows(self, color: Color, side: CastleSide) -> bool:
        return getattr(self, f"{color.value}_{side.value}")

    def revoke(self, color: Color, side: CastleSide | None = None) -> None:
        """Revoke one side, or both when side is None."""
        sides = [side] if side is not None else list(CastleSide)
        for s in sides:
            setattr(self, f"{color.value}_{s.value}", False)

    def copy(self) -> "CastlingRights":
        return CastlingRights(
            white_kingside=self.white_kingside,
            white_queenside=self.white_queenside,
            black_kingside=self.black_kingside,
            black_queenside=self.black_queenside,
        )


def is_square_attacked(board: Board, row: int, col: int, by_color: Color) -> bool:
    """Check whether any piece of by_color attacks (row, col).

    Sliding scans stop at the first occupant, obstacles included.
    """
    # Pawns attack diagonally forward, so they sit one row "behind" the target
    pawn_row = row - by_color.forward
    for dc in (-1, 1):
        if on_board(pawn_row, col + dc):
            piece = board.get_piece_at(pawn_row, col + dc)
            if piece is not None and piece.color == by_color and piece.type == PieceType.PAWN:
                return True

    for dr, dc in _KNIGHT_OFFSETS:
        r, c = row + dr, col + dc
        if on_board(r, c):
            piece = board.get_piece_at(r, c)
            if piece is not None and piece.color == by_color and piece.type == PieceType.KNIGHT:
                return True

    if _ray_attack(board, row, col, by_color, _ROOK_DIRS, (PieceType.ROOK, PieceType.QUEEN)):
        return True
    if _ray_attack(board, row, col, by_color, _BISHOP_DIRS, (PieceType.BISHOP, PieceType.QUEEN)):
        return True

    for dr, dc in _KING_DIRS:
        r, c = row + dr, col + dc
        if on_board(r, c):
            piece = board.get_piece_at(r, c)
            if piece is None or piece.color != by_color:
                continue
            # Super pawns step like kings, so they attack every adjacent square
            if piece.type == PieceType.KING or (piece.type == PieceType.PAWN and piece.super_pawn):
                return True

    return False


def _ray_attack(
    board: Board,
    row: int,
    col: int,
    by_color: Color,
    directions: list[tuple[int, int]],
    attackers: tuple[PieceType, ...],
) -> bool:
    for dr, dc in directions:
        r, c = row + dr, col + dc
        while on_board(r, c):
            occupant = board.get(r, c)
            if occupant is not None:
                if (
                    isinstance(occupant, Piece)
                    and occupant.color == by_color
                    and occupant.type in attackers
                ):
                    return True
                break
            r += dr
            c += dc
    return False


def pseudo_moves(
    board: Board,
    row: int,
    col: int,
    en_passant: Square | None,
    castling: CastlingRights | None,
) -> list[Move]:
    """Generate candidate moves for the piece on (row, col), ignoring self-check.

    Kings are never a capture target. Sliding pieces may end their move on
    an obstacle (and fall in); knights, kings and super pawns may not.
    """
    piece = board.get_piece_at(row, col)
    if piece is None:
        return []

    match piece.type:
        case PieceType.PAWN:
            if piece.super_pawn:
                return _step_moves(board, piece, row, col, _KING_DIRS)
            return _pawn_moves(board, piece, row, col, en_passant)
        case PieceType.KNIGHT:
            return _step_moves(board, piece, row, col, _KNIGHT_OFFSETS)
        case PieceType.BISHOP:
            return _slide_moves(board, piece, row, col, _BISHOP_DIRS)
        case PieceType.ROOK:
            return _slide_moves(board, piece, row, col, _ROOK_DIRS)
        case PieceType.QUEEN:
            return _slide_moves(board, piece, row, col, _QUEEN_DIRS)
        case PieceType.KING:
            moves = _step_moves(board, piece, row, col, _KING_DIRS)
            if castling is not None:
                moves.extend(_castle_moves(board, piece, row, col, castling))
            return moves
        case _:
            return []


def _is_capturable(piece: Piece, target: Piece) -> bool:
    return target.color != piece.color and target.type != PieceType.KING


def _pawn_moves(
    board: Board, piece: Piece, row: int, col: int, en_passant: Square | None
) -> list[Move]:
    moves: list[Move] = []
    direction = piece.color.forward

    r = row + direction
    if on_board(r, col) and board.is_empty(r, col):
        moves.append(_pawn_move(row, col, r, col))
        r2 = row + 2 * direction
        if row == piece.color.pawn_row and on_board(r2, col) and board.is_empty(r2, col):
            moves.append(_pawn_move(row, col, r2, col))

    for dc in (-1, 1):
        c = col + dc
        if not on_board(r, c):
            continue
        target = board.get_piece_at(r, c)
        if target is not None and _is_capturable(piece, target):
            moves.append(_pawn_move(row, col, r, c))
        elif en_passant == (r, c):
            # The pawn that just double-stepped must still be beside us
            victim = board.get_piece_at(row, c)
            if (
                victim is not None
                and victim.type == PieceType.PAWN
                and victim.color != piece.color
            ):
                moves.append(Move((row, col), (r, c), en_passant=True))

    return moves


def _pawn_move(from_row: int, from_col: int, to_row: int, to_col: int) -> Move:
    return Move(
        (from_row, from_col),
        (to_row, to_col),
        promotion=to_row in (0, 7),
    )


def _step_moves(
    board: Board,
    piece: Piece,
    row: int,
    col: int,
    offsets: list[tuple[int, int]],
) -> list[Move]:
    """Single-step moves (knight, king, super pawn) onto empty or enemy squares."""
    moves: list[Move] = []
    is_pawn = piece.type == PieceType.PAWN
    for dr, dc in offsets:
        r, c = row + dr, col + dc
        if not on_board(r, c):
            continue
        occupant = board.get(r, c)
        if occupant is None or (isinstance(occupant, Piece) and _is_capturable(piece, occupant)):
            if is_pawn:
                moves.append(_pawn_move(row, col, r, c))
            else:
                moves.append(Move((row, col), (r, c)))
    return moves


def _slide_moves(
    board: Board,
    piece: Piece,
    row: int,
    col: int,
    directions: list[tuple[int, int]],
) -> list[Move]:
    """Ray-cast moves, stopping at and possibly landing on the first occupant."""
    moves: list[Move] = []
    for dr, dc in directions:
        r, c = row + dr, col + dc
        while on_board(r, c):
            occupant = board.get(r, c)
            if occupant is None:
                moves.append(Move((row, col), (r, c)))
            else:
                if isinstance(occupant, Obstacle) or _is_capturable(piece, occupant):
                    moves.append(Move((row, col), (r, c)))
                break
            r += dr
            c += dc
    return moves


def _castle_moves(
    board: Board, piece: Piece, row: int, col: int, castling: CastlingRights
) -> list[Move]:
    moves: list[Move] = []
    back_row = piece.color.back_row
    if row != back_row or col != 4:
        return moves

    for side, (rook_col, _, _, between) in CASTLE_GEOMETRY.items():
        if not castling.allows(piece.color, side):
            continue
        if any(not board.is_empty(back_row, c) for c in between):
            continue
        rook = board.get_piece_at(back_row, rook_col)
        if rook is None or rook.type != PieceType.ROOK or rook.color != piece.color:
            continue
        king_col = 6 if side == CastleSide.KINGSIDE else 2
        moves.append(Move((row, col), (back_row, king_col), castle=side))
    return moves


def simulate(board: Board, move: Move) -> Board:
    """Return the board as it would look after a move, on a scratch copy.

    Mirrors turn resolution: a capture against a shielded piece leaves the
    board unchanged, and a mover ending on an obstacle disappears.
    """
    target = board.get_piece_at(*move.capture_square)
    if target is not None and target.shielded:
        return board

    result = board.scratch()
    if isinstance(result.get(*move.to_square), Obstacle):
        result.clear(*move.from_square)
        return result

    _relocate(result, move)
    return result


def _relocate(board: Board, move: Move) -> Piece | None:
    """Move occupants for a normal move. Returns the captured piece, if any."""
    fr, fc = move.from_square
    tr, tc = move.to_square
    captured = board.get_piece_at(*move.capture_square)

    piece = board.clear(fr, fc)
    if move.en_passant:
        board.clear(fr, tc)
    board.put(tr, tc, piece)

    if move.castle is not None:
        rook_col, new_rook_col, _, _ = CASTLE_GEOMETRY[move.castle]
        board.put(tr, new_rook_col, board.clear(tr, rook_col))

    return captured


def apply_move(board: Board, move: Move, promotion: PieceType | None = None) -> Piece | None:
    """Apply a normal move to the board in place.

    Handles en passant removal, castling rook relocation and promotion.
    The moving piece keeps its identity; promotion only changes its type.

    Returns:
        The captured piece, or None for a quiet move
    """
    captured = _relocate(board, move)
    if move.promotion:
        piece = board.get_piece_at(*move.to_square)
        if piece is not None:
            piece.type = promotion or PieceType.QUEEN
            piece.super_pawn = False
    return captured


def legal_moves(
    board: Board,
    row: int,
    col: int,
    en_passant: Square | None,
    castling: CastlingRights | None,
) -> list[Move]:
    """Get pseudo-moves that do not leave the mover's own king attacked."""
    piece = board.get_piece_at(row, col)
    if piece is None:
        return []

    enemy = piece.color.opponent
    legal: list[Move] = []
    for move in pseudo_moves(board, row, col, en_passant, castling):
        if move.castle is not None:
            _, _, pass_col, _ = CASTLE_GEOMETRY[move.castle]
            if is_square_attacked(board, row, col, enemy):
                continue
            if is_square_attacked(board, row, pass_col, enemy):
                continue
        after = simulate(board, move)
        king = after.king_square(piece.color)
        if king is None or not is_square_attacked(after, king[0], king[1], enemy):
            legal.append(move)
    return legal


def find_legal_move(
    board: Board,
    from_square: Square,
    to_square: Square,
    en_passant: Square | None,
    castling: CastlingRights | None,
) -> Move | None:
    """Get the legal move between two squares, if there is one."""
    for move in legal_moves(board, from_square[0], from_square[1], en_passant, castling):
        if move.to_square == to_square:
            return move
    return None


def any_legal_move(
    board: Board,
    color: Color,
    en_passant: Square | None,
    castling: CastlingRights | None,
) -> bool:
    """Check whether a color has at least one legal move."""
    for (row, col), _ in board.pieces(color):
        if legal_moves(board, row, col, en_passant, castling):
            return True
    return False


def is_in_check(board: Board, color: Color) -> bool:
    """Check whether a color's king is attacked."""
    king = board.king_square(color)
    if king is None:
        return False
    return is_square_attacked(board, king[0], king[1], color.opponent)


def update_castling_rights(rights: CastlingRights, board: Board, move: Move) -> None:
    """Revoke castling rights for a move, based on the board before it is applied."""
    piece = board.get_piece_at(*move.from_square)
    if piece is not None:
        if piece.type == PieceType.KING:
            rights.revoke(piece.color)
        elif piece.type == PieceType.ROOK:
            _revoke_corner(rights, move.from_square)
    # Capturing on a rook's home corner also kills that right
    _revoke_corner(rights, move.to_square)


def _revoke_corner(rights: CastlingRights, square: Square) -> None:
    for color in Color:
        for side, (rook_col, _, _, _) in CASTLE_GEOMETRY.items():
            if square == (color.back_row, rook_col):
                rights.revoke(color, side)


def square_name(square: Square) -> str:
    """Algebraic name of a square, e.g. (7, 4) -> 'e1'."""
    row, col = square
    return f"{FILES[col]}{8 - row}"


def to_algebraic(board: Board, move: Move, promotion: PieceType | None = None) -> str:
    """Simplified algebraic notation for a move, computed before it is applied."""
    piece = board.get_piece_at(*move.from_square)
    if piece is None:
        return "?"
    if move.castle == CastleSide.KINGSIDE:
        return "O-O"
    if move.castle == CastleSide.QUEENSIDE:
        return "O-O-O"

    symbol = "" if piece.type == PieceType.PAWN else piece.type.value
    is_capture = move.en_passant or board.get(*move.to_square) is not None
    capture = "x" if is_capture else ""
    from_file = FILES[move.from_square[1]] if piece.type == PieceType.PAWN and is_capture else ""
    promo = f"={promotion.value}" if move.promotion and promotion is not None else ""
    return f"{symbol}{from_file}{capture}{square_name(move.to_square)}{promo}"
