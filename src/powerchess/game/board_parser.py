"""Board string parser for custom positions."""

from powerchess.game.board import BOARD_SIZE, Board
from powerchess.game.pieces import Color, Obstacle, Piece, PieceType

PIECE_TYPE_MAP = {
    "P": PieceType.PAWN,
    "N": PieceType.KNIGHT,
    "B": PieceType.BISHOP,
    "R": PieceType.ROOK,
    "Q": PieceType.QUEEN,
    "K": PieceType.KING,
}

COLOR_MAP = {
    "1": Color.WHITE,
    "2": Color.BLACK,
}

OBSTACLE_CELL = "XX"


def parse_board_string(board_str: str, obstacle_lifespan: int = 10) -> Board:
    """Parse a board string into a Board object.

    Board string format:
        - 8 rows, row 0 (black's back row) first
        - Each square = 2 characters: piece type + side number
        - "00" = empty square, "XX" = obstacle
        - Piece types: P (pawn), N (knight), B (bishop), R (rook), Q (queen), K (king)
        - Sides: 1 (white), 2 (black)

    Args:
        board_str: Multi-line string with 2 chars per square
        obstacle_lifespan: Remaining half-moves given to parsed obstacles

    Returns:
        Board object with pieces and obstacles placed

    Raises:
        ValueError: If the board string format is invalid
    """
    lines = [line.strip() for line in board_str.strip().splitlines() if line.strip()]

    if len(lines) != BOARD_SIZE:
        raise ValueError(f"Expected {BOARD_SIZE} rows, got {len(lines)}")

    board = Board.create_empty()

    for row, line in enumerate(lines):
        if len(line) != BOARD_SIZE * 2:
            raise ValueError(
                f"Row {row} has wrong length: {len(line)}, expected {BOARD_SIZE * 2}"
            )

        for col in range(BOARD_SIZE):
            cell = line[col * 2 : col * 2 + 2]
            if cell == "00":
                continue
            if cell == OBSTACLE_CELL:
                board.put(row, col, Obstacle(remaining_half_moves=obstacle_lifespan))
                continue

            piece_type_char = cell[0]
            side_char = cell[1]

            if piece_type_char not in PIECE_TYPE_MAP:
                raise ValueError(f"Unknown piece type: {piece_type_char}")
            if side_char not in COLOR_MAP:
                raise ValueError(f"Invalid side number: {side_char}")

            board.put(
                row,
                col,
                Piece.create(PIECE_TYPE_MAP[piece_type_char], COLOR_MAP[side_char], row, col),
            )

    return board
