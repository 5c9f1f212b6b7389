"""Board representation for Power Chess.

The board is a flat list of 64 cells indexed ``row * 8 + col``. Row 0 is
the top of the board (black's back row) and row 7 the bottom (white's
back row). Each cell holds a Piece, an Obstacle or None.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

from powerchess.game.pieces import Color, Obstacle, Piece, PieceType

BOARD_SIZE = 8

Square = tuple[int, int]
Occupant = Piece | Obstacle | None

# Standard initial board setup
# Row 0: Black back row
# Row 1: Black pawns
# Row 6: White pawns
# Row 7: White back row
STANDARD_BACK_ROW = [
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
]


def on_board(row: int, col: int) -> bool:
    """Check if a square is inside the 8x8 grid."""
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def check_square(row: int, col: int) -> None:
    """Raise ValueError for coordinates outside the board."""
    if not on_board(row, col):
        raise ValueError(f"Square ({row}, {col}) is outside the board")


@dataclass
class Board:
    """Chess board with pieces and obstacles.

    Attributes:
        cells: Flat row-major list of 64 occupants
        next_serial: Counter used to mint identities for spawned pieces
    """

    cells: list[Occupant] = field(default_factory=lambda: [None] * (BOARD_SIZE * BOARD_SIZE))
    next_serial: int = 1

    @classmethod
    def create_standard(cls) -> "Board":
        """Create a standard 8x8 chess board with initial piece positions."""
        board = cls()
        for col, piece_type in enumerate(STANDARD_BACK_ROW):
            board.put(0, col, Piece.create(piece_type, Color.BLACK, 0, col))
            board.put(1, col, Piece.create(PieceType.PAWN, Color.BLACK, 1, col))
            board.put(6, col, Piece.create(PieceType.PAWN, Color.WHITE, 6, col))
            board.put(7, col, Piece.create(piece_type, Color.WHITE, 7, col))
        return board

    @classmethod
    def create_empty(cls) -> "Board":
        """Create an empty board (useful for tests and custom setups)."""
        return cls()

    def copy(self) -> "Board":
        """Create a deep copy of the board."""
        return Board(
            cells=[o.copy() if o is not None else None for o in self.cells],
            next_serial=self.next_serial,
        )

    def scratch(self) -> "Board":
        """Copy the cell list only, sharing occupants.

        Used for move simulation, which relocates occupants but never
        mutates them.
        """
        return Board(cells=list(self.cells), next_serial=self.next_serial)

    def get(self, row: int, col: int) -> Occupant:
        return self.cells[row * BOARD_SIZE + col]

    def put(self, row: int, col: int, occupant: Occupant) -> None:
        self.cells[row * BOARD_SIZE + col] = occupant

    def clear(self, row: int, col: int) -> Occupant:
        """Empty a square and return what was on it."""
        occupant = self.get(row, col)
        self.put(row, col, None)
        return occupant

    def get_piece_at(self, row: int, col: int) -> Piece | None:
        """Get the piece on a square, ignoring obstacles."""
        occupant = self.get(row, col)
        return occupant if isinstance(occupant, Piece) else None

    def get_obstacle_at(self, row: int, col: int) -> Obstacle | None:
        occupant = self.get(row, col)
        return occupant if isinstance(occupant, Obstacle) else None

    def is_empty(self, row: int, col: int) -> bool:
        return self.get(row, col) is None

    def squares(self) -> Iterator[tuple[Square, Occupant]]:
        """Iterate over all squares in scan order (row by row, left to right)."""
        for index, occupant in enumerate(self.cells):
            yield divmod(index, BOARD_SIZE), occupant

    def pieces(self, color: Color | None = None) -> Iterator[tuple[Square, Piece]]:
        """Iterate over pieces in scan order, optionally for a single color."""
        for square, occupant in self.squares():
            if isinstance(occupant, Piece) and (color is None or occupant.color == color):
                yield square, occupant

    def obstacles(self) -> Iterator[tuple[Square, Obstacle]]:
        for square, occupant in self.squares():
            if isinstance(occupant, Obstacle):
                yield square, occupant

    def empty_squares(self) -> list[Square]:
        return [square for square, occupant in self.squares() if occupant is None]

    def find_piece(self, piece_id: str) -> Square | None:
        """Get the square of a piece by its ID."""
        for square, piece in self.pieces():
            if piece.id == piece_id:
                return square
        return None

    def king_square(self, color: Color) -> Square | None:
        """Get the square of a color's king."""
        for square, piece in self.pieces(color):
            if piece.type == PieceType.KING:
                return square
        return None

    def spawn_copy(self, piece: Piece) -> Piece:
        """Create a fresh-identity copy of a piece, without shield or passive state."""
        serial = self.next_serial
        self.next_serial += 1
        return Piece(
            id=f"{piece.type.value}:{piece.color.value[0]}:x{serial}",
            type=piece.type,
            color=piece.color,
        )
