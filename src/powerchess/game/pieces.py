"""Piece definitions for Power Chess."""

from dataclasses import dataclass
from enum import Enum


class Color(Enum):
    """Side colors."""

    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE

    @property
    def forward(self) -> int:
        """Row delta of a pawn advance (white moves up the board)."""
        return -1 if self == Color.WHITE else 1

    @property
    def back_row(self) -> int:
        return 7 if self == Color.WHITE else 0

    @property
    def pawn_row(self) -> int:
        return 6 if self == Color.WHITE else 1

    def __str__(self) -> str:
        return self.value


class PieceType(Enum):
    """Chess piece types."""

    PAWN = "P"
    KNIGHT = "N"
    BISHOP = "B"
    ROOK = "R"
    QUEEN = "Q"
    KING = "K"

    def __str__(self) -> str:
        return self.value


# Capture values; they feed the power-point ledger
PIECE_VALUES: dict[PieceType, int] = {
    PieceType.QUEEN: 8,
    PieceType.ROOK: 6,
    PieceType.BISHOP: 6,
    PieceType.KNIGHT: 5,
    PieceType.PAWN: 3,
    PieceType.KING: 0,
}

PROMOTION_TYPES = (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)


@dataclass
class Piece:
    """A chess piece.

    Attributes:
        id: Stable identity, kept across moves and promotion
        type: Type of piece
        color: Owning side
        shielded: Intercepts the next capture attempt against it
        super_pawn: Pawn temporarily moving one step in any direction
        passive_charge: Captures made (knights only)
        passive_ready: Knight swap passive can be triggered
    """

    id: str
    type: PieceType
    color: Color
    shielded: bool = False
    super_pawn: bool = False
    passive_charge: int = 0
    passive_ready: bool = False

    @classmethod
    def create(cls, piece_type: PieceType, color: Color, row: int, col: int) -> "Piece":
        """Create a piece with an ID derived from its starting square."""
        piece_id = f"{piece_type.value}:{color.value[0]}:{row}:{col}"
        return cls(id=piece_id, type=piece_type, color=color)

    @property
    def value(self) -> int:
        return PIECE_VALUES[self.type]

    def copy(self) -> "Piece":
        """Create a copy of this piece."""
        return Piece(
            id=self.id,
            type=self.type,
            color=self.color,
            shielded=self.shielded,
            super_pawn=self.super_pawn,
            passive_charge=self.passive_charge,
            passive_ready=self.passive_ready,
        )


@dataclass
class Obstacle:
    """A temporary hole. Anything that ends its move on it is captured.

    Attributes:
        remaining_half_moves: Half-moves left before the hole closes
    """

    remaining_half_moves: int

    def copy(self) -> "Obstacle":
        return Obstacle(remaining_half_moves=self.remaining_half_moves)
