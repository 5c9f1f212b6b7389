"""Game state for Power Chess.

GameState is the single aggregate a session owns. Everything a
collaborator needs to render or replicate a game lives here.
"""

from dataclasses import dataclass, field
from enum import Enum

from powerchess.game.board import Board, Square
from powerchess.game.moves import CastlingRights, Move
from powerchess.game.pieces import Color, Piece
from powerchess.game.powers import POWERS, PowerKind
from powerchess.settings import Settings


class GameStatus(Enum):
    """Status of the side to move. Derived after every half-move."""

    PLAYING = "playing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


class WinReason(Enum):
    """Reason for game ending."""

    CHECKMATE = "checkmate"
    RESIGNATION = "resignation"


@dataclass(frozen=True)
class RulesConfig:
    """Rule constants for one game, frozen at creation."""

    obstacle_lifespan: int = 10
    blessing_half_moves: int = 6
    freeze_half_moves: int = 8
    offer_size: int = 4
    bonus_token_value: int = 10
    bonus_token_interval: int = 6
    hazard_interval: int = 16
    hazard_countdown: int = 4
    knight_passive_threshold: int = 2

    @classmethod
    def from_settings(cls, settings: Settings) -> "RulesConfig":
        return cls(
            obstacle_lifespan=settings.obstacle_lifespan,
            blessing_half_moves=settings.blessing_half_moves,
            freeze_half_moves=settings.freeze_half_moves,
            offer_size=min(settings.offer_size, len(POWERS)),
            bonus_token_value=settings.bonus_token_value,
            bonus_token_interval=settings.bonus_token_interval,
            hazard_interval=settings.hazard_interval,
            hazard_countdown=settings.hazard_countdown,
            knight_passive_threshold=settings.knight_passive_threshold,
        )


@dataclass
class HistoryEntry:
    """A recorded half-move (move, reflected attempt or power use)."""

    notation: str
    color: Color


@dataclass
class PowerLedger:
    """Per-color point bookkeeping.

    Attributes:
        points_spent: Total spent in the store
        bonus_points: Points from bonus tokens and blessed captures
        blessing_half_moves: Half-moves left in the blessing window
        acquired: Powers bought, in purchase order
    """

    points_spent: int = 0
    bonus_points: int = 0
    blessing_half_moves: int = 0
    acquired: list[PowerKind] = field(default_factory=list)

    @property
    def blessed(self) -> bool:
        return self.blessing_half_moves > 0

    def copy(self) -> "PowerLedger":
        return PowerLedger(
            points_spent=self.points_spent,
            bonus_points=self.bonus_points,
            blessing_half_moves=self.blessing_half_moves,
            acquired=list(self.acquired),
        )


@dataclass
class FreezeEntry:
    """A column locked for one color."""

    col: int
    color: Color
    remaining_half_moves: int


@dataclass
class HazardZone:
    """A 2x2 area that wipes its occupants when the countdown ends."""

    top_row: int
    left_col: int
    remaining_half_moves: int

    def covers(self, row: int, col: int) -> bool:
        return self.top_row <= row <= self.top_row + 1 and self.left_col <= col <= self.left_col + 1

    def squares(self) -> list[Square]:
        return [
            (self.top_row + dr, self.left_col + dc)
            for dr in (0, 1)
            for dc in (0, 1)
        ]


@dataclass
class PendingPower:
    """A purchased power waiting for its board target."""

    kind: PowerKind
    owner: Color


@dataclass
class PendingKnightSwap:
    """A knight passive waiting for the piece to swap with."""

    owner: Color
    source: Square


@dataclass
class PendingPromotion:
    """A pawn move onto the last rank waiting for the promotion choice."""

    move: Move
    color: Color


@dataclass
class GameState:
    """Complete state of a game.

    Attributes:
        board: Pieces and obstacles
        config: Rule constants
        turn: Side to move
        castling: Remaining castling rights
        en_passant: Square a pawn may capture onto via en passant, for one reply
        status: Status of the side to move
        winner: Winning color once the game is over (None for stalemate)
        win_reason: How the game ended
        history: Recorded half-moves
        captured: Pieces captured by each color, in capture order
        ledgers: Power points per color
        offer: Powers currently for sale
        pending_power: Power or knight swap waiting for a board target
        pending_promotion: Pawn move waiting for the promotion piece
        freezes: Active column freezes
        hazard: Hazard zone counting down, if any
        bonus_token: Square holding the bonus token, if any
        last_move: Origin and destination of the last board move
        selected: Square of the selected piece (local, not replicated)
        selected_moves: Legal moves of the selected piece (local, not replicated)
    """

    board: Board
    config: RulesConfig = field(default_factory=RulesConfig)
    turn: Color = Color.WHITE
    castling: CastlingRights = field(default_factory=CastlingRights)
    en_passant: Square | None = None
    status: GameStatus = GameStatus.PLAYING
    winner: Color | None = None
    win_reason: WinReason | None = None
    history: list[HistoryEntry] = field(default_factory=list)
    captured: dict[Color, list[Piece]] = field(
        default_factory=lambda: {Color.WHITE: [], Color.BLACK: []}
    )
    ledgers: dict[Color, PowerLedger] = field(
        default_factory=lambda: {Color.WHITE: PowerLedger(), Color.BLACK: PowerLedger()}
    )
    offer: list[PowerKind] = field(default_factory=list)
    pending_power: PendingPower | PendingKnightSwap | None = None
    pending_promotion: PendingPromotion | None = None
    freezes: list[FreezeEntry] = field(default_factory=list)
    hazard: HazardZone | None = None
    bonus_token: Square | None = None
    last_move: tuple[Square, Square] | None = None
    selected: Square | None = None
    selected_moves: list[Move] = field(default_factory=list)

    @property
    def half_move_count(self) -> int:
        return len(self.history)

    @property
    def is_over(self) -> bool:
        return self.status in (GameStatus.CHECKMATE, GameStatus.STALEMATE)

    def is_frozen(self, row: int, col: int, color: Color) -> bool:
        """Check if pieces of a color on this square's column are frozen."""
        return any(
            f.col == col and f.color == color and f.remaining_half_moves > 0
            for f in self.freezes
        )

    def clear_selection(self) -> None:
        self.selected = None
        self.selected_moves = []
