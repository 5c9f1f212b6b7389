"""Serializable game snapshots.

A snapshot carries everything collaborators need to render or replicate a
game. Adopting a snapshot rebuilds a fresh GameState, so emitting it again
straight away yields an identical snapshot. Local selection is never part
of a snapshot.
"""

import logging
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from powerchess.game.board import BOARD_SIZE, Board, Occupant
from powerchess.game.moves import CastleSide, CastlingRights, Move
from powerchess.game.pieces import Color, Obstacle, Piece, PieceType
from powerchess.game.powers import PowerKind
from powerchess.game.state import (
    FreezeEntry,
    GameState,
    GameStatus,
    HazardZone,
    HistoryEntry,
    PendingKnightSwap,
    PendingPower,
    PendingPromotion,
    PowerLedger,
    RulesConfig,
    WinReason,
)

logger = logging.getLogger(__name__)

_FROZEN = {"frozen": True}


class PieceModel(BaseModel):
    """A piece on the board or in a captured list."""

    kind: Literal["piece"] = "piece"
    id: str
    type: PieceType
    color: Color
    shielded: bool = False
    super_pawn: bool = False
    passive_charge: int = 0
    passive_ready: bool = False

    model_config = _FROZEN

    @classmethod
    def from_piece(cls, piece: Piece) -> "PieceModel":
        return cls(
            id=piece.id,
            type=piece.type,
            color=piece.color,
            shielded=piece.shielded,
            super_pawn=piece.super_pawn,
            passive_charge=piece.passive_charge,
            passive_ready=piece.passive_ready,
        )

    def to_piece(self) -> Piece:
        return Piece(
            id=self.id,
            type=self.type,
            color=self.color,
            shielded=self.shielded,
            super_pawn=self.super_pawn,
            passive_charge=self.passive_charge,
            passive_ready=self.passive_ready,
        )


class ObstacleModel(BaseModel):
    """An obstacle occupying a cell."""

    kind: Literal["obstacle"] = "obstacle"
    remaining_half_moves: int

    model_config = _FROZEN


CellModel = Annotated[PieceModel | ObstacleModel, Field(discriminator="kind")]


class MoveModel(BaseModel):
    from_square: tuple[int, int]
    to_square: tuple[int, int]
    en_passant: bool = False
    castle: CastleSide | None = None
    promotion: bool = False

    model_config = _FROZEN


class CastlingModel(BaseModel):
    white_kingside: bool = True
    white_queenside: bool = True
    black_kingside: bool = True
    black_queenside: bool = True

    model_config = _FROZEN


class LedgerModel(BaseModel):
    points_spent: int = 0
    bonus_points: int = 0
    blessing_half_moves: int = 0
    acquired: list[PowerKind] = Field(default_factory=list)

    model_config = _FROZEN


class FreezeModel(BaseModel):
    col: int = Field(ge=0, lt=BOARD_SIZE)
    color: Color
    remaining_half_moves: int

    model_config = _FROZEN


class HazardModel(BaseModel):
    top_row: int = Field(ge=0, lt=BOARD_SIZE - 1)
    left_col: int = Field(ge=0, lt=BOARD_SIZE - 1)
    remaining_half_moves: int

    model_config = _FROZEN


class HistoryModel(BaseModel):
    notation: str
    color: Color

    model_config = _FROZEN


class PendingPowerModel(BaseModel):
    kind: Literal["power"] = "power"
    power: PowerKind
    owner: Color

    model_config = _FROZEN


class PendingKnightSwapModel(BaseModel):
    kind: Literal["knight_swap"] = "knight_swap"
    owner: Color
    source: tuple[int, int]

    model_config = _FROZEN


PendingModel = Annotated[
    PendingPowerModel | PendingKnightSwapModel, Field(discriminator="kind")
]


class PendingPromotionModel(BaseModel):
    move: MoveModel
    color: Color

    model_config = _FROZEN


class GameSnapshot(BaseModel):
    """Full, immutable picture of a game."""

    cells: list[CellModel | None] = Field(
        min_length=BOARD_SIZE * BOARD_SIZE, max_length=BOARD_SIZE * BOARD_SIZE
    )
    next_serial: int = 1
    turn: Color = Color.WHITE
    castling: CastlingModel = Field(default_factory=CastlingModel)
    en_passant: tuple[int, int] | None = None
    status: GameStatus = GameStatus.PLAYING
    winner: Color | None = None
    win_reason: WinReason | None = None
    history: list[HistoryModel] = Field(default_factory=list)
    captured: dict[Color, list[PieceModel]] = Field(default_factory=dict)
    ledgers: dict[Color, LedgerModel] = Field(default_factory=dict)
    offer: list[PowerKind] = Field(default_factory=list)
    pending_power: PendingModel | None = None
    pending_promotion: PendingPromotionModel | None = None
    freezes: list[FreezeModel] = Field(default_factory=list)
    hazard: HazardModel | None = None
    bonus_token: tuple[int, int] | None = None
    last_move: tuple[tuple[int, int], tuple[int, int]] | None = None

    model_config = _FROZEN

    @classmethod
    def from_state(cls, state: GameState) -> "GameSnapshot":
        """Emit a snapshot of a game state."""
        pending_power: PendingPowerModel | PendingKnightSwapModel | None = None
        if isinstance(state.pending_power, PendingKnightSwap):
            pending_power = PendingKnightSwapModel(
                owner=state.pending_power.owner, source=state.pending_power.source
            )
        elif isinstance(state.pending_power, PendingPower):
            pending_power = PendingPowerModel(
                power=state.pending_power.kind, owner=state.pending_power.owner
            )

        pending_promotion = None
        if state.pending_promotion is not None:
            pending_promotion = PendingPromotionModel(
                move=_move_model(state.pending_promotion.move),
                color=state.pending_promotion.color,
            )

        rights = state.castling
        return cls(
            cells=[_cell_model(o) for o in state.board.cells],
            next_serial=state.board.next_serial,
            turn=state.turn,
            castling=CastlingModel(
                white_kingside=rights.white_kingside,
                white_queenside=rights.white_queenside,
                black_kingside=rights.black_kingside,
                black_queenside=rights.black_queenside,
            ),
            en_passant=state.en_passant,
            status=state.status,
            winner=state.winner,
            win_reason=state.win_reason,
            history=[HistoryModel(notation=h.notation, color=h.color) for h in state.history],
            captured={
                color: [PieceModel.from_piece(p) for p in pieces]
                for color, pieces in state.captured.items()
            },
            ledgers={
                color: LedgerModel(
                    points_spent=ledger.points_spent,
                    bonus_points=ledger.bonus_points,
                    blessing_half_moves=ledger.blessing_half_moves,
                    acquired=list(ledger.acquired),
                )
                for color, ledger in state.ledgers.items()
            },
            offer=list(state.offer),
            pending_power=pending_power,
            pending_promotion=pending_promotion,
            freezes=[
                FreezeModel(col=f.col, color=f.color, remaining_half_moves=f.remaining_half_moves)
                for f in state.freezes
            ],
            hazard=(
                HazardModel(
                    top_row=state.hazard.top_row,
                    left_col=state.hazard.left_col,
                    remaining_half_moves=state.hazard.remaining_half_moves,
                )
                if state.hazard is not None
                else None
            ),
            bonus_token=state.bonus_token,
            last_move=state.last_move,
        )

    def to_state(self, config: RulesConfig | None = None) -> GameState:
        """Build a fresh game state from this snapshot.

        Args:
            config: Rule constants for the restored game (defaults if not provided)
        """
        board = Board(
            cells=[_occupant(cell) for cell in self.cells],
            next_serial=self.next_serial,
        )
        for color in Color:
            kings = sum(1 for _, p in board.pieces(color) if p.type == PieceType.KING)
            if kings != 1:
                logger.warning(f"Adopted snapshot has {kings} {color} king(s)")

        pending_power: PendingPower | PendingKnightSwap | None = None
        if isinstance(self.pending_power, PendingKnightSwapModel):
            pending_power = PendingKnightSwap(
                owner=self.pending_power.owner, source=self.pending_power.source
            )
        elif isinstance(self.pending_power, PendingPowerModel):
            pending_power = PendingPower(kind=self.pending_power.power, owner=self.pending_power.owner)

        pending_promotion = None
        if self.pending_promotion is not None:
            pending_promotion = PendingPromotion(
                move=_move(self.pending_promotion.move),
                color=self.pending_promotion.color,
            )

        ledgers = {color: PowerLedger() for color in Color}
        for color, ledger in self.ledgers.items():
            ledgers[color] = PowerLedger(
                points_spent=ledger.points_spent,
                bonus_points=ledger.bonus_points,
                blessing_half_moves=ledger.blessing_half_moves,
                acquired=list(ledger.acquired),
            )

        captured: dict[Color, list[Piece]] = {color: [] for color in Color}
        for color, pieces in self.captured.items():
            captured[color] = [p.to_piece() for p in pieces]

        return GameState(
            board=board,
            config=config or RulesConfig(),
            turn=self.turn,
            castling=CastlingRights(
                white_kingside=self.castling.white_kingside,
                white_queenside=self.castling.white_queenside,
                black_kingside=self.castling.black_kingside,
                black_queenside=self.castling.black_queenside,
            ),
            en_passant=self.en_passant,
            status=self.status,
            winner=self.winner,
            win_reason=self.win_reason,
            history=[HistoryEntry(notation=h.notation, color=h.color) for h in self.history],
            captured=captured,
            ledgers=ledgers,
            offer=list(self.offer),
            pending_power=pending_power,
            pending_promotion=pending_promotion,
            freezes=[
                FreezeEntry(col=f.col, color=f.color, remaining_half_moves=f.remaining_half_moves)
                for f in self.freezes
            ],
            hazard=(
                HazardZone(
                    top_row=self.hazard.top_row,
                    left_col=self.hazard.left_col,
                    remaining_half_moves=self.hazard.remaining_half_moves,
                )
                if self.hazard is not None
                else None
            ),
            bonus_token=self.bonus_token,
            last_move=self.last_move,
        )


def _cell_model(occupant: Occupant) -> PieceModel | ObstacleModel | None:
    if isinstance(occupant, Piece):
        return PieceModel.from_piece(occupant)
    if isinstance(occupant, Obstacle):
        return ObstacleModel(remaining_half_moves=occupant.remaining_half_moves)
    return None


def _occupant(cell: PieceModel | ObstacleModel | None) -> Occupant:
    if isinstance(cell, PieceModel):
        return cell.to_piece()
    if isinstance(cell, ObstacleModel):
        return Obstacle(remaining_half_moves=cell.remaining_half_moves)
    return None


def _move_model(move: Move) -> MoveModel:
    return MoveModel(
        from_square=move.from_square,
        to_square=move.to_square,
        en_passant=move.en_passant,
        castle=move.castle,
        promotion=move.promotion,
    )


def _move(model: MoveModel) -> Move:
    return Move(
        model.from_square,
        model.to_square,
        en_passant=model.en_passant,
        castle=model.castle,
        promotion=model.promotion,
    )
