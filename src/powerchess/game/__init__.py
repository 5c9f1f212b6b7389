"""Game engine module for Power Chess."""

from powerchess.game.pieces import Color, Obstacle, Piece, PieceType, PIECE_VALUES
from powerchess.game.board import Board, Square
from powerchess.game.moves import CastleSide, CastlingRights, Move, legal_moves
from powerchess.game.powers import POWERS, PowerDefinition, PowerKind, get_power
from powerchess.game.state import (
    GameState,
    GameStatus,
    RulesConfig,
    WinReason,
)
from powerchess.game.events import GameEvent, GameEventType, Outcome
from powerchess.game.engine import GameEngine
from powerchess.game.snapshot import GameSnapshot

__all__ = [
    # Pieces
    "Color",
    "Obstacle",
    "Piece",
    "PieceType",
    "PIECE_VALUES",
    # Board
    "Board",
    "Square",
    # Moves
    "CastleSide",
    "CastlingRights",
    "Move",
    "legal_moves",
    # Powers
    "POWERS",
    "PowerDefinition",
    "PowerKind",
    "get_power",
    # State
    "GameState",
    "GameStatus",
    "RulesConfig",
    "WinReason",
    # Engine
    "GameEngine",
    "GameEvent",
    "GameEventType",
    "Outcome",
    # Snapshot
    "GameSnapshot",
]
