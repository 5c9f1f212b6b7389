"""Game service for managing active games.

This service owns any number of independent game sessions, each with its
own state and random source. Games live in memory only; persistence and
replication belong to collaborators, which read snapshots from here and
may hand restored snapshots back.
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from powerchess.game.board import Board
from powerchess.game.economy import available_points, score_advantage
from powerchess.game.engine import GameEngine
from powerchess.game.events import GameEvent, Outcome
from powerchess.game.moves import square_name
from powerchess.game.pieces import Color, PieceType
from powerchess.game.snapshot import GameSnapshot
from powerchess.game.state import GameState, RulesConfig
from powerchess.settings import get_settings

logger = logging.getLogger(__name__)

_OUTCOME_MESSAGES = {
    Outcome.INVALID_SELECTION: "Select one of your own pieces",
    Outcome.PIECE_FROZEN: "This column is frozen",
    Outcome.ILLEGAL_DESTINATION: "Invalid move",
    Outcome.INSUFFICIENT_POINTS: "Not enough points",
    Outcome.NO_VALID_TARGET: "This power has no valid target, purchase refunded",
    Outcome.NO_VALID_POWER_TARGET: "Invalid target for this power",
    Outcome.WRONG_TURN_OWNER: "Not your turn",
    Outcome.AWAITING_PROMOTION: "Choose a promotion piece first",
    Outcome.AWAITING_POWER_TARGET: "Choose a target for your power first",
    Outcome.GAME_OVER: "Game is already over",
}


@dataclass
class MoveResult:
    """Result of submitting an intent."""

    success: bool
    outcome: Outcome | None = None
    error: str | None = None
    message: str | None = None
    events: list[GameEvent] = field(default_factory=list)


@dataclass
class ManagedGame:
    """A game being managed by the service.

    Attributes:
        state: The game state
        rng: Random source for offers, token and hazard placement
        created_at: When the game was created
        last_activity: When the game was last accessed
    """

    state: GameState
    rng: random.Random
    created_at: datetime = field(default_factory=datetime.now)
    last_activity: datetime = field(default_factory=datetime.now)


_GAME_ID_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"
_GAME_ID_LENGTH = 8


def _not_found() -> MoveResult:
    return MoveResult(success=False, error="game_not_found", message="Game not found")


def _generate_game_id() -> str:
    """Generate a unique game ID."""
    return "".join(random.choices(_GAME_ID_ALPHABET, k=_GAME_ID_LENGTH))


def _result(outcome: Outcome, events: list[GameEvent]) -> MoveResult:
    if outcome.accepted:
        return MoveResult(success=True, outcome=outcome, events=events)
    return MoveResult(
        success=False,
        outcome=outcome,
        error=outcome.value,
        message=_OUTCOME_MESSAGES.get(outcome),
        events=events,
    )


class GameService:
    """Manages active games and their state.

    This service is responsible for:
    - Creating and restoring games
    - Routing intents to the engine
    - Emitting snapshots
    - Managing game lifecycle
    """

    def __init__(self) -> None:
        """Initialize the game service."""
        self.games: dict[str, ManagedGame] = {}

    def _new_game_id(self) -> str:
        game_id = _generate_game_id()

        # Ensure unique game ID
        while game_id in self.games:
            game_id = _generate_game_id()
        return game_id

    def create_game(
        self,
        seed: int | None = None,
        config: RulesConfig | None = None,
        board: Board | None = None,
    ) -> str:
        """Create a new game.

        Args:
            seed: Random seed (falls back to the configured seed, then to entropy)
            config: Rule constants (loaded from settings if not provided)
            board: Custom starting board (standard setup if not provided)

        Returns:
            The game_id
        """
        settings = get_settings()
        if seed is None:
            seed = settings.rng_seed
        rng = random.Random(seed)
        config = config or RulesConfig.from_settings(settings)

        game_id = self._new_game_id()
        state = GameEngine.create_game(rng, config=config, board=board)
        self.games[game_id] = ManagedGame(state=state, rng=rng)
        logger.info(f"Game {game_id} created (seed={seed})")
        return game_id

    def get_game(self, game_id: str) -> GameState | None:
        """Get a game state by ID.

        Args:
            game_id: The game ID

        Returns:
            GameState if found, None otherwise
        """
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return None
        return managed_game.state

    def get_managed_game(self, game_id: str) -> ManagedGame | None:
        """Get a managed game by ID and mark it active."""
        managed_game = self.games.get(game_id)
        if managed_game is not None:
            managed_game.last_activity = datetime.now()
        return managed_game

    def select_or_move(
        self, game_id: str, row: int, col: int, color: Color | None = None
    ) -> MoveResult:
        """Submit a board target for the side to move (or its pending power)."""
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return _not_found()
        outcome, events = GameEngine.select_or_move(
            managed_game.state, row, col, managed_game.rng, color
        )
        return _result(outcome, events)

    def choose_promotion(
        self, game_id: str, piece_type: PieceType, color: Color | None = None
    ) -> MoveResult:
        """Complete a pending promotion."""
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return _not_found()
        outcome, events = GameEngine.choose_promotion(
            managed_game.state, piece_type, managed_game.rng, color
        )
        return _result(outcome, events)

    def purchase(self, game_id: str, slot: int, color: Color | None = None) -> MoveResult:
        """Buy the power in an offer slot."""
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return _not_found()
        outcome, events = GameEngine.purchase(managed_game.state, slot, managed_game.rng, color)
        return _result(outcome, events)

    def supply_power_target(
        self, game_id: str, row: int, col: int, color: Color | None = None
    ) -> MoveResult:
        """Aim the pending power at a square."""
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return _not_found()
        outcome, events = GameEngine.supply_power_target(
            managed_game.state, row, col, managed_game.rng, color
        )
        return _result(outcome, events)

    def activate_knight_passive(
        self, game_id: str, row: int, col: int, color: Color | None = None
    ) -> MoveResult:
        """Arm the swap passive of a charged knight."""
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return _not_found()
        outcome, events = GameEngine.activate_knight_passive(managed_game.state, row, col, color)
        return _result(outcome, events)

    def resign(self, game_id: str, color: Color) -> bool:
        """Process a resignation.

        Returns:
            True if the resignation ended the game
        """
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return False
        outcome, _ = GameEngine.resign(managed_game.state, color)
        return outcome.accepted

    def snapshot(self, game_id: str) -> GameSnapshot | None:
        """Emit the current snapshot of a game."""
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return None
        return GameSnapshot.from_state(managed_game.state)

    def adopt_snapshot(
        self, game_id: str, snapshot: GameSnapshot | dict[str, Any]
    ) -> bool:
        """Replace a game's state with an externally supplied snapshot.

        The new state is fully built before it replaces the old one.

        Raises:
            pydantic.ValidationError: If a dict snapshot is malformed
        """
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return False
        if not isinstance(snapshot, GameSnapshot):
            snapshot = GameSnapshot.model_validate(snapshot)
        managed_game.state = snapshot.to_state(managed_game.state.config)
        logger.info(f"Game {game_id} adopted a snapshot at half-move {len(snapshot.history)}")
        return True

    def legal_moves(self, game_id: str, row: int, col: int) -> list[str] | None:
        """Get the legal destinations of the piece on a square.

        Returns:
            Square names (e.g. "e4"), or None if the game does not exist
        """
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return None
        moves = GameEngine.legal_moves(managed_game.state, row, col)
        return [square_name(move.to_square) for move in moves]

    def is_square_frozen(self, game_id: str, row: int, col: int, color: Color) -> bool | None:
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return None
        return GameEngine.is_square_frozen(managed_game.state, row, col, color)

    def available_points(self, game_id: str, color: Color) -> int | None:
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return None
        return available_points(managed_game.state, color)

    def score_advantage(self, game_id: str, color: Color) -> int | None:
        managed_game = self.get_managed_game(game_id)
        if managed_game is None:
            return None
        return score_advantage(managed_game.state, color)

    def cleanup_stale_games(self, max_age_seconds: int = 3600) -> int:
        """Remove games that haven't been accessed recently.

        Args:
            max_age_seconds: Maximum age in seconds before cleanup

        Returns:
            Number of games cleaned up
        """
        now = datetime.now()
        stale_games = [
            game_id
            for game_id, game in self.games.items()
            if (now - game.last_activity).total_seconds() > max_age_seconds
        ]

        for game_id in stale_games:
            del self.games[game_id]

        return len(stale_games)


# Global singleton instance
_game_service: GameService | None = None


def get_game_service() -> GameService:
    """Get the global game service instance."""
    global _game_service
    if _game_service is None:
        _game_service = GameService()
    return _game_service
