"""Events and outcomes produced by game transitions.

Collaborators use these to show messages and play sounds; the engine
itself never renders anything.
"""

from dataclasses import dataclass, field
from enum import Enum


class GameEventType(Enum):
    """Types of events that occur during a game."""

    PIECE_MOVED = "piece_moved"
    CAPTURE = "capture"
    CASTLED = "castled"
    PROMOTION = "promotion"
    SHIELD_REFLECTED = "shield_reflected"
    FELL_INTO_OBSTACLE = "fell_into_obstacle"
    POWER_PURCHASED = "power_purchased"
    POWER_REFUNDED = "power_refunded"
    POWER_ACTIVATED = "power_activated"
    OBSTACLE_CLOSED = "obstacle_closed"
    FREEZE_ENDED = "freeze_ended"
    BLESSING_ENDED = "blessing_ended"
    BONUS_TOKEN_SPAWNED = "bonus_token_spawned"
    BONUS_TOKEN_COLLECTED = "bonus_token_collected"
    HAZARD_SPAWNED = "hazard_spawned"
    HAZARD_DETONATED = "hazard_detonated"
    KNIGHT_PASSIVE_READY = "knight_passive_ready"
    KNIGHT_PASSIVE_USED = "knight_passive_used"
    GAME_OVER = "game_over"


@dataclass
class GameEvent:
    """An event that occurred during a half-move.

    Attributes:
        type: Type of event
        half_move: Number of half-moves recorded when the event occurred
        data: Event-specific data
    """

    type: GameEventType
    half_move: int
    data: dict = field(default_factory=dict)


class Outcome(Enum):
    """Result of an intent.

    Rejections are advisory: a rejected intent never changes the game.
    """

    # Accepted
    OK = "ok"
    SELECTED = "selected"
    DESELECTED = "deselected"
    PROMOTION_REQUIRED = "promotion_required"
    TARGET_REQUIRED = "target_required"

    # Rejected
    INVALID_SELECTION = "invalid_selection"
    PIECE_FROZEN = "piece_frozen"
    ILLEGAL_DESTINATION = "illegal_destination"
    INSUFFICIENT_POINTS = "insufficient_points"
    NO_VALID_TARGET = "no_valid_target"
    NO_VALID_POWER_TARGET = "no_valid_power_target"
    WRONG_TURN_OWNER = "wrong_turn_owner"
    AWAITING_PROMOTION = "awaiting_promotion"
    AWAITING_POWER_TARGET = "awaiting_power_target"
    GAME_OVER = "game_over"

    @property
    def accepted(self) -> bool:
        return self in _ACCEPTED


_ACCEPTED = frozenset(
    {
        Outcome.OK,
        Outcome.SELECTED,
        Outcome.DESELECTED,
        Outcome.PROMOTION_REQUIRED,
        Outcome.TARGET_REQUIRED,
    }
)
