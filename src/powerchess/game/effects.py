"""Timed effects advanced once per half-move.

Nothing here runs on a clock: every counter is measured in half-moves and
moves forward only when a half-move (board move or power use) finishes.
"""

import logging
import random

from powerchess.game.board import Square
from powerchess.game.events import GameEvent, GameEventType
from powerchess.game.pieces import PieceType
from powerchess.game.state import GameState, HazardZone

logger = logging.getLogger(__name__)

# Hazard anchors keep the 2x2 footprint inside rows 2..5 (ranks 6..3)
HAZARD_ROWS = (2, 3, 4)
HAZARD_COLS = tuple(range(7))


def advance(
    state: GameState,
    rng: random.Random,
    fresh_obstacle: Square | None = None,
) -> list[GameEvent]:
    """Advance every timed effect by one half-move. Mutates state in place.

    Runs after the half-move has been added to the history, so the history
    length is the running half-move count.

    Args:
        state: Game state (will be mutated)
        rng: Random source for spawn placement
        fresh_obstacle: Square of an obstacle opened during this half-move;
            its countdown starts with the next half-move

    Returns:
        Events generated
    """
    events: list[GameEvent] = []
    half_move = state.half_move_count
    config = state.config

    for (row, col), obstacle in list(state.board.obstacles()):
        if (row, col) == fresh_obstacle:
            continue
        obstacle.remaining_half_moves -= 1
        if obstacle.remaining_half_moves <= 0:
            state.board.clear(row, col)
            events.append(
                GameEvent(GameEventType.OBSTACLE_CLOSED, half_move, {"square": (row, col)})
            )

    for color, ledger in state.ledgers.items():
        if ledger.blessing_half_moves > 0:
            ledger.blessing_half_moves -= 1
            if ledger.blessing_half_moves == 0:
                events.append(
                    GameEvent(GameEventType.BLESSING_ENDED, half_move, {"color": color.value})
                )

    active = []
    for freeze in state.freezes:
        freeze.remaining_half_moves -= 1
        if freeze.remaining_half_moves > 0:
            active.append(freeze)
        else:
            events.append(
                GameEvent(
                    GameEventType.FREEZE_ENDED,
                    half_move,
                    {"col": freeze.col, "color": freeze.color.value},
                )
            )
    state.freezes = active

    if state.hazard is not None:
        state.hazard.remaining_half_moves -= 1
        if state.hazard.remaining_half_moves <= 0:
            events.append(detonate_hazard(state))

    if half_move > 0 and half_move % config.bonus_token_interval == 0 and state.bonus_token is None:
        event = spawn_bonus_token(state, rng)
        if event is not None:
            events.append(event)

    if half_move > 0 and half_move % config.hazard_interval == 0 and state.hazard is None:
        events.append(spawn_hazard(state, rng))

    return events


def spawn_bonus_token(state: GameState, rng: random.Random) -> GameEvent | None:
    """Place the bonus token on a random empty square. No-op on a full board."""
    empty = state.board.empty_squares()
    if not empty:
        return None
    state.bonus_token = rng.choice(empty)
    logger.debug(f"Bonus token spawned at {state.bonus_token}")
    return GameEvent(
        GameEventType.BONUS_TOKEN_SPAWNED,
        state.half_move_count,
        {"square": state.bonus_token},
    )


def spawn_hazard(state: GameState, rng: random.Random) -> GameEvent:
    """Create a hazard zone at a random interior anchor."""
    state.hazard = HazardZone(
        top_row=rng.choice(HAZARD_ROWS),
        left_col=rng.choice(HAZARD_COLS),
        remaining_half_moves=state.config.hazard_countdown,
    )
    logger.debug(f"Hazard zone spawned at ({state.hazard.top_row}, {state.hazard.left_col})")
    return GameEvent(
        GameEventType.HAZARD_SPAWNED,
        state.half_move_count,
        {
            "top_row": state.hazard.top_row,
            "left_col": state.hazard.left_col,
            "remaining_half_moves": state.hazard.remaining_half_moves,
        },
    )


def detonate_hazard(state: GameState) -> GameEvent:
    """Remove every piece inside the hazard zone and clear it.

    Obstacles survive, and so do kings: each side always keeps exactly one
    king. Nobody is credited for the removed pieces.
    """
    zone = state.hazard
    assert zone is not None
    removed: list[str] = []
    for row, col in zone.squares():
        piece = state.board.get_piece_at(row, col)
        if piece is None or piece.type == PieceType.KING:
            continue
        state.board.clear(row, col)
        removed.append(piece.id)
    state.hazard = None
    logger.info(f"Hazard zone detonated, removed {len(removed)} piece(s)")
    return GameEvent(
        GameEventType.HAZARD_DETONATED,
        state.half_move_count,
        {"top_row": zone.top_row, "left_col": zone.left_col, "removed": removed},
    )
