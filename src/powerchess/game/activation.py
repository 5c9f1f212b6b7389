"""Power target resolution.

While a power is pending, the next board target is routed here instead of
normal move selection. Each resolver validates the target first and only
mutates state once the power is known to apply, so a rejected target
leaves the game untouched and the power stays pending.
"""

import logging
from dataclasses import dataclass, field

from powerchess.game.board import Board, Square, on_board
from powerchess.game.events import GameEvent, GameEventType
from powerchess.game.moves import is_in_check
from powerchess.game.pieces import Color, Obstacle, Piece, PieceType
from powerchess.game.powers import PowerKind, get_power
from powerchess.game.state import (
    FreezeEntry,
    GameState,
    PendingKnightSwap,
    PendingPower,
)

logger = logging.getLogger(__name__)

# Scan order for the squares around a piece pulling an enemy
_ADJACENT_OFFSETS = [
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
]

_NOT_DUPLICABLE = (PieceType.KING, PieceType.QUEEN)


@dataclass
class Activation:
    """A resolved power target, ready to end the half-move.

    Attributes:
        notation: History label for the half-move
        events: Events generated by the effect
        fresh_obstacle: Square of an obstacle opened by this activation
    """

    notation: str
    events: list[GameEvent] = field(default_factory=list)
    fresh_obstacle: Square | None = None


def resolve_target(
    state: GameState,
    pending: PendingPower | PendingKnightSwap,
    row: int,
    col: int,
) -> Activation | None:
    """Apply a pending power to a target square.

    Returns:
        The activation, or None if the target is not valid (nothing changed)
    """
    if isinstance(pending, PendingKnightSwap):
        return _knight_swap(state, pending, row, col)

    match pending.kind:
        case PowerKind.OBSTACLE:
            return _place_obstacle(state, row, col)
        case PowerKind.DUPLICATE:
            return _duplicate(state, pending.owner, row, col)
        case PowerKind.PULL:
            return _pull(state, pending.owner, row, col)
        case PowerKind.FREEZE:
            return _freeze(state, pending.owner, col)
        case PowerKind.SHIELD:
            return _shield(state, pending.owner, row, col)
        case _:
            return None


def has_any_target(state: GameState, kind: PowerKind, color: Color) -> bool:
    """Check whether a power could apply anywhere for a color right now."""
    board = state.board
    match kind:
        case PowerKind.OBSTACLE:
            return any(_is_obstacle_target(state, r, c) for (r, c) in board.empty_squares())
        case PowerKind.DUPLICATE:
            return any(
                piece.type not in _NOT_DUPLICABLE
                and _free_duplicate_square(state, piece, r, c) is not None
                for (r, c), piece in board.pieces(color)
            )
        case PowerKind.PULL:
            return any(_pull_plan(state, color, r, c) is not None for (r, c), _ in board.pieces(color))
        case PowerKind.SHIELD:
            return any(not piece.shielded for _, piece in board.pieces(color))
        case _:
            return True


def _label(kind: PowerKind) -> str:
    return f"[{get_power(kind).name}]"


def _owned_piece(board: Board, color: Color, row: int, col: int) -> Piece | None:
    piece = board.get_piece_at(row, col)
    if piece is None or piece.color != color:
        return None
    return piece


def _is_obstacle_target(state: GameState, row: int, col: int) -> bool:
    return state.board.is_empty(row, col) and state.bonus_token != (row, col)


def _place_obstacle(state: GameState, row: int, col: int) -> Activation | None:
    if not _is_obstacle_target(state, row, col):
        return None
    lifespan = state.config.obstacle_lifespan
    state.board.put(row, col, Obstacle(remaining_half_moves=lifespan))
    logger.info(f"Obstacle opened at ({row}, {col}) for {lifespan} half-moves")
    return Activation(
        notation=_label(PowerKind.OBSTACLE),
        events=[
            GameEvent(
                GameEventType.POWER_ACTIVATED,
                state.half_move_count,
                {"power": PowerKind.OBSTACLE.value, "square": (row, col), "lifespan": lifespan},
            )
        ],
        fresh_obstacle=(row, col),
    )


def duplicate_candidates(piece: Piece, row: int, col: int) -> list[Square]:
    """Ordered squares where a copy of the piece may be placed.

    Pawns try forward, backward, left, right (relative to their advance).
    Other pieces try left, right, up, down, then the four diagonals.
    """
    if piece.type == PieceType.PAWN:
        forward = piece.color.forward
        offsets = [(forward, 0), (-forward, 0), (0, -1), (0, 1)]
    else:
        offsets = [
            (0, -1), (0, 1), (-1, 0), (1, 0),
            (-1, -1), (-1, 1), (1, -1), (1, 1),
        ]
    return [(row + dr, col + dc) for dr, dc in offsets if on_board(row + dr, col + dc)]


def _free_duplicate_square(state: GameState, piece: Piece, row: int, col: int) -> Square | None:
    for square in duplicate_candidates(piece, row, col):
        if state.board.is_empty(*square) and state.bonus_token != square:
            return square
    return None


def _duplicate(state: GameState, owner: Color, row: int, col: int) -> Activation | None:
    piece = _owned_piece(state.board, owner, row, col)
    if piece is None or piece.type in _NOT_DUPLICABLE:
        return None
    square = _free_duplicate_square(state, piece, row, col)
    if square is None:
        logger.debug(f"No free square to duplicate {piece.id}")
        return None

    clone = state.board.spawn_copy(piece)
    state.board.put(square[0], square[1], clone)
    logger.info(f"Duplicated {piece.id} as {clone.id} at {square}")
    return Activation(
        notation=_label(PowerKind.DUPLICATE),
        events=[
            GameEvent(
                GameEventType.POWER_ACTIVATED,
                state.half_move_count,
                {
                    "power": PowerKind.DUPLICATE.value,
                    "source_id": piece.id,
                    "piece_id": clone.id,
                    "square": square,
                },
            )
        ],
    )


def _pull_plan(state: GameState, owner: Color, row: int, col: int) -> tuple[Square, Square] | None:
    """Find the enemy to pull toward (row, col) and where it lands.

    The enemy is the closest non-king opponent piece in the column (by row
    distance, ties to the upper one). It lands on the free adjacent square
    closest to where it stood. Obstacles count as free.
    """
    board = state.board
    if _owned_piece(board, owner, row, col) is None:
        return None

    enemies: list[Square] = []
    for r in range(8):
        piece = board.get_piece_at(r, col)
        if piece is not None and piece.color != owner and piece.type != PieceType.KING:
            enemies.append((r, col))
    if not enemies:
        return None
    enemy = min(enemies, key=lambda sq: abs(sq[0] - row))

    candidates = []
    for dr, dc in _ADJACENT_OFFSETS:
        r, c = row + dr, col + dc
        if not on_board(r, c) or state.bonus_token == (r, c):
            continue
        occupant = board.get(r, c)
        if occupant is None or isinstance(occupant, Obstacle):
            candidates.append((r, c))
    if not candidates:
        return None

    dest = min(candidates, key=lambda sq: abs(sq[0] - enemy[0]) + abs(sq[1] - enemy[1]))
    return enemy, dest


def _pull(state: GameState, owner: Color, row: int, col: int) -> Activation | None:
    plan = _pull_plan(state, owner, row, col)
    if plan is None:
        return None
    (er, ec), (dr, dc) = plan

    board = state.board
    enemy = board.clear(er, ec)
    assert isinstance(enemy, Piece)
    data = {
        "power": PowerKind.PULL.value,
        "piece_id": enemy.id,
        "from": (er, ec),
        "to": (dr, dc),
    }
    events = [GameEvent(GameEventType.POWER_ACTIVATED, state.half_move_count, data)]

    if isinstance(board.get(dr, dc), Obstacle):
        # The pulled piece falls in and counts as a capture for the puller
        state.captured[owner].append(enemy)
        events.append(
            GameEvent(
                GameEventType.FELL_INTO_OBSTACLE,
                state.half_move_count,
                {"piece_id": enemy.id, "square": (dr, dc), "credited": owner.value},
            )
        )
        logger.info(f"Pulled {enemy.id} fell into the obstacle at ({dr}, {dc})")
    else:
        board.put(dr, dc, enemy)
        logger.info(f"Pulled {enemy.id} from ({er}, {ec}) to ({dr}, {dc})")

    return Activation(notation=_label(PowerKind.PULL), events=events)


def _freeze(state: GameState, owner: Color, col: int) -> Activation:
    target = owner.opponent
    duration = state.config.freeze_half_moves
    state.freezes.append(FreezeEntry(col=col, color=target, remaining_half_moves=duration))
    logger.info(f"Column {col} frozen for {target} for {duration} half-moves")
    return Activation(
        notation=_label(PowerKind.FREEZE),
        events=[
            GameEvent(
                GameEventType.POWER_ACTIVATED,
                state.half_move_count,
                {"power": PowerKind.FREEZE.value, "col": col, "color": target.value},
            )
        ],
    )


def _shield(state: GameState, owner: Color, row: int, col: int) -> Activation | None:
    piece = _owned_piece(state.board, owner, row, col)
    if piece is None or piece.shielded:
        return None
    piece.shielded = True
    return Activation(
        notation=_label(PowerKind.SHIELD),
        events=[
            GameEvent(
                GameEventType.POWER_ACTIVATED,
                state.half_move_count,
                {"power": PowerKind.SHIELD.value, "piece_id": piece.id},
            )
        ],
    )


def _knight_swap(
    state: GameState, pending: PendingKnightSwap, row: int, col: int
) -> Activation | None:
    board = state.board
    sr, sc = pending.source
    if (row, col) == (sr, sc):
        return None
    knight = _owned_piece(board, pending.owner, sr, sc)
    other = _owned_piece(board, pending.owner, row, col)
    if knight is None or other is None or knight.type != PieceType.KNIGHT:
        return None
    if state.is_frozen(sr, sc, pending.owner) or state.is_frozen(row, col, pending.owner):
        logger.debug(f"Knight swap from {pending.source} blocked by a frozen column")
        return None

    trial = board.scratch()
    trial.put(sr, sc, other)
    trial.put(row, col, knight)
    if is_in_check(trial, pending.owner):
        return None

    board.put(sr, sc, other)
    board.put(row, col, knight)
    knight.passive_ready = False
    knight.passive_charge = 0
    state.last_move = ((sr, sc), (row, col))
    logger.info(f"Knight {knight.id} swapped places with {other.id}")
    return Activation(
        notation="[Knight swap]",
        events=[
            GameEvent(
                GameEventType.KNIGHT_PASSIVE_USED,
                state.half_move_count,
                {"piece_id": knight.id, "other_id": other.id, "from": (sr, sc), "to": (row, col)},
            )
        ],
    )
