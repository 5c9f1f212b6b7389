"""Power point economy.

Points are never cached: they are recomputed from the captured lists and
the ledger every time they are needed.
"""

import logging
import random

from powerchess.game.pieces import Color, Piece
from powerchess.game.powers import POWERS, PowerKind
from powerchess.game.state import GameState

logger = logging.getLogger(__name__)


def material_score(state: GameState, color: Color) -> int:
    """Sum of the values of the pieces a color has captured."""
    return sum(piece.value for piece in state.captured[color])


def score_advantage(state: GameState, color: Color) -> int:
    """Material lead of a color over its opponent (negative when behind)."""
    return material_score(state, color) - material_score(state, color.opponent)


def available_points(state: GameState, color: Color) -> int:
    """Points a color can spend: captures + bonus - spent."""
    ledger = state.ledgers[color]
    return material_score(state, color) + ledger.bonus_points - ledger.points_spent


def create_offer(rng: random.Random, size: int) -> list[PowerKind]:
    """Pick the initial store offer."""
    return rng.sample([p.kind for p in POWERS], size)


def rotate_offer(offer: list[PowerKind], slot: int, rng: random.Random) -> list[PowerKind]:
    """Return the offer after selling a slot.

    The sold slot is replaced by a random power not currently offered, or
    removed when every power is already on offer.
    """
    new_offer = list(offer)
    offered = set(offer)
    remaining = [p.kind for p in POWERS if p.kind not in offered]
    if remaining:
        new_offer[slot] = rng.choice(remaining)
    else:
        del new_offer[slot]
    return new_offer


def credit_capture(state: GameState, color: Color, piece: Piece) -> int:
    """Record a captured piece. A blessed capturer earns its value again as bonus.

    Returns:
        Bonus points granted (0 without blessing)
    """
    state.captured[color].append(piece)
    ledger = state.ledgers[color]
    if ledger.blessed:
        ledger.bonus_points += piece.value
        logger.debug(f"Blessing doubled capture of {piece.id} for {color}")
        return piece.value
    return 0


def collect_bonus_token(state: GameState, color: Color) -> int:
    """Consume the bonus token for a color and credit its value (doubled when blessed)."""
    ledger = state.ledgers[color]
    amount = state.config.bonus_token_value
    if ledger.blessed:
        amount *= 2
    ledger.bonus_points += amount
    state.bonus_token = None
    return amount
