"""Core game engine for Power Chess.

This module provides the intent entry points and the turn resolution
state machine. State is mutated in place. Every intent either applies
completely or is rejected with an advisory Outcome and no mutation.
"""

import logging
import random

from powerchess.game import activation, economy, effects
from powerchess.game.board import Board, Square, check_square
from powerchess.game.events import GameEvent, GameEventType, Outcome
from powerchess.game.moves import (
    Move,
    any_legal_move,
    apply_move,
    find_legal_move,
    is_in_check,
    legal_moves,
    to_algebraic,
    update_castling_rights,
)
from powerchess.game.pieces import PROMOTION_TYPES, Color, Obstacle, Piece, PieceType
from powerchess.game.powers import PowerKind, get_power
from powerchess.game.state import (
    GameState,
    GameStatus,
    HistoryEntry,
    PendingKnightSwap,
    PendingPower,
    PendingPromotion,
    RulesConfig,
    WinReason,
)

logger = logging.getLogger(__name__)

IntentResult = tuple[Outcome, list[GameEvent]]


class GameEngine:
    """Core game logic for Power Chess.

    All methods are static and mutate state in place. Methods return an
    Outcome along with any events generated.
    """

    @staticmethod
    def create_game(
        rng: random.Random,
        config: RulesConfig | None = None,
        board: Board | None = None,
        turn: Color = Color.WHITE,
    ) -> GameState:
        """Create a new game.

        Args:
            rng: Random source used for the initial store offer
            config: Rule constants (defaults if not provided)
            board: Custom board (standard setup if not provided)
            turn: Side to move first

        Returns:
            New GameState instance
        """
        config = config or RulesConfig()
        state = GameState(
            board=board if board is not None else Board.create_standard(),
            config=config,
            turn=turn,
            offer=economy.create_offer(rng, config.offer_size),
        )
        GameEngine.refresh_status(state)
        return state

    @staticmethod
    def legal_moves(state: GameState, row: int, col: int) -> list[Move]:
        """Get legal moves for the piece on a square."""
        check_square(row, col)
        return legal_moves(state.board, row, col, state.en_passant, state.castling)

    @staticmethod
    def is_square_frozen(state: GameState, row: int, col: int, color: Color) -> bool:
        """Check if a color's pieces cannot move from this square's column."""
        check_square(row, col)
        return state.is_frozen(row, col, color)

    @staticmethod
    def available_points(state: GameState, color: Color) -> int:
        """Get the points a color can spend right now."""
        return economy.available_points(state, color)

    @staticmethod
    def select_or_move(
        state: GameState,
        row: int,
        col: int,
        rng: random.Random,
        actor: Color | None = None,
    ) -> IntentResult:
        """Handle a board target: select a piece, move the selected one, or aim a power.

        Args:
            state: Game state (will be mutated)
            row: Target row
            col: Target column
            rng: Random source for timed effects
            actor: Color submitting the intent, if known

        Returns:
            Tuple of (outcome, events)
        """
        check_square(row, col)
        if state.is_over:
            return Outcome.GAME_OVER, []
        if state.pending_power is not None:
            return GameEngine.supply_power_target(state, row, col, rng, actor)
        if actor is not None and actor != state.turn:
            return Outcome.WRONG_TURN_OWNER, []
        if state.pending_promotion is not None:
            return Outcome.AWAITING_PROMOTION, []

        if state.selected is None:
            return GameEngine._select(state, row, col), []

        if (row, col) == state.selected:
            state.clear_selection()
            return Outcome.DESELECTED, []

        move = find_legal_move(
            state.board, state.selected, (row, col), state.en_passant, state.castling
        )
        if move is not None:
            if move.promotion:
                state.pending_promotion = PendingPromotion(move=move, color=state.turn)
                state.clear_selection()
                return Outcome.PROMOTION_REQUIRED, []
            return Outcome.OK, GameEngine._resolve_move(state, move, None, rng)

        clicked = state.board.get_piece_at(row, col)
        if clicked is not None and clicked.color == state.turn:
            return GameEngine._select(state, row, col), []

        logger.debug(f"Rejected destination ({row}, {col}) from {state.selected}")
        return Outcome.ILLEGAL_DESTINATION, []

    @staticmethod
    def _select(state: GameState, row: int, col: int) -> Outcome:
        piece = state.board.get_piece_at(row, col)
        if piece is None or piece.color != state.turn:
            return Outcome.INVALID_SELECTION
        if state.is_frozen(row, col, piece.color):
            return Outcome.PIECE_FROZEN
        state.selected = (row, col)
        state.selected_moves = legal_moves(
            state.board, row, col, state.en_passant, state.castling
        )
        return Outcome.SELECTED

    @staticmethod
    def choose_promotion(
        state: GameState,
        piece_type: PieceType,
        rng: random.Random,
        actor: Color | None = None,
    ) -> IntentResult:
        """Complete a pending promotion with the chosen piece type.

        Raises:
            ValueError: If piece_type is not a promotion piece
        """
        if piece_type not in PROMOTION_TYPES:
            raise ValueError(f"Cannot promote to {piece_type}")
        if state.is_over:
            return Outcome.GAME_OVER, []
        pending = state.pending_promotion
        if pending is None:
            return Outcome.INVALID_SELECTION, []
        if actor is not None and actor != pending.color:
            return Outcome.WRONG_TURN_OWNER, []

        state.pending_promotion = None
        return Outcome.OK, GameEngine._resolve_move(state, pending.move, piece_type, rng)

    @staticmethod
    def _resolve_move(
        state: GameState,
        move: Move,
        promotion: PieceType | None,
        rng: random.Random,
    ) -> list[GameEvent]:
        """Resolve a legal half-move.

        Order:
        1. A shielded target absorbs the capture; the mover stays put.
        2. A mover ending on an obstacle falls in and is captured by its own side.
        3. Otherwise the move is applied normally.
        """
        board = state.board
        color = state.turn
        mover = board.get_piece_at(*move.from_square)
        assert mover is not None
        notation = to_algebraic(board, move, promotion)
        half_move = state.half_move_count
        events: list[GameEvent] = []

        target = board.get_piece_at(*move.capture_square)
        if target is not None and target.shielded:
            target.shielded = False
            state.last_move = (move.from_square, move.to_square)
            events.append(
                GameEvent(
                    GameEventType.SHIELD_REFLECTED,
                    half_move,
                    {
                        "attacker_id": mover.id,
                        "defender_id": target.id,
                        "square": move.capture_square,
                    },
                )
            )
            logger.info(f"Shield on {target.id} reflected {mover.id}")
            GameEngine._finish_half_move(state, f"{notation} (reflected)", rng, events)
            return events

        if isinstance(board.get(*move.to_square), Obstacle):
            update_castling_rights(state.castling, board, move)
            board.clear(*move.from_square)
            state.captured[color].append(mover)
            state.last_move = (move.from_square, move.to_square)
            events.append(
                GameEvent(
                    GameEventType.FELL_INTO_OBSTACLE,
                    half_move,
                    {"piece_id": mover.id, "square": move.to_square, "credited": color.value},
                )
            )
            logger.info(f"{mover.id} fell into the obstacle at {move.to_square}")
            GameEngine._finish_half_move(
                state, f"{notation} (fell into obstacle)", rng, events
            )
            return events

        update_castling_rights(state.castling, board, move)
        fr, fc = move.from_square
        tr, tc = move.to_square
        en_passant = None
        if mover.type == PieceType.PAWN and abs(tr - fr) == 2:
            en_passant = ((fr + tr) // 2, fc)

        captured = apply_move(board, move, promotion)
        events.append(
            GameEvent(
                GameEventType.PIECE_MOVED,
                half_move,
                {"piece_id": mover.id, "from": move.from_square, "to": move.to_square},
            )
        )
        if move.castle is not None:
            events.append(
                GameEvent(
                    GameEventType.CASTLED,
                    half_move,
                    {"color": color.value, "side": move.castle.value},
                )
            )
        if move.promotion:
            events.append(
                GameEvent(
                    GameEventType.PROMOTION,
                    half_move,
                    {"piece_id": mover.id, "new_type": mover.type.value},
                )
            )

        if state.bonus_token == move.to_square:
            amount = economy.collect_bonus_token(state, color)
            events.append(
                GameEvent(
                    GameEventType.BONUS_TOKEN_COLLECTED,
                    half_move,
                    {"color": color.value, "points": amount, "square": move.to_square},
                )
            )

        if captured is not None:
            bonus = economy.credit_capture(state, color, captured)
            events.append(
                GameEvent(
                    GameEventType.CAPTURE,
                    half_move,
                    {
                        "capturing_piece_id": mover.id,
                        "captured_piece_id": captured.id,
                        "position": move.capture_square,
                        "bonus": bonus,
                    },
                )
            )
            GameEngine._charge_knight(state, mover, events)

        state.last_move = (move.from_square, move.to_square)
        GameEngine._finish_half_move(state, notation, rng, events, en_passant=en_passant)
        return events

    @staticmethod
    def _charge_knight(state: GameState, piece: Piece, events: list[GameEvent]) -> None:
        if piece.type != PieceType.KNIGHT or piece.passive_ready:
            return
        piece.passive_charge += 1
        if piece.passive_charge >= state.config.knight_passive_threshold:
            piece.passive_ready = True
            events.append(
                GameEvent(
                    GameEventType.KNIGHT_PASSIVE_READY,
                    state.half_move_count,
                    {"piece_id": piece.id},
                )
            )

    @staticmethod
    def _finish_half_move(
        state: GameState,
        notation: str,
        rng: random.Random,
        events: list[GameEvent],
        fresh_obstacle: Square | None = None,
        en_passant: Square | None = None,
    ) -> None:
        """Record the half-move, pass the turn, advance timed effects, recompute status.

        The en passant target only survives for the reply to a pawn double-step,
        so every other half-move (powers included) clears it.
        """
        state.en_passant = en_passant
        state.history.append(HistoryEntry(notation=notation, color=state.turn))
        state.turn = state.turn.opponent
        state.clear_selection()
        state.pending_power = None
        state.pending_promotion = None
        events.extend(effects.advance(state, rng, fresh_obstacle))
        events.extend(GameEngine.refresh_status(state))

    @staticmethod
    def refresh_status(state: GameState) -> list[GameEvent]:
        """Derive the status of the side to move."""
        has_moves = any_legal_move(state.board, state.turn, state.en_passant, state.castling)
        in_check = is_in_check(state.board, state.turn)

        if has_moves:
            state.status = GameStatus.CHECK if in_check else GameStatus.PLAYING
            return []

        if in_check:
            state.status = GameStatus.CHECKMATE
            state.winner = state.turn.opponent
            state.win_reason = WinReason.CHECKMATE
        else:
            state.status = GameStatus.STALEMATE
        logger.info(f"Game over: {state.status.value}, winner={state.winner}")
        return [
            GameEvent(
                GameEventType.GAME_OVER,
                state.half_move_count,
                {
                    "status": state.status.value,
                    "winner": state.winner.value if state.winner else None,
                },
            )
        ]

    @staticmethod
    def purchase(
        state: GameState,
        slot: int,
        rng: random.Random,
        actor: Color | None = None,
    ) -> IntentResult:
        """Buy the power in an offer slot for the side to move.

        Untargeted powers resolve immediately and consume the turn. Targeted
        powers become pending until a valid board target is supplied.

        Raises:
            ValueError: If the slot is outside the offer
        """
        if not 0 <= slot < len(state.offer):
            raise ValueError(f"Offer slot {slot} out of range")
        if state.is_over:
            return Outcome.GAME_OVER, []
        if actor is not None and actor != state.turn:
            return Outcome.WRONG_TURN_OWNER, []
        if state.pending_promotion is not None:
            return Outcome.AWAITING_PROMOTION, []
        if state.pending_power is not None:
            return Outcome.AWAITING_POWER_TARGET, []

        color = state.turn
        power = get_power(state.offer[slot])
        if economy.available_points(state, color) < power.cost:
            return Outcome.INSUFFICIENT_POINTS, []

        half_move = state.half_move_count
        if power.targeted and not activation.has_any_target(state, power.kind, color):
            logger.debug(f"{power.name} has no target for {color}, refunded")
            return Outcome.NO_VALID_TARGET, [
                GameEvent(
                    GameEventType.POWER_REFUNDED,
                    half_move,
                    {"power": power.kind.value, "color": color.value},
                )
            ]

        ledger = state.ledgers[color]
        ledger.points_spent += power.cost
        ledger.acquired.append(power.kind)
        state.offer = economy.rotate_offer(state.offer, slot, rng)
        state.clear_selection()
        events = [
            GameEvent(
                GameEventType.POWER_PURCHASED,
                half_move,
                {"power": power.kind.value, "color": color.value, "cost": power.cost},
            )
        ]
        logger.info(f"{color} bought {power.name} for {power.cost}")

        if power.targeted:
            state.pending_power = PendingPower(kind=power.kind, owner=color)
            return Outcome.TARGET_REQUIRED, events

        if power.kind == PowerKind.BLESSING:
            ledger.blessing_half_moves = state.config.blessing_half_moves
        events.append(
            GameEvent(
                GameEventType.POWER_ACTIVATED,
                half_move,
                {"power": power.kind.value, "color": color.value},
            )
        )
        GameEngine._finish_half_move(state, f"[{power.name}]", rng, events)
        return Outcome.OK, events

    @staticmethod
    def supply_power_target(
        state: GameState,
        row: int,
        col: int,
        rng: random.Random,
        actor: Color | None = None,
    ) -> IntentResult:
        """Aim the pending power (or knight swap) at a square.

        An invalid target keeps the power pending so another can be tried.
        """
        check_square(row, col)
        if state.is_over:
            return Outcome.GAME_OVER, []
        pending = state.pending_power
        if pending is None:
            return Outcome.INVALID_SELECTION, []
        if pending.owner != state.turn or (actor is not None and actor != pending.owner):
            return Outcome.WRONG_TURN_OWNER, []

        result = activation.resolve_target(state, pending, row, col)
        if result is None:
            logger.debug(f"Rejected power target ({row}, {col}) for {pending}")
            return Outcome.NO_VALID_POWER_TARGET, []

        events = list(result.events)
        GameEngine._finish_half_move(state, result.notation, rng, events, result.fresh_obstacle)
        return Outcome.OK, events

    @staticmethod
    def activate_knight_passive(
        state: GameState,
        row: int,
        col: int,
        actor: Color | None = None,
    ) -> IntentResult:
        """Arm a charged knight's swap; the next target picks the piece to swap with."""
        check_square(row, col)
        if state.is_over:
            return Outcome.GAME_OVER, []
        if state.pending_promotion is not None:
            return Outcome.AWAITING_PROMOTION, []
        if state.pending_power is not None:
            return Outcome.AWAITING_POWER_TARGET, []

        knight = state.board.get_piece_at(row, col)
        if knight is None or knight.type != PieceType.KNIGHT or not knight.passive_ready:
            return Outcome.INVALID_SELECTION, []
        if knight.color != state.turn or (actor is not None and actor != knight.color):
            return Outcome.WRONG_TURN_OWNER, []

        state.pending_power = PendingKnightSwap(owner=knight.color, source=(row, col))
        state.clear_selection()
        return Outcome.TARGET_REQUIRED, []

    @staticmethod
    def resign(state: GameState, color: Color) -> IntentResult:
        """End the game with a win for the opponent of the resigning color."""
        if state.is_over:
            return Outcome.GAME_OVER, []

        state.status = GameStatus.CHECKMATE
        state.winner = color.opponent
        state.win_reason = WinReason.RESIGNATION
        state.pending_power = None
        state.pending_promotion = None
        state.clear_selection()
        logger.info(f"{color} resigned")
        return Outcome.OK, [
            GameEvent(
                GameEventType.GAME_OVER,
                state.half_move_count,
                {"status": state.status.value, "winner": state.winner.value, "reason": "resignation"},
            )
        ]
