"""
Action Generator - Legal actions and moves from a game state.

The action generator is used by:
1. Bots to enumerate possible moves
2. UI to show available actions
3. The resolution machine (who may block, who may be targeted)

legal_actions / legal_targets answer "what may the active player
declare"; legal_moves answers "what may this participant submit right
now", in any phase. Pure queries, no side effects.
"""

from __future__ import annotations
from itertools import combinations

from .action import Action, Move, MoveType
from .rules import (
    ActionKind,
    ACTION_COSTS,
    FORCED_COUP_THRESHOLD,
    UNIVERSALLY_BLOCKABLE,
    blocking_characters,
    requires_target,
)
from .state import GameState, GamePhase, PendingPhase


def legal_actions(state: GameState) -> set[ActionKind]:
    """
    Action kinds the active player may declare.

    Empty while an action is in flight or once the game is over.
    """
    if state.phase != GamePhase.PLAYING or state.winner is not None:
        return set()
    if state.pending is not None:
        return set()

    player = state.current_player
    if player.coins >= FORCED_COUP_THRESHOLD:
        return {ActionKind.COUP}

    actions = {kind for kind in ActionKind if player.coins >= ACTION_COSTS[kind]}

    # Steal only if there's a target with coins
    if not _steal_targets(state, player.player_id):
        actions.discard(ActionKind.STEAL)

    return actions


def legal_targets(state: GameState, kind: ActionKind) -> list[str]:
    """Player ids the active player may target with an action kind."""
    if not requires_target(kind):
        return []

    actor_id = state.current_player.player_id
    if kind == ActionKind.STEAL:
        return _steal_targets(state, actor_id)
    return list(state.alive_ids(exclude=(actor_id,)))


def _steal_targets(state: GameState, actor_id: str) -> list[str]:
    return [
        p.player_id
        for p in state.players
        if p.alive and p.player_id != actor_id and p.coins > 0
    ]


def can_block(state: GameState, action: Action, player_id: str) -> bool:
    """Whether a player is allowed to block this action at all."""
    if not blocking_characters(action.kind):
        return False
    player = state.get_player(player_id)
    if player is None or not player.alive or player_id == action.actor_id:
        return False
    if action.kind in UNIVERSALLY_BLOCKABLE:
        return True
    return player_id == action.target_id


def eligible_blockers(state: GameState, action: Action) -> tuple[str, ...]:
    """Living players who may block, in turn order."""
    return tuple(
        p.player_id for p in state.players
        if can_block(state, action, p.player_id)
    )


def players_to_act(state: GameState) -> tuple[str, ...]:
    """
    Players the game is waiting on, in turn order.

    The active player with nothing pending; otherwise the waiting set of
    the pending action. Empty once the game is over.
    """
    if state.phase != GamePhase.PLAYING or state.winner is not None:
        return ()
    if state.pending is None:
        return (state.current_player.player_id,)
    return state.pending.waiting_for_players


def legal_moves(state: GameState, player_id: str) -> list[Move]:
    """
    Every fully-specified move a participant may submit right now.

    Passive moves come first (pass, income) so that picking the first
    legal move always plays safe.
    """
    if state.phase != GamePhase.PLAYING or state.winner is not None:
        return []
    player = state.get_player(player_id)
    if player is None or not player.alive:
        return []

    pending = state.pending
    if pending is None:
        if state.current_player.player_id != player_id:
            return []
        return _turn_moves(state, player_id)

    action = pending.action
    moves: list[Move] = []

    if pending.phase == PendingPhase.LOSE_INFLUENCE:
        if pending.losing_player_id == player_id:
            moves.extend(Move.lose_influence(player_id, card) for card in _distinct(player.influences))
        return moves

    if pending.phase == PendingPhase.EXCHANGE_SELECT:
        if action.actor_id == player_id:
            moves.extend(_exchange_moves(player_id, pending.exchange_options, player.influence_count))
        return moves

    if pending.is_waiting_for(player_id):
        moves.append(Move.pass_(player_id))

    if pending.phase == PendingPhase.CHALLENGE_ACTION and player_id != action.actor_id:
        moves.append(Move.challenge(player_id))
    if pending.phase == PendingPhase.CHALLENGE_BLOCK and player_id != pending.blocker_id:
        moves.append(Move.challenge(player_id))

    if pending.phase in (PendingPhase.CHALLENGE_ACTION, PendingPhase.BLOCK):
        if can_block(state, action, player_id):
            moves.extend(Move.block(player_id, c) for c in blocking_characters(action.kind))

    return moves


def _turn_moves(state: GameState, player_id: str) -> list[Move]:
    allowed = legal_actions(state)
    moves = []
    # Enum order: income first
    for kind in ActionKind:
        if kind not in allowed:
            continue
        if requires_target(kind):
            moves.extend(Move.start(player_id, kind, target) for target in legal_targets(state, kind))
        else:
            moves.append(Move.start(player_id, kind))
    return moves


def _exchange_moves(player_id: str, options: tuple, keep_count: int) -> list[Move]:
    seen = set()
    moves = []
    for combo in combinations(options, keep_count):
        key = tuple(sorted(c.value for c in combo))
        if key in seen:
            continue
        seen.add(key)
        moves.append(Move.exchange(player_id, combo))
    return moves


def _distinct(cards: tuple) -> list:
    seen = []
    for card in cards:
        if card not in seen:
            seen.append(card)
    return seen


def is_legal(state: GameState, move: Move) -> bool:
    """Check if a specific move is among the legal moves of its player."""
    if move.move_type == MoveType.EXCHANGE:
        wanted = sorted(c.value for c in move.cards)
        return any(
            sorted(c.value for c in m.cards) == wanted
            for m in legal_moves(state, move.player_id)
            if m.move_type == move.move_type
        )
    return move in legal_moves(state, move.player_id)
