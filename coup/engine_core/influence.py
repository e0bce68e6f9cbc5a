"""
Influence loss.

Two entry points share the same elimination and win-check logic:
- lose_influence(state, player_id, card=None): reveal now. card=None
  reveals the first held card (sole card, or automated play).
- require_influence_loss(...): used by the action machine. Reveals
  automatically when the player has one card left, otherwise parks the
  game in the lose_influence phase until the player chooses.
"""

from __future__ import annotations
from dataclasses import replace

from .errors import CardNotHeld
from .rules import Character
from .state import GameState, LogType, PendingAction, PendingPhase, AfterLoss
from .turns import check_winner


def lose_influence(state: GameState, player_id: str, card: Character | None = None) -> GameState:
    """
    Reveal one influence of a player.

    Moves one instance of card from hidden to revealed, eliminates the
    player when no hidden influence remains, then checks for a winner.
    A player with no influence left is returned unchanged.
    """
    player = state.require_player(player_id)
    if not player.influences:
        return state

    if card is None:
        card = player.influences[0]
    if card not in player.influences:
        raise CardNotHeld(f"{player.name} does not hold {card.value}")

    idx = player.influences.index(card)
    remaining = player.influences[:idx] + player.influences[idx + 1:]
    new_player = replace(
        player,
        influences=remaining,
        revealed=(*player.revealed, card),
        alive=bool(remaining),
    )

    new_state = state.with_player(new_player)
    if new_player.alive:
        new_state = new_state.with_log(f"{player.name} loses {card.value}.", LogType.REVEAL)
    else:
        new_state = new_state.with_log(
            f"{player.name} reveals {card.value} and has been eliminated!", LogType.SYSTEM
        )

    return check_winner(new_state)


def require_influence_loss(
    state: GameState,
    pending: PendingAction,
    player_id: str,
    after: AfterLoss,
) -> tuple[GameState, bool]:
    """
    Make a player lose an influence as part of resolving pending.

    Returns (new state, decided). decided is True when the loss was
    applied immediately (zero or one card held) and the caller should
    continue with `after` itself; False when the state now waits in the
    lose_influence phase for the player's choice.
    """
    player = state.require_player(player_id)
    if player.influence_count <= 1:
        return lose_influence(state, player_id, None), True

    waiting = replace(
        pending,
        phase=PendingPhase.LOSE_INFLUENCE,
        waiting_for_players=(player_id,),
        losing_player_id=player_id,
        after_loss=after,
    )
    new_state = state.with_pending(waiting).with_log(
        f"{player.name} must choose an influence to lose.", LogType.SYSTEM
    )
    return new_state, False
