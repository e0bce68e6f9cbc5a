"""
Action Resolution - The claim / challenge / block protocol.

An action in flight moves through these phases:

    challenge_action -> block -> challenge_block
           |             |            |
           +------> lose_influence <--+
                         |
                  exchange_select (exchange only)

Each phase waits on an explicit set of responders. Every operation
takes a state and returns a new one, or raises a RuleViolation and
leaves the caller holding the original.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import replace

from .action import Action
from .action_generator import can_block, eligible_blockers
from .errors import (
    ActionAlreadyPending,
    CannotBlockThisAction,
    CannotChallengeInThisPhase,
    CardNotHeld,
    GameOver,
    InsufficientCoins,
    InvalidExchangeSelection,
    InvalidTarget,
    MustEliminateAtTenCoins,
    NoChoicePending,
    NoPendingAction,
    NotWaitingForThisPlayer,
    NotYourTurn,
    PlayerEliminated,
)
from .influence import lose_influence, require_influence_loss
from .rules import (
    ActionKind,
    Character,
    ACTION_COSTS,
    ACTION_INCOME,
    EXCHANGE_DRAW,
    FORCED_COUP_THRESHOLD,
    IMMEDIATE_ACTIONS,
    STEAL_AMOUNT,
    blocking_characters,
    requires_target,
)
from .state import (
    AfterLoss,
    GamePhase,
    GameState,
    LogType,
    PendingAction,
    PendingPhase,
    Player,
)
from .turns import next_turn


# =============================================================================
# Declaring an action
# =============================================================================

def start_action(state: GameState, action: Action) -> GameState:
    """
    Declare a turn action.

    Income and coup resolve at once. Everything else becomes a pending
    action: claimed actions open for challenges, foreign aid opens for
    blocks. Coup and assassination costs are paid here and never
    refunded.
    """
    _ensure_playing(state)
    if state.pending is not None:
        raise ActionAlreadyPending("An action is already pending")

    actor = _require_alive(state, action.actor_id)
    if state.current_player.player_id != actor.player_id:
        raise NotYourTurn(f"Not {actor.name}'s turn")

    cost = ACTION_COSTS[action.kind]
    if actor.coins < cost:
        raise InsufficientCoins(f"Not enough coins (need {cost})")
    if actor.coins >= FORCED_COUP_THRESHOLD and action.kind != ActionKind.COUP:
        raise MustEliminateAtTenCoins(f"Must coup with {FORCED_COUP_THRESHOLD}+ coins")

    _validate_target(state, action)

    state = state.with_log(_describe_declaration(state, action), LogType.ACTION)
    if cost:
        state = state.with_player(replace(actor, coins=actor.coins - cost))

    if action.kind in IMMEDIATE_ACTIONS:
        return resolve_action(state, action)

    others = state.alive_ids(exclude=(actor.player_id,))
    if action.claimed_character is not None:
        pending = PendingAction(
            action=action,
            phase=PendingPhase.CHALLENGE_ACTION,
            waiting_for_players=others,
        )
    else:
        pending = PendingAction(
            action=action,
            phase=PendingPhase.BLOCK,
            waiting_for_players=eligible_blockers(state, action),
        )
    return state.with_pending(pending)


def _validate_target(state: GameState, action: Action) -> None:
    if not requires_target(action.kind):
        if action.target_id is not None:
            raise InvalidTarget(f"{action.kind.value} does not take a target")
        return

    if action.target_id is None:
        raise InvalidTarget("Target required")
    target = state.get_player(action.target_id)
    if target is None:
        raise InvalidTarget("Target not found")
    if target.player_id == action.actor_id:
        raise InvalidTarget("Cannot target yourself")
    if not target.alive:
        raise InvalidTarget("Target is eliminated")
    if action.kind == ActionKind.STEAL and target.coins == 0:
        raise InvalidTarget("Target has no coins to steal")


def _describe_declaration(state: GameState, action: Action) -> str:
    actor = state.require_player(action.actor_id)
    target = state.get_player(action.target_id) if action.target_id else None
    descriptions = {
        ActionKind.INCOME: "takes income (1 coin)",
        ActionKind.FOREIGN_AID: "attempts foreign aid (2 coins)",
        ActionKind.COUP: f"coups {target.name if target else ''}",
        ActionKind.TAX: "claims Duke and takes tax (3 coins)",
        ActionKind.ASSASSINATE: f"claims Assassin and attempts to assassinate {target.name if target else ''}",
        ActionKind.STEAL: f"claims Captain and attempts to steal from {target.name if target else ''}",
        ActionKind.EXCHANGE: "claims Ambassador and exchanges cards",
    }
    return f"{actor.name} {descriptions[action.kind]}"


# =============================================================================
# Responses: challenge, block, pass
# =============================================================================

def challenge(state: GameState, challenger_id: str) -> GameState:
    """
    Challenge the claim currently on the table.

    Any living player other than the accused may challenge, whether or
    not they are still in the waiting set. If the accused holds the
    claimed character the challenger loses an influence and the
    revealed card is swapped for a fresh one from the deck; otherwise
    the accused loses an influence.
    """
    _ensure_playing(state)
    pending = _require_pending(state)
    challenger = _require_alive(state, challenger_id)
    action = pending.action

    if pending.phase == PendingPhase.CHALLENGE_ACTION:
        accused_id, claim = action.actor_id, action.claimed_character
    elif pending.phase == PendingPhase.CHALLENGE_BLOCK:
        accused_id, claim = pending.blocker_id, pending.blocker_character
    else:
        raise CannotChallengeInThisPhase(f"Cannot challenge during {pending.phase.value}")

    if challenger_id == accused_id:
        raise CannotChallengeInThisPhase("Cannot challenge your own claim")

    accused = state.require_player(accused_id)
    state = state.with_log(
        f"{challenger.name} challenges {accused.name}'s claim of {claim.value}",
        LogType.CHALLENGE,
    )

    on_action = pending.phase == PendingPhase.CHALLENGE_ACTION
    if accused.holds(claim):
        state = state.with_log(
            f"{accused.name} reveals {claim.value}! Challenge failed.", LogType.REVEAL
        )
        state = _replace_proven_card(state, accused_id, claim)
        loser_id = challenger_id
        after = AfterLoss.PROCEED if on_action else AfterLoss.END_TURN
    else:
        state = state.with_log(
            f"{accused.name} doesn't have {claim.value}! Challenge succeeded.", LogType.REVEAL
        )
        loser_id = accused_id
        after = AfterLoss.END_TURN if on_action else AfterLoss.RESOLVE_ACTION

    state, decided = require_influence_loss(state, pending, loser_id, after)
    if not decided:
        return state
    return _continue_after_loss(state, pending.action, after)


def _replace_proven_card(state: GameState, player_id: str, card: Character) -> GameState:
    """Shuffle a proven card back into the deck and draw its replacement."""
    state = state.with_returned_cards([card])
    drawn, state = state.with_drawn_cards(1)

    player = state.require_player(player_id)
    idx = player.influences.index(card)
    influences = player.influences[:idx] + drawn + player.influences[idx + 1:]
    state = state.with_player(replace(player, influences=influences))
    return state.with_log(
        f"{player.name} shuffles {card.value} into the deck and draws a new card.",
        LogType.SYSTEM,
    )


def block(state: GameState, blocker_id: str, character: Character) -> GameState:
    """
    Block the pending action by claiming a blocking character.

    Allowed before or instead of challenging the action, and during the
    block phase. Only the target may block, except for foreign aid
    which anyone may block.
    """
    _ensure_playing(state)
    pending = _require_pending(state)
    blocker = _require_alive(state, blocker_id)
    action = pending.action

    if pending.phase not in (PendingPhase.CHALLENGE_ACTION, PendingPhase.BLOCK):
        raise CannotBlockThisAction(f"Cannot block during {pending.phase.value}")
    if character not in blocking_characters(action.kind):
        raise CannotBlockThisAction(f"{character.value} cannot block {action.kind.value}")
    if not can_block(state, action, blocker_id):
        raise CannotBlockThisAction(f"{blocker.name} may not block this action")

    state = state.with_log(f"{blocker.name} claims {character.value} and blocks!", LogType.BLOCK)
    return state.with_pending(
        replace(
            pending,
            phase=PendingPhase.CHALLENGE_BLOCK,
            blocker_id=blocker_id,
            blocker_character=character,
            waiting_for_players=state.alive_ids(exclude=(blocker_id,)),
        )
    )


def pass_response(state: GameState, player_id: str) -> GameState:
    """
    Decline to respond in the current phase.

    Once everyone in the waiting set has passed the phase advances.
    A pass in lose_influence or exchange_select stands in for a timed-out
    choice: the first held card is lost, or the current hand is kept.
    """
    _ensure_playing(state)
    pending = _require_pending(state)
    _require_alive(state, player_id)

    if not pending.is_waiting_for(player_id):
        raise NotWaitingForThisPlayer(f"Not waiting for {player_id}")

    if pending.phase == PendingPhase.LOSE_INFLUENCE:
        return _apply_chosen_loss(state, pending, player_id, None)
    if pending.phase == PendingPhase.EXCHANGE_SELECT:
        held = state.require_player(player_id).influences
        return choose_exchange_cards(state, player_id, held)

    pending = pending.without_responder(player_id)
    if pending.waiting_for_players:
        return state.with_pending(pending)

    # Everyone passed
    action = pending.action
    if pending.phase == PendingPhase.CHALLENGE_ACTION:
        return _proceed_after_claim(state, action)
    if pending.phase == PendingPhase.BLOCK:
        return resolve_action(state, action)
    # challenge_block: nobody challenged, block stands
    state = state.with_log("Block successful!", LogType.SYSTEM)
    return next_turn(state)


# =============================================================================
# Choices
# =============================================================================

def choose_card_to_lose(state: GameState, player_id: str, card: Character) -> GameState:
    """Reveal the chosen influence and continue the interrupted resolution."""
    _ensure_playing(state)
    pending = _require_pending(state)
    if pending.phase != PendingPhase.LOSE_INFLUENCE:
        raise NoChoicePending("No influence loss is pending")
    if pending.losing_player_id != player_id:
        raise NotWaitingForThisPlayer(f"{player_id} is not the player losing influence")
    return _apply_chosen_loss(state, pending, player_id, card)


def _apply_chosen_loss(
    state: GameState,
    pending: PendingAction,
    player_id: str,
    card: Character | None,
) -> GameState:
    state = lose_influence(state, player_id, card)
    return _continue_after_loss(state, pending.action, pending.after_loss)


def choose_exchange_cards(
    state: GameState,
    player_id: str,
    keep: list[Character] | tuple[Character, ...],
) -> GameState:
    """
    Finish an exchange: keep as many cards as currently held, from
    held + drawn, and shuffle the rest back into the deck.
    """
    _ensure_playing(state)
    pending = _require_pending(state)
    if pending.phase != PendingPhase.EXCHANGE_SELECT:
        raise NoChoicePending("No exchange is pending")
    if pending.action.actor_id != player_id:
        raise NotWaitingForThisPlayer(f"{player_id} is not exchanging")

    player = state.require_player(player_id)
    keep = tuple(keep)
    if len(keep) != player.influence_count:
        raise InvalidExchangeSelection(
            f"Must keep exactly {player.influence_count} card(s), got {len(keep)}"
        )

    offered = Counter(pending.exchange_options)
    kept = Counter(keep)
    if kept - offered:
        missing = ", ".join(c.value for c in (kept - offered).elements())
        raise CardNotHeld(f"Cannot keep cards that were not offered: {missing}")

    returned = list((offered - kept).elements())
    state = state.with_player(replace(player, influences=keep))
    state = state.with_returned_cards(returned)
    state = state.with_log(f"{player.name} exchanges cards with the court deck.", LogType.SYSTEM)
    return next_turn(state)


# =============================================================================
# Resolution
# =============================================================================

def resolve_action(state: GameState, action: Action) -> GameState:
    """
    Apply the effect of an action that made it through, then end the turn.

    Coup and assassination may stop in lose_influence when the target
    has two cards; exchange stops in exchange_select.
    """
    actor = state.require_player(action.actor_id)
    kind = action.kind

    if kind in ACTION_INCOME:
        gained = ACTION_INCOME[kind]
        state = state.with_player(replace(actor, coins=actor.coins + gained))
        state = state.with_log(f"{actor.name} gains {gained} coin(s).", LogType.SYSTEM)

    elif kind == ActionKind.STEAL:
        target = state.require_player(action.target_id)
        stolen = min(STEAL_AMOUNT, target.coins)
        state = state.with_player(replace(target, coins=target.coins - stolen))
        state = state.with_player(replace(actor, coins=actor.coins + stolen))
        state = state.with_log(
            f"{actor.name} steals {stolen} coin(s) from {target.name}.", LogType.SYSTEM
        )

    elif kind in (ActionKind.COUP, ActionKind.ASSASSINATE):
        target = state.require_player(action.target_id)
        if target.alive:
            base = PendingAction(action=action, phase=PendingPhase.LOSE_INFLUENCE)
            state, decided = require_influence_loss(
                state, base, target.player_id, AfterLoss.END_TURN
            )
            if not decided:
                return state

    elif kind == ActionKind.EXCHANGE:
        return _begin_exchange(state, actor, action)

    return next_turn(state)


def _begin_exchange(state: GameState, actor: Player, action: Action) -> GameState:
    drawn, state = state.with_drawn_cards(min(EXCHANGE_DRAW, len(state.deck)))
    pending = PendingAction(
        action=action,
        phase=PendingPhase.EXCHANGE_SELECT,
        waiting_for_players=(actor.player_id,),
        exchange_options=actor.influences + drawn,
    )
    state = state.with_log(f"{actor.name} draws {len(drawn)} card(s) to exchange.", LogType.SYSTEM)
    return state.with_pending(pending)


def _proceed_after_claim(state: GameState, action: Action) -> GameState:
    """The claim stands: open the block phase if anyone can block, else resolve."""
    blockers = eligible_blockers(state, action)
    if not blockers:
        return resolve_action(state, action)
    return state.with_pending(
        PendingAction(
            action=action,
            phase=PendingPhase.BLOCK,
            waiting_for_players=blockers,
        )
    )


def _continue_after_loss(state: GameState, action: Action, after: AfterLoss) -> GameState:
    if state.winner is not None:
        return state
    if after == AfterLoss.RESOLVE_ACTION:
        return resolve_action(state, action)
    if after == AfterLoss.PROCEED:
        return _proceed_after_claim(state, action)
    return next_turn(state)


# =============================================================================
# Guards
# =============================================================================

def _ensure_playing(state: GameState) -> None:
    if state.winner is not None or state.phase == GamePhase.FINISHED:
        raise GameOver("Game is over - no moves allowed")
    if state.phase != GamePhase.PLAYING:
        raise GameOver("Game has not started")


def _require_pending(state: GameState) -> PendingAction:
    if state.pending is None:
        raise NoPendingAction("No pending action")
    return state.pending


def _require_alive(state: GameState, player_id: str) -> Player:
    player = state.require_player(player_id)
    if not player.alive:
        raise PlayerEliminated(f"{player.name} has been eliminated")
    return player
