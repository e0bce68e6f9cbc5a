"""
Rule Tables - Fixed game constants.

Every rule that is a lookup rather than a computation lives here:
- Which character each action claims
- What each action costs
- Which characters may block which action
- Which actions need a target

These are module-level immutable mappings. Nothing in the engine
configures them per game.
"""

from __future__ import annotations
from enum import Enum
from types import MappingProxyType


class Character(str, Enum):
    """Court characters (influence cards)."""
    DUKE = "Duke"
    ASSASSIN = "Assassin"
    CAPTAIN = "Captain"
    AMBASSADOR = "Ambassador"
    CONTESSA = "Contessa"


class ActionKind(str, Enum):
    """The seven actions a player may take on their turn."""
    INCOME = "income"
    FOREIGN_AID = "foreign_aid"
    COUP = "coup"
    TAX = "tax"
    ASSASSINATE = "assassinate"
    STEAL = "steal"
    EXCHANGE = "exchange"


# Game setup
MIN_PLAYERS = 2
MAX_PLAYERS = 6
STARTING_COINS = 2
STARTING_INFLUENCE = 2
COPIES_PER_CHARACTER = 3
DECK_SIZE = COPIES_PER_CHARACTER * len(Character)

# With this many coins a player must coup
FORCED_COUP_THRESHOLD = 10

# Cards drawn by an exchange
EXCHANGE_DRAW = 2

# Coins taken by a steal (capped by the target's purse)
STEAL_AMOUNT = 2


ACTION_COSTS = MappingProxyType({
    ActionKind.INCOME: 0,
    ActionKind.FOREIGN_AID: 0,
    ActionKind.COUP: 7,
    ActionKind.TAX: 0,
    ActionKind.ASSASSINATE: 3,
    ActionKind.STEAL: 0,
    ActionKind.EXCHANGE: 0,
})

# Coins gained by the actor on resolution (steal is a transfer, handled apart)
ACTION_INCOME = MappingProxyType({
    ActionKind.INCOME: 1,
    ActionKind.FOREIGN_AID: 2,
    ActionKind.TAX: 3,
})

ACTION_CLAIMS = MappingProxyType({
    ActionKind.INCOME: None,
    ActionKind.FOREIGN_AID: None,
    ActionKind.COUP: None,
    ActionKind.TAX: Character.DUKE,
    ActionKind.ASSASSINATE: Character.ASSASSIN,
    ActionKind.STEAL: Character.CAPTAIN,
    ActionKind.EXCHANGE: Character.AMBASSADOR,
})

BLOCKERS = MappingProxyType({
    ActionKind.FOREIGN_AID: (Character.DUKE,),
    ActionKind.ASSASSINATE: (Character.CONTESSA,),
    ActionKind.STEAL: (Character.CAPTAIN, Character.AMBASSADOR),
})

TARGETED_ACTIONS = frozenset({
    ActionKind.COUP,
    ActionKind.ASSASSINATE,
    ActionKind.STEAL,
})

# Resolve the moment they are declared: no claim, no block
IMMEDIATE_ACTIONS = frozenset({
    ActionKind.INCOME,
    ActionKind.COUP,
})

# Blockable by any living player, not just the target
UNIVERSALLY_BLOCKABLE = frozenset({
    ActionKind.FOREIGN_AID,
})


def claimed_character(kind: ActionKind) -> Character | None:
    """Character an action conventionally claims, if any."""
    return ACTION_CLAIMS[kind]


def blocking_characters(kind: ActionKind) -> tuple[Character, ...]:
    """Characters allowed to block an action (empty if unblockable)."""
    return BLOCKERS.get(kind, ())


def is_blockable(kind: ActionKind) -> bool:
    return bool(BLOCKERS.get(kind))


def requires_target(kind: ActionKind) -> bool:
    return kind in TARGETED_ACTIONS
