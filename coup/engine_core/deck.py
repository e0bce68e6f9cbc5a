"""
Deck - Court deck construction and shuffling.

Decks are plain tuples of Characters; the tail is the top.
Shuffling takes an explicit random.Random so callers control
determinism (the engine seeds one per shuffle from the game state).
"""

from __future__ import annotations
import random
from typing import Iterable

from .rules import Character, COPIES_PER_CHARACTER


def create_deck(rng: random.Random) -> tuple[Character, ...]:
    """Build the full court deck (3 of each character), shuffled."""
    cards = [
        character
        for character in Character
        for _ in range(COPIES_PER_CHARACTER)
    ]
    return shuffle(cards, rng)


def shuffle(cards: Iterable[Character], rng: random.Random) -> tuple[Character, ...]:
    """Fisher-Yates shuffle, returning a new tuple."""
    shuffled = list(cards)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return tuple(shuffled)


def draw(deck: tuple[Character, ...], count: int = 1) -> tuple[tuple[Character, ...], tuple[Character, ...]]:
    """
    Draw cards from the top (tail) of the deck.

    Returns (drawn cards, remaining deck). Drawing more cards than
    the deck holds is a defect, not a rule violation.
    """
    if count > len(deck):
        raise ValueError(f"Cannot draw {count} from a deck of {len(deck)}")
    if count == 0:
        return (), deck
    return tuple(reversed(deck[-count:])), deck[:-count]


def return_and_shuffle(
    deck: tuple[Character, ...],
    cards: Iterable[Character],
    rng: random.Random,
) -> tuple[Character, ...]:
    """Put cards back into the deck and reshuffle the whole deck."""
    return shuffle((*deck, *cards), rng)
