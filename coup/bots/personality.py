"""
Bot Personalities - Configurable play styles.

Personalities adjust:
- How often the bot challenges claims it cannot disprove
- How often it blocks with a character it does not hold
- How often it bluffs a character on its own turn
- Aggression (coup/assassinate early vs build coins)
- Randomness (for unpredictability)
"""

from __future__ import annotations
import random
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Personality:
    """
    A bot personality that defines play style.

    All rates are probabilities in [0, 1].
    """
    name: str
    description: str = ""

    challenge_rate: float = 0.3
    bluff_block_rate: float = 0.4
    bluff_rate: float = 0.2
    aggression: float = 0.5  # 0 = hoard coins, 1 = coup as soon as possible
    randomness: float = 0.1  # Probability of a random legal move

    # Metadata
    metadata: dict[str, Any] = field(default_factory=dict)


# ============================================================================
# Predefined Personalities
# ============================================================================

BALANCED = Personality(
    name="Balanced",
    description="Challenges and bluffs now and then, mostly honest",
)


AGGRESSIVE = Personality(
    name="Aggressive",
    description="Bluffs often, challenges often, coups at the first chance",
    challenge_rate=0.5,
    bluff_block_rate=0.6,
    bluff_rate=0.5,
    aggression=0.9,
    randomness=0.05,
)


CAUTIOUS = Personality(
    name="Cautious",
    description="Only claims what it holds and rarely challenges",
    challenge_rate=0.1,
    bluff_block_rate=0.0,
    bluff_rate=0.0,
    aggression=0.3,
    randomness=0.0,
)


CHAOTIC = Personality(
    name="Chaotic",
    description="Unpredictable play with high randomness",
    challenge_rate=0.5,
    bluff_block_rate=0.5,
    bluff_rate=0.5,
    aggression=0.5,
    randomness=0.4,  # 40% chance of random move
)


# All predefined personalities
PERSONALITIES: dict[str, Personality] = {
    "balanced": BALANCED,
    "aggressive": AGGRESSIVE,
    "cautious": CAUTIOUS,
    "chaotic": CHAOTIC,
}


def create_random_personality(
    name: str = "Random",
    base: Personality | None = None,
    variance: float = 0.3,
    seed: int | None = None,
) -> Personality:
    """
    Create a personality with random variations.

    Args:
        name: Name for the personality
        base: Base personality to vary from (default: BALANCED)
        variance: How much to vary (0-1)
        seed: Random seed for reproducibility
    """
    rng = random.Random(seed)
    base = base or BALANCED

    def vary(value: float) -> float:
        """Apply random variation to a rate, clamped to [0, 1]."""
        return max(0.0, min(1.0, value + variance * (rng.random() * 2 - 1)))

    return Personality(
        name=name,
        description=f"Randomly varied from {base.name}",
        challenge_rate=vary(base.challenge_rate),
        bluff_block_rate=vary(base.bluff_block_rate),
        bluff_rate=vary(base.bluff_rate),
        aggression=vary(base.aggression),
        randomness=max(0.0, min(1.0, base.randomness + variance * 0.5 * (rng.random() * 2 - 1))),
        metadata={"base": base.name, "variance": variance, "seed": seed},
    )
