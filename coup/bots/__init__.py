"""
Bots module - Automa implementations.

Provides:
- BotPolicy: Interface for bot decision-making
- RandomPolicy / FirstLegalPolicy: Baselines
- CoupBot: Heuristic bot
- Personality: Configurable play styles
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy
from .personality import Personality, PERSONALITIES
from .coup_bot import CoupBot

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "Personality",
    "PERSONALITIES",
    "CoupBot",
]
