"""
Coup - Bluffing Card Game Engine

A deterministic, rules-driven engine for the social-deduction card game.
Given a game state and one submitted move, the engine computes the next
authoritative state or rejects the move with a typed reason.
The package provides:
- State management and legal move generation
- The claim / challenge / block protocol
- Bot policies and game simulation
- An in-memory session layer and a REST API around the engine
"""

__version__ = "0.1.0"
