"""
Truncate - Word battle engine

A deterministic, rules-driven engine for Truncate, the word game where
tiles fight in battles of words. The engine provides:
- Board and game state management
- Word judging and battle resolution
- Legal move generation
- Bounded adversarial search for NPC opponents
"""

__version__ = "0.1.0"
