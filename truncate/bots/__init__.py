"""
Bots module - NPC opponents.

Provides:
- BotPolicy: Interface for bot decision-making
- HeuristicEvaluator: Scores game states
- Arborist / best_move: Bounded adversarial search
- ArboristBot: The searching NPC
- Personality: Configurable play styles
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy
from .evaluator import HeuristicEvaluator, EvaluationWeights, StateEvaluation, WIN_SCORE
from .arborist import Arborist, SearchParams, best_move
from .personality import (
    Personality, PERSONALITIES, BALANCED, AGGRESSIVE, DEFENSIVE,
    get_personality, create_random_personality,
)
from .arborist_bot import ArboristBot

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "HeuristicEvaluator",
    "EvaluationWeights",
    "StateEvaluation",
    "WIN_SCORE",
    "Arborist",
    "SearchParams",
    "best_move",
    "Personality",
    "PERSONALITIES",
    "BALANCED",
    "AGGRESSIVE",
    "DEFENSIVE",
    "get_personality",
    "create_random_personality",
    "ArboristBot",
]
