"""
NPC personalities - How an ArboristBot plays.

A personality bundles the bot's SearchParams (depth, node budget and
evaluation weights) with a chance of playing a random legal move.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any
import random

from .arborist import SearchParams
from .evaluator import EvaluationWeights


@dataclass
class Personality:
    """
    Search settings plus a name.

    Use one of the presets below, or derive a variant with
    create_random_personality().
    """
    name: str
    description: str = ""

    search: SearchParams = field(default_factory=SearchParams)

    randomness: float = 0.0  # Probability of a random move

    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def weights(self) -> EvaluationWeights:
        return self.search.weights


# ============================================================================
# Predefined Personalities
# ============================================================================

BALANCED = Personality(
    name="Balanced",
    description="Weighs its own reach against the opponent's",
    search=SearchParams(max_depth=2, evaluation_cap=5000),
)


AGGRESSIVE = Personality(
    name="Aggressive",
    description="Races for towns and artifacts, accepts invalid words",
    search=SearchParams(
        max_depth=2,
        evaluation_cap=5000,
        weights=EvaluationWeights(
            town_proximity=8.0,
            artifact_proximity=10.0,
            invalid_tile=-0.5,
            opponent_penalty=-0.5,  # Less concerned with the opponent
        ),
    ),
)


DEFENSIVE = Personality(
    name="Defensive",
    description="Keeps its words valid and watches the opponent",
    search=SearchParams(
        max_depth=3,
        evaluation_cap=8000,
        weights=EvaluationWeights(
            town_proximity=2.0,
            artifact_proximity=3.0,
            valid_tile=3.0,
            invalid_tile=-4.0,
            opponent_penalty=-1.5,
        ),
    ),
)


PERSONALITIES: dict[str, Personality] = {
    "balanced": BALANCED,
    "aggressive": AGGRESSIVE,
    "defensive": DEFENSIVE,
}


def get_personality(name: str) -> Personality:
    """Look up a preset by case-insensitive name."""
    try:
        return PERSONALITIES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown personality {name!r}; choose from {', '.join(PERSONALITIES)}"
        ) from None


def create_random_personality(
    name: str = "Random",
    base: Personality | None = None,
    variance: float = 0.3,
    seed: int | None = None,
) -> Personality:
    """
    A copy of base (BALANCED by default) with every weight nudged by up
    to +/- variance of its value. Search limits are kept.
    """
    rng = random.Random(seed)
    base = base or BALANCED

    def vary(value: float) -> float:
        return value + value * variance * (rng.random() * 2 - 1)

    weights = base.weights
    new_weights = EvaluationWeights(
        tile_count=vary(weights.tile_count),
        town_proximity=vary(weights.town_proximity),
        artifact_proximity=vary(weights.artifact_proximity),
        valid_tile=vary(weights.valid_tile),
        invalid_tile=vary(weights.invalid_tile),
        hand_size=vary(weights.hand_size),
        opponent_penalty=vary(weights.opponent_penalty),
    )

    return Personality(
        name=name,
        description=f"Randomly varied from {base.name}",
        search=replace(base.search, weights=new_weights),
        randomness=base.randomness,
        metadata={"base": base.name, "variance": variance, "seed": seed},
    )
