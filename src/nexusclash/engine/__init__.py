"""Deterministic, headless rules engine for nexusclash.

IMPORTANT: This package must never import a rendering or networking library.
"""

from .actions import Direction, QueueCardAction, QueuedPlay, RemoveQueuedAction, ResolveTickAction, TargetSnapshot
from .match import (
    MatchConfig,
    MatchState,
    at_end_of_round_score_nexus,
    check_victory,
    new_match,
    queue_play,
    reset_queues,
)
from .resolver import resolve_one_tick
from .session import replay, step
from .types import CardCatalog, CardDefinition

__all__ = [
    "CardCatalog",
    "CardDefinition",
    "Direction",
    "MatchConfig",
    "MatchState",
    "QueueCardAction",
    "QueuedPlay",
    "RemoveQueuedAction",
    "ResolveTickAction",
    "TargetSnapshot",
    "at_end_of_round_score_nexus",
    "check_victory",
    "new_match",
    "queue_play",
    "replay",
    "reset_queues",
    "resolve_one_tick",
    "step",
]
