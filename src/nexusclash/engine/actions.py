from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .types import CardDefinition

Facing = Literal["up", "down", "left", "right"]


@dataclass(frozen=True)
class Direction:
    dx: int
    dy: int

    @staticmethod
    def up() -> "Direction":
        return Direction(0, -1)

    @staticmethod
    def down() -> "Direction":
        return Direction(0, 1)

    @staticmethod
    def left() -> "Direction":
        return Direction(-1, 0)

    @staticmethod
    def right() -> "Direction":
        return Direction(1, 0)

    def facing(self) -> Facing | None:
        """Facing for a cardinal unit step; None for anything else."""
        return _FACINGS.get((self.dx, self.dy))


_FACINGS: dict[tuple[int, int], Facing] = {
    (0, -1): "up",
    (0, 1): "down",
    (-1, 0): "left",
    (1, 0): "right",
}


@dataclass(frozen=True)
class TargetSnapshot:
    x: int
    y: int


@dataclass(frozen=True)
class QueuedPlay:
    card: CardDefinition
    direction: Direction | None = None
    target: TargetSnapshot | None = None


# Session actions, recorded in MatchState.action_log for replay.


@dataclass(frozen=True)
class QueueCardAction:
    actor_id: str
    hand_index: int
    direction: Direction | None = None
    target: TargetSnapshot | None = None


@dataclass(frozen=True)
class RemoveQueuedAction:
    actor_id: str
    index: int


@dataclass(frozen=True)
class ResolveTickAction:
    pass


Action = QueueCardAction | RemoveQueuedAction | ResolveTickAction
