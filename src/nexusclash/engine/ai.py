from __future__ import annotations

from .actions import Direction, QueueCardAction
from .board import Cell, nexus_position
from .match import MatchState
from .resolver import steps_for
from .types import CardDefinition, needs_direction


def _card_value(card: CardDefinition) -> float:
    v = 0.0
    if card.damage is not None:
        try:
            v += float(card.damage.dice) + float(card.damage.bonus)
        except ValueError:
            v += float(card.damage.bonus)
    if card.miss is not None:
        v += 0.5
    v += 0.25 * len(card.effects)
    return v


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


def _projected_position(state: MatchState, actor_id: str) -> Cell:
    """Where the actor would stand after its queued plays, ignoring blockers."""
    actor = state.actors[actor_id]
    x, y = actor.pos
    for play in state.teams[actor_id].queue:
        if play.direction is None:
            continue
        n = steps_for(play)
        x += play.direction.dx * n
        y += play.direction.dy * n
    return (x, y)


def _toward(src: Cell, dst: Cell) -> tuple[Direction, int]:
    dx = dst[0] - src[0]
    dy = dst[1] - src[1]
    if dx != 0 and abs(dx) >= abs(dy):
        return Direction(_sign(dx), 0), abs(dx)
    return Direction(0, _sign(dy)), abs(dy)


def choose_play(state: MatchState, actor_id: str) -> QueueCardAction | None:
    """Pick the next card for ``actor_id`` to queue, or None when it can't queue.

    Walks toward the nexus, then holds it with the strongest non-movement card.
    Pure function of the state; never touches ``state.rng``.
    """
    team = state.teams[actor_id]
    if len(team.queue) >= state.queue_limit() or not team.hand:
        return None

    pos = _projected_position(state, actor_id)
    nexus = nexus_position(state.board)

    if pos == nexus:
        best: tuple[float, int] | None = None
        for idx, card in enumerate(team.hand):
            if card.movement is not None or needs_direction(card):
                continue
            score = _card_value(card)
            if best is None or score > best[0]:
                best = (score, idx)
        if best is not None:
            return QueueCardAction(actor_id=actor_id, hand_index=best[1])
        # Only movers in hand: queue one with no direction so it stays put.
        return QueueCardAction(actor_id=actor_id, hand_index=0)

    direction, distance = _toward(pos, nexus)
    chosen: tuple[int, int] | None = None  # (tiles, index)
    for idx, card in enumerate(team.hand):
        if card.movement is None:
            continue
        tiles = max(0, card.movement.tiles)
        if tiles == 0:
            continue
        # prefer the longest move that does not overshoot; else the shortest
        fits = tiles <= distance
        if chosen is None:
            chosen = (tiles, idx)
            continue
        best_tiles = chosen[0]
        best_fits = best_tiles <= distance
        if fits and (not best_fits or tiles > best_tiles):
            chosen = (tiles, idx)
        elif not fits and not best_fits and tiles < best_tiles:
            chosen = (tiles, idx)

    if chosen is not None:
        return QueueCardAction(actor_id=actor_id, hand_index=chosen[1], direction=direction)

    card = team.hand[0]
    return QueueCardAction(
        actor_id=actor_id,
        hand_index=0,
        direction=direction if needs_direction(card) else None,
    )
