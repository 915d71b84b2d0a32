from __future__ import annotations

from .actions import QueuedPlay
from .board import Cell, get_tile, place_actor, vacate
from .match import Actor, MatchState


def steps_for(play: QueuedPlay | None) -> int:
    """Tile steps a play attempts this tick.

    A declared movement count wins (negative counts clamp to 0); a bare
    direction means one step; anything else does not move.
    """
    if play is None:
        return 0
    if play.card.movement is not None:
        return max(0, play.card.movement.tiles)
    if play.direction is not None:
        return 1
    return 0


def _step_target(state: MatchState, actor: Actor, play: QueuedPlay | None, step: int) -> Cell | None:
    if play is None or play.direction is None:
        return None
    if step >= steps_for(play):
        return None

    if step == 0:
        facing = play.direction.facing()
        if facing is not None and facing != actor.facing:
            actor.facing = facing
            state.event_log.append({"type": "FACING_CHANGED", "actor": actor.id, "facing": facing})

    tx = actor.x + play.direction.dx
    ty = actor.y + play.direction.dy
    t = get_tile(state.board, tx, ty)
    if t is None or t.blocks_movement or (t.occupied_by is not None and t.occupied_by != actor.id):
        state.event_log.append({"type": "MOVE_BLOCKED", "actor": actor.id, "step": step, "to": [tx, ty]})
        return None
    return (tx, ty)


def _move(state: MatchState, actor: Actor, dest: Cell) -> None:
    src = actor.pos
    vacate(state.board, actor.id, actor.x, actor.y)
    actor.x, actor.y = dest
    place_actor(state.board, actor.id, actor.x, actor.y)
    state.event_log.append({"type": "ACTOR_MOVED", "actor": actor.id, "from": list(src), "to": list(dest)})


def resolve_one_tick(state: MatchState, play_a: QueuedPlay | None, play_b: QueuedPlay | None) -> None:
    """Resolve one tick for the two sides in setup order.

    Both actors move in lockstep, one tile per iteration. Every candidate is
    computed before any is committed, so evaluation order inside an iteration
    never decides the outcome. Two candidates on the same cell cancel each
    other for that iteration. Never touches ``state.rng``.
    """
    if play_a is None and play_b is None:
        return

    ids = state.actor_ids()
    a = state.actors[ids[0]]
    b = state.actors[ids[1]]
    entries = [(a, play_a), (b, play_b)]

    max_steps = max(steps_for(play_a), steps_for(play_b))
    for step in range(max_steps):
        candidates = [(actor, _step_target(state, actor, play, step)) for actor, play in entries]
        dests = [dest for _, dest in candidates if dest is not None]
        for actor, dest in candidates:
            if dest is None:
                continue
            if dests.count(dest) > 1:
                state.event_log.append({"type": "MOVE_COLLIDED", "actor": actor.id, "step": step, "to": list(dest)})
                continue
            _move(state, actor, dest)

    # Placeholder combat: when both sides acted, both take 1 damage. Card
    # attack/damage/effect data is not consumed here yet.
    if play_a is not None and play_b is not None:
        for actor in (a, b):
            actor.hp -= 1
            state.event_log.append({"type": "DAMAGE_ACTOR", "actor": actor.id, "amount": 1, "hp": actor.hp})
