from __future__ import annotations

from typing import Iterable

from .actions import Action, QueueCardAction, QueuedPlay, RemoveQueuedAction, ResolveTickAction
from .deck import draw_to, refresh_round
from .match import (
    MatchConfig,
    MatchState,
    Mode,
    StepResult,
    at_end_of_round_score_nexus,
    check_victory,
    new_match,
    queue_play,
    remove_queued,
    reset_queues,
)
from .resolver import resolve_one_tick
from .types import CardCatalog


def _queue_card(state: MatchState, action: QueueCardAction) -> StepResult:
    team = state.teams.get(action.actor_id)
    if team is None:
        return StepResult(ok=False, events=[], error="Unknown actor.")
    if action.hand_index < 0 or action.hand_index >= len(team.hand):
        return StepResult(ok=False, events=[], error="Invalid hand index.")
    if len(team.queue) >= state.queue_limit():
        return StepResult(ok=False, events=[], error="Queue is full.")

    # The card stays in hand; hands are replaced wholesale at round refresh.
    card = team.hand[action.hand_index]
    queue_play(action.actor_id, state, QueuedPlay(card=card, direction=action.direction, target=action.target))
    event: dict[str, object] = {
        "type": "PLAY_QUEUED",
        "actor": action.actor_id,
        "card_id": card.id,
        "slot": len(team.queue) - 1,
    }
    if action.direction is not None:
        event["direction"] = [action.direction.dx, action.direction.dy]
    state.event_log.append(event)
    return StepResult(ok=True, events=[event])


def _remove_queued(state: MatchState, action: RemoveQueuedAction) -> StepResult:
    removed = remove_queued(action.actor_id, state, action.index)
    if removed is None:
        return StepResult(ok=False, events=[], error="No queued play at that index.")
    event: dict[str, object] = {
        "type": "PLAY_REMOVED",
        "actor": action.actor_id,
        "card_id": removed.card.id,
        "slot": action.index,
    }
    state.event_log.append(event)
    return StepResult(ok=True, events=[event])


def _end_round(state: MatchState) -> None:
    for actor_id in at_end_of_round_score_nexus(state):
        team = state.teams[state.actors[actor_id].team]
        state.event_log.append({"type": "NEXUS_SCORED", "actor": actor_id, "vp": team.vp})
    reset_queues(state)
    for team in state.teams.values():
        refresh_round(team, state.hand_max, state.rng)
    state.event_log.append({"type": "ROUND_ENDED", "round": state.round})
    state.round += 1
    state.tick = 1


def _resolve_tick(state: MatchState) -> StepResult:
    start = len(state.event_log)
    ids = state.actor_ids()[:2]
    plays = [state.teams[i].queue.pop(0) if state.teams[i].queue else None for i in ids]
    state.event_log.append(
        {
            "type": "TICK_STARTED",
            "round": state.round,
            "tick": state.tick,
            "plays": {i: (p.card.id if p is not None else None) for i, p in zip(ids, plays)},
        }
    )

    resolve_one_tick(state, plays[0], plays[1])

    if state.mode == "Queue3":
        if state.tick >= state.config.ticks_per_round:
            _end_round(state)
        else:
            state.tick += 1
    else:
        # SingleCard never ends a round; hands top up after every tick instead.
        for team in state.teams.values():
            draw_to(team.hand, team.draw_pile, state.hand_max)
        state.event_log.append({"type": "HANDS_REFILLED"})
        state.tick += 1

    state.winner = check_victory(state)
    if state.winner is not None:
        reason = "hp_0" if any(a.hp <= 0 for a in state.actors.values()) else "nexus_vp"
        state.event_log.append({"type": "GAME_ENDED", "winner": state.winner, "reason": reason})
    return StepResult(ok=True, events=state.event_log[start:])


def step(state: MatchState, action: Action) -> StepResult:
    """Apply one session action to the match state.

    Mutates ``state`` in place. Deterministic for a given (seed, mode,
    config, action sequence). Rejected requests come back with ``ok=False``;
    nothing is raised for gameplay input.
    """
    if state.winner is not None:
        return StepResult(ok=False, events=[], error="Match already ended.")

    state.action_log.append(action)

    if isinstance(action, QueueCardAction):
        return _queue_card(state, action)
    if isinstance(action, RemoveQueuedAction):
        return _remove_queued(state, action)
    if isinstance(action, ResolveTickAction):
        return _resolve_tick(state)
    return StepResult(ok=False, events=[], error="Unknown action.")


def replay(
    cards: CardCatalog,
    mode: Mode,
    seed: int,
    actions: Iterable[Action],
    config: MatchConfig | None = None,
) -> MatchState:
    state = new_match(cards, mode=mode, seed=seed, config=config)
    for a in actions:
        step(state, a)
        if state.winner is not None:
            break
    return state
