from __future__ import annotations

import copy
import dataclasses
import random

from nexusclash.engine.actions import Direction, QueuedPlay
from nexusclash.engine.board import get_tile, place_actor, vacate
from nexusclash.engine.match import MatchState, new_match
from nexusclash.engine.resolver import resolve_one_tick, steps_for
from nexusclash.engine.serialize import to_plain
from nexusclash.engine.types import CardCatalog, CardDefinition, MovementSpec
from nexusclash.paths import get_paths
from nexusclash.services.content import ContentService


def _load_cards() -> CardCatalog:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    return content.load_card_catalog()


def _relocate(state: MatchState, actor_id: str, x: int, y: int) -> None:
    actor = state.actors[actor_id]
    vacate(state.board, actor_id, actor.x, actor.y)
    actor.x, actor.y = x, y
    place_actor(state.board, actor_id, x, y)


def _mover(cards: CardCatalog, tiles: int) -> CardDefinition:
    return dataclasses.replace(cards.get("move_step"), movement=MovementSpec(tiles=tiles, direction="any"))


def _assert_occupancy(state: MatchState) -> None:
    seen = set()
    for actor in state.actors.values():
        if actor.hp <= 0:
            continue
        tile = get_tile(state.board, actor.x, actor.y)
        assert tile is not None and tile.occupied_by == actor.id
        assert actor.pos not in seen
        seen.add(actor.pos)
    occupied = [t for row in state.board.tiles for t in row if t.occupied_by is not None]
    assert len(occupied) == len(state.actors)


def test_steps_for() -> None:
    cards = _load_cards()
    assert steps_for(None) == 0
    assert steps_for(QueuedPlay(card=_mover(cards, 3))) == 3
    assert steps_for(QueuedPlay(card=_mover(cards, -2), direction=Direction.up())) == 0
    assert steps_for(QueuedPlay(card=cards.get("ftr_cleave"), direction=Direction.up())) == 1
    assert steps_for(QueuedPlay(card=cards.get("ftr_cleave"))) == 0


def test_no_plays_is_a_no_op() -> None:
    state = new_match(_load_cards(), seed=2)
    before = to_plain(state)
    resolve_one_tick(state, None, None)
    assert to_plain(state) == before


def test_mutual_cancellation() -> None:
    cards = _load_cards()
    state = new_match(cards, seed=3)
    _relocate(state, "B", 4, 4)
    step1 = _mover(cards, 1)

    resolve_one_tick(
        state,
        QueuedPlay(card=step1, direction=Direction(1, 0)),
        QueuedPlay(card=step1, direction=Direction(-1, 0)),
    )

    assert state.actors["A"].pos == (2, 4)
    assert state.actors["B"].pos == (4, 4)
    tile = get_tile(state.board, 3, 4)
    assert tile is not None and tile.occupied_by is None
    assert state.actors["A"].facing == "right"
    assert state.actors["B"].facing == "left"
    assert any(e["type"] == "MOVE_COLLIDED" for e in state.event_log)
    _assert_occupancy(state)


def test_blocked_single_move_at_board_edge() -> None:
    cards = _load_cards()
    state = new_match(cards, seed=4)
    _relocate(state, "A", 0, 0)

    resolve_one_tick(state, QueuedPlay(card=_mover(cards, 1), direction=Direction(-1, 0)), None)

    assert state.actors["A"].pos == (0, 0)
    assert state.actors["A"].facing == "left"
    # only one side acted: no placeholder damage
    assert state.actors["A"].hp == 10
    assert state.actors["B"].hp == 10
    _assert_occupancy(state)


def test_multi_step_move_and_placeholder_damage() -> None:
    cards = _load_cards()
    state = new_match(cards, seed=5)
    resolve_one_tick(
        state,
        QueuedPlay(card=cards.get("move_step"), direction=Direction.right()),
        QueuedPlay(card=cards.get("ftr_guardian_stance")),
    )
    assert state.actors["A"].pos == (4, 4)
    assert state.actors["B"].pos == (6, 4)
    # both acted, so both lose exactly 1 regardless of card damage data
    assert state.actors["A"].hp == 9
    assert state.actors["B"].hp == 9
    _assert_occupancy(state)


def test_attack_cards_only_deal_placeholder_damage() -> None:
    cards = _load_cards()
    state = new_match(cards, seed=5)
    _relocate(state, "B", 3, 4)
    brute = cards.get("ftr_brute_finish")
    resolve_one_tick(state, QueuedPlay(card=brute), QueuedPlay(card=brute))
    assert state.actors["A"].hp == 9
    assert state.actors["B"].hp == 9


def test_shorter_move_finishes_early() -> None:
    cards = _load_cards()
    state = new_match(cards, seed=6)
    _relocate(state, "B", 6, 8)
    resolve_one_tick(
        state,
        QueuedPlay(card=_mover(cards, 1), direction=Direction.up()),
        QueuedPlay(card=_mover(cards, 3), direction=Direction.left()),
    )
    assert state.actors["A"].pos == (2, 3)
    assert state.actors["B"].pos == (3, 8)
    _assert_occupancy(state)


def test_candidates_recomputed_each_step() -> None:
    cards = _load_cards()
    state = new_match(cards, seed=7)
    _relocate(state, "B", 3, 4)
    two = _mover(cards, 2)
    resolve_one_tick(
        state,
        QueuedPlay(card=two, direction=Direction.right()),
        QueuedPlay(card=two, direction=Direction.right()),
    )
    # A is blocked by B on the first step, then follows into the vacated tile
    assert state.actors["A"].pos == (3, 4)
    assert state.actors["B"].pos == (5, 4)
    _assert_occupancy(state)


def test_no_swapping_through_each_other() -> None:
    cards = _load_cards()
    state = new_match(cards, seed=8)
    _relocate(state, "A", 3, 4)
    _relocate(state, "B", 4, 4)
    one = _mover(cards, 1)
    resolve_one_tick(
        state,
        QueuedPlay(card=one, direction=Direction.right()),
        QueuedPlay(card=one, direction=Direction.left()),
    )
    assert state.actors["A"].pos == (3, 4)
    assert state.actors["B"].pos == (4, 4)
    _assert_occupancy(state)


def test_movement_blocking_tile() -> None:
    cards = _load_cards()
    state = new_match(cards, seed=9)
    wall = get_tile(state.board, 3, 4)
    assert wall is not None
    wall.blocks_movement = True
    wall.type = "wall"
    resolve_one_tick(state, QueuedPlay(card=cards.get("dash_step"), direction=Direction.right()), None)
    assert state.actors["A"].pos == (2, 4)
    assert state.actors["A"].facing == "right"


def test_non_cardinal_direction_keeps_facing() -> None:
    cards = _load_cards()
    state = new_match(cards, seed=10)
    resolve_one_tick(state, QueuedPlay(card=_mover(cards, 1), direction=Direction(1, 1)), None)
    assert state.actors["A"].facing is None
    assert state.actors["A"].pos == (3, 5)
    _assert_occupancy(state)


def test_direction_without_steps_sets_no_facing() -> None:
    cards = _load_cards()
    state = new_match(cards, seed=10)
    resolve_one_tick(state, QueuedPlay(card=_mover(cards, 0), direction=Direction.up()), None)
    assert state.actors["A"].facing is None
    assert state.actors["A"].pos == (2, 4)


def test_resolution_is_deterministic_and_leaves_rng_alone() -> None:
    cards = _load_cards()
    base = new_match(cards, seed=12)
    _relocate(base, "B", 4, 5)
    plays = (
        QueuedPlay(card=cards.get("dash_step"), direction=Direction.right()),
        QueuedPlay(card=cards.get("side_step"), direction=Direction.up()),
    )

    results = []
    for _ in range(3):
        state = copy.deepcopy(base)
        assert isinstance(state.rng, random.Random)
        rng_before = state.rng.getstate()
        resolve_one_tick(state, *plays)
        assert state.rng.getstate() == rng_before
        _assert_occupancy(state)
        results.append((to_plain(state), state.event_log))
    assert results[0] == results[1] == results[2]
