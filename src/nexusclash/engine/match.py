from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Literal

from .actions import Action, Facing, QueuedPlay
from .board import Board, Cell, in_range, make_board, nexus_position, place_actor
from .deck import RandomSource, build_starter_deck, draw_to, shuffle
from .types import CardCatalog, CardDefinition

Mode = Literal["Queue3", "SingleCard"]

Event = dict[str, object]


@dataclass(frozen=True)
class MatchConfig:
    board_width: int = 12
    board_height: int = 12
    nexus: Cell = (4, 4)
    start_positions: tuple[tuple[str, Cell], ...] = (("A", (2, 4)), ("B", (6, 4)))
    starting_hp: int = 10
    starting_hand: int = 7
    hand_max: int = 7
    deck_size: int = 30
    filler_card_id: str = "move_step"
    vp_to_win: int = 3
    ticks_per_round: int = 3
    queue_limits: tuple[tuple[str, int], ...] = (("Queue3", 3), ("SingleCard", 1))

    def queue_limit(self, mode: Mode) -> int:
        return dict(self.queue_limits)[mode]


@dataclass
class Status:
    name: str
    value: int | None = None
    expires_on_tick: int | None = None


@dataclass
class Actor:
    id: str
    team: str
    hp: int
    max_hp: int
    x: int
    y: int
    statuses: list[Status] = field(default_factory=list)
    facing: Facing | None = None

    @property
    def pos(self) -> Cell:
        return (self.x, self.y)


@dataclass
class TeamState:
    actor_id: str
    deck: list[CardDefinition]
    draw_pile: list[CardDefinition] = field(default_factory=list)
    discard: list[CardDefinition] = field(default_factory=list)
    hand: list[CardDefinition] = field(default_factory=list)
    queue: list[QueuedPlay] = field(default_factory=list)  # capacity is the caller's job
    vp: int = 0


@dataclass
class StepResult:
    ok: bool
    events: list[Event]
    error: str | None = None


@dataclass
class MatchState:
    cards: CardCatalog
    config: MatchConfig
    mode: Mode
    seed: int
    rng: RandomSource
    board: Board
    actors: dict[str, Actor]
    teams: dict[str, TeamState]
    hand_max: int
    round: int = 1
    tick: int = 1
    winner: str | None = None
    action_log: list[Action] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)

    def actor_ids(self) -> list[str]:
        return list(self.actors.keys())

    def opponent(self, actor_id: str) -> str | None:
        """First actor on a different team, in setup order."""
        team = self.actors[actor_id].team
        for other in self.actors.values():
            if other.team != team:
                return other.id
        return None

    def queue_limit(self) -> int:
        return self.config.queue_limit(self.mode)


def _check_config(cfg: MatchConfig) -> None:
    if len(cfg.start_positions) < 2:
        raise ValueError("A match needs at least two start positions.")
    seen: set[Cell] = set()
    for actor_id, pos in cfg.start_positions:
        if not in_range(cfg.board_width, cfg.board_height, *pos):
            raise ValueError(f"Start position {pos} for {actor_id!r} is off the board.")
        if pos in seen:
            raise ValueError(f"Start position {pos} is used twice.")
        seen.add(pos)
    if len({actor_id for actor_id, _ in cfg.start_positions}) != len(cfg.start_positions):
        raise ValueError("Actor ids in start_positions must be unique.")


def new_match(
    cards: CardCatalog,
    mode: Mode = "Queue3",
    seed: int = 0,
    config: MatchConfig | None = None,
    rng: RandomSource | None = None,
) -> MatchState:
    cfg = config or MatchConfig()
    _check_config(cfg)
    source: RandomSource = rng if rng is not None else random.Random(seed)

    board = make_board(cfg.board_width, cfg.board_height, cfg.nexus)
    actors: dict[str, Actor] = {}
    teams: dict[str, TeamState] = {}
    for actor_id, (x, y) in cfg.start_positions:
        actors[actor_id] = Actor(
            id=actor_id, team=actor_id, hp=cfg.starting_hp, max_hp=cfg.starting_hp, x=x, y=y
        )
        deck = shuffle(build_starter_deck(cards, cfg.deck_size, cfg.filler_card_id), source)
        team = TeamState(actor_id=actor_id, deck=deck)
        # Opening hand comes straight off the master deck; the draw pile stays
        # empty until the first round refresh.
        draw_to(team.hand, team.deck, cfg.starting_hand)
        teams[actor_id] = team
        place_actor(board, actor_id, x, y)

    state = MatchState(
        cards=cards,
        config=cfg,
        mode=mode,
        seed=seed,
        rng=source,
        board=board,
        actors=actors,
        teams=teams,
        hand_max=cfg.hand_max,
    )
    state.event_log.append({"type": "MATCH_STARTED", "mode": mode, "seed": seed, "actors": state.actor_ids()})
    return state


def queue_play(actor_id: str, state: MatchState, play: QueuedPlay) -> None:
    team = state.teams.get(actor_id)
    if team is None:
        return
    team.queue.append(play)


def remove_queued(actor_id: str, state: MatchState, index: int) -> QueuedPlay | None:
    """Drop one queued play. Unknown actors and out-of-range indices are ignored."""
    team = state.teams.get(actor_id)
    if team is None or index < 0 or index >= len(team.queue):
        return None
    return team.queue.pop(index)


def reset_queues(state: MatchState) -> None:
    for team in state.teams.values():
        team.queue = []


def at_end_of_round_score_nexus(state: MatchState) -> list[str]:
    """Award 1 VP to the team of every actor standing on the nexus. Returns the scorers."""
    nexus = nexus_position(state.board)
    scored: list[str] = []
    for actor in state.actors.values():
        if actor.pos != nexus:
            continue
        team = state.teams.get(actor.team)
        if team is None:
            continue
        team.vp += 1
        scored.append(actor.id)
    return scored


def check_victory(state: MatchState) -> str | None:
    """Elimination first (the other side wins), then nexus score."""
    for actor in state.actors.values():
        if actor.hp <= 0:
            other = state.opponent(actor.id)
            return state.actors[other].team if other is not None else None
    for team in state.teams.values():
        if team.vp >= state.config.vp_to_win:
            return state.actors[team.actor_id].team
    return None
