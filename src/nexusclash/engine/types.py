from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

Usage = Literal["At-Will", "Encounter", "Daily"]
CardType = Literal["Attack", "Movement", "Utility", "Hybrid"]
ActionType = Literal["Standard", "Move", "Minor", "Immediate"]
AimMode = Literal["direction_prequeued", "target_snapshot", "self"]
Defense = Literal["AC", "Fortitude", "Reflex", "Will"]

AttackKind = Literal["melee", "melee_sweep", "ranged_target", "projectile_line", "close_blast"]
MoveDirectionMode = Literal["any", "chosen_line"]
ZoneShape = Literal["square", "burst"]


@dataclass(frozen=True)
class AttackProfile:
    """Shape of an attack. Only the fields relevant to ``kind`` are set."""

    kind: AttackKind
    reach: int | None = None
    splash: int | None = None
    range: int | None = None
    projectile_speed: int | None = None
    size: int | None = None


@dataclass(frozen=True)
class DamageSpec:
    dice: str
    bonus: int = 0


@dataclass(frozen=True)
class MissPolicy:
    half_damage: bool = False
    chip: int | None = None


@dataclass(frozen=True)
class MovementSpec:
    tiles: int
    direction: MoveDirectionMode
    before_attack: bool = False
    ignores_opportunity: bool = False
    must_end_adjacent_enemy: bool = False


@dataclass(frozen=True)
class ZoneSpec:
    shape: ZoneShape
    size: int
    duration_turns: int
    blocks_los: bool = False
    friendly_heal_each_turn: int | None = None
    enemy_dot_each_turn: int | None = None


@dataclass(frozen=True)
class EffectSpec:
    name: str
    value: int | None = None
    tiles: int | None = None
    radius: int | None = None
    duration_turns: int | None = None
    condition: str | None = None


@dataclass(frozen=True)
class CardDefinition:
    id: str
    card_class: str
    usage: Usage
    cooldown_turns: int
    type: CardType
    action: ActionType
    keywords: tuple[str, ...]
    speed: int  # lower = faster; not consulted by the resolver
    aim_mode: AimMode
    copies_allowed: int
    attack_profile: AttackProfile | None = None
    attack_vs: Defense | None = None
    damage: DamageSpec | None = None
    miss: MissPolicy | None = None
    movement: MovementSpec | None = None
    zone: ZoneSpec | None = None
    effects: tuple[EffectSpec, ...] = ()
    interaction_tags: tuple[str, ...] = ()


def needs_direction(card: CardDefinition) -> bool:
    """True when queuing this card should ask the player for a direction."""
    if card.aim_mode == "direction_prequeued":
        return True
    if card.movement is not None and card.movement.direction in ("chosen_line", "any"):
        return True
    return False


@dataclass(frozen=True)
class CardCatalog:
    """Immutable card catalog used by the engine. Iteration order is catalog order."""

    cards: dict[str, CardDefinition]

    def get(self, card_id: str) -> CardDefinition:
        return self.cards[card_id]

    def all_ids(self) -> Sequence[str]:
        return list(self.cards.keys())

    def definitions(self) -> Sequence[CardDefinition]:
        return list(self.cards.values())
