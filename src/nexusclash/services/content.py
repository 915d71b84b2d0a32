from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from nexusclash.engine.types import (
    AttackProfile,
    CardCatalog,
    CardDefinition,
    DamageSpec,
    EffectSpec,
    MissPolicy,
    MovementSpec,
    ZoneSpec,
)


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContentError(f"Expected int for {key}")
    return v


def _optional_int(obj: Mapping[str, object], key: str) -> int | None:
    if obj.get(key) is None:
        return None
    return _require_int(obj, key)


def _optional_mapping(obj: Mapping[str, object], key: str) -> Mapping[str, object] | None:
    v = obj.get(key)
    if v is None:
        return None
    if not isinstance(v, dict):
        raise ContentError(f"Expected object for {key}")
    return v


def _str_tuple(raw: object, key: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ContentError(f"{key} must be a list")
    return tuple(item for item in raw if isinstance(item, str))


def _parse_attack_profile(raw: Mapping[str, object]) -> AttackProfile:
    return AttackProfile(
        kind=_require_str(raw, "kind"),  # type: ignore[arg-type]
        reach=_optional_int(raw, "reach"),
        splash=_optional_int(raw, "splash"),
        range=_optional_int(raw, "range"),
        projectile_speed=_optional_int(raw, "projectile_speed"),
        size=_optional_int(raw, "size"),
    )


def _parse_movement(raw: Mapping[str, object]) -> MovementSpec:
    return MovementSpec(
        tiles=_require_int(raw, "tiles"),
        direction=_require_str(raw, "direction"),  # type: ignore[arg-type]
        before_attack=bool(raw.get("before_attack", False)),
        ignores_opportunity=bool(raw.get("ignores_opportunity", False)),
        must_end_adjacent_enemy=bool(raw.get("must_end_adjacent_enemy", False)),
    )


def _parse_zone(raw: Mapping[str, object]) -> ZoneSpec:
    return ZoneSpec(
        shape=_require_str(raw, "shape"),  # type: ignore[arg-type]
        size=_require_int(raw, "size"),
        duration_turns=_require_int(raw, "duration_turns"),
        blocks_los=bool(raw.get("blocks_los", False)),
        friendly_heal_each_turn=_optional_int(raw, "friendly_heal_each_turn"),
        enemy_dot_each_turn=_optional_int(raw, "enemy_dot_each_turn"),
    )


def _parse_effect(raw: Mapping[str, object]) -> EffectSpec:
    condition = raw.get("condition")
    return EffectSpec(
        name=_require_str(raw, "name"),
        value=_optional_int(raw, "value"),
        tiles=_optional_int(raw, "tiles"),
        radius=_optional_int(raw, "radius"),
        duration_turns=_optional_int(raw, "duration_turns"),
        condition=condition if isinstance(condition, str) else None,
    )


def parse_card(item: Mapping[str, object]) -> CardDefinition:
    attack_raw = _optional_mapping(item, "attack_profile")
    damage_raw = _optional_mapping(item, "damage")
    miss_raw = _optional_mapping(item, "miss")
    movement_raw = _optional_mapping(item, "movement")
    zone_raw = _optional_mapping(item, "zone")
    attack_vs = item.get("attack_vs")

    effects: list[EffectSpec] = []
    effects_raw = item.get("effects", [])
    if isinstance(effects_raw, list):
        for eff in effects_raw:
            if isinstance(eff, dict):
                effects.append(_parse_effect(eff))

    return CardDefinition(
        id=_require_str(item, "id"),
        card_class=_require_str(item, "class"),
        usage=_require_str(item, "usage"),  # type: ignore[arg-type]
        cooldown_turns=_require_int(item, "cooldown_turns"),
        type=_require_str(item, "type"),  # type: ignore[arg-type]
        action=_require_str(item, "action"),  # type: ignore[arg-type]
        keywords=_str_tuple(item.get("keywords"), "keywords"),
        speed=_require_int(item, "speed"),
        aim_mode=_require_str(item, "aim_mode"),  # type: ignore[arg-type]
        copies_allowed=_require_int(item, "copies_allowed"),
        attack_profile=_parse_attack_profile(attack_raw) if attack_raw is not None else None,
        attack_vs=attack_vs if isinstance(attack_vs, str) else None,  # type: ignore[arg-type]
        damage=(
            DamageSpec(dice=_require_str(damage_raw, "dice"), bonus=_optional_int(damage_raw, "bonus") or 0)
            if damage_raw is not None
            else None
        ),
        miss=(
            MissPolicy(half_damage=bool(miss_raw.get("half_damage", False)), chip=_optional_int(miss_raw, "chip"))
            if miss_raw is not None
            else None
        ),
        movement=_parse_movement(movement_raw) if movement_raw is not None else None,
        zone=_parse_zone(zone_raw) if zone_raw is not None else None,
        effects=tuple(effects),
        interaction_tags=_str_tuple(item.get("interaction_tags"), "interaction_tags"),
    )


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_card_catalog(self, filename: str = "cards.json") -> CardCatalog:
        cards_path = self._data_dir / filename
        schema = _load_json(self._schema_dir / "cards.schema.json")
        raw = _load_json(cards_path)
        validate_json(raw, schema, context=str(cards_path))

        if not isinstance(raw, dict):
            raise ContentError(f"{filename} must be an object")
        raw_cards = raw.get("cards")
        if not isinstance(raw_cards, list):
            raise ContentError(f"{filename}.cards must be a list")

        cards: dict[str, CardDefinition] = {}
        for item in raw_cards:
            if not isinstance(item, dict):
                continue
            card = parse_card(item)
            if card.id in cards:
                raise ContentError(f"Duplicate card id: {card.id}")
            cards[card.id] = card
        return CardCatalog(cards=cards)

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_card_catalog()
