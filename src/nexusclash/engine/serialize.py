from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping

from .actions import Action, QueueCardAction, RemoveQueuedAction, ResolveTickAction
from .match import MatchState

# Fields that never leave the process: the random source carries no match
# data, the catalog is static content and the event log is per-session.
_EXCLUDED_STATE_FIELDS = frozenset({"rng", "cards", "event_log"})


class _Drop:
    pass


_DROP = _Drop()


def _sanitize(x: object) -> object:
    """Recursively reduce to JSON-safe data.

    Dataclass fields keep their shape, so an unset tile occupant or facing
    comes out as null. None inside plain mappings and lists is dropped, as
    are non-data objects (callables, random sources).
    """
    if x is None:
        return _DROP
    if isinstance(x, (bool, int, float, str)):
        return x
    if dataclasses.is_dataclass(x) and not isinstance(x, type):
        fields: dict[str, object] = {}
        for f in dataclasses.fields(x):
            v = getattr(x, f.name)
            sv = None if v is None else _sanitize(v)
            if sv is not _DROP:
                fields[f.name] = sv
        return fields
    if isinstance(x, Mapping):
        out: dict[str, object] = {}
        for k, v in x.items():
            sv = _sanitize(v)
            if sv is not _DROP:
                out[str(k)] = sv
        return out
    if isinstance(x, (list, tuple)):
        return [sv for sv in (_sanitize(v) for v in x) if sv is not _DROP]
    return _DROP


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, QueueCardAction):
        out = _sanitize(a)
        assert isinstance(out, dict)
        return {"type": "queue", **{k: v for k, v in out.items() if v is not None}}
    if isinstance(a, RemoveQueuedAction):
        return {"type": "remove", "actor_id": a.actor_id, "index": a.index}
    if isinstance(a, ResolveTickAction):
        return {"type": "resolve"}
    # should be unreachable
    return {"type": "unknown"}


def to_plain(state: MatchState) -> dict[str, object]:
    """JSON-safe snapshot of the match, suitable for sending to other participants."""
    fields = {
        f.name: getattr(state, f.name)
        for f in dataclasses.fields(state)
        if f.name not in _EXCLUDED_STATE_FIELDS and f.name != "action_log"
    }
    out = _sanitize(fields)
    assert isinstance(out, dict)
    # winner is part of the contract even while undecided
    out["winner"] = state.winner
    out["action_log"] = [action_to_dict(a) for a in state.action_log]
    return out


def to_partial(state: MatchState, names: Iterable[str]) -> dict[str, object]:
    plain = to_plain(state)
    return {n: plain[n] for n in names if n in plain}
