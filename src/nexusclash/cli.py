from __future__ import annotations

import argparse
import json
from pathlib import Path

from nexusclash.engine.actions import ResolveTickAction
from nexusclash.engine.ai import choose_play
from nexusclash.engine.match import MatchState, new_match
from nexusclash.engine.serialize import to_plain
from nexusclash.engine.session import step
from nexusclash.paths import get_paths
from nexusclash.services.content import ContentService
from nexusclash.services.telemetry import TelemetryService


def run_selfplay(state: MatchState, max_ticks: int, telemetry: TelemetryService | None = None) -> MatchState:
    """Drive both sides with the built-in policy until someone wins or ``max_ticks`` run out."""
    if telemetry is not None:
        telemetry.log_many(state.event_log)
    for _ in range(max_ticks):
        if state.winner is not None:
            break
        for actor_id in state.actor_ids():
            while True:
                action = choose_play(state, actor_id)
                if action is None:
                    break
                res = step(state, action)
                if telemetry is not None:
                    telemetry.log_many(res.events)
                if not res.ok:
                    break
        res = step(state, ResolveTickAction())
        if telemetry is not None:
            telemetry.log_many(res.events)
    return state


def main() -> int:
    parser = argparse.ArgumentParser(prog="nexusclash-sim")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--mode", choices=["Queue3", "SingleCard"], default="Queue3")
    parser.add_argument("--max-ticks", type=int, default=60)
    parser.add_argument("--telemetry", type=Path, default=None, help="JSONL event log path")
    parser.add_argument("--no-telemetry", action="store_true")
    parser.add_argument("--snapshot", action="store_true", help="print the final state as JSON")
    args = parser.parse_args()

    paths = get_paths()
    content = ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir)
    cards = content.load_card_catalog()

    telemetry = None
    if not args.no_telemetry:
        telemetry = TelemetryService(args.telemetry or paths.userdata_dir / "telemetry.jsonl")

    state = new_match(cards, mode=args.mode, seed=args.seed)
    run_selfplay(state, args.max_ticks, telemetry)

    if args.snapshot:
        print(json.dumps(to_plain(state), indent=2))
    else:
        vp = ", ".join(f"{tid}={t.vp}" for tid, t in state.teams.items())
        hp = ", ".join(f"{aid}={a.hp}" for aid, a in state.actors.items())
        print(f"round {state.round} tick {state.tick} | hp {hp} | vp {vp} | winner {state.winner}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
