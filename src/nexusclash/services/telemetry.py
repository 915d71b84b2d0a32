from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Mapping


@dataclass
class TelemetryService:
    path: Path

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        self.log_many([{"type": event_type, **payload}])

    def log_many(self, events: Iterable[Mapping[str, object]]) -> int:
        """Append engine events (dicts with a ``type`` key) as JSON lines."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        ts = datetime.now(tz=timezone.utc).isoformat()
        written = 0
        with self.path.open("a", encoding="utf-8") as f:
            for ev in events:
                payload = {k: v for k, v in ev.items() if k != "type"}
                rec = {"ts": ts, "type": ev.get("type", "UNKNOWN"), "payload": payload}
                f.write(json.dumps(rec, ensure_ascii=False) + "\n")
                written += 1
        return written
