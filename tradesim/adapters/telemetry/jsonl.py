"""JSON Lines Telemetry adapter.

Implements the Telemetry port by appending structured JSON objects (one per line)
to a file. Every record carries the session id and seed so a trading session can
be replayed from its event log.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from tradesim.utils.utility import make_serializable


class JsonlTelemetry:
    def __init__(
        self,
        session_id: str,
        seed: int | None,
        sink_path: Path,
    ) -> None:
        self._session_id = str(session_id)
        self._seed = seed
        self._sink_path = sink_path if isinstance(sink_path, Path) else Path(sink_path)

    @property
    def sink_path(self) -> Path:
        return self._sink_path

    def log(self, event: str, **fields: Any) -> None:
        if not event:
            raise ValueError("Telemetry event name must be non-empty")

        record: dict[str, Any] = {
            "event": event,
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "session_id": self._session_id,
            "seed": self._seed,
            **make_serializable(fields),
        }
        self._write_record(record)

    def _write_record(self, record: Mapping[str, Any]) -> None:
        payload = json.dumps(record, sort_keys=True, separators=(",", ":"), ensure_ascii=True)
        self._sink_path.parent.mkdir(parents=True, exist_ok=True)
        with self._sink_path.open("a", encoding="utf-8") as handle:
            handle.write(payload + "\n")


class NullTelemetry:
    """Telemetry sink that drops everything."""

    def log(self, event: str, **fields: Any) -> None:
        return None
