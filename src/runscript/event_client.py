# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""JSONL log of script execution events.

One line per event. Every line of one execution shares a correlation id,
which the runner also exports to the script as RUNSCRIPT_CORRELATION_ID.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_EVENTS_PATH = Path("~/.runscript/events.jsonl")


class EventClient:
    """Appends execution events to a JSONL file and reads them back."""

    def __init__(self, log_path: Path):
        self.log_path = Path(log_path).expanduser()
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    @classmethod
    def default(cls) -> "EventClient":
        return cls(DEFAULT_EVENTS_PATH)

    def log_event(
        self,
        event_type: str,
        correlation_id: str,
        status: str,
        payload: Optional[Dict[str, Any]] = None,
        error_message: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Record one event and return it.

        payload and error_message are left out of the line when empty.

        Raises:
            OSError: If the log file cannot be written.
        """
        record: Dict[str, Any] = dict(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event_type=event_type,
            correlation_id=correlation_id,
            status=status,
        )
        for key, value in (("payload", payload), ("error_message", error_message)):
            if value:
                record[key] = value

        line = json.dumps(record, sort_keys=True)
        with self.log_path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")
        return record

    def read_events(self, correlation_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Logged events, oldest first, optionally only those of one execution."""
        if not self.log_path.exists():
            return []
        with self.log_path.open(encoding="utf-8") as f:
            events = [json.loads(line) for line in f if line.strip()]
        if correlation_id is None:
            return events
        return [event for event in events if event["correlation_id"] == correlation_id]
