"""Per-run artifacts: the JSONL event log and the saved plan files."""

from __future__ import annotations

import json
import os
import uuid
from contextlib import suppress
from datetime import UTC, datetime
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from layr.logging.redaction import redact_structured

if TYPE_CHECKING:
    from layr.planning.models import ProjectPlan

DEFAULT_RUNS_DIR = Path(".layr/runs")


class Phase(StrEnum):
    SELECT = "SELECT"
    GENERATE = "GENERATE"
    NORMALIZE = "NORMALIZE"
    RULES = "RULES"


def new_run_id() -> str:
    """``YYYYMMDDTHHMMZ_<8 hex>``: sortable by start time, unique per run."""
    return f"{datetime.now(UTC):%Y%m%dT%H%MZ}_{uuid.uuid4().hex[:8]}"


class RunDir:
    """One generation's directory under the runs root."""

    def __init__(self, base: Path | None = None, run_id: str | None = None) -> None:
        self.run_id = run_id or new_run_id()
        self.path = (base or DEFAULT_RUNS_DIR) / self.run_id
        self.path.mkdir(parents=True, exist_ok=True)

    @property
    def events_path(self) -> Path:
        return self.path / "events.jsonl"

    @property
    def plan_path(self) -> Path:
        return self.path / "plan.json"

    @property
    def markdown_path(self) -> Path:
        return self.path / "plan.md"

    def save_plan(self, plan: ProjectPlan, markdown: str) -> list[Path]:
        """Write the plan as camelCase JSON and as Markdown; returns both paths."""
        self.plan_path.write_text(plan.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        self.markdown_path.write_text(markdown, encoding="utf-8")
        return [self.plan_path, self.markdown_path]


class EventLog:
    """Append-only JSONL log of one run.

    Every string in an event passes through redaction first, so configured
    credentials and recognisable key formats never reach disk.
    """

    def __init__(self, run_dir: RunDir, secrets: dict[str, str] | None = None) -> None:
        self.run_dir = run_dir
        self.secrets = {name: value for name, value in (secrets or {}).items() if value}
        self.count = 0
        fd = os.open(run_dir.events_path, os.O_APPEND | os.O_CREAT | os.O_WRONLY, 0o600)
        self._file = os.fdopen(fd, "a", encoding="utf-8")
        # Pre-existing files keep their mode on open.
        with suppress(OSError):
            os.chmod(run_dir.events_path, 0o600)

    def emit(
        self,
        phase: Phase | str,
        event_type: str,
        summary: str,
        data: dict[str, Any] | None = None,
        result: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        self.count += 1
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "run_id": self.run_dir.run_id,
            "phase": str(phase),
            "seq": self.count,
            "type": event_type,
            "summary": summary,
            "data": data or {},
        }
        if result is not None:
            event["result"] = result

        event = redact_structured(event, self.secrets)
        self._file.write(json.dumps(event, default=str) + "\n")
        self._file.flush()
        return event

    @property
    def closed(self) -> bool:
        return self._file.closed

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> EventLog:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def read_events(path: Path) -> list[dict[str, Any]]:
    """Load a run's events back, in emission order."""
    with path.open(encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]
