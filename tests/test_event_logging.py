"""Tests for event logging."""

from __future__ import annotations

import json
import os
from pathlib import Path

from layr.logging.events import EventLog, Phase, RunDir, read_events
from layr.planning.markdown import plan_to_markdown
from layr.planning.rules import RuleBasedGenerator


class TestRunDir:
    def test_creates_directory(self, tmp_path: Path) -> None:
        rd = RunDir(base=tmp_path / "runs")
        assert rd.path.exists()
        assert rd.path.is_dir()

    def test_has_expected_paths(self, tmp_path: Path) -> None:
        rd = RunDir(base=tmp_path / "runs")
        assert rd.events_path.name == "events.jsonl"
        assert rd.plan_path.name == "plan.json"
        assert rd.markdown_path.name == "plan.md"

    def test_run_id_format(self, tmp_path: Path) -> None:
        rd = RunDir(base=tmp_path / "runs")
        # Format: YYYYMMDDTHHMMZ_<8hex>
        parts = rd.run_id.split("_")
        assert len(parts) == 2
        assert parts[0].endswith("Z")
        assert len(parts[1]) == 8

    def test_explicit_run_id(self, tmp_path: Path) -> None:
        rd = RunDir(base=tmp_path / "runs", run_id="fixed")
        assert rd.path == tmp_path / "runs" / "fixed"

    def test_default_base(self, tmp_path: Path) -> None:
        rd = RunDir()
        assert rd.path.parent == Path(".layr/runs")
        assert (tmp_path / ".layr" / "runs" / rd.run_id).is_dir()

    def test_save_plan(self, run_dir: RunDir) -> None:
        plan = RuleBasedGenerator().generate_plan("a backend api")
        paths = run_dir.save_plan(plan, plan_to_markdown(plan))

        assert paths == [run_dir.plan_path, run_dir.markdown_path]
        data = json.loads(run_dir.plan_path.read_text())
        assert data["title"] == plan.title
        assert data["nextSteps"][0]["estimatedTime"] == "15 minutes"
        assert run_dir.markdown_path.read_text().startswith(f"# {plan.title}")


class TestEventLog:
    def test_emit_and_read(self, run_dir: RunDir) -> None:
        log = EventLog(run_dir)
        log.emit(Phase.GENERATE, "generation.start", "Requesting plan", {"provider": "gemini"})
        log.close()

        (event,) = read_events(run_dir.events_path)
        assert event["phase"] == "GENERATE"
        assert event["type"] == "generation.start"
        assert event["summary"] == "Requesting plan"
        assert event["data"]["provider"] == "gemini"
        assert event["run_id"] == run_dir.run_id
        assert event["seq"] == 1
        assert "result" not in event

    def test_sequential_seq(self, run_dir: RunDir) -> None:
        log = EventLog(run_dir)
        log.emit(Phase.SELECT, "e1", "First")
        log.emit(Phase.GENERATE, "e2", "Second")
        log.emit(Phase.NORMALIZE, "e3", "Third", result={"steps": 3})
        log.close()

        events = read_events(run_dir.events_path)
        assert [e["seq"] for e in events] == [1, 2, 3]
        assert events[2]["result"] == {"steps": 3}

    def test_emit_returns_written_event(self, event_log: EventLog) -> None:
        event = event_log.emit(Phase.RULES, "generation.complete", "done", {"template": "Web"})
        assert read_events(event_log.run_dir.events_path) == [event]

    def test_secrets_redacted(self, run_dir: RunDir) -> None:
        secrets = {"openai_api_key": "sk-live-secret", "claude_api_key": ""}
        with EventLog(run_dir, secrets) as log:
            log.emit(Phase.GENERATE, "generation.failed", "key sk-live-secret rejected",
                     {"headers": {"note": "sk-live-secret"}}, {"kind": "ai_service"})

        text = run_dir.events_path.read_text()
        assert "sk-live-secret" not in text
        assert "[REDACTED:openai_api_key]" in text
        assert read_events(run_dir.events_path)[0]["result"] == {"kind": "ai_service"}

    def test_file_permissions(self, run_dir: RunDir) -> None:
        with EventLog(run_dir) as log:
            log.emit(Phase.RULES, "generation.complete", "done")
        mode = os.stat(run_dir.events_path).st_mode & 0o777
        assert mode == 0o600

    def test_close_is_idempotent(self, run_dir: RunDir) -> None:
        log = EventLog(run_dir)
        log.close()
        log.close()
        assert log.closed

    def test_append_across_instances(self, run_dir: RunDir) -> None:
        with EventLog(run_dir) as log:
            log.emit(Phase.SELECT, "a", "first")
        with EventLog(run_dir) as log:
            log.emit(Phase.SELECT, "b", "second")
        assert [e["type"] for e in read_events(run_dir.events_path)] == ["a", "b"]
