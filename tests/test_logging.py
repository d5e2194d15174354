"""Tests for structured logging helpers."""
import json
import logging

import pytest
from structlog.testing import capture_logs

from fitplan.core.logging import configure_logging, get_logger, log_timing
from fitplan.services.plan_generator import generate


class TestLogTiming:
    def test_logs_event_with_duration_and_fields(self):
        with capture_logs() as logs:
            with log_timing(get_logger("test"), "work_done", batch=3) as fields:
                fields["plan_id"] = "plan-abc"

        assert len(logs) == 1
        entry = logs[0]
        assert entry["event"] == "work_done"
        assert entry["log_level"] == "info"
        assert entry["batch"] == 3
        assert entry["plan_id"] == "plan-abc"
        assert entry["duration_ms"] >= 0

    def test_slow_run_adds_warning(self):
        with capture_logs() as logs:
            with log_timing(get_logger("test"), "work_done", slow_ms=-1, slow_event="work_slow"):
                pass

        assert [e["event"] for e in logs] == ["work_done", "work_slow"]
        assert logs[1]["log_level"] == "warning"
        assert logs[1]["threshold_ms"] == -1

    def test_nothing_logged_when_block_raises(self):
        with capture_logs() as logs:
            with pytest.raises(RuntimeError):
                with log_timing(get_logger("test"), "work_done"):
                    raise RuntimeError("boom")

        assert logs == []

    def test_generator_logs_plan_generated(self, catalog, make_profile):
        with capture_logs() as logs:
            plan = generate(make_profile(), catalog)

        entry = next(e for e in logs if e["event"] == "plan_generated")
        assert entry["plan_id"] == plan.plan_id
        assert entry["split"] == "full_body"
        assert entry["days"] == 3


class TestConfigureLogging:
    def test_stdlib_records_render_as_json(self, restore_logging, capsys):
        configure_logging()
        logging.getLogger("fitplan.test").info("catalog loaded")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "catalog loaded"
        assert record["logger"] == "fitplan.test"
        assert record["level"] == "info"
