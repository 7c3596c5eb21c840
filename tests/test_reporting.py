"""Tests for outcomes, the fill context and the run log.

@file test_reporting.py
@description FillOutcome / AutofillReport semantics, FillContext chaining and
             step isolation, and JSONL run logging.
"""

import json
import logging

from ats_autofill import config
from ats_autofill.state import outcome as result
from ats_autofill.state.outcome import AutofillReport, FillStatus
from ats_autofill.utils.logging import LOGGER_NAME, log_result, setup_logging
from fakes import FakePage


class TestFillOutcome:
    def test_ok_statuses(self):
        assert result.filled("email").ok
        assert result.already_set("email").ok
        assert not result.kept_existing("email").ok
        assert not result.verification_mismatch("email").ok

    def test_located(self):
        assert not result.not_found("email").located
        assert not result.no_value("email").located
        assert result.kept_existing("email").located
        assert result.interaction_failed("email").located

    def test_bool_follows_ok(self):
        assert result.filled("email")
        assert not result.not_found("email")

    def test_str(self):
        assert str(result.not_found("email", "label 'Email'")) == "email → not_found (label 'Email')"
        assert str(result.filled("email")) == "email → filled"


class TestAutofillReport:
    def _report(self):
        return AutofillReport(
            platform="Ashby",
            outcomes=[
                result.not_found("location"),
                result.filled("location"),
                result.interaction_failed("resume", "boom"),
                result.verification_mismatch("veteran"),
                result.kept_existing("phone"),
            ],
        )

    def test_filled_and_failed(self):
        report = self._report()
        assert [o.field for o in report.filled] == ["location"]
        assert [o.field for o in report.failed] == ["resume", "veteran"]

    def test_last(self):
        report = self._report()
        assert report.last("location").status == FillStatus.FILLED
        assert report.last("github") is None
        assert len(report.for_field("location")) == 2

    def test_summary(self):
        assert self._report().summary() == {
            "filled": 1,
            "interaction_failed": 1,
            "kept_existing": 1,
            "not_found": 1,
            "verification_mismatch": 1,
        }


class TestFillContext:
    def test_first_located_stops_at_found_field(self, run, make_ctx):
        ctx = make_ctx(FakePage())
        seen = []

        async def attempt(item):
            seen.append(item)
            return result.kept_existing("x") if item == "b" else result.not_found("x")

        outcome = run(ctx.first_located(["a", "b", "c"], attempt))
        assert seen == ["a", "b"]
        assert outcome.status == FillStatus.KEPT_EXISTING

    def test_first_located_stops_on_no_value(self, run, make_ctx):
        ctx = make_ctx(FakePage())
        seen = []

        async def attempt(item):
            seen.append(item)
            return result.no_value("x")

        run(ctx.first_located(["a", "b"], attempt))
        assert seen == ["a"]

    def test_first_located_returns_last_miss(self, run, make_ctx):
        ctx = make_ctx(FakePage())

        async def attempt(item):
            return result.not_found("x", item)

        assert run(ctx.first_located(["a", "b"], attempt)).detail == "b"

    def test_step_logs_and_continues(self, run, make_ctx, caplog):
        ctx = make_ctx(FakePage(), platform="Lever")

        async def broken():
            raise ValueError("bad DOM")

        with caplog.at_level(logging.ERROR):
            assert run(ctx.step("location", broken)) is None
        assert "step 'location' failed" in caplog.text
        assert "[Lever]" in caplog.text

    def test_record_logs_one_line(self, make_ctx, caplog):
        ctx = make_ctx(FakePage(), platform="Greenhouse")
        with caplog.at_level(logging.INFO):
            ctx.record(result.filled("email"))
        assert ctx.report.outcomes == [result.filled("email")]
        assert "[Greenhouse] ✓ email → filled" in caplog.text

    def test_settle_waits_profile_value(self, run, make_ctx):
        page = FakePage()
        ctx = make_ctx(page)
        run(ctx.settle("settle_medium"))
        assert page.waited == [ctx.wait("settle_medium")]

    def test_report_url_from_page(self, make_ctx):
        ctx = make_ctx(FakePage(url="https://jobs.lever.co/a/b/apply"))
        assert ctx.report.url == "https://jobs.lever.co/a/b/apply"


class TestRunLog:
    def test_appends_json_lines(self, tmp_path):
        path = tmp_path / "runs.jsonl"
        report = AutofillReport(
            platform="Ashby",
            native_autofill_detected=False,
            outcomes=[result.filled("email"), result.interaction_failed("resume")],
        )
        log_result("https://jobs.ashbyhq.com/a/1", "Ashby", "FILLED", report, path=path)
        log_result("https://example.com", None, "UNSUPPORTED", path=path)

        lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        assert len(lines) == 2
        assert lines[0]["outcomes"] == {"filled": 1, "interaction_failed": 1}
        assert lines[0]["failed_fields"] == ["resume"]
        assert lines[0]["native_autofill_detected"] is False
        assert lines[1]["status"] == "UNSUPPORTED"
        assert "outcomes" not in lines[1]

    def test_default_path_from_config(self):
        log_result("https://example.com", None, "UNSUPPORTED")
        assert config.RUN_LOG_PATH.exists()

    def test_setup_logging_is_idempotent(self):
        logger = logging.getLogger(LOGGER_NAME)
        setup_logging("DEBUG")
        setup_logging("DEBUG")

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
