"""Tests for the command line entry point.

@file test_main.py
@description Link file parsing, profile loading, per-URL run logging and
             argument validation. The browser is never launched.
"""

import json

import pytest

from ats_autofill import config, main
from ats_autofill.state.outcome import AutofillReport
from ats_autofill.state import outcome as result
from fakes import FakePage


class TestHelpers:
    def test_format_elapsed_time(self):
        assert main.format_elapsed_time(4.0) == "4.0s"
        assert main.format_elapsed_time(125) == "2m 5s"

    def test_load_job_links(self, tmp_path):
        links = tmp_path / "jobs.txt"
        links.write_text(
            "# saved jobs\n"
            "https://jobs.lever.co/a/1\n"
            "\n"
            "https://jobs.ashbyhq.com/b/2\n"
            "https://jobs.lever.co/a/1\n",
            encoding="utf-8",
        )
        assert main.load_job_links(links) == [
            "https://jobs.lever.co/a/1",
            "https://jobs.ashbyhq.com/b/2",
        ]

    def test_load_profile(self, tmp_path, profile_data):
        path = tmp_path / "profile.json"
        path.write_text(json.dumps(profile_data), encoding="utf-8")
        assert main.load_profile(path).email == "jane@example.com"


class TestFillOne:
    def test_unsupported_url_is_logged(self, run, profile):
        page = FakePage()
        entry = run(main.fill_one(page, "https://example.com/job", profile, None))
        assert entry["status"] == "UNSUPPORTED"
        assert page.navigations == []
        assert config.RUN_LOG_PATH.exists()

    def test_supported_url(self, run, profile, monkeypatch):
        async def fake_autofill(page, prof, timing=None):
            return AutofillReport(
                platform="Lever", url=page.url, outcomes=[result.filled("email")]
            )

        monkeypatch.setattr(main, "autofill_page", fake_autofill)
        page = FakePage()

        entry = run(main.fill_one(page, "https://jobs.lever.co/a/1", profile, None))

        assert page.navigations == ["https://jobs.lever.co/a/1"]
        assert entry["status"] == "FILLED"
        assert entry["platform"] == "lever"
        assert entry["outcomes"] == {"filled": 1}


    def test_redirect_off_the_ats_is_unsupported(self, run, profile):
        """A board that lands on a company careers site is logged, not fatal."""

        class RedirectingPage(FakePage):
            async def goto(self, url, wait_until=None, timeout=None):
                await super().goto(url, wait_until, timeout)
                self.url = "https://careers.acme.com/jobs?gh_jid=123"

        page = RedirectingPage()
        entry = run(main.fill_one(page, "https://boards.greenhouse.io/acme/jobs/123", profile, None))

        assert entry["status"] == "UNSUPPORTED"
        assert entry["job_url"] == "https://careers.acme.com/jobs?gh_jid=123"
        assert entry["platform"] == "greenhouse"
        logged = [json.loads(line) for line in config.RUN_LOG_PATH.read_text(encoding="utf-8").splitlines()]
        assert [line["status"] for line in logged] == ["UNSUPPORTED"]


class TestArguments:
    def test_url_or_links_file_required(self):
        with pytest.raises(SystemExit) as exc:
            main.main([])
        assert exc.value.code == 2

    def test_empty_links_file(self, tmp_path):
        links = tmp_path / "jobs.txt"
        links.write_text("# nothing yet\n", encoding="utf-8")
        with pytest.raises(SystemExit):
            main.main(["--links-file", str(links)])

    def test_runs_each_url(self, tmp_path, profile_data, monkeypatch):
        path = tmp_path / "profile.json"
        path.write_text(json.dumps(profile_data), encoding="utf-8")
        calls = []

        async def fake_run(urls, profile, timing_name=None, headless=False):
            calls.append((urls, profile.full_name, timing_name, headless))

        monkeypatch.setattr(main, "run", fake_run)
        monkeypatch.setattr(main, "setup_logging", lambda level=None: None)

        code = main.main(
            ["https://jobs.lever.co/a/1", "--profile", str(path), "--timing", "constrained", "--headless"]
        )

        assert code == 0
        assert calls == [(["https://jobs.lever.co/a/1"], "Jane Doe", "constrained", True)]
