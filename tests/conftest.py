"""Shared fixtures for the ats_autofill test suite.

@file conftest.py
@description Offline, deterministic fixtures: isolated environment, a run log
             under tmp_path, a sample profile and a FillContext factory bound
             to the in-memory FakePage. No browser is launched.
"""

import asyncio
import logging

import pytest

from ats_autofill import config
from ats_autofill.data.profile import Profile
from ats_autofill.state.context import FillContext

# Fake waits return instantly, so the real default profile keeps tests fast
TIMING = dict(config.TIMING_PROFILES["default"])


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Ensure every test gets a clean environment.

    - Removes ATS_AUTOFILL_TIMING so profile-selection tests are deterministic.
    - Points the JSONL run log at a temp file.
    - Turns the Lever debug pass off.
    - Undoes setup_logging() so caplog keeps seeing package records.
    """
    monkeypatch.delenv(config.TIMING_ENV_VAR, raising=False)
    monkeypatch.setattr(config, "RUN_LOG_PATH", tmp_path / "autofill_log.jsonl")
    monkeypatch.setattr(config, "LEVER_DEBUG", False)
    logger = logging.getLogger("ats_autofill")
    monkeypatch.setattr(logger, "handlers", [])
    monkeypatch.setattr(logger, "propagate", True)
    monkeypatch.setattr(logger, "level", logging.NOTSET)


@pytest.fixture
def run():
    """Run a coroutine to completion from a synchronous test"""
    return asyncio.run


@pytest.fixture
def profile_data():
    return {
        "fullName": "Jane Doe",
        "email": "jane@example.com",
        "phone": "555-123-4567",
        "location": "Austin, Texas",
        "linkedin": "https://www.linkedin.com/in/janedoe",
        "github": "https://github.com/janedoe",
        "portfolio": "https://janedoe.dev",
        "workAuthorization": {
            "currentStatus": "US Citizen",
            "authorizedToWorkInUS": "Yes",
        },
        "sponsorship": {
            "requiresSponsorshipNow": "No",
            "requiresSponsorshipInFuture": "No",
        },
        "preferences": {"willingToRelocateOrCommute": "Yes"},
        "veteran": "No",
    }


@pytest.fixture
def profile(profile_data):
    return Profile.from_dict(profile_data)


@pytest.fixture
def make_ctx():
    """FillContext factory: make_ctx(page, toggle_state=None, rules=None)"""

    def factory(page, platform="Test", toggle_state=None, rules=None):
        return FillContext(
            page, platform, timing=dict(TIMING), rules=rules, toggle_state=toggle_state
        )

    return factory
