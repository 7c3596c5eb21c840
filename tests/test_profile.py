"""Tests for Profile parsing and derived answers.

@file test_profile.py
@description camelCase / snake_case mapping, type coercion and the fallbacks
             from specific answers to free-form defaults.
"""

import dataclasses

import pytest

from ats_autofill.data.profile import Profile


class TestFromDict:
    def test_camel_case_keys(self, profile):
        assert profile.full_name == "Jane Doe"
        assert profile.work_authorization.current_status == "US Citizen"
        assert profile.work_authorization.authorized_to_work_in_us == "Yes"
        assert profile.sponsorship.requires_in_future == "No"
        assert profile.willing_to_relocate_or_commute == "Yes"

    def test_snake_case_keys(self):
        profile = Profile.from_dict(
            {
                "full_name": "Jane Doe",
                "resume_path": "/tmp/resume.pdf",
                "work_authorization": {"authorized_to_work_in_us": "yes"},
                "willing_to_relocate_or_commute": "no",
            }
        )
        assert profile.resume_path == "/tmp/resume.pdf"
        assert profile.work_authorization.authorized_to_work_in_us == "yes"
        assert profile.willing_to_relocate_or_commute == "no"

    def test_resume_pdf_path_alias(self):
        assert Profile.from_dict({"resumePdfPath": "cv.pdf"}).resume_path == "cv.pdf"

    def test_booleans_become_yes_no(self):
        profile = Profile.from_dict({"workAuthorization": {"authorizedToWorkInUS": True}})
        assert profile.work_authorization.authorized_to_work_in_us == "Yes"

    def test_eeo_block(self):
        profile = Profile.from_dict(
            {"eeo": {"gender": "Woman", "raceEthnicity": ["Asian", "White"], "veteranStatus": None}}
        )
        assert profile.eeo.gender == "Woman"
        assert profile.eeo.race_ethnicity == ["Asian", "White"]
        assert profile.eeo.veteran_status is None

    def test_missing_eeo(self, profile):
        assert profile.eeo is None

    def test_empty_input(self):
        profile = Profile.from_dict(None)
        assert profile.full_name == ""
        assert profile.defaults.salary_expectation == ""

    def test_frozen(self, profile):
        with pytest.raises(dataclasses.FrozenInstanceError):
            profile.email = "other@example.com"


class TestDerivedAnswers:
    def test_specific_answer_preferred(self, profile):
        assert profile.authorized_answer() == "Yes"
        assert profile.sponsorship_now_answer() == "No"
        assert profile.sponsorship_future_answer() == "No"

    def test_defaults_used_when_missing(self):
        profile = Profile.from_dict(
            {
                "defaults": {
                    "authorizedToWork": "Yes",
                    "needsSponsorship": "No",
                    "willNowOrInFutureRequireSponsorship": "Yes",
                    "salaryExpectation": "$150,000",
                }
            }
        )
        assert profile.authorized_answer() == "Yes"
        assert profile.sponsorship_now_answer() == "No"
        assert profile.sponsorship_future_answer() == "Yes"
        assert profile.defaults.salary_expectation == "$150,000"

    def test_veteran_from_eeo(self):
        profile = Profile.from_dict({"eeo": {"veteranStatus": "I am not a protected veteran"}})
        assert profile.veteran_answer() == "I am not a protected veteran"

    def test_veteran_top_level_wins(self, profile):
        assert profile.veteran_answer() == "No"
