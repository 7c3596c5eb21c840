"""Candidate profile record - read-only input to every fill pass"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

Answer = Union[str, List[str], None]


def _pick(data, *keys, default=""):
    """First present, non-None value among camelCase / snake_case aliases"""
    if not isinstance(data, dict):
        return default
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _text(value):
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value) if value is not None else ""


@dataclass(frozen=True)
class WorkAuthorization:
    current_status: str = ""
    authorized_to_work_in_us: str = ""


@dataclass(frozen=True)
class Sponsorship:
    requires_now: str = ""
    requires_in_future: str = ""


@dataclass(frozen=True)
class EEO:
    """Voluntary self-identification answers, as the candidate phrased them"""

    gender: Answer = None
    race_ethnicity: Answer = None
    hispanic_or_latino: Answer = None
    veteran_status: Answer = None
    disability_status: Answer = None


@dataclass(frozen=True)
class Defaults:
    """Free-form fallbacks used when a specific answer is missing"""

    authorized_to_work: str = ""
    needs_sponsorship: str = ""
    will_require_sponsorship: str = ""
    start_date: str = ""
    salary_expectation: str = ""


@dataclass(frozen=True)
class Profile:
    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    first_name: str = ""
    last_name: str = ""
    linkedin: str = ""
    github: str = ""
    portfolio: str = ""
    resume_path: str = ""
    work_authorization: WorkAuthorization = field(default_factory=WorkAuthorization)
    sponsorship: Sponsorship = field(default_factory=Sponsorship)
    willing_to_relocate_or_commute: str = ""
    veteran: str = ""
    eeo: Optional[EEO] = None
    defaults: Defaults = field(default_factory=Defaults)

    @classmethod
    def from_dict(cls, data):
        """
        Build a Profile from the profile.json shape.

        Accepts the camelCase keys the rest of the tool writes (fullName,
        resumePdfPath, workAuthorization.authorizedToWorkInUS, ...) as well as
        snake_case equivalents. Unknown keys are ignored.
        """
        data = data or {}
        auth = _pick(data, "workAuthorization", "work_authorization", default={})
        sponsor = _pick(data, "sponsorship", default={})
        prefs = _pick(data, "preferences", default={})
        defaults = _pick(data, "defaults", default={})
        eeo = _pick(data, "eeo", default=None)

        return cls(
            full_name=_text(_pick(data, "fullName", "full_name")),
            email=_text(_pick(data, "email")),
            phone=_text(_pick(data, "phone")),
            location=_text(_pick(data, "location")),
            first_name=_text(_pick(data, "firstName", "first_name")),
            last_name=_text(_pick(data, "lastName", "last_name")),
            linkedin=_text(_pick(data, "linkedin")),
            github=_text(_pick(data, "github")),
            portfolio=_text(_pick(data, "portfolio")),
            resume_path=_text(_pick(data, "resumePdfPath", "resume_path", "resumePath")),
            work_authorization=WorkAuthorization(
                current_status=_text(_pick(auth, "currentStatus", "current_status")),
                authorized_to_work_in_us=_text(
                    _pick(auth, "authorizedToWorkInUS", "authorized_to_work_in_us")
                ),
            ),
            sponsorship=Sponsorship(
                requires_now=_text(_pick(sponsor, "requiresSponsorshipNow", "requires_now")),
                requires_in_future=_text(
                    _pick(sponsor, "requiresSponsorshipInFuture", "requires_in_future")
                ),
            ),
            willing_to_relocate_or_commute=_text(
                _pick(
                    prefs,
                    "willingToRelocateOrCommute",
                    "willing_to_relocate_or_commute",
                    default=_pick(data, "willing_to_relocate_or_commute"),
                )
            ),
            veteran=_text(_pick(data, "veteran")),
            eeo=EEO(
                gender=_pick(eeo, "gender", default=None),
                race_ethnicity=_pick(eeo, "raceEthnicity", "race_ethnicity", default=None),
                hispanic_or_latino=_pick(eeo, "hispanicOrLatino", "hispanic_or_latino", default=None),
                veteran_status=_pick(eeo, "veteranStatus", "veteran_status", default=None),
                disability_status=_pick(eeo, "disabilityStatus", "disability_status", default=None),
            )
            if isinstance(eeo, dict)
            else None,
            defaults=Defaults(
                authorized_to_work=_text(_pick(defaults, "authorizedToWork", "authorized_to_work")),
                needs_sponsorship=_text(_pick(defaults, "needsSponsorship", "needs_sponsorship")),
                will_require_sponsorship=_text(
                    _pick(
                        defaults,
                        "willNowOrInFutureRequireSponsorship",
                        "will_require_sponsorship",
                    )
                ),
                start_date=_text(_pick(defaults, "startDate", "start_date")),
                salary_expectation=_text(_pick(defaults, "salaryExpectation", "salary_expectation")),
            ),
        )

    # ----------------------------------------
    # Derived answers shared by the adapters
    # ----------------------------------------

    def authorized_answer(self):
        return self.work_authorization.authorized_to_work_in_us or self.defaults.authorized_to_work

    def sponsorship_now_answer(self):
        return self.sponsorship.requires_now or self.defaults.needs_sponsorship

    def sponsorship_future_answer(self):
        return self.sponsorship.requires_in_future or self.defaults.will_require_sponsorship

    def veteran_answer(self):
        if self.veteran:
            return self.veteran
        if self.eeo is not None and isinstance(self.eeo.veteran_status, str):
            return self.eeo.veteran_status
        return ""
