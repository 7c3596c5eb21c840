"""Fill attempt outcomes and the per-run report"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class FillStatus(str, Enum):
    """What happened to one field during a fill pass"""

    FILLED = "filled"  # interaction performed (and verified where checkable)
    ALREADY_SET = "already_set"  # desired state was already present, nothing clicked
    KEPT_EXISTING = "kept_existing"  # field has a value we must not overwrite
    NO_VALUE = "no_value"  # profile has nothing to put here
    NOT_FOUND = "not_found"  # resolution failure: anchor / block / control missing
    INTERACTION_FAILED = "interaction_failed"  # found, but click/fill/upload raised
    VERIFICATION_MISMATCH = "verification_mismatch"  # action done, state still wrong


_OK = {FillStatus.FILLED, FillStatus.ALREADY_SET}
_UNLOCATED = {FillStatus.NOT_FOUND, FillStatus.NO_VALUE}


@dataclass(frozen=True)
class FillOutcome:
    field: str
    status: FillStatus
    detail: str = ""

    @property
    def ok(self):
        return self.status in _OK

    @property
    def located(self):
        """The field was found on the page, whatever happened next"""
        return self.status not in _UNLOCATED

    def __bool__(self):
        return self.ok

    def __str__(self):
        suffix = f" ({self.detail})" if self.detail else ""
        return f"{self.field} → {self.status.value}{suffix}"


def filled(field, detail=""):
    return FillOutcome(field, FillStatus.FILLED, detail)


def already_set(field, detail=""):
    return FillOutcome(field, FillStatus.ALREADY_SET, detail)


def kept_existing(field, detail=""):
    return FillOutcome(field, FillStatus.KEPT_EXISTING, detail)


def no_value(field, detail=""):
    return FillOutcome(field, FillStatus.NO_VALUE, detail)


def not_found(field, detail=""):
    return FillOutcome(field, FillStatus.NOT_FOUND, detail)


def interaction_failed(field, detail=""):
    return FillOutcome(field, FillStatus.INTERACTION_FAILED, detail)


def verification_mismatch(field, detail=""):
    return FillOutcome(field, FillStatus.VERIFICATION_MISMATCH, detail)


@dataclass
class AutofillReport:
    """Everything one adapter invocation did to the page"""

    platform: str
    url: str = ""
    native_autofill_detected: bool = False
    outcomes: List[FillOutcome] = field(default_factory=list)

    @property
    def filled(self):
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self):
        return [
            o
            for o in self.outcomes
            if o.status in (FillStatus.INTERACTION_FAILED, FillStatus.VERIFICATION_MISMATCH)
        ]

    def for_field(self, name) -> List[FillOutcome]:
        return [o for o in self.outcomes if o.field == name]

    def last(self, name) -> Optional[FillOutcome]:
        matches = self.for_field(name)
        return matches[-1] if matches else None

    def summary(self):
        """Outcome counts keyed by status value"""
        counts = Counter(o.status.value for o in self.outcomes)
        return dict(sorted(counts.items()))
