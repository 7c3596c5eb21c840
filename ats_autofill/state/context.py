"""Per-invocation fill context"""

import logging

from ats_autofill import config
from ats_autofill.state.outcome import AutofillReport, FillStatus
from ats_autofill.utils.timing import settle

log = logging.getLogger(__name__)

_LEVELS = {
    FillStatus.FILLED: logging.INFO,
    FillStatus.ALREADY_SET: logging.INFO,
    FillStatus.KEPT_EXISTING: logging.INFO,
    FillStatus.NO_VALUE: logging.DEBUG,
    FillStatus.NOT_FOUND: logging.INFO,
    FillStatus.INTERACTION_FAILED: logging.WARNING,
    FillStatus.VERIFICATION_MISMATCH: logging.WARNING,
}

_MARKS = {
    FillStatus.FILLED: "✓",
    FillStatus.ALREADY_SET: "✓",
    FillStatus.KEPT_EXISTING: "=",
    FillStatus.NO_VALUE: "-",
    FillStatus.NOT_FOUND: "⏭️",
    FillStatus.INTERACTION_FAILED: "⚠️",
    FillStatus.VERIFICATION_MISMATCH: "⚠️",
}


class FillContext:
    """
    State owned by exactly one adapter run against one page.

    Holds the timing profile, block rules and toggle-state capability the
    resolvers use, the set of question blocks already answered during this
    run, and the report that collects every outcome. Create one per adapter
    invocation and drop it afterwards; nothing here outlives the run.
    """

    def __init__(self, page, platform, timing=None, rules=None, toggle_state=None):
        self.page = page
        self.platform = platform
        self.timing = timing or config.get_active_timing()
        self.rules = config.block_rules(rules)
        self.toggle_state = toggle_state
        self.answered_blocks = set()
        self.report = AutofillReport(platform=platform, url=_page_url(page))

    @property
    def tag(self):
        return f"[{self.platform}]"

    def wait(self, key):
        """Timing profile value in ms"""
        return self.timing[key]

    def rule(self, kind):
        return self.rules[kind]

    async def settle(self, key):
        await settle(self.page, self.timing[key])

    def record(self, outcome):
        """Append an outcome to the report and emit one log line for it"""
        self.report.outcomes.append(outcome)
        log.log(
            _LEVELS[outcome.status],
            "%s %s %s",
            self.tag,
            _MARKS[outcome.status],
            outcome,
        )
        return outcome

    async def first_located(self, items, attempt):
        """
        Run attempt(item) for each item until one finds its field.

        Used for phrasing chains: a question that exists on the page is
        answered once, under the first phrasing that matches it.
        """
        outcome = None
        for item in items:
            outcome = await attempt(item)
            if outcome.located or outcome.status == FillStatus.NO_VALUE:
                break
        return outcome

    async def step(self, name, func, *args, **kwargs):
        """Run one adapter step; an unexpected error is logged and the run continues"""
        try:
            return await func(*args, **kwargs)
        except Exception:
            log.exception("%s ⚠️ step %r failed, continuing", self.tag, name)
            return None

    def note(self, message, *args):
        log.info("%s " + message, self.tag, *args)

    def warn(self, message, *args):
        log.warning("%s ⚠️ " + message, self.tag, *args)


def _page_url(page):
    return getattr(page, "url", "") or ""
