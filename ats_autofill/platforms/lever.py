"""Lever application form autofill"""

import logging
from urllib.parse import urlsplit, urlunsplit

from playwright.async_api import Error as PlaywrightError

from ats_autofill import config
from ats_autofill.interaction.radios import answer_radio_question, radio_container
from ats_autofill.interaction.text_fields import (
    fill_by_label,
    fill_by_question,
    fill_first_visible,
    fill_if_empty,
    question_input,
)
from ats_autofill.interaction.uploads import upload_file
from ats_autofill.perception.locators import (
    first_visible,
    is_visible_within,
    safe_input_value,
    tag_name,
    text_anchor,
)
from ats_autofill.reasoning.normalize import YES, normalize_yes_no, split_name, state_name
from ats_autofill.state import outcome as result
from ats_autofill.state.context import FillContext

log = logging.getLogger(__name__)

PLATFORM = "Lever"

LOCATION_INPUT = [
    "input.location-input",
    "input[name='location']",
    "input[data-qa='location-input']",
]
PORTFOLIO_INPUT = "input[name='urls[Portfolio]']"
RESUME_INPUT = (
    "input[type='file'][name*='resume' i], input[type='file'][id*='resume' i], input[type='file']"
)

# (kind, target) strategies per identity field
FULL_NAME = [("selector", "input[name='name']"), ("label", "Full name")]
EMAIL = [("selector", "input[name='email']"), ("label", "Email")]
PHONE = [("selector", "input[name='phone']"), ("label", "Phone")]

LOCATION_LABELS = ["Current location", "Location"]
LINKEDIN_LABELS = ["LinkedIn", "LinkedIn Profile"]
PORTFOLIO = [
    ("label", "Website"),
    ("label", "Portfolio URL"),
    ("label", "Portfolio"),
    ("question", "Portfolio URL"),
    ("selector", PORTFOLIO_INPUT),
]
SALARY = [
    ("label", "target cash compensation range"),
    ("label", "target cash compensation"),
    ("label", "target compensation"),
    ("label", "target salary"),
    ("question", "What is your target cash compensation range"),
]
VISA_QUESTIONS = [
    "Do you now, or will you in the future require visa support",
    "Do you require visa support",
]
VISA_DETAILS_QUESTION = "If yes, please describe"

DEBUG_LABELS = [
    "Current location",
    "Portfolio URL",
    "What is your target cash compensation range",
    "Do you now, or will you in the future require visa support",
    "Do you require visa support",
    "State",
]

# Sets the React-controlled value and the paired hidden selectedLocation field
# that Lever reads on submit. With onlyIfEmpty the visible value is left alone
# when already present, but the hidden field is always written.
_LOCATION_JS = """([val, onlyIfEmpty]) => {
  const container = document.querySelector(
    "li.application-question[data-qa='structured-contact-location-question']");
  const scope = container || document;
  const input = scope.querySelector(
    "input.location-input, input[name='location'], input[data-qa='location-input']");
  if (!input) return false;
  const setter = Object.getOwnPropertyDescriptor(HTMLInputElement.prototype, 'value').set;
  const hasValue = input.value && input.value.trim().length > 0;
  if (!hasValue) {
    setter.call(input, val);
    input.dispatchEvent(new Event('input', { bubbles: true }));
    input.dispatchEvent(new Event('change', { bubbles: true }));
  } else if (onlyIfEmpty) {
    return false;
  }
  const hidden = scope.querySelector("input[name='selectedLocation']");
  if (hidden) {
    setter.call(hidden, JSON.stringify({ name: val }));
    hidden.dispatchEvent(new Event('input', { bubbles: true }));
    hidden.dispatchEvent(new Event('change', { bubbles: true }));
  }
  return true;
}"""


def apply_url(url):
    """Lever posting URL with /apply appended, or None for non-Lever URLs"""
    parts = urlsplit(url or "")
    if "jobs.lever.co" not in (parts.hostname or ""):
        return None
    if "/apply" in parts.path:
        return url
    path = parts.path.rstrip("/") + "/apply"
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


async def _fill_text(ctx, field, value, strategy):
    kind, target = strategy
    if kind == "label":
        return await fill_by_label(ctx, field, target, value)
    if kind == "question":
        return await fill_by_question(ctx, field, target, value)
    return await fill_if_empty(ctx, field, target, value)


async def _fill_chain(ctx, field, value, strategies):
    async def attempt(strategy):
        return await _fill_text(ctx, field, value, strategy)

    return await ctx.first_located(strategies, attempt)


# ========================================
# DEBUG
# ========================================


async def debug_fields(ctx, labels=DEBUG_LABELS):
    """Log what each known question resolves to, without touching anything"""
    for label in labels:
        if await text_anchor(ctx.page, label, ctx.wait("control_visible")) is None:
            log.info("%s[debug] label not visible: %r", ctx.tag, label)
            continue
        target = await question_input(ctx, label)
        kind = await tag_name(target) if target is not None else ""
        value = await safe_input_value(target) if target is not None else ""
        radios = await radio_container(ctx, label)
        radio_visible = False
        if radios is not None:
            radio_visible = await is_visible_within(
                radios.locator("input[type='radio']").first, ctx.wait("control_visible")
            )
        log.info(
            "%s[debug] %r -> %s:%s value:%r radio:%s",
            ctx.tag, label, kind or "input", target is not None, value, radio_visible,
        )


# ========================================
# STEPS
# ========================================


async def _normalize_route(ctx):
    page = ctx.page
    target = apply_url(page.url)
    if target and target != page.url:
        ctx.note("navigating to apply form: %s", target)
        await page.goto(target, wait_until="domcontentloaded")
    ctx.report.url = page.url


async def _fill_identity(ctx, profile):
    first, last = split_name(profile.full_name, profile.first_name, profile.last_name)
    await _fill_chain(ctx, "full_name", profile.full_name, FULL_NAME)
    await _fill_chain(ctx, "email", profile.email, EMAIL)
    await _fill_chain(ctx, "phone", profile.phone, PHONE)
    # Only some postings split the name
    if await text_anchor(ctx.page, "First name", ctx.wait("control_visible")) is not None:
        await fill_by_label(ctx, "first_name", "First name", first)
        await fill_by_label(ctx, "last_name", "Last name", last)


async def _commit_typed(target):
    for event in ("input", "change"):
        await target.dispatch_event(event)
    await target.blur()


async def _inject_location(ctx, value, only_if_empty):
    try:
        return bool(await ctx.page.evaluate(_LOCATION_JS, [value, only_if_empty]))
    except PlaywrightError as e:
        log.debug("Location injection failed: %s", e)
        return False


async def _type_location(ctx, value):
    target = await first_visible(ctx.page, LOCATION_INPUT, ctx.wait("visible"))
    if target is None:
        return ctx.record(result.not_found("location", "typed"))
    try:
        await target.click(timeout=ctx.wait("visible"))
        await target.press("Control+A")
        await target.press_sequentially(value, delay=ctx.wait("type_delay"))
        await target.blur()
    except PlaywrightError as e:
        return ctx.record(result.interaction_failed("location", str(e).splitlines()[0]))
    if await safe_input_value(target):
        return ctx.record(result.filled("location", "typed"))
    return ctx.record(result.verification_mismatch("location", "still empty after typing"))


async def _fill_location(ctx, profile):
    """
    Location is a typeahead backed by a hidden selectedLocation field; a plain
    fill shows the text but is not registered on submit. Each tactic runs only
    if the previous one left the field unfilled, and the hidden field is
    enforced at the end regardless.
    """
    value = profile.location
    if not value:
        return ctx.record(result.no_value("location"))

    async def by_label(label):
        return await fill_by_label(ctx, "location", label, value)

    outcome = await ctx.first_located(LOCATION_LABELS, by_label)
    if not outcome.located:
        outcome = await fill_by_question(ctx, "location", "Current location", value)

    if not outcome.located:
        outcome = await fill_first_visible(ctx, "location", LOCATION_INPUT, value)
        if outcome.status == result.FillStatus.FILLED:
            target = await first_visible(ctx.page, LOCATION_INPUT, ctx.wait("visible"))
            if target is not None:
                try:
                    await _commit_typed(target)
                except PlaywrightError as e:
                    log.debug("Location events failed: %s", e)

    if not outcome.ok and outcome.status != result.FillStatus.KEPT_EXISTING:
        if await _inject_location(ctx, value, only_if_empty=True):
            outcome = ctx.record(result.filled("location", "injected"))
        else:
            await ctx.settle("settle_short")
            outcome = await _type_location(ctx, value)

    await ctx.settle("settle_medium")
    if await _inject_location(ctx, value, only_if_empty=False):
        ctx.record(result.filled("location_selection", "hidden field enforced"))
    else:
        ctx.record(result.not_found("location_selection"))
    return outcome


async def _fill_links(ctx, profile):
    async def linkedin(label):
        return await fill_by_label(ctx, "linkedin", label, profile.linkedin)

    await ctx.first_located(LINKEDIN_LABELS, linkedin)
    await _fill_chain(ctx, "portfolio", profile.portfolio, PORTFOLIO)
    await fill_by_label(ctx, "github", "GitHub", profile.github)


async def _answer_visa(ctx, profile):
    needs_visa = normalize_yes_no(profile.sponsorship_future_answer(), YES)

    async def attempt(question):
        return await answer_radio_question(ctx, "visa_support", question, needs_visa)

    await ctx.first_located(VISA_QUESTIONS, attempt)
    if needs_visa == YES:
        details = profile.work_authorization.current_status
        await fill_by_question(
            ctx, "visa_details", VISA_DETAILS_QUESTION, details, textarea_only=True
        )


async def _answer_state(ctx, profile):
    state = state_name(profile.location)
    if not state:
        return ctx.record(result.no_value("state"))
    return await answer_radio_question(ctx, "state", "State", state)


# ========================================
# ENTRY POINT
# ========================================


async def autofill_lever(page, profile, timing=None, block_rules=None):
    """
    Best-effort fill of a Lever application form. Never submits.

    Set ATS_AUTOFILL_LEVER_DEBUG=1 to log what each known question resolves
    to before anything is filled.
    """
    ctx = FillContext(page, PLATFORM, timing=timing, rules=block_rules)

    await ctx.step("route", _normalize_route, ctx)
    await ctx.settle("settle_long")
    if config.LEVER_DEBUG:
        await ctx.step("debug", debug_fields, ctx)

    await ctx.step("identity", _fill_identity, ctx, profile)
    await ctx.step("location", _fill_location, ctx, profile)
    await ctx.step("links", _fill_links, ctx, profile)
    await ctx.step("salary", _fill_chain, ctx, "salary", profile.defaults.salary_expectation, SALARY)
    await ctx.step("visa", _answer_visa, ctx, profile)
    await ctx.step("state", _answer_state, ctx, profile)
    await ctx.step("resume", upload_file, ctx, "resume", profile.resume_path, RESUME_INPUT)

    ctx.note("autofill completed (best-effort): %s", ctx.report.summary())
    return ctx.report
