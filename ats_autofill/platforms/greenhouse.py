"""Greenhouse application form autofill"""

import logging
import re

from playwright.async_api import Error as PlaywrightError

from ats_autofill.interaction.comboboxes import select_dropdown_by_label
from ats_autofill.interaction.text_fields import fill_by_label, fill_if_empty, fill_phone
from ats_autofill.interaction.toggles import answer_yes_no
from ats_autofill.interaction.uploads import upload_file
from ats_autofill.perception.locators import is_visible_within, scroll_into_view
from ats_autofill.reasoning.normalize import (
    NO,
    YES,
    as_list,
    disability_options,
    gender_options,
    normalize_yes_no,
    split_name,
    state_options,
    veteran_options,
)
from ats_autofill.state.context import FillContext
from ats_autofill.state.outcome import FillStatus

log = logging.getLogger(__name__)

PLATFORM = "Greenhouse"

NATIVE_AUTOFILL_TOAST = re.compile(r"Autofilled from MyGreenhouse", re.I)
EEO_SECTION = re.compile(r"Voluntary Self-Identification|Gender|Veteran Status|Disability Status", re.I)
COUNTRY_LABEL = re.compile(r"^Country\b", re.I)
STATE_LABEL = re.compile(r"^State\b", re.I)

COUNTRY = "United States"
PHONE = ["input[name='job_application[phone]']", "input[type='tel']"]
RESUME_INPUT = (
    "input[type='file'][name*='resume' i], input[type='file'][id*='resume' i], input[type='file']"
)

# (kind, target) strategies per identity field, most specific first
FIRST_NAME = [
    ("selector", "input[name='job_application[first_name]']"),
    ("selector", "input[name*='first' i]"),
    ("label", "First Name"),
]
LAST_NAME = [
    ("selector", "input[name='job_application[last_name]']"),
    ("selector", "input[name*='last' i]"),
    ("label", "Last Name"),
]
EMAIL = [
    ("selector", "input[name='job_application[email]']"),
    ("selector", "input[type='email']"),
    ("label", "Email"),
]

LOCATION_LABELS = ["Location", "Location (City)", "Current Location"]
LINKEDIN_LABELS = ["LinkedIn", "LinkedIn Profile"]
PORTFOLIO_LABELS = ["Website", "Portfolio"]
GITHUB_LABELS = ["GitHub"]
RACE_LABELS = ["Race", "Please identify your race"]

AUTHORIZED_QUESTIONS = ["Are you authorized to work", "authorized to work"]
SPONSOR_NOW_QUESTIONS = ["Do you require sponsorship"]
SPONSOR_FUTURE_QUESTIONS = ["Will you now or in the future require sponsorship"]
VETERAN_QUESTIONS = ["Do you identify as a veteran", "Are you a veteran"]


class NativeAutofillDetected(Exception):
    """MyGreenhouse filled the form itself; manual fill must stop"""


def _needs_fallback(outcome):
    return not outcome.ok and outcome.status != FillStatus.KEPT_EXISTING


async def native_autofill_visible(ctx):
    toast = ctx.page.get_by_text(NATIVE_AUTOFILL_TOAST).first
    return await is_visible_within(toast, 500)


async def _fill_text(ctx, field, value, strategy):
    kind, target = strategy
    if kind == "label":
        return await fill_by_label(ctx, field, target, value)
    return await fill_if_empty(ctx, field, target, value)


async def _fill_chain(ctx, field, value, strategies):
    async def attempt(strategy):
        return await _fill_text(ctx, field, value, strategy)

    return await ctx.first_located(strategies, attempt)


async def _fill_labels(ctx, field, labels, value):
    async def attempt(label):
        return await fill_by_label(ctx, field, label, value)

    return await ctx.first_located(labels, attempt)


# ========================================
# STEPS
# ========================================


async def _fill_identity(ctx, profile):
    first, last = split_name(profile.full_name, profile.first_name, profile.last_name)
    await _fill_chain(ctx, "first_name", first, FIRST_NAME)
    await _fill_chain(ctx, "last_name", last, LAST_NAME)
    await _fill_chain(ctx, "email", profile.email, EMAIL)
    await fill_phone(ctx, PHONE, profile.phone)


async def _fill_address(ctx, profile):
    country = await select_dropdown_by_label(
        ctx,
        "country",
        "Country",
        [COUNTRY, f"{COUNTRY} (+1)", "+1", "US (+1)"],
        strict=True,
        label_pattern=COUNTRY_LABEL,
    )
    if _needs_fallback(country):
        await fill_by_label(ctx, "country", "Country", COUNTRY)

    states = state_options(profile.location)
    if states:
        state = await select_dropdown_by_label(
            ctx, "state", "State", states, strict=True, label_pattern=STATE_LABEL
        )
        if _needs_fallback(state):
            await fill_by_label(ctx, "state", "State", states[0])

    async def location_dropdown(label):
        return await select_dropdown_by_label(ctx, "location", label, [profile.location])

    location = await ctx.first_located(LOCATION_LABELS, location_dropdown)
    if _needs_fallback(location) and location.status != FillStatus.NO_VALUE:
        await _fill_labels(ctx, "location", LOCATION_LABELS, profile.location)


async def _fill_links(ctx, profile):
    await _fill_labels(ctx, "linkedin", LINKEDIN_LABELS, profile.linkedin)
    await _fill_labels(ctx, "portfolio", PORTFOLIO_LABELS, profile.portfolio)
    await _fill_labels(ctx, "github", GITHUB_LABELS, profile.github)


async def _upload_resume(ctx, profile):
    outcome = await upload_file(ctx, "resume", profile.resume_path, RESUME_INPUT)
    if outcome.ok or outcome.status == FillStatus.NO_VALUE:
        return outcome
    # Some boards only render the upload widget once scrolled into view
    try:
        await ctx.page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")
    except PlaywrightError:
        log.debug("Scroll to bottom failed")
    await ctx.settle("settle_medium")
    return await upload_file(ctx, "resume", profile.resume_path, RESUME_INPUT)


async def _answer_chain(ctx, field, questions, answer):
    async def attempt(question):
        async def dropdown():
            return await select_dropdown_by_label(ctx, field, question, [answer])

        return await answer_yes_no(ctx, question, answer, field=field, fallback=dropdown)

    return await ctx.first_located(questions, attempt)


async def _answer_yes_no_questions(ctx, profile):
    authorized = normalize_yes_no(profile.authorized_answer(), YES)
    sponsor_now = normalize_yes_no(profile.sponsorship_now_answer(), YES)
    sponsor_future = normalize_yes_no(profile.sponsorship_future_answer(), YES)
    veteran = normalize_yes_no(profile.veteran_answer(), NO)

    await _answer_chain(ctx, "authorized_to_work", AUTHORIZED_QUESTIONS, authorized)
    await _answer_chain(ctx, "sponsorship_now", SPONSOR_NOW_QUESTIONS, sponsor_now)
    await _answer_chain(ctx, "sponsorship_future", SPONSOR_FUTURE_QUESTIONS, sponsor_future)
    await _answer_chain(ctx, "veteran", VETERAN_QUESTIONS, veteran)


async def _fill_eeo(ctx, profile):
    eeo = profile.eeo
    await scroll_into_view(ctx.page.get_by_text(EEO_SECTION).first)

    await select_dropdown_by_label(ctx, "gender", "Gender", gender_options(eeo.gender), exact=True)
    await select_dropdown_by_label(
        ctx, "hispanic_or_latino", "Are you Hispanic/Latino", as_list(eeo.hispanic_or_latino)
    )

    async def race(label):
        return await select_dropdown_by_label(ctx, "race_ethnicity", label, eeo.race_ethnicity)

    await ctx.first_located(RACE_LABELS, race)
    await select_dropdown_by_label(
        ctx, "veteran_status", "Veteran Status", veteran_options(eeo.veteran_status)
    )
    await select_dropdown_by_label(
        ctx, "disability_status", "Disability Status", disability_options(eeo.disability_status)
    )


async def _check_native_autofill(ctx):
    if await native_autofill_visible(ctx):
        raise NativeAutofillDetected()


# ========================================
# ENTRY POINT
# ========================================


async def autofill_greenhouse(page, profile, timing=None, block_rules=None):
    """
    Best-effort fill of a Greenhouse application form. Never submits.

    Stops without touching anything else as soon as the MyGreenhouse
    "Autofilled" toast shows up, and says so in the report.
    """
    ctx = FillContext(page, PLATFORM, timing=timing, rules=block_rules)
    await ctx.settle("settle_long")

    try:
        await _check_native_autofill(ctx)
        ctx.note("running manual autofill")
        await ctx.step("identity", _fill_identity, ctx, profile)
        await _check_native_autofill(ctx)
    except NativeAutofillDetected:
        ctx.report.native_autofill_detected = True
        ctx.note("MyGreenhouse already autofilled; skipping manual fill")
        return ctx.report

    await ctx.step("address", _fill_address, ctx, profile)
    await ctx.step("links", _fill_links, ctx, profile)
    await ctx.step("resume", _upload_resume, ctx, profile)
    await ctx.step("yes/no questions", _answer_yes_no_questions, ctx, profile)
    if profile.eeo is not None:
        await ctx.step("eeo", _fill_eeo, ctx, profile)
    # Late re-renders sometimes paste the number in twice
    await ctx.step("phone re-check", fill_phone, ctx, PHONE, profile.phone)

    ctx.note("autofill completed (best-effort): %s", ctx.report.summary())
    return ctx.report
