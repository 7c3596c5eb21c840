"""Ashby application form autofill"""

import logging
from urllib.parse import urlsplit, urlunsplit

from playwright.async_api import Error as PlaywrightError

from ats_autofill.interaction.comboboxes import fill_combobox_for_question
from ats_autofill.interaction.options import click_first_visible, click_visible_option
from ats_autofill.interaction.radios import select_radio_option
from ats_autofill.interaction.text_fields import fill_first_visible
from ats_autofill.interaction.toggles import answer_yes_no
from ats_autofill.interaction.uploads import upload_file
from ats_autofill.perception.locators import read_value
from ats_autofill.perception.toggle_state import ComputedStyleToggleState
from ats_autofill.reasoning.normalize import (
    NO,
    YES,
    as_list,
    disability_options,
    format_us_phone,
    gender_options,
    looks_all_caps_name,
    normalize_yes_no,
    split_name,
    to_proper_name_case,
    veteran_options,
)
from ats_autofill.state.context import FillContext
from ats_autofill.state.outcome import FillStatus

log = logging.getLogger(__name__)

PLATFORM = "Ashby"

# ========================================
# SELECTORS
# ========================================
NAME = [
    "input[autocomplete='name']",
    "input[name='name']",
    "input[placeholder*='Name' i]",
    "input[id*='name' i]",
]
FIRST_NAME = [
    "input[autocomplete='given-name']",
    "input[name*='first' i]",
    "input[placeholder*='First' i]",
    "input[id*='first' i]",
]
LAST_NAME = [
    "input[autocomplete='family-name']",
    "input[name*='last' i]",
    "input[placeholder*='Last' i]",
    "input[id*='last' i]",
]
EMAIL = [
    "input[type='email']",
    "input[autocomplete='email']",
    "input[name='email']",
    "input[id*='email' i]",
]
PHONE = [
    "input[type='tel']",
    "input[autocomplete='tel']",
    "input[name='phone']",
    "input[id*='phone' i]",
    "input[placeholder*='phone' i]",
]
LINKEDIN = [
    "input[name*='linkedin' i]",
    "input[placeholder*='LinkedIn' i]",
    "input[id*='linkedin' i]",
]
GITHUB = ["input[name*='github' i]", "input[placeholder*='GitHub' i]"]
PORTFOLIO = [
    "input[name*='portfolio' i]",
    "input[name*='website' i]",
    "input[placeholder*='Portfolio' i]",
    "input[placeholder*='Website' i]",
]
EEO_EXPANDERS = [
    "button:has-text('Voluntary')",
    "button:has-text('Self-Identification')",
    "button:has-text('Equal Opportunity')",
    "button:has-text('EEO')",
]

# ========================================
# QUESTION PHRASINGS
# ========================================
LOCATION_QUESTIONS = ["Current Location", "Location", "Where are you located", "City"]
WORK_AUTH_QUESTIONS = [
    "What is your current U.S. work authorization status",
    "current U.S. work authorization status",
    "U.S. work authorization status",
]
AUTHORIZED_QUESTIONS = ["Are you authorized to work", "authorized to work"]
SPONSOR_NOW_QUESTIONS = ["Do you require sponsorship"]
SPONSOR_FUTURE_QUESTIONS = ["Will you now or in the future require sponsorship"]
VETERAN_QUESTIONS = ["Do you identify as a veteran", "Are you a veteran"]
RELOCATE_QUESTIONS = [
    "Are you willing to relocate",
    "Are you willing to commute",
    "willing to relocate",
    "willing to commute",
]
# Most specific first
OFFICE_QUESTIONS = [
    "Mondays and Thursdays",
    "El Segundo",
    "San Francisco",
    "Are you excited to work from our",
    "Are you excited to work in our office",
    "excited to work from our",
    "excited to work in our office",
]
EXPERIENCE_QUESTION = (
    "How many years of professional (paid) experience do you have building "
    "production full-stack applications"
)
EXPERIENCE_ANSWER = "I'm an expert (5+ years)"


def application_url(url):
    """
    Canonical /{company}/{job}/application URL for an Ashby posting.

    Returns None for non-Ashby URLs and paths too short to carry a job id.
    """
    parts = urlsplit(url or "")
    if "ashbyhq.com" not in (parts.hostname or ""):
        return None
    if parts.path.rstrip("/").endswith("/application"):
        return url
    segments = [s for s in parts.path.split("/") if s]
    if len(segments) < 2:
        return None
    path = f"/{segments[0]}/{segments[1]}/application"
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


def proper_name(profile, existing):
    """The mixed-case name to write over an ALL CAPS one"""
    name = profile.full_name or existing
    if looks_all_caps_name(name):
        return to_proper_name_case(name)
    return name


# ========================================
# STEPS
# ========================================


async def _normalize_route(ctx):
    page = ctx.page
    current = page.url
    target = application_url(current)
    if target and target != current:
        ctx.note("navigating to application form: %s", target)
        await page.goto(target, wait_until="domcontentloaded")
        await ctx.settle("settle_short")
    ctx.report.url = page.url


async def _wait_for_fields(ctx):
    try:
        await ctx.page.wait_for_selector("input", timeout=ctx.wait("fields_ready"))
    except PlaywrightError:
        ctx.warn("could not confirm fields appeared (continuing anyway)")


async def _fix_all_caps_name(ctx, profile):
    existing = await read_value(ctx.page, NAME, ctx.wait("visible"))
    if not looks_all_caps_name(existing):
        return None
    corrected = proper_name(profile, existing)
    ctx.note("fixing ALL CAPS name %r -> %r", existing, corrected)
    return await fill_first_visible(ctx, "full_name", NAME, corrected, overwrite=True)


async def _fill_identity(ctx, profile):
    first, last = split_name(profile.full_name, profile.first_name, profile.last_name)

    if await _fix_all_caps_name(ctx, profile) is None:
        await fill_first_visible(ctx, "full_name", NAME, profile.full_name)
    await fill_first_visible(ctx, "first_name", FIRST_NAME, first)
    await fill_first_visible(ctx, "last_name", LAST_NAME, last)
    await fill_first_visible(ctx, "email", EMAIL, profile.email)

    phone = await fill_first_visible(ctx, "phone", PHONE, profile.phone)
    formatted = format_us_phone(profile.phone)
    retry = not phone.located or phone.status == FillStatus.INTERACTION_FAILED
    if retry and formatted != profile.phone:
        await fill_first_visible(ctx, "phone", PHONE[:3], formatted)


async def _fill_links(ctx, profile):
    await fill_first_visible(ctx, "linkedin", LINKEDIN, profile.linkedin)
    await fill_first_visible(ctx, "github", GITHUB, profile.github)
    await fill_first_visible(ctx, "portfolio", PORTFOLIO, profile.portfolio)


async def _fill_dropdowns(ctx, profile):
    await ctx.settle("settle_long")

    async def location(question):
        return await fill_combobox_for_question(ctx, "location", question, profile.location)

    await ctx.first_located(LOCATION_QUESTIONS, location)

    await ctx.settle("settle_medium")
    status = profile.work_authorization.current_status

    async def work_auth(question):
        return await fill_combobox_for_question(ctx, "work_authorization_status", question, status)

    await ctx.first_located(WORK_AUTH_QUESTIONS, work_auth)


async def _answer_chain(ctx, field, questions, answer):
    async def attempt(question):
        return await answer_yes_no(ctx, question, answer, field=field)

    return await ctx.first_located(questions, attempt)


async def _answer_yes_no_questions(ctx, profile):
    authorized = normalize_yes_no(profile.authorized_answer(), YES)
    sponsor_now = normalize_yes_no(profile.sponsorship_now_answer(), YES)
    sponsor_future = normalize_yes_no(profile.sponsorship_future_answer(), YES)
    veteran = normalize_yes_no(profile.veteran_answer(), NO)
    relocate = normalize_yes_no(profile.willing_to_relocate_or_commute, YES)

    await _answer_chain(ctx, "authorized_to_work", AUTHORIZED_QUESTIONS, authorized)
    await _answer_chain(ctx, "sponsorship_now", SPONSOR_NOW_QUESTIONS, sponsor_now)
    await _answer_chain(ctx, "sponsorship_future", SPONSOR_FUTURE_QUESTIONS, sponsor_future)
    await _answer_chain(ctx, "veteran", VETERAN_QUESTIONS, veteran)
    await _answer_chain(ctx, "relocate_or_commute", RELOCATE_QUESTIONS, relocate)

    office = await _answer_chain(ctx, "office_excitement", OFFICE_QUESTIONS, relocate)
    if not office.located:
        ctx.note("no office question on this form")


async def _fill_eeo(ctx, profile):
    eeo = profile.eeo
    await click_first_visible(ctx, "eeo_section", EEO_EXPANDERS)
    # Normalized phrasing first, then the candidate's own wording
    await click_visible_option(ctx, "gender", gender_options(eeo.gender) + as_list(eeo.gender))
    await click_visible_option(ctx, "race_ethnicity", eeo.race_ethnicity)
    await click_visible_option(ctx, "hispanic_or_latino", eeo.hispanic_or_latino)
    await click_visible_option(
        ctx, "veteran_status", veteran_options(eeo.veteran_status) + as_list(eeo.veteran_status)
    )
    await click_visible_option(
        ctx,
        "disability_status",
        disability_options(eeo.disability_status) + as_list(eeo.disability_status),
    )


# ========================================
# ENTRY POINT
# ========================================


async def autofill_ashby(page, profile, timing=None, block_rules=None):
    """
    Best-effort fill of an Ashby application form. Never submits.

    Returns the AutofillReport for this run.
    """
    ctx = FillContext(
        page, PLATFORM, timing=timing, rules=block_rules, toggle_state=ComputedStyleToggleState()
    )
    ctx.note("current url: %s", page.url)

    await ctx.step("route", _normalize_route, ctx)
    await ctx.step("wait for fields", _wait_for_fields, ctx)
    await ctx.step("identity", _fill_identity, ctx, profile)
    await ctx.step("links", _fill_links, ctx, profile)
    await ctx.step("resume", upload_file, ctx, "resume", profile.resume_path)
    await ctx.step("dropdowns", _fill_dropdowns, ctx, profile)
    await ctx.step("yes/no questions", _answer_yes_no_questions, ctx, profile)
    await ctx.step(
        "experience", select_radio_option, ctx, "experience", EXPERIENCE_QUESTION, EXPERIENCE_ANSWER
    )
    if profile.eeo is not None:
        await ctx.step("eeo", _fill_eeo, ctx, profile)
    # Résumé parsing can put the name back in capitals
    await ctx.step("name re-check", _fix_all_caps_name, ctx, profile)

    ctx.note("autofill completed (best-effort): %s", ctx.report.summary())
    return ctx.report
