"""Combobox, typeahead and dropdown selection"""

import logging

from playwright.async_api import Error as PlaywrightError

from ats_autofill.perception.blocks import climb, question_block
from ats_autofill.perception.locators import (
    is_visible_within,
    label_anchor,
    label_anchor_matching,
    safe_input_value,
    safe_text,
    scroll_into_view,
)
from ats_autofill.reasoning.normalize import (
    as_list,
    contains_pattern,
    exact_pattern,
    normalize_text,
    word_pattern,
)
from ats_autofill.state import outcome as result

log = logging.getLogger(__name__)

# First typeahead input after the question text, in document order
COMBOBOX_AFTER_XPATH = (
    "xpath=following::input[@role='combobox' or @aria-autocomplete or "
    "contains(translate(@placeholder,'START TYPING','start typing'),'start typing')][1]"
)
COMBOBOX_IN_BLOCK = (
    "input[role='combobox'], input[aria-autocomplete], input[placeholder*='Start typing' i]"
)
OPTION = "[role='option']"

# react-select style dropdowns
MENU = "div.select__menu, [role='listbox'], ul[role='listbox'], div.select__menu-list"
MENU_OPTION = "div.select__option, [role='option']"
DROPDOWN_CONTROL = (
    "div.select__control, [role='combobox'], button[aria-haspopup='listbox'], "
    "input[aria-autocomplete], input[type='search']"
)
DROPDOWN_INPUT = "input[aria-autocomplete], input[type='search'], div.select__input input"
SINGLE_VALUE = ".select__single-value"


# ========================================
# TYPEAHEAD COMBOBOX
# ========================================


async def combobox_input(ctx, question):
    """
    The combobox that belongs to a question.

    Takes the first typeahead input following the question text so two
    adjacent questions never share one input; falls back to the first
    typeahead inside the question's block.
    """
    block = await question_block(ctx.page, question, ctx.rule("generic"), ctx.wait("anchor"))
    if block is None:
        return None

    timeout = ctx.wait("combobox_visible")
    question_text = block.get_by_text(contains_pattern(question)).first
    after = question_text.locator(COMBOBOX_AFTER_XPATH)
    if await is_visible_within(after, timeout):
        return after

    fallback = block.locator(COMBOBOX_IN_BLOCK).first
    if await is_visible_within(fallback, timeout):
        return fallback
    return None


async def _click_option(option, timeout_ms, force=False):
    if not await is_visible_within(option, timeout_ms):
        return False
    try:
        await option.click(force=force)
        return True
    except PlaywrightError as e:
        log.debug("Option click failed: %s", e)
        return False


async def fill_combobox_for_question(ctx, field, question, value):
    """
    Type a value into a question's combobox once and confirm a suggestion.

    Strict chain: option containing the value -> first rendered option ->
    ArrowDown + Enter on the input. The input is never left typed but
    unconfirmed.
    """
    if not value:
        return ctx.record(result.no_value(field))
    page = ctx.page
    box = await combobox_input(ctx, question)
    if box is None:
        return ctx.record(result.not_found(field, f"question {question!r}"))

    try:
        await scroll_into_view(box)
        await box.click()
        await box.fill("")
        await box.press_sequentially(value, delay=ctx.wait("type_delay"))
    except PlaywrightError as e:
        return ctx.record(result.interaction_failed(field, str(e).splitlines()[0]))

    options = page.locator(OPTION)
    options_visible = await is_visible_within(options.first, ctx.wait("options_wait"))

    if options_visible:
        matching = options.filter(has_text=contains_pattern(value)).first
        if await _click_option(matching, ctx.wait("option_visible")):
            return ctx.record(result.filled(field, "matching option"))

        if await _click_option(options.first, ctx.wait("option_visible")):
            return ctx.record(result.filled(field, "first option"))

    try:
        await box.press("ArrowDown")
        await box.press("Enter")
    except PlaywrightError as e:
        return ctx.record(result.interaction_failed(field, str(e).splitlines()[0]))
    return ctx.record(result.filled(field, "keyboard"))


# ========================================
# LABELLED DROPDOWNS
# ========================================


def _menu_tiers(page, menu, option, exact):
    if exact:
        return [
            menu.get_by_role("option", name=option, exact=True),
            menu.get_by_text(exact_pattern(option)),
            page.locator(MENU_OPTION).filter(has_text=exact_pattern(option)),
        ]
    return [
        menu.get_by_text(exact_pattern(option)),
        menu.get_by_text(word_pattern(option)),
        menu.get_by_text(contains_pattern(option)),
        page.locator(MENU_OPTION).filter(has_text=exact_pattern(option)),
        page.locator(MENU_OPTION).filter(has_text=word_pattern(option)),
    ]


async def pick_option_from_open_menu(ctx, option, exact=False):
    """Click the best match for option in the open menu. Returns True on a click."""
    page = ctx.page
    menu = page.locator(MENU).first
    if not await is_visible_within(menu, ctx.wait("menu_wait")):
        return False
    for tier in _menu_tiers(page, menu, option, exact):
        if await _click_option(tier.first, ctx.wait("option_visible"), force=True):
            return True
    return False


async def current_selection(container):
    """Whatever the dropdown in container already shows, or an empty string"""
    select_value = await safe_input_value(container.locator("select").first, 500)
    if select_value:
        return select_value
    single = await safe_text(container.locator(SINGLE_VALUE).first, 500)
    if single:
        return single
    return await safe_input_value(container.locator(DROPDOWN_INPUT).first, 500)


async def _select_native(ctx, container, options):
    select = container.locator("select").first
    if not await is_visible_within(select, ctx.wait("control_visible")):
        return None
    for option in options:
        try:
            await select.select_option(label=option, timeout=ctx.wait("control_visible"))
            return option
        except PlaywrightError:
            continue
    return None


async def select_dropdown_by_label(
    ctx, field, label, options, strict=False, exact=False, label_pattern=None
):
    """
    Select one of options in the dropdown under a label.

    Finds the label (a <label> first, else any text), then the nearest
    container that holds a select-like control. A container that already shows
    a value is left alone. Native <select> is tried by option label; otherwise
    the control is opened and each candidate is typed and picked from the open
    menu. Without strict, ArrowDown + Enter confirms the first suggestion when
    no menu entry matched. Escape closes the menu when nothing was picked.
    """
    options = as_list(options)
    if not options:
        return ctx.record(result.no_value(field))
    page = ctx.page
    timeout = ctx.wait("visible")

    if label_pattern is not None:
        anchor = await label_anchor_matching(page, label_pattern, timeout)
    else:
        anchor = await label_anchor(page, label, timeout)
    if anchor is None:
        return ctx.record(result.not_found(field, f"label {label!r}"))
    await scroll_into_view(anchor)

    container = await climb(anchor, ctx.rule("select_container"))
    if container is None:
        return ctx.record(result.not_found(field, f"no dropdown under {label!r}"))

    existing = await current_selection(container)
    if existing:
        wanted = {normalize_text(o) for o in options}
        if normalize_text(existing) in wanted:
            return ctx.record(result.already_set(field, existing))
        return ctx.record(result.kept_existing(field, existing))

    chosen = await _select_native(ctx, container, options)
    if chosen:
        return ctx.record(result.filled(field, chosen))

    control = container.locator(DROPDOWN_CONTROL).first
    if not await is_visible_within(control, ctx.wait("control_visible")):
        return ctx.record(result.not_found(field, "no dropdown control"))
    try:
        await control.click()
    except PlaywrightError as e:
        return ctx.record(result.interaction_failed(field, str(e).splitlines()[0]))

    for option in options:
        typed = False
        search = container.locator(DROPDOWN_INPUT).first
        if await is_visible_within(search, ctx.wait("control_visible")):
            try:
                await search.fill("")
                await search.press_sequentially(option, delay=ctx.wait("type_delay"))
                typed = True
            except PlaywrightError as e:
                log.debug("Typing %r into dropdown failed: %s", option, e)
            await ctx.settle("settle_tiny")

        if await pick_option_from_open_menu(ctx, option, exact=exact):
            return ctx.record(result.filled(field, option))

        if typed and not strict and not exact:
            try:
                await page.keyboard.press("ArrowDown")
                await page.keyboard.press("Enter")
                return ctx.record(result.filled(field, f"{option} (keyboard)"))
            except PlaywrightError as e:
                log.debug("Keyboard confirm failed: %s", e)

    try:
        await page.keyboard.press("Escape")
    except PlaywrightError:
        log.debug("Escape failed while closing menu")
    return ctx.record(result.not_found(field, f"no option among {options}"))
