"""Text field filling

Every fill here is fill-only-if-empty: a value that a human or the platform
already typed is left alone. The one caller that overwrites is the all-caps
name correction, which passes overwrite=True explicitly.
"""

import logging
import re

from playwright.async_api import Error as PlaywrightError

from ats_autofill.perception.blocks import question_block
from ats_autofill.perception.locators import (
    first_visible,
    is_visible_within,
    label_anchor,
    safe_attribute,
    safe_count,
    safe_input_value,
    scroll_into_view,
    tag_name,
)
from ats_autofill.reasoning.normalize import digits_only
from ats_autofill.state import outcome as result

log = logging.getLogger(__name__)

_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")

# Attributes that usually carry a field's purpose on unlabeled inputs
_MATCH_ATTRIBUTES_JS = """els => els.map(el => [
  el.getAttribute('name'), el.getAttribute('id'), el.getAttribute('aria-label'),
  el.getAttribute('placeholder'), el.getAttribute('data-qa')
].map(v => (v || '').toLowerCase()).join(' '))"""


async def fill_locator(ctx, field, locator, value, overwrite=False):
    """Fill an already-resolved, visible input"""
    existing = await safe_input_value(locator)
    if existing and not overwrite:
        if existing == value.strip():
            return ctx.record(result.already_set(field))
        return ctx.record(result.kept_existing(field, existing))
    if existing == value:
        return ctx.record(result.already_set(field))

    try:
        await locator.fill(value)
    except PlaywrightError as e:
        return ctx.record(result.interaction_failed(field, str(e).splitlines()[0]))
    detail = f"{existing!r} -> {value!r}" if existing else ""
    return ctx.record(result.filled(field, detail))


async def fill_if_empty(ctx, field, selector, value):
    """Fill the first match of one selector if it is visible and empty"""
    return await fill_first_visible(ctx, field, [selector], value)


async def fill_first_visible(ctx, field, selectors, value, overwrite=False):
    """
    Fill the first visible match among selectors.

    Without overwrite a non-empty field is reported as KEPT_EXISTING (or
    ALREADY_SET when it already holds the value) and left untouched.
    """
    if not value:
        return ctx.record(result.no_value(field))
    locator = await first_visible(ctx.page, selectors, ctx.wait("visible"))
    if locator is None:
        return ctx.record(result.not_found(field))
    return await fill_locator(ctx, field, locator, value, overwrite=overwrite)


async def fill_by_label(ctx, field, label_text, value):
    """
    Fill the input a label points at.

    A label with for= resolves to that id; otherwise the first input or
    textarea in the label's nearest div/section container.
    """
    if not value:
        return ctx.record(result.no_value(field))
    timeout = ctx.wait("visible")
    label = await label_anchor(ctx.page, label_text, timeout)
    if label is None:
        return ctx.record(result.not_found(field, f"label {label_text!r}"))

    for_id = await safe_attribute(label, "for")
    if for_id:
        target = ctx.page.locator(f"[id='{for_id}']").first
    else:
        container = label.locator("xpath=ancestor::*[self::div or self::section][1]")
        target = container.locator("input, textarea").first

    if not await is_visible_within(target, timeout):
        return ctx.record(result.not_found(field, f"no input for {label_text!r}"))
    return await fill_locator(ctx, field, target, value)


async def pick_input_in_block(block, question, textarea_only=False):
    """
    The input in a block that best matches the question.

    With several inputs, prefer the one whose name/id/aria-label/placeholder/
    data-qa contains a word (3+ chars) of the question, else the first.
    """
    inputs = block.locator("textarea" if textarea_only else "input, textarea")
    count = await safe_count(inputs)
    if count == 0:
        return None
    if count == 1:
        return inputs.first

    tokens = [t for t in _TOKEN_SPLIT.split(question.lower()) if len(t) >= 3]
    try:
        described = await inputs.evaluate_all(_MATCH_ATTRIBUTES_JS)
    except PlaywrightError:
        return inputs.first
    for idx, combined in enumerate(described):
        if any(token in combined for token in tokens):
            return inputs.nth(idx)
    return inputs.first


async def question_input(ctx, question, textarea_only=False):
    """Resolve the input next to a question, by label for= then block climbing"""
    page = ctx.page
    timeout = ctx.wait("control_visible")

    label = page.locator("label", has_text=re.compile(re.escape(question), re.I)).first
    if await is_visible_within(label, timeout):
        for_id = await safe_attribute(label, "for")
        if for_id:
            target = page.locator(f"[id='{for_id}']").first
            if await is_visible_within(target, timeout):
                if not textarea_only or await tag_name(target) == "textarea":
                    return target

    block = await question_block(page, question, ctx.rule("field"), ctx.wait("anchor"))
    if block is None:
        return None
    target = await pick_input_in_block(block, question, textarea_only=textarea_only)
    if target is not None and await is_visible_within(target, timeout):
        return target
    return None


async def fill_by_question(ctx, field, question, value, textarea_only=False):
    """Fill the input (or textarea) that belongs to a free-text question"""
    if not value:
        return ctx.record(result.no_value(field))
    target = await question_input(ctx, question, textarea_only=textarea_only)
    if target is None:
        return ctx.record(result.not_found(field, f"question {question!r}"))
    if await tag_name(target) not in ("input", "textarea"):
        return ctx.record(result.not_found(field, "not a text control"))
    await scroll_into_view(target)
    return await fill_locator(ctx, field, target, value)


async def fill_phone(ctx, selectors, phone, field="phone"):
    """
    Fill a phone field, repairing one known platform autofill bug.

    Empty -> fill. Existing digits equal to the target digits twice over (the
    number was pasted in twice) -> rewrite. Anything else is kept.
    """
    if not phone:
        return ctx.record(result.no_value(field))
    locator = await first_visible(ctx.page, selectors, ctx.wait("visible"))
    if locator is None:
        return ctx.record(result.not_found(field))

    target = digits_only(phone)
    existing = digits_only(await safe_input_value(locator))
    if existing:
        if target and existing == target:
            return ctx.record(result.already_set(field))
        if target and existing == target + target:
            return await fill_locator(ctx, field, locator, phone, overwrite=True)
        return ctx.record(result.kept_existing(field, existing))
    return await fill_locator(ctx, field, locator, phone)
