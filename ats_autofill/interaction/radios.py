"""Radio group selection"""

import logging

from playwright.async_api import Error as PlaywrightError

from ats_autofill.perception.blocks import question_block
from ats_autofill.perception.locators import is_visible_within, safe_count, scroll_into_view
from ats_autofill.reasoning.normalize import contains_pattern, exact_pattern
from ats_autofill.state import outcome as result

log = logging.getLogger(__name__)


async def _click_first_visible(ctx, field, candidates):
    """
    Click the first visible locator among candidates.

    Returns an outcome, or None when no candidate was visible.
    """
    failure = None
    for label, locator in candidates:
        if not await is_visible_within(locator, ctx.wait("control_visible")):
            continue
        await scroll_into_view(locator)
        try:
            await locator.click()
        except PlaywrightError as e:
            failure = str(e).splitlines()[0]
            continue
        return ctx.record(result.filled(field, label))
    if failure:
        return ctx.record(result.interaction_failed(field, failure))
    return None


async def select_radio_option(ctx, field, question, option, rule="radio"):
    """
    Pick option inside the question's block: anchored exact text first, then
    substring.
    """
    if not option:
        return ctx.record(result.no_value(field))
    block = await question_block(ctx.page, question, ctx.rule(rule), ctx.wait("anchor"))
    if block is None:
        return ctx.record(result.not_found(field, f"question {question!r}"))

    outcome = await _click_first_visible(
        ctx,
        field,
        [
            (option, block.get_by_text(exact_pattern(option)).first),
            (f"~{option}", block.get_by_text(contains_pattern(option)).first),
        ],
    )
    return outcome or ctx.record(result.not_found(field, f"option {option!r}"))


async def radio_container(ctx, question):
    """A fieldset about the question holding radios, else the radio_group block"""
    fieldset = ctx.page.locator("fieldset", has_text=contains_pattern(question)).first
    if await is_visible_within(fieldset, ctx.wait("visible")):
        if await safe_count(fieldset.locator("input[type='radio']")) > 0:
            return fieldset
    return await question_block(ctx.page, question, ctx.rule("radio_group"), ctx.wait("anchor"))


async def answer_radio_question(ctx, field, question, option):
    """Radio answer matched on the option's <label>, then any exact text"""
    if not option:
        return ctx.record(result.no_value(field))
    container = await radio_container(ctx, question)
    if container is None:
        return ctx.record(result.not_found(field, f"question {question!r}"))

    pattern = exact_pattern(option)
    outcome = await _click_first_visible(
        ctx,
        field,
        [
            (option, container.locator("label").filter(has_text=pattern).first),
            (option, container.get_by_text(pattern).first),
        ],
    )
    return outcome or ctx.record(result.not_found(field, f"option {option!r}"))
