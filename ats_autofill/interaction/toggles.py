"""Yes/No question answering"""

import logging

from playwright.async_api import Error as PlaywrightError

from ats_autofill.interaction.radios import select_radio_option
from ats_autofill.perception.blocks import block_identity, question_block
from ats_autofill.perception.locators import is_visible_within, scroll_into_view
from ats_autofill.reasoning.normalize import NO, YES, exact_pattern, normalize_yes_no
from ats_autofill.state import outcome as result

log = logging.getLogger(__name__)


def _button(block, answer):
    return block.locator("button").filter(has_text=exact_pattern(answer)).first


async def _answer_toggle(ctx, field, block, answer):
    """Click the answer's button, using the selected-state reader when there is one"""
    other = NO if answer == YES else YES
    desired = _button(block, answer)
    if not await is_visible_within(desired, ctx.wait("control_visible")):
        return ctx.record(result.not_found(field, f"{answer} button"))

    await scroll_into_view(desired)
    reader = ctx.toggle_state
    if reader is not None:
        await ctx.settle("settle_short")
        mine = await reader.read(desired)
        theirs = await reader.read(_button(block, other))
        log.debug(
            "%s %s | %s selected=%s (bg %s) | %s selected=%s (bg %s)",
            ctx.tag, field, answer, mine.selected, mine.background,
            other, theirs.selected, theirs.background,
        )
        if mine.selected and not theirs.selected:
            return ctx.record(result.already_set(field, answer))

    try:
        await desired.click(force=True)
    except PlaywrightError as e:
        return ctx.record(result.interaction_failed(field, str(e).splitlines()[0]))

    if reader is None:
        return ctx.record(result.filled(field, answer))

    await ctx.settle("toggle_verify")
    after = await reader.read(desired)
    if after.selected:
        return ctx.record(result.filled(field, answer))
    return ctx.record(
        result.verification_mismatch(field, f"{answer} not selected after click (bg {after.background})")
    )


async def answer_yes_no(ctx, question, answer, field=None, fallback=None):
    """
    Answer a Yes/No question.

    Looks for a block holding both a Yes and a No button. A block already
    answered earlier in this run is skipped. Without a toggle pair the answer
    is tried as a radio option, then through `fallback` (an async callable
    returning an outcome) when the adapter supplies one.
    """
    field = field or question
    answer = normalize_yes_no(answer)

    block = await question_block(ctx.page, question, ctx.rule("yes_no"), ctx.wait("anchor"))
    if block is None:
        outcome = await select_radio_option(ctx, field, question, answer)
        if not outcome.located and fallback is not None:
            outcome = await fallback()
        return outcome

    identity = await block_identity(block)
    if identity and identity in ctx.answered_blocks:
        return ctx.record(result.already_set(field, "answered earlier in this run"))

    outcome = await _answer_toggle(ctx, field, block, answer)
    if identity and outcome.status in (
        result.FillStatus.FILLED,
        result.FillStatus.ALREADY_SET,
        result.FillStatus.VERIFICATION_MISMATCH,
    ):
        ctx.answered_blocks.add(identity)
    return outcome
