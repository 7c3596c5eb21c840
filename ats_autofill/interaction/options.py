"""Clicking options that are rendered directly on the page"""

import logging

from playwright.async_api import Error as PlaywrightError

from ats_autofill.perception.locators import first_visible, is_visible_within, scroll_into_view
from ats_autofill.reasoning.normalize import as_list, contains_pattern, exact_pattern
from ats_autofill.state import outcome as result

log = logging.getLogger(__name__)


async def click_visible_option(ctx, field, candidates):
    """
    Click a tile/button anywhere on the page whose text matches a candidate.

    Candidates are tried in order, each exact (anchored) first, then as a
    substring. Stops at the first successful click.
    """
    candidates = as_list(candidates)
    if not candidates:
        return ctx.record(result.no_value(field))

    page = ctx.page
    failure = None
    for candidate in candidates:
        for pattern in (exact_pattern(candidate), contains_pattern(candidate)):
            option = page.get_by_text(pattern).first
            if not await is_visible_within(option, ctx.wait("option_visible")):
                continue
            await scroll_into_view(option)
            try:
                await option.click()
            except PlaywrightError as e:
                failure = str(e).splitlines()[0]
                continue
            return ctx.record(result.filled(field, candidate))

    if failure:
        return ctx.record(result.interaction_failed(field, failure))
    return ctx.record(result.not_found(field, f"none of {candidates}"))


async def click_first_visible(ctx, field, selectors):
    """Click the first visible match, e.g. to expand a collapsed section"""
    target = await first_visible(ctx.page, selectors, ctx.wait("visible"))
    if target is None:
        return ctx.record(result.not_found(field))
    try:
        await target.click()
    except PlaywrightError as e:
        return ctx.record(result.interaction_failed(field, str(e).splitlines()[0]))
    await ctx.settle("settle_short")
    return ctx.record(result.filled(field))
