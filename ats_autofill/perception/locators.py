"""Platform-agnostic locator primitives.

Everything here works on Playwright locators, which re-query the live
document on every use; nothing holds on to an element handle. Any Playwright
error (timeout, detached node, navigation mid-query) is treated as "could not
resolve" and turned into an empty result.
"""

import logging

from playwright.async_api import Error as PlaywrightError

from ats_autofill.reasoning.normalize import contains_pattern

log = logging.getLogger(__name__)


async def is_visible_within(locator, timeout_ms):
    """Wait up to timeout_ms for the locator to become visible"""
    try:
        await locator.wait_for(state="visible", timeout=timeout_ms)
        return True
    except PlaywrightError:
        return False


async def safe_count(locator, default=0):
    try:
        return await locator.count()
    except PlaywrightError:
        return default


async def safe_input_value(locator, timeout_ms=None):
    """Current input value, trimmed, or "" when it cannot be read"""
    try:
        value = await locator.input_value(timeout=timeout_ms)
    except PlaywrightError:
        return ""
    return (value or "").strip()


async def safe_text(locator, timeout_ms=None):
    try:
        text = await locator.text_content(timeout=timeout_ms)
    except PlaywrightError:
        return ""
    return (text or "").strip()


async def scroll_into_view(locator, timeout_ms=2000):
    try:
        await locator.scroll_into_view_if_needed(timeout=timeout_ms)
    except PlaywrightError:
        log.debug("scroll_into_view failed, continuing")


async def first_visible(page, selectors, timeout_ms):
    """
    Evaluate selectors in order, return the first whose first match becomes
    visible within timeout_ms. Returns None when nothing is visible.
    """
    for selector in selectors:
        locator = page.locator(selector).first
        if await is_visible_within(locator, timeout_ms):
            return locator
    return None


async def read_value(page, selectors, timeout_ms):
    """
    Non-mutating read of the first visible field's value.

    Used to decide whether a field is already populated and to detect that a
    platform's own autofill has already run.
    """
    locator = await first_visible(page, selectors, timeout_ms)
    if locator is None:
        return ""
    return await safe_input_value(locator, timeout_ms)


async def text_anchor(scope, text, timeout_ms):
    """First visible element containing text (case-insensitive), or None"""
    if not text:
        return None
    locator = scope.get_by_text(contains_pattern(text)).first
    if await is_visible_within(locator, timeout_ms):
        return locator
    return None


async def label_anchor(page, text, timeout_ms):
    """Prefer a <label> containing text, else any visible text match"""
    label = page.locator("label", has_text=contains_pattern(text)).first
    if await is_visible_within(label, timeout_ms):
        return label
    return await text_anchor(page, text, timeout_ms)


async def label_anchor_matching(page, pattern, timeout_ms):
    """Same as label_anchor, for a caller-built pattern (anchored labels)"""
    label = page.locator("label", has_text=pattern).first
    if await is_visible_within(label, timeout_ms):
        return label
    fallback = page.get_by_text(pattern).first
    if await is_visible_within(fallback, timeout_ms):
        return fallback
    return None


async def safe_attribute(locator, name, timeout_ms=None):
    try:
        return await locator.get_attribute(name, timeout=timeout_ms)
    except PlaywrightError:
        return None


async def tag_name(locator):
    try:
        return (await locator.evaluate("el => el.tagName") or "").lower()
    except PlaywrightError:
        return ""
