"""Question block detection

A question block is the smallest ancestor of a question's text that holds the
question's control and as little else as possible. The page gives no schema,
so the block is found by climbing from the text and measuring each level
against a BlockRule for the field kind.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from playwright.async_api import Error as PlaywrightError

from ats_autofill.perception.locators import safe_count, text_anchor

log = logging.getLogger(__name__)

# Snapshot used to recognise the same block twice within one run
_IDENTITY_JS = """el => {
  const r = el.getBoundingClientRect();
  const text = (el.textContent || '').trim().slice(0, 80);
  return text + '@' + Math.round(r.top) + ',' + Math.round(r.left);
}"""


@dataclass(frozen=True)
class BlockRule:
    """Ceiling table entry for one field kind"""

    count_selector: str
    ceiling: Optional[int]
    floor: int = 0
    max_height: int = 10
    ancestor_tags: Tuple[str, ...] = ("div", "section")
    limits: Tuple[Tuple[str, int], ...] = ()
    requires: Tuple[str, ...] = ()

    def selectors(self):
        """Every selector that has to be counted at one level"""
        seen = [self.count_selector]
        for selector, _ in self.limits:
            if selector not in seen:
                seen.append(selector)
        for selector in self.requires:
            if selector not in seen:
                seen.append(selector)
        return seen

    def xpath(self, level):
        tags = " or ".join(f"self::{tag}" for tag in self.ancestor_tags)
        return f"xpath=ancestor::*[{tags}][{level}]"

    def accepts(self, measurements):
        """Pure check of one level's selector counts against this rule"""
        if measurements is None:
            return False
        count = measurements.get(self.count_selector, 0)
        if count < self.floor:
            return False
        if self.ceiling is not None and count > self.ceiling:
            return False
        for selector, ceiling in self.limits:
            if measurements.get(selector, 0) > ceiling:
                return False
        for selector in self.requires:
            if measurements.get(selector, 0) < 1:
                return False
        return True


def select_level(rule, measurements_per_level):
    """
    Pick the first (smallest) qualifying ancestor level, 1-based.

    measurements_per_level[i] holds the counts for level i + 1, or None when
    counting failed there; a failed level never qualifies. Levels beyond
    rule.max_height are ignored. Returns None when no level qualifies.
    """
    for level, measurements in enumerate(measurements_per_level, start=1):
        if level > rule.max_height:
            break
        if rule.accepts(measurements):
            return level
    return None


async def measure(block, rule):
    """Selector counts inside block, or None if any count raised"""
    counts = {}
    for selector in rule.selectors():
        try:
            counts[selector] = await block.locator(selector).count()
        except PlaywrightError:
            return None
    return counts


async def climb(anchor, rule):
    """Climb from an anchor element to the first level satisfying rule"""
    measurements = []
    for level in range(1, rule.max_height + 1):
        block = anchor.locator(rule.xpath(level))
        # Past the document root
        if await safe_count(block) == 0:
            return None
        measurements.append(await measure(block.first, rule))
        if select_level(rule, measurements) == level:
            return block.first
    return None


async def question_block(page, text, rule, timeout_ms, scope=None):
    """
    Find the block for the question whose visible text contains `text`.

    Returns a Locator for the block, or None when the text is not on the page
    or no ancestor up to rule.max_height satisfies the rule.
    """
    anchor = await text_anchor(scope or page, text, timeout_ms)
    if anchor is None:
        return None
    block = await climb(anchor, rule)
    if block is None:
        log.debug("No block under rule %s for %r", rule.count_selector, text)
    return block


async def block_identity(block):
    """Text prefix plus position, or None if the block is gone"""
    try:
        return await block.evaluate(_IDENTITY_JS)
    except PlaywrightError:
        return None
