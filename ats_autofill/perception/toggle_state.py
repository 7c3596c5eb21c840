"""Selected-state detection for button-pair toggles

Some platforms render Yes/No as plain buttons whose only "selected" signal is
client-side styling. A ToggleStateReader turns that styling into a boolean so
the toggle resolver can skip clicks that are already in effect and verify the
clicks it makes. Platforms without a readable signal pass no reader at all.
"""

import logging
from dataclasses import dataclass

from playwright.async_api import Error as PlaywrightError

log = logging.getLogger(__name__)

_STYLE_JS = """el => ({
  background: window.getComputedStyle(el).backgroundColor || '',
  classes: el.className || '',
  ariaPressed: el.getAttribute('aria-pressed') || ''
})"""


@dataclass(frozen=True)
class ToggleState:
    selected: bool
    background: str = ""


class ToggleStateReader:
    """Interface: read whether a toggle button is currently selected"""

    async def read(self, button) -> ToggleState:
        raise NotImplementedError


class ComputedStyleToggleState(ToggleStateReader):
    """
    Selected when the button is painted with the selected background, carries
    a `selected` class, or reports aria-pressed="true".
    """

    def __init__(self, selected_backgrounds=("rgb(0, 0, 0)",)):
        self.selected_backgrounds = tuple(_compact(bg) for bg in selected_backgrounds)

    def interpret(self, raw):
        raw = raw or {}
        background = str(raw.get("background") or "")
        classes = str(raw.get("classes") or "").split()
        selected = (
            _compact(background) in self.selected_backgrounds
            or "selected" in classes
            or str(raw.get("ariaPressed") or "").lower() == "true"
        )
        return ToggleState(selected=selected, background=background)

    async def read(self, button):
        try:
            raw = await button.evaluate(_STYLE_JS)
        except PlaywrightError:
            log.debug("Could not read toggle style")
            return ToggleState(selected=False, background="unknown")
        return self.interpret(raw)


def _compact(color):
    return "".join(color.split()).lower()
