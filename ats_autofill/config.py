"""Configuration, timing profiles and block ceilings for ATS autofill"""

import logging
import os
import platform
from pathlib import Path

from ats_autofill.perception.blocks import BlockRule

log = logging.getLogger(__name__)

# ========================================
# ENVIRONMENT
# ========================================
TIMING_ENV_VAR = "ATS_AUTOFILL_TIMING"
LOG_LEVEL = os.environ.get("ATS_AUTOFILL_LOG_LEVEL", "INFO").upper()
RUN_LOG_PATH = Path(os.environ.get("ATS_AUTOFILL_RUN_LOG", "autofill_log.jsonl"))
LEVER_DEBUG = os.environ.get("ATS_AUTOFILL_LEVER_DEBUG", "") == "1"
BROWSER_DATA_DIR = Path(os.environ.get("ATS_AUTOFILL_BROWSER_DATA", "./browser_data"))

# ========================================
# PLATFORM IDENTIFICATION
# ========================================
# Hostname substring -> adapter name
ATS_HOSTS = {
    "greenhouse.io": "greenhouse",
    "jobs.lever.co": "lever",
    "ashbyhq.com": "ashby",
}

# ========================================
# TIMING PROFILES
# ========================================
# All values are in milliseconds (ms).
# - default: Linux/Windows desktop browsers
# - constrained: slower environments (macOS runners, throttled VMs) where
#   re-renders and network-driven option lists take longer to settle

TIMING_PROFILES = {
    "default": {
        # Visibility waits
        "visible": 1200,  # Field lookup by selector
        "anchor": 1500,  # Question text anchor
        "control_visible": 800,  # Controls inside an already-found block
        "combobox_visible": 2500,  # Combobox input before interacting
        "options_wait": 3000,  # Option list after typing
        "option_visible": 1500,  # Individual option
        "menu_wait": 2000,  # Open menu container
        "upload": 7000,  # set_input_files per input
        "fields_ready": 12000,  # Initial wait for the form to render
        # Settle delays after navigation / click / typing
        "settle_tiny": 100,
        "settle_short": 200,
        "settle_medium": 500,
        "settle_long": 1000,
        "type_delay": 35,  # Per-keystroke delay in typeahead inputs
        "toggle_verify": 400,  # Wait after clicking a toggle before verifying
    },
    "constrained": {
        "visible": 2000,
        "anchor": 1500,
        "control_visible": 1200,
        "combobox_visible": 3500,
        "options_wait": 4000,
        "option_visible": 2000,
        "menu_wait": 3000,
        "upload": 7000,
        "fields_ready": 12000,
        "settle_tiny": 200,
        "settle_short": 400,
        "settle_medium": 1000,
        "settle_long": 1500,
        "type_delay": 50,
        "toggle_verify": 400,
    },
}

# ========================================
# SAFETY VALIDATIONS
# ========================================
_MIN_VISIBLE_MS = 200
_VISIBILITY_KEYS = (
    "visible",
    "anchor",
    "control_visible",
    "combobox_visible",
    "options_wait",
    "option_visible",
    "menu_wait",
)


def default_timing_name():
    """Pick a profile name from the environment, then the host OS"""
    requested = os.environ.get(TIMING_ENV_VAR, "").strip().lower()
    if requested in TIMING_PROFILES:
        return requested
    if requested:
        log.warning("Unknown timing profile %r, ignoring %s", requested, TIMING_ENV_VAR)
    if platform.system() == "Darwin":
        return "constrained"
    return "default"


def validate_timing(timing):
    """Return a list of human-readable constraint violations for a profile"""
    violations = []
    required = set(TIMING_PROFILES["default"])
    missing = required - set(timing)
    if missing:
        violations.append(f"missing keys: {', '.join(sorted(missing))}")

    for key, value in timing.items():
        if value < 0:
            violations.append(f"{key}={value}ms < 0ms")
        if key in _VISIBILITY_KEYS and value < _MIN_VISIBLE_MS:
            violations.append(f"{key}={value}ms < {_MIN_VISIBLE_MS}ms minimum")
    return violations


def get_active_timing(name=None):
    """
    Get a timing profile by name (or the environment default).

    Falls back to the default profile when the requested one violates the
    minimum wait constraints.
    """
    name = name or default_timing_name()
    timing = TIMING_PROFILES.get(name)
    if timing is None:
        log.warning("Unknown timing profile %r, using default", name)
        return dict(TIMING_PROFILES["default"])

    violations = validate_timing(timing)
    if violations:
        log.warning("⚠️ Timing profile %r violates constraints, falling back to default:", name)
        for violation in violations:
            log.warning("  - %s", violation)
        return dict(TIMING_PROFILES["default"])

    return dict(timing)


# ========================================
# QUESTION BLOCK CEILINGS
# ========================================
# Climb from the question's text anchor to the first ancestor that satisfies
# the rule for the field kind. No qualifying level -> "not found".

BLOCK_RULES = {
    # Text / combobox questions
    "generic": BlockRule(count_selector="input", ceiling=40, max_height=10),
    # Radio questions with many options (experience ranges, etc.)
    "radio": BlockRule(count_selector="input", ceiling=60, max_height=12),
    # Button-pair toggles: both answers present, only a handful of buttons
    "yes_no": BlockRule(
        count_selector="button",
        ceiling=12,
        max_height=10,
        requires=("button:text-is('Yes')", "button:text-is('No')"),
    ),
    # Single input next to a question, not a radio group
    "field": BlockRule(
        count_selector="input, textarea",
        ceiling=8,
        floor=1,
        max_height=10,
        ancestor_tags=("div", "section", "fieldset"),
        limits=(("input[type='radio']", 2),),
    ),
    # Nearest container that holds any radio input
    "radio_group": BlockRule(
        count_selector="input[type='radio']",
        ceiling=None,
        floor=1,
        max_height=10,
        ancestor_tags=("div", "section", "fieldset"),
    ),
    # Nearest container of a label that holds a select-like control
    "select_container": BlockRule(
        count_selector=(
            "select, [role='combobox'], div.select__control, "
            "button[aria-haspopup='listbox'], input[aria-autocomplete], input[type='search']"
        ),
        ceiling=None,
        floor=1,
        max_height=10,
        ancestor_tags=("div", "section", "fieldset"),
    ),
}


def block_rules(overrides=None):
    """Default block rules merged with per-adapter overrides"""
    rules = dict(BLOCK_RULES)
    if overrides:
        rules.update(overrides)
    return rules
