"""Text and profile value normalization utilities"""

import re
import string

YES = "Yes"
NO = "No"

US_STATES = {
    "Alabama": "AL",
    "Alaska": "AK",
    "Arizona": "AZ",
    "Arkansas": "AR",
    "California": "CA",
    "Colorado": "CO",
    "Connecticut": "CT",
    "Delaware": "DE",
    "Florida": "FL",
    "Georgia": "GA",
    "Hawaii": "HI",
    "Idaho": "ID",
    "Illinois": "IL",
    "Indiana": "IN",
    "Iowa": "IA",
    "Kansas": "KS",
    "Kentucky": "KY",
    "Louisiana": "LA",
    "Maine": "ME",
    "Maryland": "MD",
    "Massachusetts": "MA",
    "Michigan": "MI",
    "Minnesota": "MN",
    "Mississippi": "MS",
    "Missouri": "MO",
    "Montana": "MT",
    "Nebraska": "NE",
    "Nevada": "NV",
    "New Hampshire": "NH",
    "New Jersey": "NJ",
    "New Mexico": "NM",
    "New York": "NY",
    "North Carolina": "NC",
    "North Dakota": "ND",
    "Ohio": "OH",
    "Oklahoma": "OK",
    "Oregon": "OR",
    "Pennsylvania": "PA",
    "Rhode Island": "RI",
    "South Carolina": "SC",
    "South Dakota": "SD",
    "Tennessee": "TN",
    "Texas": "TX",
    "Utah": "UT",
    "Vermont": "VT",
    "Virginia": "VA",
    "Washington": "WA",
    "West Virginia": "WV",
    "Wisconsin": "WI",
    "Wyoming": "WY",
}

# Name casing tables (upper-case keys, compared against all-caps tokens)
NAME_SUFFIXES = {"II", "III", "IV", "V"}
NAME_GENERATIONAL = {"JR", "SR"}
NAME_PARTICLES = {"DE", "DA", "DOS", "DEL", "VAN", "VON", "DI", "LA", "LE"}

_ALL_CAPS_NAME = re.compile(r"^[A-Z\s.'-]+$")
_NAME_SEGMENT_SPLIT = re.compile(r"([-'’])")

# Platform phrasing for demographic self-identification
VETERAN_NOT_PROTECTED = "I am not a protected veteran"
VETERAN_PROTECTED = "I identify as one or more of the classifications of a protected veteran"
VETERAN_DECLINE = "I don't wish to answer"
DISABILITY_NO = "No, I do not have a disability and have not had one in the past"
DISABILITY_YES = "Yes, I have a disability, or have had one in the past"
DISABILITY_DECLINE = "I do not want to answer"

_DECLINE = re.compile(r"prefer not|decline|(?:do not|don[’']t|not) (?:want|wish)")
# "no", "not", "don't", "haven't" ... checked only after the decline phrasings
_NEGATION = re.compile(r"\bno\b|\bnot\b|n[’']t\b")


def normalize_text(text):
    """Normalize text for keyword matching - lowercase, strip punctuation"""
    if not text:
        return ""
    # Lowercase and remove punctuation
    text = text.lower()
    text = text.translate(str.maketrans('', '', string.punctuation))
    # Collapse whitespace
    return ' '.join(text.split())


# ========================================
# PATTERNS
# ========================================


def escape_pattern(text):
    """Escape text for literal use inside a regular expression"""
    return re.escape(text or "")


def contains_pattern(text):
    """Case-insensitive substring match"""
    return re.compile(escape_pattern(text), re.IGNORECASE)


def exact_pattern(text):
    """Case-insensitive, anchored full-text match"""
    return re.compile(f"^{escape_pattern(text)}$", re.IGNORECASE)


def word_pattern(text):
    """Case-insensitive whole-word match"""
    return re.compile(rf"\b{escape_pattern(text)}\b", re.IGNORECASE)


# ========================================
# SCALARS
# ========================================


def as_list(value):
    """Coerce str | list | None into a list of non-empty strings"""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v]
    return [str(value)] if value else []


def _dedupe(values):
    seen = set()
    return [v for v in values if not (v in seen or seen.add(v))]


def normalize_yes_no(value, default=YES):
    """
    Map a loosely-shaped yes/no answer onto "Yes" / "No".

    The first character decides; anything unrecognized (including None and
    empty strings) returns the supplied default.
    """
    if isinstance(value, bool):
        return YES if value else NO
    if not value:
        return default
    v = str(value).strip().lower()
    if v.startswith("y"):
        return YES
    if v.startswith("n"):
        return NO
    return default


def digits_only(text):
    return re.sub(r"\D", "", text or "")


def format_us_phone(phone):
    """Format a 10-digit phone number as (XXX) XXX-XXXX, else return it unchanged"""
    digits = digits_only(phone)
    if len(digits) != 10:
        return phone
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"


# ========================================
# NAMES
# ========================================


def split_name(full_name, first_name="", last_name=""):
    """
    Prefer explicit first/last names, else split the full name on whitespace.

    Returns: (first, last)
    """
    if first_name or last_name:
        return (first_name or "", last_name or "")
    parts = (full_name or "").split()
    if not parts:
        return ("", "")
    if len(parts) == 1:
        return (parts[0], "")
    return (parts[0], " ".join(parts[1:]))


def looks_all_caps_name(text):
    """
    Detect an ALL CAPS person name.

    Requires at least two words (avoids matching IDs and initials), no
    lowercase letters, and only letters, spaces, apostrophes, hyphens, periods.
    """
    t = (text or "").strip()
    if not t:
        return False
    if len(t.split()) < 2:
        return False
    if re.search(r"[a-z]", t):
        return False
    if not re.search(r"[A-Z]", t):
        return False
    return bool(_ALL_CAPS_NAME.match(t))


def _title_segment(segment):
    if not segment or _NAME_SEGMENT_SPLIT.fullmatch(segment):
        return segment
    return segment[0].upper() + segment[1:].lower()


def to_proper_name_case(text):
    """
    Convert an ALL CAPS name to title case.

    - "ANNA-MARIA" -> "Anna-Maria", "O'NEIL" -> "O'Neil"
    - II, III, IV, V are kept as-is
    - JR / SR -> "Jr." / "Sr."
    - particles (de, da, dos, del, van, von, di, la, le) stay lowercase
      unless they are the first word
    """
    tokens = (text or "").split()
    cased = []
    for idx, raw in enumerate(tokens):
        bare = raw.rstrip(".,")
        trailing = raw[len(bare):]

        if bare in NAME_SUFFIXES:
            cased.append(raw)
            continue

        if bare in NAME_GENERATIONAL:
            cased.append(bare[0] + bare[1:].lower() + ".")
            continue

        if idx != 0 and bare in NAME_PARTICLES:
            cased.append(raw.lower())
            continue

        segments = _NAME_SEGMENT_SPLIT.split(bare)
        cased.append("".join(_title_segment(seg) for seg in segments) + trailing)

    return " ".join(cased)


# ========================================
# LOCATION
# ========================================


def state_name(location):
    """State token from "City, State", or "" when there is no comma"""
    if not location:
        return ""
    parts = [p.strip() for p in location.split(",")]
    if len(parts) < 2:
        return ""
    return parts[1]


def state_options(location):
    """
    Candidate spellings for the state part of "City, State".

    "Austin, Texas" -> ["Texas", "TX"]; "Austin, TX" -> ["TX"]; "Austin" -> []
    """
    state = state_name(location)
    if not state:
        return []
    abbr = US_STATES.get(state, "")
    return [state, abbr] if abbr else [state]


# ========================================
# DEMOGRAPHIC SELF-IDENTIFICATION
# ========================================


def gender_options(value):
    """Map man/male and woman/female onto the platform labels"""
    out = []
    for v in as_list(value):
        t = v.strip().lower()
        if t in ("man", "male"):
            out.append("Male")
        elif t in ("woman", "female"):
            out.append("Female")
        else:
            out.append(v)
    return _dedupe(out)


def veteran_options(value):
    out = []
    for v in as_list(value):
        t = v.lower()
        if "not a veteran" in t or "not a protected" in t:
            out.append(VETERAN_NOT_PROTECTED)
        elif "protected veteran" in t or "identify" in t:
            out.append(VETERAN_PROTECTED)
        elif "don't wish" in t or "prefer not" in t:
            out.append(VETERAN_DECLINE)
        else:
            out.append(v)
    return _dedupe(out)


def disability_options(value):
    out = []
    for v in as_list(value):
        t = v.lower()
        if _DECLINE.search(t):
            out.append(DISABILITY_DECLINE)
        elif "no disability" in t or (_NEGATION.search(t) and "disability" in t) or t == "no":
            out.append(DISABILITY_NO)
        elif "yes" in t or "disability" in t:
            out.append(DISABILITY_YES)
        else:
            out.append(v)
    return _dedupe(out)
