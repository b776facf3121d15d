"""Defaults and field-name tokens shared by the analyzer and the fixer."""

import re

# String length
DEFAULT_MIN_LENGTH = 1
DEFAULT_MAX_LENGTH = 255

# Numeric ranges
DEFAULT_MIN_VALUE = 0
DEFAULT_MAX_INTEGER = 2147483647
DEFAULT_MAX_DECIMAL = 9999999999
INTEGER_TYPES = ("Integer", "Long")

PAGE_MIN = 1
PAGE_MAX = 2147483647
PAGE_SIZE_MIN = 1
PAGE_SIZE_MAX = 100
AGE_MIN = 0
AGE_MAX = 150
SCORE_MIN = 0
SCORE_MAX = 100

# Collection size
DEFAULT_MIN_SIZE = 1
DEFAULT_MAX_SIZE = 100

PHONE_PATTERN = r"^(\+86|86)?1[3-9]\d{9}$"

# Exact (case-insensitive) field names
PAGE_FIELD_NAMES = ("page", "pagenum")
PAGE_SIZE_FIELD_NAMES = ("pagesize", "limit", "size")

# Substring tokens matched against the lower-cased field name
EMAIL_TOKENS = ("email", "mail")
PHONE_TOKENS = ("phone", "mobile", "tel")
BIRTH_TOKENS = ("birth", "dob")
SCHEDULE_TOKENS = ("appoint", "schedule")

# Whole words of a camelCase / snake_case name ("page" must not count as "age")
AGE_WORDS = ("age",)
SCORE_WORDS = ("score", "rate")


def name_matches(name: str | None, tokens: tuple[str, ...]) -> bool:
    """True when the lower-cased name contains any of the tokens."""
    if not name:
        return False
    lower = name.lower()
    return any(token in lower for token in tokens)


def name_has_word(name: str | None, words: tuple[str, ...]) -> bool:
    """True when one of the words of a camelCase or snake_case name is in ``words``."""
    if not name:
        return False
    parts = re.findall(r"[A-Z]?[a-z0-9]+|[A-Z]+(?![a-z])", name)
    return any(part.lower() in words for part in parts)
