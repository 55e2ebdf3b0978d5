"""
Score extraction from free-form model output.

Each metric keyword is turned into an ordered set of compiled patterns, most
specific first. The first pattern that yields a number in [0, 100] wins.
"""
import re
from functools import lru_cache
from typing import Optional, Pattern, Tuple

from clipgrade.core.logging import get_logger
from clipgrade.evaluation.metrics import OVERALL_FALLBACK_KEYWORD, OVERALL_KEYWORD

logger = get_logger("extraction.scores")

MIN_SCORE = 0
MAX_SCORE = 100

_NUMBER = r"(\d{{1,3}})(?!\d)"  # escaped for str.format
_DASH = r"[-–—]"

# Pattern templates; {kw} is the guarded keyword group
_SCORE_PATTERN_TEMPLATES: Tuple[str, ...] = (
    # **KEYWORD SCORE:** 82 - description
    r"\*\*\s*{kw}\s+score\s*:\s*\*\*\s*(\d{{1,3}})\s*" + _DASH + r"\s*",
    # **KEYWORD SCORE:** 82
    r"\*\*\s*{kw}\s+score\s*:\s*\*\*\s*" + _NUMBER,
    # **KEYWORD:** 82
    r"\*\*\s*{kw}\s*:\s*\*\*\s*" + _NUMBER,
    # keyword: 82
    r"{kw}\s*:\s*" + _NUMBER,
    # keyword score: 82
    r"{kw}\s+score\s*:?\s*" + _NUMBER,
    # keyword ... (82/100)
    r"{kw}[^\n\d]*\(\s*(\d{{1,3}})\s*/\s*100\s*\)",
    # keyword ... 82%
    r"{kw}[^\n\d]*?(\d{{1,3}})\s*%",
    # 82/100 ... keyword
    r"(?<!\d)(\d{{1,3}})\s*/\s*100[^\n\d]*?{kw}",
)

_LANGUAGE_DETECTED = re.compile(
    r"^[ \t]*(?:[-*][ \t]*)?(?:\*\*)?[ \t]*language[ \t]+detected[ \t]*:?[ \t]*(?:\*\*)?[ \t]*:?[ \t]*(?P<value>[^\n]*)$",
    re.IGNORECASE | re.MULTILINE,
)
_LANGUAGE_SEPARATOR = re.compile(r"\s+[-–—]\s+")


@lru_cache(maxsize=256)
def compile_score_patterns(keyword: str) -> Tuple[Pattern, ...]:
    """
    Build the ordered pattern set for a keyword.

    The keyword is a regex fragment; it is wrapped in a group that refuses to
    start or end inside a longer word, so "final" never matches "Finally".
    Results are cached per keyword.
    """
    guarded = rf"(?<![A-Za-z])(?:{keyword})(?![A-Za-z])"
    return tuple(
        re.compile(template.format(kw=guarded), re.IGNORECASE)
        for template in _SCORE_PATTERN_TEMPLATES
    )


def extract_score(text: str, keyword: str) -> Optional[int]:
    """
    Extract a 0-100 score for `keyword` from `text`.

    Returns None when no pattern matches or the matched number is out of
    range. None means "not determined" and must not be read as zero.
    """
    if not text:
        return None

    for index, pattern in enumerate(compile_score_patterns(keyword)):
        match = pattern.search(text)
        if not match:
            continue
        value = int(match.group(1))
        if MIN_SCORE <= value <= MAX_SCORE:
            logger.debug(f"Extracted score for '{keyword}': {value} (pattern {index + 1})")
            return value
        logger.debug(f"Ignoring out-of-range score for '{keyword}': {value} (pattern {index + 1})")

    logger.debug(f"Could not extract score for '{keyword}'")
    return None


def extract_overall_score(text: str) -> Optional[int]:
    """Overall score, preferring the explicit 'overall' label over total/final."""
    score = extract_score(text, OVERALL_KEYWORD)
    if score is None:
        score = extract_score(text, OVERALL_FALLBACK_KEYWORD)
    return score


def extract_language_detection(text: str) -> Optional[str]:
    """
    Value of the LANGUAGE DETECTED header, e.g. "Chinese (Mandarin) - clear speech".

    Returns None if the header is absent or empty.
    """
    if not text:
        return None
    match = _LANGUAGE_DETECTED.search(text)
    if not match:
        return None
    value = match.group("value").replace("**", "").strip(" \t*_`")
    return value or None


def detected_language_name(token: Optional[str]) -> Optional[str]:
    """Language part of a detection token, without the trailing assessment."""
    if not token:
        return None
    name = _LANGUAGE_SEPARATOR.split(token, maxsplit=1)[0].strip()
    return name or None
