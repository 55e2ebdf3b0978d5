"""
Text-block extraction: feedback paragraphs, bulleted lists and
category-specific feedback from free-form model output.
"""
import re
from typing import List, Optional

from clipgrade.core.config import settings

_MARKDOWN_EMPHASIS = re.compile(r"\*\*|[*_`]")
_BOLD_HEADER = re.compile(r"^\s*\*\*[^*\n]+\*\*")
_BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+(?P<body>.+)$")
_SECTION_END = r"(?=\n[ \t]*\*\*[^*\n]+\*\*|\Z)"

_DETAILED_FEEDBACK = re.compile(
    r"\*\*\s*DETAILED\s+FEEDBACK\s*:?\s*\*\*\s*:?(?P<body>.*?)" + _SECTION_END,
    re.IGNORECASE | re.DOTALL,
)
_VIDEO_ANALYSIS = re.compile(
    r"\*\*\s*VIDEO\s+ANALYSIS\s*:?\s*\*\*\s*:?(?P<body>.*?)" + _SECTION_END,
    re.IGNORECASE | re.DOTALL,
)

_MEANINGFUL_LINE_MIN = 20
_CATEGORY_FEEDBACK_MIN = 20


def strip_markdown(text: str) -> str:
    """Remove markdown emphasis markers (**, *, _, backticks)."""
    return _MARKDOWN_EMPHASIS.sub("", text or "").strip()


def _is_bold_header(line: str) -> bool:
    return bool(_BOLD_HEADER.match(line))


def _is_meaningful_line(line: str) -> bool:
    stripped = line.strip()
    if len(stripped) <= _MEANINGFUL_LINE_MIN:
        return False
    if _BULLET.match(stripped) or _is_bold_header(stripped):
        return False
    upper = stripped.upper()
    return "SCORE" not in upper and "DETECTED" not in upper


def _section_body(pattern: re.Pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    if not match:
        return None
    body = strip_markdown(match.group("body"))
    return body or None


def extract_feedback(text: str) -> str:
    """
    Main feedback text.

    Order: DETAILED FEEDBACK section, VIDEO ANALYSIS section, the first few
    meaningful prose lines, then the head of the raw text.
    """
    text = text or ""

    body = _section_body(_DETAILED_FEEDBACK, text)
    if body:
        return body

    body = _section_body(_VIDEO_ANALYSIS, text)
    if body:
        return body

    lines = [line.strip() for line in text.splitlines() if _is_meaningful_line(line)]
    if lines:
        return strip_markdown(" ".join(lines[:settings.meaningful_line_count]))

    return strip_markdown(text[:settings.feedback_fallback_chars])


def _clean_bullet(body: str) -> str:
    return strip_markdown(body).strip(" :-")


def extract_bullet_points(text: str, keyword: str, limit: Optional[int] = None) -> List[str]:
    """
    Bulleted items under a bold header matching `keyword`.

    Collects bullet or numbered lines after a matching header until the next
    bold header. Without any matching header, falls back to bulleted lines
    anywhere that mention the keyword. Duplicates are dropped.
    """
    limit = settings.max_bullet_points if limit is None else limit
    keyword_re = re.compile(keyword, re.IGNORECASE)
    points: List[str] = []
    header_found = False
    in_section = False

    for line in (text or "").splitlines():
        if _is_bold_header(line):
            in_section = bool(keyword_re.search(line))
            header_found = header_found or in_section
            continue
        if not in_section:
            continue
        bullet = _BULLET.match(line)
        if bullet:
            cleaned = _clean_bullet(bullet.group("body"))
            if cleaned and cleaned not in points:
                points.append(cleaned)

    if not header_found:
        for line in (text or "").splitlines():
            bullet = _BULLET.match(line)
            if bullet and keyword_re.search(line):
                cleaned = _clean_bullet(bullet.group("body"))
                if cleaned and cleaned not in points:
                    points.append(cleaned)

    return points[:limit]


def extract_category_feedback(text: str, keyword: str) -> str:
    """
    Feedback for one category: `<keyword>...: <text>` plus up to two
    continuation lines. Falls back to `extract_feedback` when nothing
    meaningful follows the label.
    """
    pattern = re.compile(
        r"^[^\n]*?(?<![A-Za-z])(?:" + keyword + r")[^\n:]*:(?P<body>[^\n]*"
        r"(?:\n(?![ \t]*(?:\*\*|[-*•]\s|\d+[.)]))[^\n]+){0,2})",
        re.IGNORECASE | re.MULTILINE,
    )
    for match in pattern.finditer(text or ""):
        body = " ".join(strip_markdown(match.group("body")).split())
        if len(body) > _CATEGORY_FEEDBACK_MIN and not body[0].isdigit():
            return body
    return extract_feedback(text)
