"""
Extractors that pull scores and feedback out of free-form model output.
"""
from clipgrade.extraction.scores import (
    extract_score,
    extract_overall_score,
    extract_language_detection,
    detected_language_name,
    compile_score_patterns,
)
from clipgrade.extraction.text import (
    extract_feedback,
    extract_bullet_points,
    extract_category_feedback,
    strip_markdown,
)

__all__ = [
    "extract_score",
    "extract_overall_score",
    "extract_language_detection",
    "detected_language_name",
    "compile_score_patterns",
    "extract_feedback",
    "extract_bullet_points",
    "extract_category_feedback",
    "strip_markdown",
]
