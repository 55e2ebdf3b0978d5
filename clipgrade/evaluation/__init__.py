"""
Evaluation record models, metric catalogue and parse errors.
"""
from clipgrade.evaluation.metrics import (
    MetricSpec,
    CategorySpec,
    METRICS,
    METRICS_BY_NAME,
    CATEGORIES,
    CATEGORIES_BY_NAME,
    CORE_METRICS,
    CORE_SKILL_METRICS,
)
from clipgrade.evaluation.result import Evaluation, CategoryEvaluation
from clipgrade.evaluation.errors import (
    ParseError,
    IncompleteResponseError,
    InvalidScoresError,
    InsufficientScoresError,
    EmptyFeedbackError,
    UnparseableResponseError,
)

__all__ = [
    "MetricSpec",
    "CategorySpec",
    "METRICS",
    "METRICS_BY_NAME",
    "CATEGORIES",
    "CATEGORIES_BY_NAME",
    "CORE_METRICS",
    "CORE_SKILL_METRICS",
    "Evaluation",
    "CategoryEvaluation",
    "ParseError",
    "IncompleteResponseError",
    "InvalidScoresError",
    "InsufficientScoresError",
    "EmptyFeedbackError",
    "UnparseableResponseError",
]
