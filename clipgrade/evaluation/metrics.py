"""
Metric and category definitions for video submission evaluations.

Each metric carries the regex keyword used to find its score in model output
and the name of its compatibility alias. Categories group metrics into the
five sub-scores shown to learners.
"""
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class MetricSpec:
    """A single scored metric."""
    name: str
    keyword: str          # regex fragment matched case-insensitively
    alias_name: Optional[str] = None

    @property
    def alias(self) -> str:
        """Field name of the `*_score` compatibility alias."""
        return self.alias_name or f"{self.name}_score"


@dataclass(frozen=True)
class CategorySpec:
    """A group of metrics aggregated into one sub-score."""
    name: str
    metrics: Tuple[str, ...]
    feedback_keyword: str          # regex fragment for category feedback lookup
    filter_keywords: Tuple[str, ...]  # substrings routing strengths/weaknesses here


METRICS: Tuple[MetricSpec, ...] = (
    # Speaking & pronunciation
    MetricSpec("pronunciation", r"pronunciation"),
    MetricSpec("intonation", r"intonation"),
    MetricSpec("stress", r"(?:word\s+)?stress"),
    MetricSpec("linking_sounds", r"linking(?:\s+sounds?)?"),
    # Language usage
    MetricSpec("grammar", r"(?<!caption )(?<!written )grammar"),
    MetricSpec("tenses", r"(?:verb\s+)?tenses?"),
    MetricSpec("vocabulary", r"(?<!appropriate )vocabulary"),
    MetricSpec("collocations", r"collocations?", alias_name="collocation_score"),
    # Fluency & delivery
    MetricSpec("fluency", r"fluency"),
    MetricSpec("speaking_speed", r"(?:speaking\s+)?speed"),
    MetricSpec("confidence", r"confidence"),
    # Visual & presentation
    MetricSpec("facial_expressions", r"facial(?:\s+expressions?)?"),
    MetricSpec("body_language", r"body\s+language"),
    MetricSpec("eye_contact", r"eye\s+contact"),
    MetricSpec("audience_interaction", r"audience\s+(?:interaction|engagement)"),
    # Caption quality
    MetricSpec("caption_spelling", r"(?:caption\s+)?spelling"),
    MetricSpec("caption_grammar", r"(?:caption|written)\s+grammar"),
    MetricSpec("appropriate_vocabulary", r"appropriate\s+vocabulary|vocabulary\s+appropriateness"),
    MetricSpec("clarity", r"clarity"),
    MetricSpec("call_to_action", r"call[\s-]+to[\s-]+action|cta"),
    MetricSpec("hashtags", r"hashtags?"),
    MetricSpec("seo_caption", r"seo(?:\s+caption|\s+optimization)?", alias_name="seo_score"),
    MetricSpec("creativity", r"creativity"),
    MetricSpec("emotions", r"emotional\s+appeal|emotions?"),
    MetricSpec("personal_branding", r"personal\s+branding|branding"),
)

METRICS_BY_NAME: Dict[str, MetricSpec] = {m.name: m for m in METRICS}

# Scores that must be present for an English evaluation to be accepted
CORE_METRICS: Tuple[str, ...] = ("overall", "pronunciation", "grammar", "fluency", "vocabulary")
CORE_SKILL_METRICS: Tuple[str, ...] = ("pronunciation", "grammar", "fluency", "vocabulary")

OVERALL_KEYWORD = r"overall"
OVERALL_FALLBACK_KEYWORD = r"total|final"


CATEGORIES: Tuple[CategorySpec, ...] = (
    CategorySpec(
        name="speaking",
        metrics=("pronunciation", "intonation", "stress", "linking_sounds"),
        feedback_keyword=r"speaking|pronunciation",
        filter_keywords=("pronunciation", "pronounce", "intonation", "stress", "linking", "accent", "sound"),
    ),
    CategorySpec(
        name="language",
        metrics=("grammar", "tenses", "vocabulary", "collocations"),
        feedback_keyword=r"language\s+usage|grammar|vocabulary",
        filter_keywords=("grammar", "tense", "vocabulary", "collocation", "sentence", "word choice"),
    ),
    CategorySpec(
        name="delivery",
        metrics=("fluency", "speaking_speed", "confidence"),
        feedback_keyword=r"delivery|fluency",
        filter_keywords=("fluency", "fluent", "speed", "pace", "confidence", "confident", "pause", "hesitat", "delivery"),
    ),
    CategorySpec(
        name="visual",
        metrics=("facial_expressions", "body_language", "eye_contact", "audience_interaction"),
        feedback_keyword=r"visual|presentation",
        filter_keywords=("facial", "expression", "body language", "gesture", "eye contact", "audience", "camera", "visual"),
    ),
    CategorySpec(
        name="caption",
        metrics=(
            "caption_spelling", "caption_grammar", "appropriate_vocabulary", "clarity",
            "call_to_action", "hashtags", "seo_caption", "creativity", "emotions",
            "personal_branding",
        ),
        feedback_keyword=r"caption|written",
        filter_keywords=("caption", "hashtag", "spelling", "call to action", "call-to-action", "seo", "brand"),
    ),
)

CATEGORIES_BY_NAME: Dict[str, CategorySpec] = {c.name: c for c in CATEGORIES}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for non-negative input."""
    return int(math.floor(value + 0.5))


def mean_score(values: Iterable[int]) -> int:
    """Rounded mean of metric scores (0 for an empty group)."""
    values = list(values)
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def filter_by_keywords(items: List[str], keywords: Iterable[str]) -> List[str]:
    """Items mentioning any of the keywords (case-insensitive)."""
    keywords = [k.lower() for k in keywords]
    return [item for item in items if any(k in item.lower() for k in keywords)]
