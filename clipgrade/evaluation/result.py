"""
Evaluation result models.

Single source of truth for the structured record produced by the parser and
the non-English builder, and consumed by persistence and UI layers.
Serialized keys are camelCase for compatibility with existing consumers.
"""
from typing import Any, Dict, List, Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from clipgrade.evaluation.metrics import (
    CATEGORIES,
    METRICS,
    CategorySpec,
    filter_by_keywords,
    mean_score,
)

MAX_LIST_ITEMS = 8

Score = int


def _score_field() -> Any:
    return Field(default=0, ge=0, le=100)


class CategoryEvaluation(BaseModel):
    """Aggregated sub-score for one category of metrics."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    score: Score = _score_field()
    overall_score: Score = _score_field()
    feedback: str = ""
    strengths: List[str] = Field(default_factory=list)
    areas_to_improve: List[str] = Field(default_factory=list, alias="areas_to_improve")
    metrics: Dict[str, Score] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_mean(self):
        if self.score != self.overall_score:
            raise ValueError("category score and overall_score must match")
        for name, value in self.metrics.items():
            if not 0 <= value <= 100:
                raise ValueError(f"category metric '{name}' out of range: {value}")
        if self.metrics and self.score != mean_score(self.metrics.values()):
            raise ValueError("category score must be the rounded mean of its metrics")
        return self

    @classmethod
    def from_metrics(
        cls,
        spec: CategorySpec,
        metric_scores: Mapping[str, int],
        feedback: str,
        strengths: List[str],
        weaknesses: List[str],
        areas_to_improve: Optional[List[str]] = None,
    ) -> "CategoryEvaluation":
        """Build a category from its member metric scores."""
        metrics = {name: metric_scores.get(name, 0) for name in spec.metrics}
        score = mean_score(metrics.values())
        if areas_to_improve is None:
            areas_to_improve = filter_by_keywords(weaknesses, spec.filter_keywords)
        return cls(
            score=score,
            overall_score=score,
            feedback=feedback,
            strengths=filter_by_keywords(strengths, spec.filter_keywords)[:MAX_LIST_ITEMS],
            areas_to_improve=list(areas_to_improve)[:MAX_LIST_ITEMS],
            metrics=metrics,
        )


class Evaluation(BaseModel):
    """
    Complete evaluation of a video submission.

    Every metric is mirrored under its `*_score` alias; the validator refuses
    records where a pair disagrees. Use `assemble()` to build one from a
    metric score mapping so the pairs are always filled together.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    score: Score = _score_field()
    feedback: str
    overall_feedback: str

    # Speaking & pronunciation
    pronunciation: Score = _score_field()
    intonation: Score = _score_field()
    stress: Score = _score_field()
    linking_sounds: Score = _score_field()
    # Language usage
    grammar: Score = _score_field()
    tenses: Score = _score_field()
    vocabulary: Score = _score_field()
    collocations: Score = _score_field()
    # Fluency & delivery
    fluency: Score = _score_field()
    speaking_speed: Score = _score_field()
    confidence: Score = _score_field()
    # Visual & presentation
    facial_expressions: Score = _score_field()
    body_language: Score = _score_field()
    eye_contact: Score = _score_field()
    audience_interaction: Score = _score_field()
    # Caption quality
    caption_spelling: Score = _score_field()
    caption_grammar: Score = _score_field()
    appropriate_vocabulary: Score = _score_field()
    clarity: Score = _score_field()
    call_to_action: Score = _score_field()
    hashtags: Score = _score_field()
    seo_caption: Score = _score_field()
    creativity: Score = _score_field()
    emotions: Score = _score_field()
    personal_branding: Score = _score_field()

    # Compatibility aliases
    pronunciation_score: Score = _score_field()
    intonation_score: Score = _score_field()
    stress_score: Score = _score_field()
    linking_sounds_score: Score = _score_field()
    grammar_score: Score = _score_field()
    tenses_score: Score = _score_field()
    vocabulary_score: Score = _score_field()
    collocation_score: Score = _score_field()
    fluency_score: Score = _score_field()
    speaking_speed_score: Score = _score_field()
    confidence_score: Score = _score_field()
    facial_expressions_score: Score = _score_field()
    body_language_score: Score = _score_field()
    eye_contact_score: Score = _score_field()
    audience_interaction_score: Score = _score_field()
    caption_spelling_score: Score = _score_field()
    caption_grammar_score: Score = _score_field()
    appropriate_vocabulary_score: Score = _score_field()
    clarity_score: Score = _score_field()
    call_to_action_score: Score = _score_field()
    hashtags_score: Score = _score_field()
    seo_score: Score = _score_field()
    creativity_score: Score = _score_field()
    emotions_score: Score = _score_field()
    personal_branding_score: Score = _score_field()

    # Feedback lists
    strengths: List[str] = Field(default_factory=list, max_length=MAX_LIST_ITEMS)
    weaknesses: List[str] = Field(default_factory=list, max_length=MAX_LIST_ITEMS)
    improvements: List[str] = Field(default_factory=list, max_length=MAX_LIST_ITEMS)
    recommendations: List[str] = Field(default_factory=list, max_length=MAX_LIST_ITEMS)
    key_points: List[str] = Field(default_factory=list, max_length=MAX_LIST_ITEMS)
    next_steps: List[str] = Field(default_factory=list, max_length=MAX_LIST_ITEMS)

    # Category feedback
    speaking_feedback: str = ""
    language_feedback: str = ""
    delivery_feedback: str = ""
    visual_feedback: str = ""
    caption_feedback: str = ""

    speaking_category: CategoryEvaluation
    language_category: CategoryEvaluation
    delivery_category: CategoryEvaluation
    visual_category: CategoryEvaluation
    caption_category: CategoryEvaluation

    language_detected: Optional[str] = None
    rejection_reason: Optional[str] = None

    @model_validator(mode="after")
    def validate_aliases(self):
        for metric in METRICS:
            if getattr(self, metric.name) != getattr(self, metric.alias):
                raise ValueError(
                    f"{metric.alias} ({getattr(self, metric.alias)}) does not match "
                    f"{metric.name} ({getattr(self, metric.name)})"
                )
        return self

    @classmethod
    def assemble(cls, metric_scores: Mapping[str, int], **fields: Any) -> "Evaluation":
        """
        Build an evaluation from metric scores.

        Metrics absent from `metric_scores` are zero-filled, and each value is
        written to both the metric field and its alias.
        """
        data = dict(fields)
        for metric in METRICS:
            value = metric_scores.get(metric.name)
            value = 0 if value is None else value
            data[metric.name] = value
            data[metric.alias] = value
        return cls(**data)

    def metric_scores(self) -> Dict[str, int]:
        """Flat metric scores keyed by metric name."""
        return {metric.name: getattr(self, metric.name) for metric in METRICS}

    def categories(self) -> Dict[str, CategoryEvaluation]:
        """Category records keyed by category name."""
        return {spec.name: getattr(self, f"{spec.name}_category") for spec in CATEGORIES}

    def all_scores(self) -> Dict[str, int]:
        """Every numeric score in the record, including aliases and categories."""
        scores = {"score": self.score}
        for metric in METRICS:
            scores[metric.name] = getattr(self, metric.name)
            scores[metric.alias] = getattr(self, metric.alias)
        for name, category in self.categories().items():
            scores[f"{name}_category.score"] = category.score
            scores[f"{name}_category.overall_score"] = category.overall_score
            for metric_name, value in category.metrics.items():
                scores[f"{name}_category.{metric_name}"] = value
        return scores

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Evaluation":
        """Create from a dict produced by `to_dict()` (or snake_case keys)."""
        return cls.model_validate(data)
