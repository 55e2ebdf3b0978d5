"""
Response parser.

Turns free-form model output describing a video submission into a validated
`Evaluation`. The language policy runs first, in three stages, so that
metadata rejections never pay for score extraction:

    metadata rules -> overall score -> score rules -> metric battery
    -> completeness gates -> consistency rules -> feedback -> assembly

Policy rejections return the zero-score evaluation. Anything else that
prevents a trustworthy record raises a `ParseError` subclass.
"""
from typing import Dict, Optional

from clipgrade.core.config import settings
from clipgrade.core.logging import excerpt, get_logger
from clipgrade.evaluation.errors import (
    EmptyFeedbackError,
    IncompleteResponseError,
    InsufficientScoresError,
    InvalidScoresError,
    ParseError,
    UnparseableResponseError,
)
from clipgrade.evaluation.metrics import CATEGORIES, CORE_METRICS, CORE_SKILL_METRICS, METRICS
from clipgrade.evaluation.result import CategoryEvaluation, Evaluation
from clipgrade.extraction.scores import (
    extract_language_detection,
    extract_overall_score,
    extract_score,
)
from clipgrade.extraction.text import (
    extract_bullet_points,
    extract_category_feedback,
    extract_feedback,
)
from clipgrade.policies.compliance import (
    LanguageCompliancePolicy,
    PolicyContext,
    PolicyDecision,
    PolicyOutcome,
    PolicyStage,
)
from clipgrade.policies.non_english import NonEnglishEvaluationBuilder

logger = get_logger("parser")

MIN_CORE_SKILL_SCORES = 2

STRENGTHS_KEYWORD = r"strengths?"
WEAKNESSES_KEYWORD = r"weakness(?:es)?|areas?\s+(?:to|for)\s+improve(?:ment)?|improvements?"
KEY_POINTS_KEYWORD = r"key\s+points?"
NEXT_STEPS_KEYWORD = r"next\s+steps?"


class ResponseParser:
    """Parses model output into an `Evaluation`, enforcing the language policy."""

    def __init__(
        self,
        policy: Optional[LanguageCompliancePolicy] = None,
        builder: Optional[NonEnglishEvaluationBuilder] = None,
    ):
        self.policy = policy or LanguageCompliancePolicy()
        self.builder = builder or NonEnglishEvaluationBuilder()

    def parse(
        self,
        response_text: str,
        video_url: Optional[str] = None,
        caption: Optional[str] = None,
    ) -> Evaluation:
        """
        Parse a model response.

        Args:
            response_text: Free-form model output
            video_url: Submission URL, only inspected for origin markers
            caption: User-authored caption

        Returns:
            The evaluation; all-zero when the language policy rejects.

        Raises:
            ParseError: (a subclass of) when the response cannot be trusted.
        """
        try:
            return self._parse(response_text or "", video_url or "", caption or "")
        except ParseError as e:
            logger.error(f"Evaluation parse failed: {e.reason} | response: {excerpt(e.raw_response)!r}")
            raise
        except Exception as e:
            error = UnparseableResponseError(raw_response=response_text)
            logger.error(
                f"Unexpected error parsing evaluation: {type(e).__name__}: {e} | "
                f"response: {excerpt(response_text)!r}"
            )
            raise error from e

    def _parse(self, response_text: str, video_url: str, caption: str) -> Evaluation:
        context = PolicyContext(
            response_text=response_text,
            caption=caption,
            video_url=video_url,
            detected_language=extract_language_detection(response_text),
        )

        decision = self.policy.evaluate(context, PolicyStage.METADATA)
        if decision.rejected:
            return self._rejected(decision, context)

        context.overall_score = extract_overall_score(response_text)
        decision = self.policy.evaluate(context, PolicyStage.SCORE)
        if decision.rejected:
            return self._rejected(decision, context)

        scores = {metric.name: extract_score(response_text, metric.keyword) for metric in METRICS}
        core = {"overall": context.overall_score}
        core.update({name: scores[name] for name in CORE_SKILL_METRICS})
        self._validate_core_scores(core, response_text)
        context.core_scores = {name: scores[name] for name in CORE_SKILL_METRICS}

        decision = self.policy.evaluate(context, PolicyStage.CONSISTENCY)
        if decision.rejected:
            return self._rejected(decision, context)

        feedback = extract_feedback(response_text)
        if len(feedback) <= settings.min_feedback_length:
            raise EmptyFeedbackError(raw_response=response_text)

        evaluation = self._assemble(response_text, context, scores, feedback)
        logger.info(
            f"Parsed evaluation: overall={evaluation.score} "
            f"language={context.detected_language or 'unspecified'}"
        )
        return evaluation

    def _validate_core_scores(self, core: Dict[str, Optional[int]], response_text: str):
        missing = [name for name in CORE_METRICS if core.get(name) is None]
        if missing:
            raise IncompleteResponseError(missing, raw_response=response_text)

        if any(not 0 <= core[name] <= 100 for name in CORE_METRICS):
            raise InvalidScoresError(raw_response=response_text)

        found = sum(1 for name in CORE_SKILL_METRICS if core.get(name) is not None)
        if found < MIN_CORE_SKILL_SCORES:
            raise InsufficientScoresError(raw_response=response_text)

    def _assemble(
        self,
        response_text: str,
        context: PolicyContext,
        scores: Dict[str, Optional[int]],
        feedback: str,
    ) -> Evaluation:
        strengths = extract_bullet_points(response_text, STRENGTHS_KEYWORD)
        weaknesses = extract_bullet_points(response_text, WEAKNESSES_KEYWORD)
        key_points = extract_bullet_points(response_text, KEY_POINTS_KEYWORD)
        next_steps = extract_bullet_points(response_text, NEXT_STEPS_KEYWORD)

        filled = {name: (0 if value is None else value) for name, value in scores.items()}

        fields = {}
        for spec in CATEGORIES:
            category_feedback = extract_category_feedback(response_text, spec.feedback_keyword)
            fields[f"{spec.name}_feedback"] = category_feedback
            fields[f"{spec.name}_category"] = CategoryEvaluation.from_metrics(
                spec, filled, category_feedback, strengths, weaknesses,
            )

        return Evaluation.assemble(
            filled,
            score=context.overall_score,
            feedback=feedback,
            overall_feedback=feedback,
            strengths=strengths,
            weaknesses=weaknesses,
            improvements=list(weaknesses),
            recommendations=list(strengths),
            key_points=key_points,
            next_steps=next_steps,
            language_detected=context.detected_language,
            **fields,
        )

    def _rejected(self, decision: PolicyDecision, context: PolicyContext) -> Evaluation:
        logger.warning(
            f"Submission rejected by language policy: {decision.reason.value} "
            f"(rule={decision.rule}, evidence={decision.evidence!r}, "
            f"response={excerpt(context.response_text)!r})"
        )
        evaluation = self.builder.build(decision.language, context.response_text, context.caption)
        update = {
            "rejection_reason": decision.reason.value,
            "language_detected": context.detected_language,
        }
        if decision.outcome == PolicyOutcome.ADJUST:
            update["score"] = decision.adjusted_score
            update["overall_feedback"] = inconsistency_message(
                context.overall_score, context.core_average(), decision.adjusted_score,
            )
        return evaluation.model_copy(update=update)


def inconsistency_message(overall: int, core_average: float, adjusted: int) -> str:
    """Explanation attached to an evaluation whose overall score was overridden."""
    return (
        f"SCORE ADJUSTED: The reported overall score of {overall} is inconsistent with the core "
        f"skill scores (pronunciation, grammar, fluency, vocabulary average {core_average:.1f}). "
        f"This usually means the speech was not clearly in English. The overall score has been "
        f"reduced to {adjusted}. Record a new video speaking ONLY in English for a full evaluation."
    )


_default_parser: Optional[ResponseParser] = None


def get_parser() -> ResponseParser:
    """Shared parser built from the configured policy and lexicon."""
    global _default_parser
    if _default_parser is None:
        _default_parser = ResponseParser()
    return _default_parser


def parse_video_evaluation_response(
    response_text: str,
    video_url: Optional[str] = None,
    caption: Optional[str] = None,
) -> Evaluation:
    """Parse with the shared default parser."""
    return get_parser().parse(response_text, video_url=video_url, caption=caption)
