"""
Zero-score evaluation returned when a submission fails the language policy.

The wording is fixed and only parameterized by the detected language name,
so the same inputs always produce the same record.
"""
from typing import Dict, List, Optional

from clipgrade.evaluation.metrics import CATEGORIES
from clipgrade.evaluation.result import CategoryEvaluation, Evaluation

DEFAULT_LANGUAGE = "non-English"

STRENGTHS = [
    "NONE - English language is REQUIRED for any assessment",
    "ZERO strengths can be identified from non-English content",
    "Must speak English to demonstrate any language skills",
]

IMPROVEMENTS = [
    "CRITICAL: Record a new video speaking ONLY in English",
    "MANDATORY: Use ZERO non-English words in your submission",
    "REQUIRED: Practice English pronunciation and vocabulary daily",
    "ESSENTIAL: Focus on English grammar and sentence structure",
    "COMPULSORY: Build English fluency through regular practice",
    "OBLIGATORY: Use English-only content for all submissions",
    "NECESSARY: Complete English conversation practice before recording",
]

NEXT_STEPS = [
    "IMMEDIATE ACTION: Record a new video speaking ONLY in English",
    "DAILY PRACTICE: Study English pronunciation and vocabulary",
    "FOCUS AREAS: English grammar and sentence structure mastery",
    "BUILD SKILLS: English fluency through consistent conversation practice",
    "SUBMISSION RULE: Use ONLY English in all future video submissions",
]

RECOMMENDATIONS = [
    "MANDATORY: Record a new video speaking ONLY in English",
    "PROHIBITION: Never mix languages in English learning submissions",
    "REQUIREMENT: Complete daily English pronunciation practice",
    "OBLIGATION: Master English grammar exercises before recording",
    "NECESSITY: Use English learning resources and apps daily",
    "COMPULSORY: Engage in English conversation practice sessions",
]

CATEGORY_AREAS_TO_IMPROVE: Dict[str, List[str]] = {
    "speaking": ["Speak in English", "Practice English pronunciation", "Focus on English grammar"],
    "language": ["Use English vocabulary", "Practice English grammar", "Build English sentence structure"],
    "delivery": [
        "PRIORITY: Record in English only",
        "REQUIREMENT: English fluency practice",
        "MANDATORY: English conversation skills",
    ],
    "visual": [
        "FIRST PRIORITY: Use English language",
        "FIX LANGUAGE: Before focusing on visuals",
        "REQUIREMENT: English-only submissions",
    ],
    "caption": [
        "CRITICAL: Write captions in English only",
        "PROHIBITED: Non-English captions",
        "REQUIRED: English writing practice",
    ],
}


def display_language(detected_language: Optional[str]) -> str:
    """Language name with its first character capitalized."""
    name = (detected_language or "").strip() or DEFAULT_LANGUAGE
    return name[0].upper() + name[1:]


class NonEnglishEvaluationBuilder:
    """Builds the all-zero rejection evaluation."""

    def build(
        self,
        detected_language: Optional[str],
        raw_response: Optional[str] = None,
        caption: Optional[str] = None,
    ) -> Evaluation:
        language = display_language(detected_language)
        feedback = self.feedback(language)

        category_feedback = self.category_feedback(language)
        categories = {
            f"{spec.name}_category": CategoryEvaluation.from_metrics(
                spec,
                {},
                feedback=category_feedback[spec.name],
                strengths=[],
                weaknesses=[],
                areas_to_improve=CATEGORY_AREAS_TO_IMPROVE[spec.name],
            )
            for spec in CATEGORIES
        }

        return Evaluation.assemble(
            {},
            score=0,
            feedback=feedback,
            overall_feedback=feedback,
            strengths=list(STRENGTHS),
            weaknesses=list(IMPROVEMENTS),
            improvements=list(IMPROVEMENTS),
            recommendations=list(RECOMMENDATIONS),
            key_points=self.key_points(language),
            next_steps=list(NEXT_STEPS),
            speaking_feedback=(
                f"EVALUATION IMPOSSIBLE: Video contains {language}, not English. English speaking "
                "skills cannot and will not be assessed from non-English content. COMPLETE FAILURE."
            ),
            language_feedback=(
                "ZERO English language usage detected. SUBMISSION REJECTED. "
                "Only English content will be evaluated on this platform."
            ),
            delivery_feedback=(
                "While delivery confidence may exist, this is irrelevant as the language is not "
                "English. TOTAL FAILURE to meet basic requirements."
            ),
            visual_feedback=(
                "Visual presentation is irrelevant when language requirement is not met. ZERO CREDIT given."
            ),
            caption_feedback=self.caption_feedback(caption),
            **categories,
        )

    @staticmethod
    def feedback(language: str) -> str:
        return (
            f"CRITICAL FAILURE: This video contains {language} content, NOT English.\n\n"
            "This is an ENGLISH learning platform with ZERO TOLERANCE for non-English submissions. "
            "Your evaluation receives 0 points across ALL categories because English-only content "
            "is MANDATORY.\n\n"
            "SUBMISSION REJECTED: You must submit a video where you speak ONLY in English. "
            "No exceptions, no partial credit, no mixed languages allowed.\n\n"
            "REQUIREMENT: Record a NEW video speaking EXCLUSIVELY in English to receive any "
            "evaluation points."
        )

    @staticmethod
    def key_points(language: str) -> List[str]:
        return [
            f"SUBMISSION FAILED: Video contains {language}, not English",
            "ZERO POINTS awarded - English-only content is MANDATORY",
            "NO English language proficiency can be assessed",
            "COMPLETE RE-SUBMISSION required with English-only content",
            "This platform has ABSOLUTE ZERO TOLERANCE for non-English videos",
        ]

    @staticmethod
    def category_feedback(language: str) -> Dict[str, str]:
        return {
            "speaking": f"Cannot assess English speaking skills from {language} content",
            "language": f"No English language usage detected in this {language} video",
            "delivery": "Delivery assessment IMPOSSIBLE due to wrong language. English required.",
            "visual": "Visual assessment IRRELEVANT when language requirement not met.",
            "caption": "Caption evaluation IMPOSSIBLE with wrong language content.",
        }

    @staticmethod
    def caption_feedback(caption: Optional[str]) -> str:
        if caption:
            return "Caption irrelevant - English content evaluation impossible due to wrong language."
        return "No caption provided AND wrong language used - COMPLETE FAILURE."
