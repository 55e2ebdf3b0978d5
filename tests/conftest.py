"""
Shared fixtures: a well-formed English model response and a factory for variants.
"""
import pytest

DEFAULT_SCORES = {
    "Pronunciation": 85,
    "Intonation": 78,
    "Word Stress": 80,
    "Linking Sounds": 74,
    "Grammar": 88,
    "Tenses": 84,
    "Vocabulary": 79,
    "Collocations": 76,
    "Fluency": 81,
    "Speaking Speed": 77,
    "Confidence": 83,
    "Facial Expressions": 70,
    "Body Language": 72,
    "Eye Contact": 75,
    "Audience Interaction": 68,
    "Caption Spelling": 90,
    "Caption Grammar": 86,
    "Appropriate Vocabulary": 82,
    "Clarity": 80,
    "Call to Action": 60,
    "Hashtags": 55,
    "SEO Caption": 58,
    "Creativity": 73,
    "Emotions": 71,
    "Personal Branding": 65,
}

DETAILED_FEEDBACK = (
    "You delivered a well organised talk with accurate grammar and clear pronunciation. "
    "Work on intonation and camera engagement to sound more natural."
)


def build_response(
    overall="**OVERALL SCORE:** 82 - Strong performance",
    language="English - clear speech throughout",
    scores=None,
    omit=(),
    detailed_feedback=DETAILED_FEEDBACK,
):
    """Model response following the documented template."""
    merged = dict(DEFAULT_SCORES)
    merged.update(scores or {})
    score_lines = "\n".join(
        f"- {label}: {value}" for label, value in merged.items() if label not in omit
    )

    sections = []
    if language is not None:
        sections.append(f"**LANGUAGE DETECTED:** {language}")
    sections.append(
        "**VIDEO ANALYSIS:**\n"
        "The speaker introduces a short talk about local history at a steady pace."
    )
    if overall is not None:
        sections.append(overall)
    sections.append(f"**SCORES:**\n{score_lines}")
    sections.append(
        "**KEY POINTS:**\n"
        "- Clear structure with an engaging opening\n"
        "- Good pronunciation of difficult terms"
    )
    sections.append(
        "**STRENGTHS:**\n"
        "- Clear pronunciation of individual sounds\n"
        "- Accurate grammar in complex sentences\n"
        "- Confident delivery with steady pace"
    )
    sections.append(
        "**WEAKNESSES:**\n"
        "- Intonation is flat at the end of questions\n"
        "- Limited eye contact with the camera\n"
        "- Caption lacks hashtags"
    )
    sections.append(
        "**NEXT STEPS:**\n"
        "- Practice rising intonation on questions\n"
        "- Add relevant hashtags to the caption"
    )
    if detailed_feedback is not None:
        sections.append(f"**DETAILED FEEDBACK:**\n{detailed_feedback}")
    return "\n\n".join(sections)


@pytest.fixture
def response_factory():
    """Factory for response variants."""
    return build_response


@pytest.fixture
def english_response():
    """Well-formed English response."""
    return build_response()


@pytest.fixture
def english_caption():
    return "Hello, I will talk about history today"
