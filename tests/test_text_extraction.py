"""
Tests for feedback, bullet list and category feedback extraction.
"""
import pytest

from clipgrade.extraction.text import (
    extract_bullet_points,
    extract_category_feedback,
    extract_feedback,
    strip_markdown,
)


def test_strip_markdown():
    assert strip_markdown("**Bold** and *italic* with `code` and _under_") == (
        "Bold and italic with code and under"
    )


class TestExtractFeedback:
    """Fallback chain for the main feedback text."""

    def test_prefers_detailed_feedback(self, english_response):
        feedback = extract_feedback(english_response)
        assert feedback.startswith("You delivered a well organised talk")
        assert "VIDEO ANALYSIS" not in feedback

    def test_falls_back_to_video_analysis(self, response_factory):
        feedback = extract_feedback(response_factory(detailed_feedback=None))
        assert feedback == "The speaker introduces a short talk about local history at a steady pace."

    def test_falls_back_to_meaningful_lines(self):
        text = (
            "Score: 50\n"
            "The presenter speaks with a clear and steady voice.\n"
            "- a bulleted line that is long enough to count\n"
            "Short line\n"
            "Language detected by the reviewer was clear\n"
        )
        assert extract_feedback(text) == "The presenter speaks with a clear and steady voice."

    def test_final_fallback_is_head_of_text(self):
        text = "ok\n" * 200
        feedback = extract_feedback(text)
        assert feedback.startswith("ok")
        assert len(feedback) <= 300

    def test_markdown_is_stripped(self):
        text = "**DETAILED FEEDBACK:** Great *energy* and `clear` speech throughout the video"
        assert extract_feedback(text) == "Great energy and clear speech throughout the video"

    def test_empty_text(self):
        assert extract_feedback("") == ""


class TestExtractBulletPoints:
    """Section and fallback bullet collection."""

    def test_collects_section_until_next_header(self, english_response):
        assert extract_bullet_points(english_response, r"strengths?") == [
            "Clear pronunciation of individual sounds",
            "Accurate grammar in complex sentences",
            "Confident delivery with steady pace",
        ]

    def test_numbered_items(self):
        text = "**STRENGTHS:**\n1. Good pace\n2) Clear voice\n\n**WEAKNESSES:**\n- Flat tone"
        assert extract_bullet_points(text, "strength") == ["Good pace", "Clear voice"]

    def test_fallback_scans_bullets_mentioning_keyword(self):
        text = "- Strength: clear voice\n- Weak spot\n- Another strength here"
        assert extract_bullet_points(text, "strength") == [
            "Strength: clear voice",
            "Another strength here",
        ]

    def test_capped_at_eight(self):
        bullets = "\n".join(f"- Point number {i}" for i in range(12))
        points = extract_bullet_points(f"**KEY POINTS:**\n{bullets}", r"key\s+points?")
        assert len(points) == 8
        assert points[0] == "Point number 0"

    def test_duplicates_dropped(self):
        text = "**STRENGTHS:**\n- Clear voice\n- Clear voice\n- Good pace"
        assert extract_bullet_points(text, "strength") == ["Clear voice", "Good pace"]

    def test_no_matches(self):
        assert extract_bullet_points("Nothing bulleted here.", "strength") == []

    @pytest.mark.parametrize("limit", [1, 2])
    def test_explicit_limit(self, english_response, limit):
        assert len(extract_bullet_points(english_response, "strength", limit=limit)) == limit


class TestExtractCategoryFeedback:

    def test_label_with_continuation_lines(self):
        text = (
            "Speaking: Your pronunciation was clear and your rhythm felt natural.\n"
            "Keep practising linking sounds.\n"
            "- Pronunciation: 85"
        )
        assert extract_category_feedback(text, r"speaking|pronunciation") == (
            "Your pronunciation was clear and your rhythm felt natural. "
            "Keep practising linking sounds."
        )

    def test_numeric_label_falls_back_to_feedback(self):
        text = (
            "- Pronunciation: 85\n\n"
            "**DETAILED FEEDBACK:** The delivery was confident and well paced overall."
        )
        assert extract_category_feedback(text, r"speaking|pronunciation") == (
            "The delivery was confident and well paced overall."
        )

    def test_no_label_falls_back_to_feedback(self, english_response):
        assert extract_category_feedback(english_response, r"visual|presentation") == (
            extract_feedback(english_response)
        )
