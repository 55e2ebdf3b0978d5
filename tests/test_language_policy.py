"""
Tests for the English-only language compliance policy.

Rules are exercised one at a time through `evaluate_rule` with a small
injected lexicon, then in order through `evaluate`/`check` with the
built-in tables.
"""
import pytest

from clipgrade.core.config import get_policy_config, get_policy_presets
from clipgrade.policies.compliance import (
    LanguageCompliancePolicy,
    PolicyContext,
    PolicyOutcome,
    PolicyStage,
    RejectionReason,
)
from clipgrade.policies.lexicon import LanguageLexicon


@pytest.fixture
def small_lexicon():
    """Minimal tables so each rule has exactly one trigger."""
    return LanguageLexicon(
        vietnamese_names=frozenset({"vietnamese"}),
        denylisted_languages=frozenset({"spanish", "french"}),
        mixed_language_indicators=frozenset({"mixed"}),
        vietnamese_words=frozenset({"xin chào", "không"}),
        non_english_phrases=frozenset({"not english"}),
        other_language_phrases=frozenset({"foreign language"}),
        url_markers=frozenset({"saigon"}),
        language_difficulty_phrases=frozenset({"hard to understand"}),
    )


@pytest.fixture
def policy(small_lexicon):
    return LanguageCompliancePolicy(lexicon=small_lexicon)


@pytest.fixture
def default_policy():
    return LanguageCompliancePolicy()


class TestMetadataRules:
    """Rules 1-7: language token, caption, response phrasing, URL."""

    def test_vietnamese_token(self, policy):
        ctx = PolicyContext(detected_language="Vietnamese - fluent speech")
        decision = policy.evaluate_rule("vietnamese_language_token", ctx)
        assert decision.rejected
        assert decision.reason == RejectionReason.VIETNAMESE
        assert decision.language == "Vietnamese"

    def test_token_assessment_is_ignored(self, policy):
        ctx = PolicyContext(detected_language="English - mentions vietnamese food once")
        assert policy.evaluate_rule("vietnamese_language_token", ctx).compliant

    def test_denylisted_token(self, policy):
        ctx = PolicyContext(detected_language="Spanish - clear speech")
        decision = policy.evaluate_rule("denylisted_language_token", ctx)
        assert decision.reason == RejectionReason.NON_ENGLISH
        assert decision.language == "Spanish"

    def test_english_token_is_compliant(self, policy):
        ctx = PolicyContext(detected_language="English - clear speech")
        assert policy.evaluate(ctx, PolicyStage.METADATA).compliant

    def test_mixed_token(self, policy):
        ctx = PolicyContext(detected_language="Mixed")
        decision = policy.evaluate_rule("mixed_language_token", ctx)
        assert decision.reason == RejectionReason.MIXED_LANGUAGE

    def test_accent_note_naming_a_language_is_rejected(self, default_policy):
        decision = default_policy.check("**LANGUAGE DETECTED:** English (Irish accent) - clear speech")
        assert decision.reason == RejectionReason.NON_ENGLISH
        assert decision.rule == "denylisted_language_token"
        assert decision.evidence.lower() == "irish"

    def test_caption_words(self, policy):
        ctx = PolicyContext(caption="xin chào everyone, welcome back")
        decision = policy.evaluate_rule("vietnamese_caption", ctx)
        assert decision.reason == RejectionReason.VIETNAMESE
        assert "xin chào" in decision.evidence

    def test_caption_diacritics(self, policy):
        ctx = PolicyContext(caption="Đẹp quá")
        assert policy.evaluate_rule("vietnamese_caption", ctx).reason == RejectionReason.VIETNAMESE

    def test_caption_with_other_accents_is_compliant(self, policy):
        ctx = PolicyContext(caption="Coffee at my favourite café")
        assert policy.evaluate_rule("vietnamese_caption", ctx).compliant

    def test_non_english_phrase_in_response(self, policy):
        ctx = PolicyContext(response_text="The speech is not English at all.")
        decision = policy.evaluate_rule("non_english_response_phrases", ctx)
        assert decision.reason == RejectionReason.NON_ENGLISH
        assert decision.language == "non-English"

    def test_vietnamese_words_in_response(self, policy):
        ctx = PolicyContext(response_text="The speaker says không several times.")
        decision = policy.evaluate_rule("non_english_response_phrases", ctx)
        assert decision.reason == RejectionReason.NON_ENGLISH
        assert decision.language == "Vietnamese"

    def test_other_language_phrase(self, policy):
        ctx = PolicyContext(response_text="The video uses a foreign language.")
        decision = policy.evaluate_rule("other_language_response_phrases", ctx)
        assert decision.reason == RejectionReason.NON_ENGLISH

    def test_language_mention(self, policy):
        ctx = PolicyContext(response_text="The presenter is speaking French throughout.")
        decision = policy.evaluate_rule("other_language_response_phrases", ctx)
        assert decision.rejected
        assert decision.language == "French"

    def test_vietnamese_url(self, policy):
        ctx = PolicyContext(video_url="https://cdn.example.com/Saigon/clip.mp4")
        decision = policy.evaluate_rule("vietnamese_video_url", ctx)
        assert decision.reason == RejectionReason.NON_ENGLISH
        assert decision.language == "Vietnamese"

    def test_plain_url_is_compliant(self, policy):
        ctx = PolicyContext(video_url="https://cdn.example.com/uploads/clip.mp4")
        assert policy.evaluate_rule("vietnamese_video_url", ctx).compliant


class TestScoreRules:
    """Rules 8-9: implausible overall scores."""

    def test_suspicious_low_score_with_difficulty_phrase(self, policy):
        ctx = PolicyContext(response_text="Speech was hard to understand.", overall_score=25)
        decision = policy.evaluate_rule("suspicious_low_scores", ctx)
        assert decision.reason == RejectionReason.SUSPICIOUS_LOW_SCORES

    def test_suspicious_rule_needs_score_below_cutoff(self, policy):
        ctx = PolicyContext(response_text="Speech was hard to understand.", overall_score=35)
        assert policy.evaluate_rule("suspicious_low_scores", ctx).compliant

    def test_suspicious_rule_needs_phrase(self, policy):
        ctx = PolicyContext(response_text="A short but honest attempt.", overall_score=25)
        assert policy.evaluate_rule("suspicious_low_scores", ctx).compliant

    @pytest.mark.parametrize("score,rejected", [(8, True), (14, True), (15, False), (0, False), (None, False)])
    def test_very_low_score(self, policy, score, rejected):
        ctx = PolicyContext(overall_score=score)
        decision = policy.evaluate_rule("very_low_scores", ctx)
        assert decision.rejected is rejected
        if rejected:
            assert decision.reason == RejectionReason.VERY_LOW_SCORES


class TestConsistencyRules:
    """Rules 10-11: overall versus core scores."""

    @staticmethod
    def core(pronunciation, grammar, fluency, vocabulary):
        return {
            "pronunciation": pronunciation,
            "grammar": grammar,
            "fluency": fluency,
            "vocabulary": vocabulary,
        }

    def test_inconsistent_scores_adjust(self, policy):
        ctx = PolicyContext(overall_score=75, core_scores=self.core(20, 15, 25, 18))
        decision = policy.evaluate_rule("inconsistent_core_scores", ctx)
        assert decision.reason == RejectionReason.INCONSISTENT_SCORES
        assert decision.outcome == PolicyOutcome.ADJUST
        assert decision.adjusted_score == 29

    def test_adjusted_score_has_a_floor(self, policy):
        ctx = PolicyContext(overall_score=60, core_scores=self.core(0, 0, 0, 0))
        assert policy.evaluate_rule("inconsistent_core_scores", ctx).adjusted_score == 10

    def test_adjusted_score_never_exceeds_overall(self, policy):
        ctx = PolicyContext(overall_score=52, core_scores=self.core(39, 39, 39, 39))
        assert policy.evaluate_rule("inconsistent_core_scores", ctx).adjusted_score == 49

    def test_consistent_scores(self, policy):
        ctx = PolicyContext(overall_score=75, core_scores=self.core(45, 45, 45, 45))
        assert policy.evaluate_rule("inconsistent_core_scores", ctx).compliant

    def test_overall_at_floor_is_not_checked(self, policy):
        ctx = PolicyContext(overall_score=50, core_scores=self.core(10, 10, 10, 10))
        assert policy.evaluate_rule("inconsistent_core_scores", ctx).compliant

    def test_high_score_with_indicator_phrase(self, policy):
        ctx = PolicyContext(response_text="This is not English.", overall_score=80)
        decision = policy.evaluate_rule("high_score_with_non_english_indicators", ctx)
        assert decision.reason == RejectionReason.VIETNAMESE
        assert decision.outcome == PolicyOutcome.REJECT

    def test_high_score_with_url_marker(self, policy):
        ctx = PolicyContext(video_url="https://example.com/saigon.mp4", overall_score=80)
        decision = policy.evaluate_rule("high_score_with_non_english_indicators", ctx)
        assert decision.reason == RejectionReason.VIETNAMESE

    def test_high_score_rule_needs_high_score(self, policy):
        ctx = PolicyContext(response_text="This is not English.", overall_score=50)
        assert policy.evaluate_rule("high_score_with_non_english_indicators", ctx).compliant


class TestRuleOrdering:

    def test_rule_order(self, policy):
        assert policy.rule_names() == [
            "vietnamese_language_token",
            "denylisted_language_token",
            "mixed_language_token",
            "vietnamese_caption",
            "non_english_response_phrases",
            "other_language_response_phrases",
            "vietnamese_video_url",
            "suspicious_low_scores",
            "very_low_scores",
            "inconsistent_core_scores",
            "high_score_with_non_english_indicators",
        ]

    def test_first_hit_wins(self, policy):
        ctx = PolicyContext(detected_language="Spanish", caption="xin chào")
        assert policy.evaluate(ctx).rule == "denylisted_language_token"

    def test_stage_filter(self, policy):
        ctx = PolicyContext(detected_language="Spanish", overall_score=8)
        assert policy.evaluate(ctx, PolicyStage.SCORE).reason == RejectionReason.VERY_LOW_SCORES

    def test_unknown_rule(self, policy):
        with pytest.raises(KeyError):
            policy.evaluate_rule("does_not_exist", PolicyContext())

    def test_decision_to_dict(self, policy):
        decision = policy.evaluate(PolicyContext(detected_language="Mixed"))
        data = decision.to_dict()
        assert data["compliant"] is False
        assert data["reason"] == "mixed-language"
        assert data["outcome"] == "reject"


class TestCheckWithDefaultLexicon:
    """Metadata stage against raw inputs and the built-in tables."""

    def test_vietnamese_header(self, default_policy):
        decision = default_policy.check("**LANGUAGE DETECTED:** Vietnamese - fluent")
        assert decision.reason == RejectionReason.VIETNAMESE
        assert decision.rule == "vietnamese_language_token"

    def test_partially_english_header(self, default_policy):
        decision = default_policy.check("**LANGUAGE DETECTED:** Partially English")
        assert decision.reason == RejectionReason.MIXED_LANGUAGE

    def test_vietnamese_caption(self, default_policy):
        decision = default_policy.check(
            "**LANGUAGE DETECTED:** English",
            caption="Xin chào các bạn, hôm nay tôi sẽ nói về lịch sử",
        )
        assert decision.reason == RejectionReason.VIETNAMESE
        assert decision.rule == "vietnamese_caption"

    def test_english_submission(self, default_policy, english_response, english_caption):
        decision = default_policy.check(english_response, caption=english_caption)
        assert decision.compliant


class TestThresholdConfiguration:

    def test_threshold_override(self):
        policy = LanguageCompliancePolicy(config={"thresholds": {"very_low_score": 25}})
        ctx = PolicyContext(overall_score=20)
        assert policy.evaluate_rule("very_low_scores", ctx).rejected
        assert LanguageCompliancePolicy().evaluate_rule("very_low_scores", ctx).compliant

    def test_adjustment_override(self):
        policy = LanguageCompliancePolicy(config={"adjustment": {"bonus": 0}})
        ctx = PolicyContext(
            overall_score=75,
            core_scores={"pronunciation": 20, "grammar": 15, "fluency": 25, "vocabulary": 18},
        )
        assert policy.evaluate_rule("inconsistent_core_scores", ctx).adjusted_score == 19

    def test_policy_config_deep_merge(self):
        config = get_policy_config({"thresholds": {"very_low_score": 20}})
        assert config["thresholds"]["very_low_score"] == 20
        assert config["thresholds"]["suspicious_cutoff"] == 30
        assert config["adjustment"] == {"bonus": 10, "minimum": 10}

    def test_presets(self):
        presets = get_policy_presets()
        assert set(presets) == {"strict", "balanced", "lenient"}
        assert presets["balanced"]["thresholds"] == get_policy_config()["thresholds"]
        policy = LanguageCompliancePolicy(config=presets["strict"])
        assert policy.thresholds["very_low_score"] == 25


class TestLexicon:

    def test_ascii_names_are_not_vietnamese_words(self):
        lexicon = LanguageLexicon()
        assert lexicon.find_vietnamese_words("Em and Anh went to the market") == []

    def test_finds_vietnamese_words(self):
        lexicon = LanguageLexicon()
        assert "Xin chào" in lexicon.find_vietnamese_words("Xin chào các bạn")

    def test_from_yaml_replaces_only_given_tables(self):
        lexicon = LanguageLexicon.from_yaml("url_markers:\n  - hcmc\n")
        assert lexicon.url_markers == frozenset({"hcmc"})
        assert "spanish" in lexicon.denylisted_languages
        assert lexicon.match_url_marker("https://example.com/HCMC/clip.mp4") == "hcmc"

    def test_from_yaml_rejects_unknown_table(self):
        with pytest.raises(ValueError, match="Unknown lexicon tables"):
            LanguageLexicon.from_yaml("klingon:\n  - qapla\n")

    def test_from_yaml_rejects_non_list(self):
        with pytest.raises(ValueError, match="must be a list"):
            LanguageLexicon.from_yaml("url_markers: saigon\n")

    def test_from_yaml_rejects_invalid_yaml(self):
        with pytest.raises(ValueError, match="Invalid YAML"):
            LanguageLexicon.from_yaml("url_markers: [unclosed\n")

    def test_from_file(self, tmp_path):
        path = tmp_path / "lexicon.yaml"
        path.write_text("vietnamese_names:\n  - viet\n", encoding="utf-8")
        lexicon = LanguageLexicon.from_file(str(path))
        assert lexicon.match_vietnamese_name("Viet") == "Viet"
