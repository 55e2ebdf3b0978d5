"""
English-only language compliance policy.

An ordered rule engine: rules are evaluated top to bottom and the first hit
decides. Rules are grouped in stages matching the points in the parse where
their inputs become available:

- METADATA: detected-language token, caption, response phrasing, video URL
- SCORE: implausible overall scores
- CONSISTENCY: overall score versus core skill scores

False rejections are preferred over false acceptances, so several rules
overlap on purpose.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from clipgrade.core.config import get_policy_config
from clipgrade.core.logging import get_logger
from clipgrade.evaluation.metrics import CORE_SKILL_METRICS
from clipgrade.extraction.scores import detected_language_name, extract_language_detection
from clipgrade.policies.lexicon import LanguageLexicon, get_lexicon

logger = get_logger("policies.compliance")

VIETNAMESE_LABEL = "Vietnamese"
NON_ENGLISH_LABEL = "non-English"


class PolicyStage(str, Enum):
    """Point in the parse at which a rule can run."""
    METADATA = "metadata"
    SCORE = "score"
    CONSISTENCY = "consistency"


class RejectionReason(str, Enum):
    """Why a submission failed the language policy."""
    VIETNAMESE = "vietnamese"
    NON_ENGLISH = "non-english-detected"
    MIXED_LANGUAGE = "mixed-language"
    SUSPICIOUS_LOW_SCORES = "suspicious-low-scores"
    VERY_LOW_SCORES = "very-low-scores-forced-to-zero"
    INCONSISTENT_SCORES = "inconsistent-scores"


class PolicyOutcome(str, Enum):
    """What the parser does with a rule hit."""
    REJECT = "reject"   # full-zero evaluation
    ADJUST = "adjust"   # zero evaluation with an overridden overall score


@dataclass
class PolicyContext:
    """Inputs available to the rules."""
    response_text: str = ""
    caption: str = ""
    video_url: str = ""
    detected_language: Optional[str] = None
    overall_score: Optional[int] = None
    core_scores: Dict[str, Optional[int]] = field(default_factory=dict)

    @property
    def language_name(self) -> Optional[str]:
        return detected_language_name(self.detected_language)

    def core_average(self) -> Optional[float]:
        """Mean of the core skill scores that were found."""
        values = [
            self.core_scores[name] for name in CORE_SKILL_METRICS
            if self.core_scores.get(name) is not None
        ]
        if not values:
            return None
        return sum(values) / len(values)


@dataclass(frozen=True)
class RuleHit:
    """A rule's finding: the language label for the rejection and what matched."""
    language: str
    evidence: str
    adjusted_score: Optional[int] = None


@dataclass(frozen=True)
class PolicyRule:
    """A single (predicate, outcome) entry of the rule list."""
    name: str
    stage: PolicyStage
    reason: RejectionReason
    check: Callable[[PolicyContext], Optional[RuleHit]]
    outcome: PolicyOutcome = PolicyOutcome.REJECT


@dataclass(frozen=True)
class PolicyDecision:
    """Result of running the policy."""
    compliant: bool
    reason: Optional[RejectionReason] = None
    rule: Optional[str] = None
    outcome: Optional[PolicyOutcome] = None
    language: Optional[str] = None
    evidence: Optional[str] = None
    adjusted_score: Optional[int] = None

    @property
    def rejected(self) -> bool:
        return not self.compliant

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compliant": self.compliant,
            "reason": self.reason.value if self.reason else None,
            "rule": self.rule,
            "outcome": self.outcome.value if self.outcome else None,
            "language": self.language,
            "evidence": self.evidence,
            "adjusted_score": self.adjusted_score,
        }


COMPLIANT = PolicyDecision(compliant=True)


class LanguageCompliancePolicy:
    """Deterministic rule engine deciding whether a submission is English-only."""

    def __init__(self, config: Dict[str, Any] = None, lexicon: LanguageLexicon = None):
        defaults = get_policy_config()
        config = config or {}
        self.thresholds = {**defaults["thresholds"], **config.get("thresholds", {})}
        self.adjustment = {**defaults["adjustment"], **config.get("adjustment", {})}
        self.lexicon = lexicon or get_lexicon()

        self.rules: List[PolicyRule] = [
            PolicyRule("vietnamese_language_token", PolicyStage.METADATA,
                       RejectionReason.VIETNAMESE, self._vietnamese_token),
            PolicyRule("denylisted_language_token", PolicyStage.METADATA,
                       RejectionReason.NON_ENGLISH, self._denylisted_token),
            PolicyRule("mixed_language_token", PolicyStage.METADATA,
                       RejectionReason.MIXED_LANGUAGE, self._mixed_token),
            PolicyRule("vietnamese_caption", PolicyStage.METADATA,
                       RejectionReason.VIETNAMESE, self._vietnamese_caption),
            PolicyRule("non_english_response_phrases", PolicyStage.METADATA,
                       RejectionReason.NON_ENGLISH, self._non_english_phrases),
            PolicyRule("other_language_response_phrases", PolicyStage.METADATA,
                       RejectionReason.NON_ENGLISH, self._other_language_phrases),
            PolicyRule("vietnamese_video_url", PolicyStage.METADATA,
                       RejectionReason.NON_ENGLISH, self._vietnamese_url),
            PolicyRule("suspicious_low_scores", PolicyStage.SCORE,
                       RejectionReason.SUSPICIOUS_LOW_SCORES, self._suspicious_low_score),
            PolicyRule("very_low_scores", PolicyStage.SCORE,
                       RejectionReason.VERY_LOW_SCORES, self._very_low_score),
            PolicyRule("inconsistent_core_scores", PolicyStage.CONSISTENCY,
                       RejectionReason.INCONSISTENT_SCORES, self._inconsistent_scores,
                       outcome=PolicyOutcome.ADJUST),
            PolicyRule("high_score_with_non_english_indicators", PolicyStage.CONSISTENCY,
                       RejectionReason.VIETNAMESE, self._high_score_non_english),
        ]

    # ===== ENTRY POINTS =====

    def check(
        self,
        response_text: str,
        caption: Optional[str] = None,
        video_url: Optional[str] = None,
    ) -> PolicyDecision:
        """Run the metadata rules against raw inputs."""
        context = PolicyContext(
            response_text=response_text or "",
            caption=caption or "",
            video_url=video_url or "",
            detected_language=extract_language_detection(response_text or ""),
        )
        return self.evaluate(context, PolicyStage.METADATA)

    def evaluate(self, context: PolicyContext, stage: Optional[PolicyStage] = None) -> PolicyDecision:
        """Run rules in order (optionally only one stage); the first hit wins."""
        for rule in self.rules:
            if stage is not None and rule.stage != stage:
                continue
            decision = self._apply(rule, context)
            if decision.rejected:
                return decision
        return COMPLIANT

    def evaluate_rule(self, name: str, context: PolicyContext) -> PolicyDecision:
        """Run a single rule by name."""
        for rule in self.rules:
            if rule.name == name:
                return self._apply(rule, context)
        raise KeyError(f"Unknown policy rule '{name}'. Available: {self.rule_names()}")

    def rule_names(self) -> List[str]:
        return [rule.name for rule in self.rules]

    def _apply(self, rule: PolicyRule, context: PolicyContext) -> PolicyDecision:
        hit = rule.check(context)
        if hit is None:
            return COMPLIANT
        logger.debug(f"Policy rule '{rule.name}' triggered ({rule.reason.value}): {hit.evidence!r}")
        return PolicyDecision(
            compliant=False,
            reason=rule.reason,
            rule=rule.name,
            outcome=rule.outcome,
            language=hit.language,
            evidence=hit.evidence,
            adjusted_score=hit.adjusted_score,
        )

    # ===== METADATA RULES =====

    def _vietnamese_token(self, ctx: PolicyContext) -> Optional[RuleHit]:
        match = self.lexicon.match_vietnamese_name(ctx.language_name)
        if match:
            return RuleHit(VIETNAMESE_LABEL, match)
        return None

    def _denylisted_token(self, ctx: PolicyContext) -> Optional[RuleHit]:
        match = self.lexicon.match_denylisted_language(ctx.language_name)
        if match:
            return RuleHit(ctx.language_name, match)
        return None

    def _mixed_token(self, ctx: PolicyContext) -> Optional[RuleHit]:
        match = self.lexicon.match_mixed_indicator(ctx.language_name)
        if match:
            return RuleHit("mixed-language", match)
        return None

    def _vietnamese_caption(self, ctx: PolicyContext) -> Optional[RuleHit]:
        words = self.lexicon.find_vietnamese_words(ctx.caption)
        if words:
            return RuleHit(VIETNAMESE_LABEL, ", ".join(words[:5]))
        if self.lexicon.has_vietnamese_diacritics(ctx.caption):
            return RuleHit(VIETNAMESE_LABEL, "vietnamese diacritics in caption")
        return None

    def _non_english_phrases(self, ctx: PolicyContext) -> Optional[RuleHit]:
        match = self.lexicon.match_non_english_phrase(ctx.response_text)
        if match:
            label = VIETNAMESE_LABEL if self.lexicon.match_vietnamese_name(match) else NON_ENGLISH_LABEL
            return RuleHit(label, match)
        words = self.lexicon.find_vietnamese_words(ctx.response_text)
        if words:
            return RuleHit(VIETNAMESE_LABEL, ", ".join(words[:5]))
        return None

    def _other_language_phrases(self, ctx: PolicyContext) -> Optional[RuleHit]:
        match = self.lexicon.match_other_language_phrase(ctx.response_text)
        if match:
            language = self.lexicon.match_denylisted_language(match)
            return RuleHit(language or NON_ENGLISH_LABEL, match)
        return None

    def _vietnamese_url(self, ctx: PolicyContext) -> Optional[RuleHit]:
        marker = self.lexicon.match_url_marker(ctx.video_url)
        if marker:
            return RuleHit(VIETNAMESE_LABEL, marker)
        return None

    # ===== SCORE RULES =====

    def _suspicious_low_score(self, ctx: PolicyContext) -> Optional[RuleHit]:
        score = ctx.overall_score
        if score is None:
            return None
        if not 0 < score < self.thresholds["suspicious_ceiling"]:
            return None
        if score >= self.thresholds["suspicious_cutoff"]:
            return None
        phrase = self.lexicon.match_difficulty_phrase(ctx.response_text)
        if phrase:
            return RuleHit(NON_ENGLISH_LABEL, f"overall {score} with '{phrase}'")
        return None

    def _very_low_score(self, ctx: PolicyContext) -> Optional[RuleHit]:
        score = ctx.overall_score
        if score is not None and 0 < score < self.thresholds["very_low_score"]:
            return RuleHit(NON_ENGLISH_LABEL, f"overall {score}")
        return None

    # ===== CONSISTENCY RULES =====

    def _inconsistent_scores(self, ctx: PolicyContext) -> Optional[RuleHit]:
        score = ctx.overall_score
        average = ctx.core_average()
        if score is None or average is None:
            return None
        if score <= self.thresholds["consistency_overall"]:
            return None
        if average >= self.thresholds["consistency_core_average"]:
            return None
        adjusted = int(max(
            self.adjustment["minimum"],
            min(average + self.adjustment["bonus"], score),
        ))
        return RuleHit(NON_ENGLISH_LABEL, f"overall {score} vs core average {average:.1f}", adjusted)

    def _high_score_non_english(self, ctx: PolicyContext) -> Optional[RuleHit]:
        score = ctx.overall_score
        if score is None or score <= self.thresholds["high_score_indicator"]:
            return None
        evidence = (
            self.lexicon.match_non_english_phrase(ctx.response_text)
            or next(iter(self.lexicon.find_vietnamese_words(ctx.response_text)), None)
            or self.lexicon.match_url_marker(ctx.video_url)
        )
        if evidence:
            return RuleHit(VIETNAMESE_LABEL, f"overall {score} with '{evidence}'")
        return None
