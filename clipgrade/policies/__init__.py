"""
English-only language policy: denylist tables, rule engine and the
zero-score rejection evaluation.
"""
from clipgrade.policies.lexicon import LanguageLexicon, DEFAULT_LEXICON, get_lexicon
from clipgrade.policies.compliance import (
    LanguageCompliancePolicy,
    PolicyContext,
    PolicyDecision,
    PolicyOutcome,
    PolicyRule,
    PolicyStage,
    RejectionReason,
    RuleHit,
)
from clipgrade.policies.non_english import NonEnglishEvaluationBuilder, display_language

__all__ = [
    "LanguageLexicon",
    "DEFAULT_LEXICON",
    "get_lexicon",
    "LanguageCompliancePolicy",
    "PolicyContext",
    "PolicyDecision",
    "PolicyOutcome",
    "PolicyRule",
    "PolicyStage",
    "RejectionReason",
    "RuleHit",
    "NonEnglishEvaluationBuilder",
    "display_language",
]
