"""
Example usage of the clipgrade parser and language policy.
"""
from clipgrade.evaluation import ParseError
from clipgrade.parser import ResponseParser
from clipgrade.policies import LanguageCompliancePolicy, LanguageLexicon


MODEL_RESPONSE = """**LANGUAGE DETECTED:** English - clear speech throughout

**VIDEO ANALYSIS:**
The speaker introduces a short talk about local history at a steady pace.

**OVERALL SCORE:** 82 - Strong performance

**SCORES:**
- Pronunciation: 85
- Grammar: 88
- Vocabulary: 79
- Fluency: 81

**STRENGTHS:**
- Clear pronunciation of individual sounds
- Accurate grammar in complex sentences

**WEAKNESSES:**
- Limited eye contact with the camera

**DETAILED FEEDBACK:**
You delivered a well organised talk with accurate grammar and clear pronunciation.
"""


# Example 1: Basic parse
def example_basic():
    print("=" * 60)
    print("Example 1: Parse a model response")
    print("=" * 60)

    evaluation = ResponseParser().parse(MODEL_RESPONSE, caption="A quick history lesson")

    print(f"\nScore: {evaluation.score}")
    for name, category in evaluation.categories().items():
        print(f"  {name}: {category.score}")
    print(f"\nStrengths: {evaluation.strengths}")
    print(f"\nFeedback:\n{evaluation.feedback}")


# Example 2: Language policy rejection
def example_rejection():
    print("=" * 60)
    print("Example 2: Caption in another language")
    print("=" * 60)

    evaluation = ResponseParser().parse(
        MODEL_RESPONSE,
        caption="Xin chào các bạn, hôm nay tôi sẽ nói về lịch sử",
    )
    print(f"\nScore: {evaluation.score}")
    print(f"Rejection reason: {evaluation.rejection_reason}")
    print(f"\n{evaluation.feedback}")


# Example 3: Custom thresholds and lexicon
def example_custom_policy():
    print("=" * 60)
    print("Example 3: Strict thresholds and a custom lexicon")
    print("=" * 60)

    policy = LanguageCompliancePolicy(
        config={"thresholds": {"very_low_score": 25}},
        lexicon=LanguageLexicon.from_file("examples/lexicon.yaml"),
    )
    parser = ResponseParser(policy=policy)

    evaluation = parser.parse(MODEL_RESPONSE, video_url="https://cdn.example.com/hcmc/clip.mp4")
    print(f"\nScore: {evaluation.score}")
    print(f"Rejection reason: {evaluation.rejection_reason}")


# Example 4: Handling unusable responses
def example_failure():
    print("=" * 60)
    print("Example 4: Incomplete model output")
    print("=" * 60)

    try:
        ResponseParser().parse("**OVERALL SCORE:** 70\nThe video was fine.")
    except ParseError as e:
        print(f"\nParse failed: {e.reason}")
        print(f"Missing: {getattr(e, 'missing', [])}")


if __name__ == "__main__":
    example_basic()
    example_rejection()
    example_custom_policy()
    example_failure()
