"""
Language denylist tables used by the compliance policy.

The tables are immutable and built once. A replacement lexicon can be loaded
from YAML (see `LanguageLexicon.from_yaml`) or injected directly into the
policy, e.g. a small table in tests.
"""
import re
from dataclasses import dataclass, fields, replace
from functools import cached_property, lru_cache
from typing import FrozenSet, Iterable, List, Optional, Pattern

import yaml

from clipgrade.core.config import settings
from clipgrade.core.logging import get_logger

logger = get_logger("policies.lexicon")


VIETNAMESE_NAMES = frozenset({
    "vietnamese", "việt", "tiếng việt", "tieng viet", "vietnam", "viet",
})

DENYLISTED_LANGUAGES = frozenset({
    # East & Southeast Asia
    "chinese", "mandarin", "cantonese", "taiwanese", "hokkien", "japanese", "korean",
    "thai", "lao", "khmer", "burmese", "indonesian", "malay", "javanese", "sundanese",
    "tagalog", "filipino", "hmong", "mongolian", "tibetan",
    # South Asia
    "hindi", "urdu", "bengali", "bangla", "punjabi", "marathi", "gujarati", "tamil",
    "telugu", "kannada", "malayalam", "nepali", "sinhala",
    # Central Asia & Middle East
    "arabic", "persian", "farsi", "dari", "pashto", "kurdish", "turkish", "azerbaijani",
    "uyghur", "kazakh", "uzbek", "turkmen", "kyrgyz", "tajik", "armenian", "georgian",
    "hebrew", "yiddish",
    # Africa
    "amharic", "somali", "swahili", "yoruba", "igbo", "hausa", "zulu", "xhosa",
    "afrikaans", "malagasy",
    # Europe
    "spanish", "french", "german", "italian", "portuguese", "russian", "dutch", "flemish",
    "danish", "swedish", "norwegian", "icelandic", "finnish", "estonian", "latvian",
    "lithuanian", "polish", "czech", "slovak", "hungarian", "romanian", "moldovan",
    "bulgarian", "serbian", "croatian", "bosnian", "slovenian", "macedonian", "albanian",
    "greek", "ukrainian", "belarusian", "catalan", "basque", "galician", "maltese",
    # Also matched in accent notes, so "English (Irish accent)" is rejected as well
    "irish", "welsh",
    # Other
    "haitian creole", "latin", "esperanto",
})

MIXED_LANGUAGE_INDICATORS = frozenset({
    "mixed", "partially", "partial", "bilingual", "multilingual", "code-switching",
    "code switching", "combination", "multiple languages", "both languages",
    "limited english", "minimal english", "little english", "some english",
})

# Vietnamese function words and phrases. Single words are kept only when they
# carry diacritics, so that they cannot collide with English words or names.
VIETNAMESE_WORDS = frozenset({
    "xin chào", "chào", "cảm ơn", "xin lỗi", "không", "của", "được", "tôi", "tôi sẽ",
    "các bạn", "bạn bè", "hôm nay", "bây giờ", "chúng ta", "chúng tôi", "người",
    "những", "này", "đây", "đó", "và", "một", "có", "có thể", "là", "với", "trong",
    "để", "về", "từ", "trước", "cũng", "thì", "như", "nếu", "mà", "rồi", "vì", "nên",
    "chỉ", "cả", "đều", "đang", "đã", "sẽ", "vẫn", "việc", "làm", "làm việc", "thế",
    "gì", "đâu", "bao giờ", "bằng", "phải", "cần", "muốn", "thích", "biết", "hiểu",
    "nói", "đọc", "viết", "học", "dạy", "rất", "nhiều", "hơn", "nữa", "chưa", "vậy",
    "tất cả", "gia đình", "tiếng việt", "việt nam", "sài gòn", "hà nội", "lịch sử",
    "ngày", "năm", "cuộc sống",
    # unaccented spellings common in captions
    "xin chao", "cam on", "cac ban", "hom nay", "chung ta", "toi se", "tieng viet",
    "viet nam",
})

NON_ENGLISH_PHRASES = frozenset({
    "vietnamese", "tiếng việt", "tieng viet",
    "not english", "non-english", "non english", "not in english", "no english",
    "isn't english", "not speaking english", "no english speech",
})

OTHER_LANGUAGE_PHRASES = frozenset({
    "mixed language", "mixed-language", "mixed languages", "bilingual",
    "foreign language", "unidentified language", "unknown language",
    "another language", "other language", "multiple languages",
    "code-switching", "code switching",
})

URL_MARKERS = frozenset({"vietnam", "vietnamese", "viet", "saigon", "hanoi"})

LANGUAGE_DIFFICULTY_PHRASES = frozenset({
    "difficult to understand", "hard to understand", "broken english",
    "barely english", "poor english", "limited english", "minimal english",
    "little english", "unclear speech", "mostly unintelligible",
})

_VIETNAMESE_DIACRITICS = re.compile(r"[ăđơưĂĐƠƯẠ-ỹ]")

# Verbs/nouns that turn a bare language name into a statement about the speech
_LANGUAGE_LEAD = r"(?:speaks?|speaking|spoken|in|uses?|using|switch(?:es|ing)?\s+to)"
_LANGUAGE_TRAIL = r"(?:speech|language|words?|phrases?|content|audio|dialogue)"


def _term_pattern(terms: Iterable[str]) -> Pattern:
    """Whole-word alternation over terms, longest first; spaces match any whitespace."""
    ordered = sorted({t.lower() for t in terms if t}, key=len, reverse=True)
    if not ordered:
        return re.compile(r"(?!x)x")
    alternation = "|".join(re.escape(t).replace(r"\ ", r"\s+") for t in ordered)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", re.IGNORECASE)


def _first_match(pattern: Pattern, text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    match = pattern.search(text)
    return match.group(0) if match else None


@dataclass(frozen=True)
class LanguageLexicon:
    """Immutable set of denylist tables."""
    vietnamese_names: FrozenSet[str] = VIETNAMESE_NAMES
    denylisted_languages: FrozenSet[str] = DENYLISTED_LANGUAGES
    mixed_language_indicators: FrozenSet[str] = MIXED_LANGUAGE_INDICATORS
    vietnamese_words: FrozenSet[str] = VIETNAMESE_WORDS
    non_english_phrases: FrozenSet[str] = NON_ENGLISH_PHRASES
    other_language_phrases: FrozenSet[str] = OTHER_LANGUAGE_PHRASES
    url_markers: FrozenSet[str] = URL_MARKERS
    language_difficulty_phrases: FrozenSet[str] = LANGUAGE_DIFFICULTY_PHRASES

    # ===== LOADING =====

    @classmethod
    def from_dict(cls, data: dict) -> "LanguageLexicon":
        """Build a lexicon; keys not present keep the built-in table."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown lexicon tables: {sorted(unknown)}")
        overrides = {}
        for key, values in data.items():
            if not isinstance(values, list):
                raise ValueError(f"Lexicon table '{key}' must be a list")
            overrides[key] = frozenset(str(v).lower() for v in values)
        return replace(cls(), **overrides)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "LanguageLexicon":
        """Parse from YAML string."""
        try:
            data = yaml.safe_load(yaml_str) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML: {e}")
        if not isinstance(data, dict):
            raise ValueError("Lexicon YAML must be a mapping of table name to list")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: str) -> "LanguageLexicon":
        """Load from a YAML file."""
        with open(file_path, "r", encoding="utf-8") as f:
            return cls.from_yaml(f.read())

    # ===== COMPILED MATCHERS =====

    @cached_property
    def _vietnamese_name_re(self) -> Pattern:
        return _term_pattern(self.vietnamese_names)

    @cached_property
    def _denylisted_language_re(self) -> Pattern:
        return _term_pattern(self.denylisted_languages)

    @cached_property
    def _mixed_indicator_re(self) -> Pattern:
        return _term_pattern(self.mixed_language_indicators)

    @cached_property
    def _vietnamese_word_re(self) -> Pattern:
        return _term_pattern(self.vietnamese_words)

    @cached_property
    def _non_english_phrase_re(self) -> Pattern:
        return _term_pattern(self.non_english_phrases)

    @cached_property
    def _other_language_phrase_re(self) -> Pattern:
        return _term_pattern(self.other_language_phrases)

    @cached_property
    def _language_mention_re(self) -> Pattern:
        names = sorted(self.denylisted_languages, key=len, reverse=True)
        if not names:
            return re.compile(r"(?!x)x")
        alternation = "|".join(re.escape(n).replace(r"\ ", r"\s+") for n in names)
        return re.compile(
            rf"(?<!\w)(?:{_LANGUAGE_LEAD}\s+(?:{alternation})|(?:{alternation})\s+{_LANGUAGE_TRAIL})(?!\w)",
            re.IGNORECASE,
        )

    @cached_property
    def _difficulty_phrase_re(self) -> Pattern:
        return _term_pattern(self.language_difficulty_phrases)

    # ===== QUERIES =====

    def match_vietnamese_name(self, text: Optional[str]) -> Optional[str]:
        return _first_match(self._vietnamese_name_re, text)

    def match_denylisted_language(self, text: Optional[str]) -> Optional[str]:
        return _first_match(self._denylisted_language_re, text)

    def match_mixed_indicator(self, text: Optional[str]) -> Optional[str]:
        return _first_match(self._mixed_indicator_re, text)

    def find_vietnamese_words(self, text: Optional[str]) -> List[str]:
        """All Vietnamese lexicon entries found in text, in order of appearance."""
        if not text:
            return []
        return [m.group(0) for m in self._vietnamese_word_re.finditer(text)]

    def has_vietnamese_diacritics(self, text: Optional[str]) -> bool:
        return bool(text) and bool(_VIETNAMESE_DIACRITICS.search(text))

    def match_non_english_phrase(self, text: Optional[str]) -> Optional[str]:
        return _first_match(self._non_english_phrase_re, text)

    def match_other_language_phrase(self, text: Optional[str]) -> Optional[str]:
        """Generic other-language phrasing or a statement about a denylisted language."""
        return (
            _first_match(self._other_language_phrase_re, text)
            or _first_match(self._language_mention_re, text)
        )

    def match_url_marker(self, url: Optional[str]) -> Optional[str]:
        """Marker substring in a URL (plain substring match, URLs have no word breaks)."""
        if not url:
            return None
        lowered = url.lower()
        for marker in sorted(self.url_markers, key=len, reverse=True):
            if marker in lowered:
                return marker
        return None

    def match_difficulty_phrase(self, text: Optional[str]) -> Optional[str]:
        return _first_match(self._difficulty_phrase_re, text)


DEFAULT_LEXICON = LanguageLexicon()


@lru_cache(maxsize=1)
def get_lexicon() -> LanguageLexicon:
    """Configured lexicon: `settings.lexicon_path` if set, else the built-in tables."""
    if settings.lexicon_path:
        logger.info(f"Loading language lexicon from {settings.lexicon_path}")
        return LanguageLexicon.from_file(settings.lexicon_path)
    return DEFAULT_LEXICON
