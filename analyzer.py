import logging
from dataclasses import asdict, dataclass
from typing import Any, Optional, Sequence, Union

from config import KEYWORD_MATCH_MODE, LEXICON_FETCH_TIMEOUT, LEXICON_SOURCE, URGENCY_KEYWORDS
from keywords import get_matcher, has_urgent_signal, prepare_keywords
from lexicon import LexiconCache, source_from_location
from normalizer import normalize
from sentiment import score_sentiment
from urgency import classify_urgency, is_urgent

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidText:
    text: str


@dataclass(frozen=True)
class InvalidInput:
    reason: str


AnalysisInput = Union[ValidText, InvalidInput]


def validate_input(value: Any) -> AnalysisInput:
    if not isinstance(value, str):
        return InvalidInput(f"expected str, got {type(value).__name__}")
    if not value.strip():
        return InvalidInput("empty text")
    return ValidText(value)


@dataclass(frozen=True)
class AnalysisResult:
    text: str
    sentiment: str  # "positive" | "negative" | "neutral"
    score: float
    urgency: str    # "High" | "Critical"

    def to_dict(self) -> dict:
        return asdict(self)


class UrgencyAnalyzer:
    """
    Runs normalize -> score -> keyword match -> classify over one complaint text.

    Only High and Critical outcomes produce a result; everything else is None.
    A lexicon that cannot be loaded raises LexiconUnavailableError instead of
    looking like a "not urgent" answer.
    """

    def __init__(self, cache: LexiconCache, keywords: Sequence[str] = URGENCY_KEYWORDS, matcher=None):
        self.cache = cache
        self.keywords = prepare_keywords(keywords)
        self.matcher = matcher if matcher is not None else get_matcher("substring")

    async def analyze(self, value: Any) -> Optional[AnalysisResult]:
        checked = validate_input(value)
        if isinstance(checked, InvalidInput):
            return None

        lexicon = await self.cache.get()

        tokens = normalize(checked.text)
        scored = score_sentiment(tokens, lexicon)
        urgent_signal = has_urgent_signal(tokens, self.keywords, self.matcher)
        urgency = classify_urgency(urgent_signal, scored.score, scored.sentiment)

        if not is_urgent(urgency):
            return None

        log.debug("Urgency %s (score=%.2f, keyword=%s): %s",
                  urgency, scored.score, urgent_signal, checked.text[:80])
        return AnalysisResult(
            text=checked.text,
            sentiment=scored.sentiment,
            score=scored.score,
            urgency=urgency,
        )


_default_analyzer: Optional[UrgencyAnalyzer] = None


def default_analyzer() -> UrgencyAnalyzer:
    """Process-wide analyzer built from config.py settings, created on first use."""
    global _default_analyzer
    if _default_analyzer is None:
        cache = LexiconCache(
            source_from_location(LEXICON_SOURCE, timeout=LEXICON_FETCH_TIMEOUT),
            timeout=LEXICON_FETCH_TIMEOUT,
        )
        _default_analyzer = UrgencyAnalyzer(cache, URGENCY_KEYWORDS, get_matcher(KEYWORD_MATCH_MODE))
    return _default_analyzer


async def analyze_complaint_urgency(text: Any, analyzer: Optional[UrgencyAnalyzer] = None) -> Optional[AnalysisResult]:
    return await (analyzer or default_analyzer()).analyze(text)
