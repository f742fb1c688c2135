from dataclasses import dataclass
from typing import Iterable, Mapping

POSITIVE = "positive"
NEGATIVE = "negative"
NEUTRAL = "neutral"


@dataclass(frozen=True)
class SentimentScore:
    score: float
    sentiment: str


def polarity(score: float) -> str:
    if score > 0:
        return POSITIVE
    if score < 0:
        return NEGATIVE
    return NEUTRAL


def score_sentiment(tokens: Iterable[str], lexicon: Mapping[str, float]) -> SentimentScore:
    """
    Sum lexicon scores over the tokens; out-of-vocabulary tokens count as 0.

    The sum is not divided by the token count: longer texts reach larger
    magnitudes, and the urgency thresholds assume raw sums.
    """
    total = 0.0
    for tok in tokens:
        total += lexicon.get(tok, 0.0)
    return SentimentScore(score=total, sentiment=polarity(total))
