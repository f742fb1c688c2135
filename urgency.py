from typing import Optional

from config import CRITICAL_SCORE_THRESHOLD
from sentiment import NEGATIVE

CRITICAL = "Critical"
HIGH = "High"

# Lower rank surfaces first in the urgent queue
PRIORITY_RANK = {CRITICAL: 1, HIGH: 2}


def classify_urgency(has_urgent_signal: bool, score: float, sentiment: str) -> Optional[str]:
    # Critical first: a keyword hit with a strong negative score also satisfies plain High
    if has_urgent_signal and score <= CRITICAL_SCORE_THRESHOLD:
        return CRITICAL  # strong negative + urgent word
    if has_urgent_signal:
        return HIGH      # urgent keyword only
    if sentiment == NEGATIVE and score <= CRITICAL_SCORE_THRESHOLD:
        return HIGH      # very negative
    return None          # low / neutral: never surfaced


def is_urgent(tier: Optional[str]) -> bool:
    return tier in PRIORITY_RANK
