"""
Urgency keyword matching strategies.

SubstringMatch is the legacy behavior: a token matches when it *contains* a
keyword, so "nowhere" matches "now". ExactTokenMatch only accepts whole tokens,
plus multi-word keywords ("karon dayon") appearing as consecutive tokens.
"""
from typing import Iterable, Sequence

from config import KEYWORD_MATCH_MODE, URGENCY_KEYWORDS


class SubstringMatch:
    name = "substring"

    def matches(self, tokens: Sequence[str], keywords: Sequence[str]) -> bool:
        return any(kw in tok for tok in tokens for kw in keywords)


class ExactTokenMatch:
    name = "exact"

    def matches(self, tokens: Sequence[str], keywords: Sequence[str]) -> bool:
        token_set = set(tokens)
        for kw in keywords:
            parts = kw.split()
            if len(parts) == 1:
                if parts[0] in token_set:
                    return True
            elif parts and _contains_run(tokens, parts):
                return True
        return False


def _contains_run(tokens: Sequence[str], parts: Sequence[str]) -> bool:
    width = len(parts)
    for start in range(len(tokens) - width + 1):
        if list(tokens[start:start + width]) == list(parts):
            return True
    return False


MATCHERS = {
    SubstringMatch.name: SubstringMatch,
    ExactTokenMatch.name: ExactTokenMatch,
}


def get_matcher(mode: str = KEYWORD_MATCH_MODE):
    try:
        return MATCHERS[mode.strip().lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown keyword match mode {mode!r}; expected one of {sorted(MATCHERS)}"
        ) from None


def prepare_keywords(keywords: Iterable[str]) -> tuple:
    """Lowercase and trim keywords, dropping blanks (an empty keyword would match every token)."""
    return tuple(k for k in (str(kw).strip().lower() for kw in keywords) if k)


def has_urgent_signal(tokens: Sequence[str], keywords: Sequence[str] = URGENCY_KEYWORDS, matcher=None) -> bool:
    """True if any token carries any urgency keyword under the given matching strategy."""
    if matcher is None:
        matcher = SubstringMatch()
    return matcher.matches(tokens, keywords)
