import re

# Anything that is not a word character, whitespace or a hyphen
_STRIP_RE = re.compile(r"[^\w\s-]")


def normalize(text: str) -> list:
    """Lowercase, drop punctuation (hyphens survive) and split on whitespace."""
    return _STRIP_RE.sub("", text.lower()).split()
