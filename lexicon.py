"""
Lexicon loading: reads a tab-separated `token<TAB>score` resource and caches
the parsed table for the lifetime of the process.

The cache is single-flight: callers that arrive while a load is running wait
on that same load instead of starting their own. A failed load leaves nothing
behind, so the next caller starts a fresh attempt.
"""
import asyncio
import logging
import math
import re
from types import MappingProxyType
from typing import Mapping, Optional

import requests

from config import LEXICON_FETCH_TIMEOUT

log = logging.getLogger(__name__)

_FIELD_SPLIT_RE = re.compile(r"\t+")
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


class LexiconUnavailableError(RuntimeError):
    """The lexicon could not be fetched or parsed; urgency cannot be judged."""


def parse_lexicon(raw: str) -> dict:
    """Parse lexicon text into {token: score}. Malformed lines are skipped, never fatal."""
    lexicon = {}
    for index, line in enumerate(raw.split("\n"), start=1):
        if not line or not line.strip():
            continue

        parts = _FIELD_SPLIT_RE.split(line.strip())
        if len(parts) < 2:
            log.warning("Skipping invalid lexicon line %d: %r", index, line)
            continue

        word = parts[0].strip()
        raw_score = parts[1].strip()
        if not word or not _DECIMAL_RE.fullmatch(raw_score):
            log.warning("Skipping malformed lexicon entry on line %d: %r", index, line)
            continue

        score = float(raw_score)
        if not math.isfinite(score):
            log.warning("Skipping non-finite lexicon score on line %d: %r", index, line)
            continue

        # last occurrence wins
        lexicon[word.lower()] = score
    return lexicon


class FileLexiconSource:
    def __init__(self, path: str):
        self.path = path

    def read(self) -> str:
        with open(self.path, encoding="utf-8") as f:
            return f.read()

    def __repr__(self):
        return f"FileLexiconSource({self.path!r})"


class HttpLexiconSource:
    def __init__(self, url: str, timeout: float = LEXICON_FETCH_TIMEOUT):
        self.url = url
        self.timeout = timeout

    def read(self) -> str:
        resp = requests.get(self.url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.text

    def __repr__(self):
        return f"HttpLexiconSource({self.url!r})"


def source_from_location(location: str, timeout: float = LEXICON_FETCH_TIMEOUT):
    """Pick an HTTP source for http(s) URLs, a file source for anything else."""
    if location.startswith(("http://", "https://")):
        return HttpLexiconSource(location, timeout=timeout)
    return FileLexiconSource(location)


class LexiconCache:
    def __init__(self, source, timeout: float = LEXICON_FETCH_TIMEOUT, executor=None):
        self.source = source
        self.timeout = timeout
        self.executor = executor
        self._lexicon: Optional[Mapping[str, float]] = None
        self._pending: Optional[asyncio.Future] = None

    @property
    def loaded(self) -> bool:
        return self._lexicon is not None

    @property
    def size(self) -> int:
        return len(self._lexicon) if self._lexicon is not None else 0

    async def get(self) -> Mapping[str, float]:
        """Return the lexicon, joining (or starting) the single in-flight load if needed."""
        if self._lexicon is not None:
            return self._lexicon

        if self._pending is None or self._pending.done():
            self._pending = asyncio.ensure_future(self._load())

        # shield: one cancelled caller must not cancel the load everyone else waits on
        return await asyncio.shield(self._pending)

    async def init(self) -> Mapping[str, float]:
        """Eagerly load the lexicon, e.g. on service start-up."""
        return await self.get()

    def reset(self) -> None:
        """Forget the cached lexicon; the next get() reloads from the source."""
        self._lexicon = None
        self._pending = None

    async def _load(self) -> Mapping[str, float]:
        task = asyncio.current_task()
        try:
            lexicon = await self._fetch_and_parse()
        except LexiconUnavailableError as exc:
            log.error("Lexicon load from %r failed: %s", self.source, exc)
            raise
        finally:
            # a reset() during the load detaches this task; it must not touch the cache
            superseded = self._pending is not task
            if not superseded:
                self._pending = None

        if superseded:
            log.info("Discarding lexicon load from %r superseded by reset()", self.source)
            return lexicon

        self._lexicon = lexicon
        log.info("Lexicon loaded from %r: %d entries", self.source, len(lexicon))
        return lexicon

    async def _fetch_and_parse(self) -> Mapping[str, float]:
        loop = asyncio.get_running_loop()
        try:
            raw = await asyncio.wait_for(
                loop.run_in_executor(self.executor, self.source.read),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            raise LexiconUnavailableError(
                f"lexicon fetch timed out after {self.timeout}s"
            ) from exc
        except Exception as exc:
            raise LexiconUnavailableError(f"lexicon fetch failed: {exc}") from exc

        try:
            parsed = parse_lexicon(raw)
        except Exception as exc:
            raise LexiconUnavailableError(f"lexicon parse failed: {exc}") from exc
        if not parsed:
            raise LexiconUnavailableError("lexicon source contained no usable entries")
        return MappingProxyType(parsed)
