import threading
import time

import pytest

from analyzer import UrgencyAnalyzer
from lexicon import LexiconCache

SAMPLE_LEXICON = "\n".join([
    "danger\t-3\t0.5\t[-3, -3, -3]",
    "dangerous\t-3",
    "help\t0",
    "need\t-1",
    "terrible\t-2.5",
    "happy\t2.7",
    "good\t1.9",
])


class FakeSource:
    """In-memory lexicon source that counts reads and can be slow or failing."""

    def __init__(self, raw=SAMPLE_LEXICON, delay=0.0, fail_times=0):
        self.raw = raw
        self.delay = delay
        self.fail_times = fail_times
        self.calls = 0
        self._lock = threading.Lock()

    def read(self):
        with self._lock:
            self.calls += 1
            attempt = self.calls
        if self.delay:
            time.sleep(self.delay)
        if attempt <= self.fail_times:
            raise OSError("lexicon storage offline")
        return self.raw


@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def cache(source):
    return LexiconCache(source, timeout=5)


@pytest.fixture
def analyzer(cache):
    return UrgencyAnalyzer(cache)


class SequenceSource:
    """Returns the given payloads one per read (the last one repeats), after an optional delay."""

    def __init__(self, payloads, delay=0.0):
        self.payloads = list(payloads)
        self.delay = delay
        self.calls = 0
        self._lock = threading.Lock()

    def read(self):
        with self._lock:
            self.calls += 1
            attempt = self.calls
        if self.delay:
            time.sleep(self.delay)
        return self.payloads[min(attempt, len(self.payloads)) - 1]
