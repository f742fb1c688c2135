"""End-to-end tests for UrgencyAnalyzer and the urgent complaints queue."""

import asyncio

import pytest

from analyzer import (
    AnalysisResult,
    InvalidInput,
    UrgencyAnalyzer,
    ValidText,
    analyze_complaint_urgency,
    default_analyzer,
    validate_input,
)
import analyzer as analyzer_module
from conftest import FakeSource
from keywords import ExactTokenMatch
from lexicon import LexiconCache, LexiconUnavailableError
from urgent_queue import build_urgent_queue, complaint_text, is_open


class TestValidateInput:

    @pytest.mark.parametrize("value", [None, 42, b"help", ["help"], "", "   \n"])
    def test_invalid(self, value):
        assert isinstance(validate_input(value), InvalidInput)

    def test_valid(self):
        assert validate_input("help") == ValidText("help")


class TestUrgencyAnalyzer:

    def test_urgent_keyword_with_strong_negative_is_critical(self, analyzer):
        result = asyncio.run(analyzer.analyze("please help now, this is dangerous"))
        assert result == AnalysisResult(
            text="please help now, this is dangerous",
            sentiment="negative",
            score=-3.0,
            urgency="Critical",
        )

    def test_mildly_negative_without_keyword_is_suppressed(self, analyzer):
        assert asyncio.run(analyzer.analyze("I need assistance soon")) is None

    @pytest.mark.parametrize("value", ["", "   ", None, 7, {"text": "help"}])
    def test_invalid_input_never_loads_the_lexicon(self, analyzer, source, value):
        assert asyncio.run(analyzer.analyze(value)) is None
        assert source.calls == 0

    def test_cebuano_keywords_give_high_regardless_of_score(self, analyzer):
        result = asyncio.run(analyzer.analyze("tabang karon"))
        assert result.urgency == "High"
        assert result.score == 0
        assert result.sentiment == "neutral"

    def test_very_negative_without_keyword_is_high(self, analyzer):
        result = asyncio.run(analyzer.analyze("terrible terrible service"))
        assert result.urgency == "High"
        assert result.score == pytest.approx(-5.0)

    def test_positive_text_is_suppressed(self, analyzer):
        assert asyncio.run(analyzer.analyze("good and happy")) is None

    def test_repeated_calls_are_idempotent(self, analyzer, source):
        async def run():
            return [await analyzer.analyze("tulong, terrible na!") for _ in range(3)]

        results = asyncio.run(run())
        assert results[0] == results[1] == results[2]
        assert source.calls == 1

    def test_concurrent_first_calls_share_the_load(self):
        source = FakeSource(delay=0.05)
        analyzer = UrgencyAnalyzer(LexiconCache(source, timeout=5))

        async def run():
            return await asyncio.gather(*(analyzer.analyze("help now") for _ in range(8)))

        results = asyncio.run(run())
        assert source.calls == 1
        assert {r.urgency for r in results} == {"High"}

    def test_lexicon_failure_propagates_instead_of_none(self):
        analyzer = UrgencyAnalyzer(LexiconCache(FakeSource(fail_times=99), timeout=5))
        with pytest.raises(LexiconUnavailableError):
            asyncio.run(analyzer.analyze("help now"))

    def test_exact_matcher_avoids_substring_false_positive(self, cache):
        analyzer = UrgencyAnalyzer(cache, matcher=ExactTokenMatch())
        assert asyncio.run(analyzer.analyze("nowhere to park")) is None

    def test_injected_keywords(self, cache):
        analyzer = UrgencyAnalyzer(cache, keywords=["  FIRE "])
        assert asyncio.run(analyzer.analyze("Fire in the lab")).urgency == "High"
        assert asyncio.run(analyzer.analyze("help now")) is None

    def test_public_function_accepts_explicit_analyzer(self, analyzer):
        result = asyncio.run(analyze_complaint_urgency("emergency", analyzer))
        assert result.to_dict() == {
            "text": "emergency", "sentiment": "neutral", "score": 0.0, "urgency": "High",
        }

    def test_default_analyzer_uses_configured_match_mode(self, monkeypatch):
        monkeypatch.setattr(analyzer_module, "KEYWORD_MATCH_MODE", "exact")
        monkeypatch.setattr(analyzer_module, "_default_analyzer", None)
        built = default_analyzer()
        assert isinstance(built.matcher, ExactTokenMatch)
        assert default_analyzer() is built


class TestUrgentQueue:
    COMPLAINTS = [
        {"id": "c1", "status": "pending", "concernDescription": "The canteen is good"},
        {"id": "c2", "category": "Safety", "incidentDescription": "please help"},
        {"id": "c3", "status": " Resolved ", "concernDescription": "emergency now"},
        {"id": "c4", "concernDescription": "", "facilityDescription": "tulong, terrible ang hagdanan",
         "submissionDate": "2024-11-03T08:15:00Z"},
        {"id": "c5", "concernDescription": "   ", "additionalNotes": "urgent"},
        {"id": "c6", "status": "closed", "otherDescription": "danger"},
        {"id": "c7", "otherDescription": "broken door, urgent"},
    ]

    def test_complaint_text_takes_first_non_empty_field(self):
        record = {"concernDescription": None, "incidentDescription": "", "facilityDescription": 42}
        assert complaint_text(record) == "42"
        assert complaint_text({"title": "ignored"}) == ""

    def test_is_open(self):
        assert is_open({})
        assert is_open({"status": "In Progress"})
        assert not is_open({"status": "CLOSED"})

    def test_critical_first_then_high_in_input_order(self, analyzer):
        queue = asyncio.run(build_urgent_queue(self.COMPLAINTS, analyzer))
        assert [c["id"] for c in queue] == ["c4", "c2", "c7"]
        assert queue[0]["priority"] == "Critical"
        assert queue[0]["submission_date"] == "2024-11-03T08:15:00Z"
        assert queue[1]["category"] == "Safety"
        assert queue[1]["snippet"] == "please help"

    def test_limit(self, analyzer):
        queue = asyncio.run(build_urgent_queue(self.COMPLAINTS, analyzer, limit=2))
        assert [c["id"] for c in queue] == ["c4", "c2"]

    def test_snippet_is_truncated(self, analyzer):
        long_text = "help " + "x" * 300
        queue = asyncio.run(build_urgent_queue([{"id": "c9", "concernDescription": long_text}], analyzer))
        assert len(queue[0]["snippet"]) == 120
