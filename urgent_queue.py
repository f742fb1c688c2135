import heapq
import logging
from typing import Iterable, Optional

from config import CLOSED_STATUSES, COMPLAINT_TEXT_FIELDS, SNIPPET_LENGTH
from urgency import PRIORITY_RANK

log = logging.getLogger(__name__)


def complaint_text(record: dict) -> str:
    """Returns the first free-text field with a non-empty string value, or ""."""
    for field in COMPLAINT_TEXT_FIELDS:
        value = record.get(field)
        if value is None:
            continue
        text = str(value)
        if text:
            return text
    return ""


def is_open(record: dict) -> bool:
    status = str(record.get("status") or "").lower().strip()
    return status not in CLOSED_STATUSES


async def build_urgent_queue(complaints: Iterable[dict], analyzer, limit: Optional[int] = None) -> list:
    """
    Analyzes open complaints and returns the urgent ones, Critical before High.

    Within a tier complaints keep their input order (the sequence number breaks
    ties, as in a FIFO). LexiconUnavailableError from the analyzer propagates.
    """
    heap = []
    seq = 0
    for record in complaints:
        if not is_open(record):
            continue

        text = complaint_text(record)
        if not text.strip():
            continue

        analysis = await analyzer.analyze(text)
        if analysis is None:
            continue

        seq += 1
        item = {
            "id": record.get("id"),
            "snippet": text[:SNIPPET_LENGTH],
            "category": record.get("category"),
            "submission_date": record.get("submissionDate"),
            "priority": analysis.urgency,
            "sentiment": analysis.sentiment,
            "score": analysis.score,
        }
        heapq.heappush(heap, (PRIORITY_RANK[analysis.urgency], seq, item))

    count = len(heap) if limit is None else min(max(limit, 0), len(heap))
    queue = [heapq.heappop(heap)[2] for _ in range(count)]
    log.info("Urgent queue built: %d of %d urgent complaints returned", len(queue), seq)
    return queue
