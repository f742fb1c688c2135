import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, HTTPException
from pydantic import BaseModel

from analyzer import UrgencyAnalyzer, default_analyzer
from config import API_HOST, API_PORT, LOG_LEVEL, MAX_URGENT_QUEUE_LIMIT
from lexicon import LexiconUnavailableError
from urgent_queue import build_urgent_queue

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [api] %(levelname)s %(message)s",
)
log = logging.getLogger(__name__)


def get_analyzer() -> UrgencyAnalyzer:
    return default_analyzer()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Warm the lexicon; a failure here is not fatal, requests retry the load
    try:
        await get_analyzer().cache.init()
    except LexiconUnavailableError as exc:
        log.warning("Lexicon preload failed, will retry on demand: %s", exc)
    yield


app = FastAPI(
    title="Complaint Urgency Triage",
    description="Flags complaint narratives that need immediate attention",
    lifespan=lifespan,
)


class ComplaintRequest(BaseModel):
    id: Optional[str] = None
    text: Any = None


def _unavailable(exc: LexiconUnavailableError) -> HTTPException:
    log.error("Urgency analysis unavailable: %s", exc)
    return HTTPException(status_code=503, detail=f"Urgency lexicon unavailable: {exc}")


@app.get("/")
def index():
    return {
        "message": "Complaint urgency triage API",
        "endpoints": {
            "health": "GET /health",
            "analyze_complaint": "POST /analyze",
            "urgent_queue": "POST /complaints/urgent",
        },
    }


@app.get("/health")
def health(analyzer: UrgencyAnalyzer = Depends(get_analyzer)):
    return {
        "status": "ok",
        "lexicon_loaded": analyzer.cache.loaded,
        "lexicon_size": analyzer.cache.size,
        "keyword_match_mode": getattr(analyzer.matcher, "name", type(analyzer.matcher).__name__),
    }


@app.post("/analyze")
async def analyze_complaint(complaint: ComplaintRequest, analyzer: UrgencyAnalyzer = Depends(get_analyzer)):
    try:
        result = await analyzer.analyze(complaint.text)
    except LexiconUnavailableError as exc:
        raise _unavailable(exc)

    return {
        "id": complaint.id,
        "urgent": result is not None,
        "result": result.to_dict() if result is not None else None,
    }


@app.post("/complaints/urgent")
async def urgent_complaints(
    complaints: List[Dict[str, Any]] = Body(...),
    limit: int = 50,
    analyzer: UrgencyAnalyzer = Depends(get_analyzer),
):
    """Urgent-queue view: open complaints flagged High or Critical, Critical first."""
    limit = min(max(limit, 1), MAX_URGENT_QUEUE_LIMIT)
    try:
        queue = await build_urgent_queue(complaints, analyzer, limit=limit)
    except LexiconUnavailableError as exc:
        raise _unavailable(exc)
    return {"count": len(queue), "complaints": queue}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=API_HOST, port=API_PORT, reload=False)
