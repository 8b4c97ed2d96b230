# api/main.py
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from config import PARSE_WORKERS, PATTERN_FILE, WATCH_PATTERNS
from ingestor.handlers.base import PatternFileError
from ingestor.patternfile import PatternStore
from ingestor.watcher import start_watcher, stop_watcher
from normalize import to_record
from patterns import validate

# ----- logging -----
logger = logging.getLogger("uvicorn.error")

store = PatternStore(PATTERN_FILE)


# ----- lifespan (startup/shutdown) -----
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    try:
        store.reload()
        logger.info("[logpattern] Loaded %d patterns from %s", len(store.repository), PATTERN_FILE)
    except PatternFileError as e:
        logger.error("[logpattern] Starting with an empty library: %s", e)

    observer = None
    if WATCH_PATTERNS:
        observer = start_watcher(PATTERN_FILE, store.reload)
    yield
    # Shutdown
    if observer is not None:
        try:
            stop_watcher(observer)
            logger.info("[logpattern] Pattern watcher stopped")
        except Exception as e:
            logger.warning(f"[logpattern] stop_watcher error: {e}")


app = FastAPI(
    title="logpattern API",
    version="0.1.0",
    lifespan=lifespan,
)


# ----- Schemas -----
class ParseRequest(BaseModel):
    lines: List[str] = Field(..., max_length=100_000)


class ParseRecord(BaseModel):
    line_number: int
    line: str
    matched: bool
    uuid: Optional[str] = None
    name: Optional[str] = None
    values: Dict[str, str]
    tags: List[str]
    content_hash: str


class PatternItem(BaseModel):
    uuid: str
    name: str
    pattern: str
    tags: List[str]
    test_messages: int


class ValidationResponse(BaseModel):
    ok: bool
    diagnostics: List[Dict[str, Any]]
    outcomes: List[Dict[str, Any]]


# ----- Routes -----
@app.get("/health")
def health():
    return {
        "status": "ok" if not store.diagnostics else "degraded",
        "patterns": len(store.repository),
        "diagnostics": len(store.diagnostics),
    }


@app.get("/patterns", response_model=List[PatternItem])
def list_patterns():
    return [
        PatternItem(
            uuid=str(p.uuid),
            name=p.name,
            pattern=p.template,
            tags=sorted(p.tags),
            test_messages=len(p.test_messages),
        )
        for p in store.repository.values()
    ]


@app.post("/parse", response_model=List[ParseRecord])
def parse(payload: ParseRequest):
    # one snapshot per request so a concurrent reload cannot mix libraries
    _, _, matcher = store.snapshot()
    results = matcher.match_lines(payload.lines, workers=PARSE_WORKERS)
    return [
        to_record(i, line, result)
        for i, (line, result) in enumerate(zip(payload.lines, results), start=1)
    ]


@app.get("/validate", response_model=ValidationResponse)
def run_validation():
    repository, diagnostics, _ = store.snapshot()
    report = validate(repository, diagnostics)
    return ValidationResponse(
        ok=report.ok,
        diagnostics=[d.to_dict() for d in report.diagnostics],
        outcomes=[o.to_dict() for o in report.outcomes],
    )


@app.post("/reload")
def reload_patterns():
    try:
        store.reload()
    except PatternFileError as e:
        raise HTTPException(status_code=500, detail=f"Pattern file error: {e}")
    return {"ok": True, "patterns": len(store.repository), "diagnostics": len(store.diagnostics)}
