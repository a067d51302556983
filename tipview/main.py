"""
FastAPI entrypoint for TipView.
"""
import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from .config import (
    TIP_PERCENT_MIN, TIP_PERCENT_MAX, DEFAULT_TIP_PERCENT,
    PARTY_SIZE_MIN, PARTY_SIZE_MAX, DEFAULT_PARTY_SIZE,
    MAX_HISTORY_PAGE, SAVE_RATE_LIMIT,
    SLOW_REQUEST_THRESHOLD_MS, LOG_FILE, LOG_MAX_BYTES, LOG_BACKUP_COUNT,
)
from .calculator import BillInput, Category, calculate, format_currency, format_percent
from .history import TipRecord, get_history_store
from .quotes import get_session_quote
from .validation import InputError

# Attributes present on every LogRecord, excluded from the JSON extras dict
_LOG_RECORD_BUILTIN_ATTRS = {
    'args', 'asctime', 'created', 'exc_info', 'exc_text', 'filename',
    'funcName', 'levelname', 'levelno', 'lineno', 'message', 'module',
    'msecs', 'msg', 'name', 'pathname', 'process', 'processName',
    'relativeCreated', 'stack_info', 'thread', 'threadName', 'taskName',
}


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON for machine-readable file output."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        for key, val in record.__dict__.items():
            if key not in _LOG_RECORD_BUILTIN_ATTRS and key not in entry:
                entry[key] = val
        return json.dumps(entry, default=str)


_console_handler = logging.StreamHandler()
_console_handler.setFormatter(
    logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
)

# File handler: JSON, rotated
_file_handler = RotatingFileHandler(
    LOG_FILE, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding='utf-8'
)
_file_handler.setFormatter(JSONFormatter())

logging.basicConfig(level=logging.INFO, handlers=[_console_handler, _file_handler])
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler: a process start is a session start."""
    logger.info("Starting TipView")

    history = get_history_store()
    logger.info(f"History ready with {len(history)} records at {history.store.path}")

    quote = get_session_quote()
    logger.info(f"Quote of the day by {quote.author}")

    yield


limiter = Limiter(key_func=get_remote_address)

app = FastAPI(
    title="TipView",
    description="Tip calculator with saved history",
    version="1.0.0",
    lifespan=lifespan
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every HTTP request with method, path, status code, and duration."""
    start_time = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start_time) * 1000, 2)
    extra = {
        "method": request.method,
        "path": request.url.path,
        "status_code": response.status_code,
        "duration_ms": duration_ms,
    }
    message = f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms}ms)"
    if duration_ms > SLOW_REQUEST_THRESHOLD_MS:
        logger.warning(f"Slow request: {message}", extra=extra)
    else:
        logger.info(message, extra=extra)
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class BillRequest(BaseModel):
    """Form fields. The amount is kept as typed."""
    amount: str = Field("", description="Bill amount as entered")
    tip_percent: int = Field(DEFAULT_TIP_PERCENT, ge=TIP_PERCENT_MIN, le=TIP_PERCENT_MAX)
    party_size: int = Field(DEFAULT_PARTY_SIZE, ge=PARTY_SIZE_MIN, le=PARTY_SIZE_MAX)
    category: Optional[Category] = None

    def to_input(self) -> BillInput:
        return BillInput(
            amount=self.amount,
            tip_percent=self.tip_percent,
            party_size=self.party_size,
            category=self.category,
        )


class CalculationResponse(BaseModel):
    """Live calculation for the current form."""
    bill: float
    tip_percent: int
    party_size: int
    tip_amount: float
    total_amount: float
    tip_per_person: float
    total_per_person: float
    display: Dict[str, str]


class RecordResponse(BaseModel):
    """A saved calculation."""
    id: str
    bill_amount: float
    tip_amount: float
    tip_percent: int
    total_amount: float
    category: Optional[str]
    timestamp: datetime
    entry: str


class HistoryResponse(BaseModel):
    """Saved calculations, most recent first."""
    count: int
    records: List[RecordResponse]


class SummaryResponse(BaseModel):
    """Aggregates over the whole history."""
    record_count: int
    top_category: Optional[str]
    last_week_tip_sum: float


class QuoteResponse(BaseModel):
    text: str
    author: str


class HealthResponse(BaseModel):
    status: str
    records: int
    store_path: str


def _record_response(record: TipRecord) -> RecordResponse:
    return RecordResponse(
        id=record.id,
        bill_amount=record.bill_amount,
        tip_amount=record.tip_amount,
        tip_percent=record.tip_percent,
        total_amount=record.total_amount,
        category=record.category.value if record.category else None,
        timestamp=record.timestamp,
        entry=record.describe(),
    )


# Endpoints
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Report whether the history store is loaded."""
    history = get_history_store()
    return HealthResponse(
        status="healthy",
        records=len(history),
        store_path=str(history.store.path),
    )


@app.get("/categories")
async def categories_endpoint():
    """List the categories a record may be filed under."""
    return {"categories": [c.value for c in Category]}


@app.post("/calculate", response_model=CalculationResponse)
async def calculate_endpoint(body: BillRequest):
    """
    Recompute tip, total and split for the current form.

    Invalid amounts are not an error here; every value is shown as zero.
    """
    calc = calculate(body.to_input())
    return CalculationResponse(
        bill=calc.bill,
        tip_percent=calc.tip_percent,
        party_size=calc.party_size,
        tip_amount=calc.tip_amount,
        total_amount=calc.total_amount,
        tip_per_person=calc.tip_per_person,
        total_per_person=calc.total_per_person,
        display={
            "tip_percent": format_percent(calc.tip_percent),
            "tip_amount": format_currency(calc.tip_amount),
            "total_amount": format_currency(calc.total_amount),
            "tip_per_person": format_currency(calc.tip_per_person),
            "total_per_person": format_currency(calc.total_per_person),
        },
    )


@app.post("/records", response_model=RecordResponse, status_code=201)
@limiter.limit(SAVE_RATE_LIMIT)
async def save_record_endpoint(request: Request, body: BillRequest):
    """
    Save the current calculation to history.

    The amount must be a positive number; otherwise nothing is saved.
    """
    request_id = uuid.uuid4().hex[:8]

    try:
        record = get_history_store().save(body.to_input())
    except InputError as e:
        logger.info(f"[{request_id}] Save rejected: {e.message}",
                    extra={"request_id": request_id, "error": e.message})
        raise HTTPException(status_code=400, detail={"error": e.message, "hint": e.hint})
    except Exception as e:
        logger.exception(f"[{request_id}] Save failed",
                         extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=f"Save failed: {e}")

    return _record_response(record)


@app.get("/history", response_model=HistoryResponse)
async def history_endpoint(limit: Optional[int] = Query(None, ge=1, le=MAX_HISTORY_PAGE)):
    """Saved calculations, most recent first."""
    history = get_history_store()
    records = history.recent(limit)
    return HistoryResponse(
        count=len(history),
        records=[_record_response(r) for r in records],
    )


@app.delete("/history")
async def clear_history_endpoint():
    """Clear all saved calculations."""
    get_history_store().clear()
    return {"message": "History cleared"}


@app.get("/history/summary", response_model=SummaryResponse)
async def summary_endpoint():
    """Top category by tips and the tip total over the last week."""
    history = get_history_store()
    top = history.top_category()
    return SummaryResponse(
        record_count=len(history),
        top_category=top.value if top else None,
        last_week_tip_sum=history.last_week_tip_sum(),
    )


@app.get("/quote", response_model=QuoteResponse)
async def quote_endpoint():
    """Quote of the day, fixed for the session."""
    quote = get_session_quote()
    return QuoteResponse(text=quote.text, author=quote.author)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
