"""FastAPI app serving quotes and the AI chat endpoint."""

import logging
import re
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from quotes_api import __version__
from quotes_api.chat import ResponseSelector
from quotes_api.config import get_settings
from quotes_api.errors import EmptyStoreError, ValidationError
from quotes_api.models import (
    ChatResponse,
    ChatTurn,
    ErrorResponse,
    PageResult,
    QuoteResponse,
    RandomQuoteResponse,
)
from quotes_api.provider import build_provider
from quotes_api.quotes import QuoteStore

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="[%(asctime)s] %(levelname)s - %(message)s",
)
logger = logging.getLogger("quotes_api")

LEADING_INT = re.compile(r"\s*([+-]?\d+)")

store: QuoteStore | None = None
selector: ResponseSelector | None = None


def _api_limit() -> str:
    s = get_settings()
    return f"{s.rate_limit_max}/{s.rate_limit_window_s} seconds"


def _chat_limit() -> str:
    s = get_settings()
    return f"{s.chat_rate_limit_max}/{s.chat_rate_limit_window_s} seconds"


limiter = Limiter(key_func=get_remote_address)
api_limit = limiter.shared_limit(
    _api_limit,
    scope="api",
    error_message="You have exceeded the rate limit. Please try again later.",
)
chat_limit = limiter.limit(
    _chat_limit,
    error_message="You have exceeded the chat rate limit. Please try again later.",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    global store, selector
    cfg = get_settings()
    logger.info("Loading quotes from %s...", cfg.quotes_path)
    # FormatError propagates and aborts startup: there is nothing to serve.
    store = QuoteStore.from_file(cfg.quotes_path)
    provider = build_provider(
        cfg.ai_provider, cfg.gemini_api_key, cfg.gemini_model, cfg.provider_timeout_s
    )
    selector = ResponseSelector(store, provider)
    logger.info(
        "Quotes API ready. %d quotes loaded, provider=%s",
        store.count(),
        provider.name if provider else "fallback",
    )
    yield
    logger.info("Shutting down.")


app = FastAPI(title="Random Quotes API", version=__version__, lifespan=lifespan)
app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.allowed_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "%s %s %s %.1fms",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - start) * 1000,
    )
    return response


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error(status_code: int, error: str, message: str, details: list[str] | None = None):
    body = ErrorResponse(error=error, message=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _parse_int(value: str | None, default: int) -> int:
    """Read a leading integer ("2abc" is 2); missing, malformed or zero values use the default."""
    match = LEADING_INT.match(value or "")
    if not match:
        return default
    return int(match.group(1)) or default


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exceeded(request: Request, exc: RateLimitExceeded):
    title = "Too many chat requests" if request.url.path == "/api/v1/chat" else "Too many requests"
    return _error(429, title, exc.detail)


@app.exception_handler(ValidationError)
async def validation_failed(request: Request, exc: ValidationError):
    return _error(400, "Validation failed", "Invalid request parameters", exc.errors)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return _error(
            404, "Endpoint not found", "Please check the available endpoints at the root URL"
        )
    return _error(exc.status_code, "Request failed", str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if get_settings().is_development else "Something went wrong"
    return _error(500, "Internal server error", message)


@app.get("/")
async def root():
    return {
        "message": "Welcome to Random Quotes API!",
        "version": __version__,
        "endpoints": {
            "/health": "GET - Health check",
            "/docs": "GET - API documentation",
            "/api/v1/quote": "GET - Returns a random quote",
            "/api/v1/quotes": "GET - Returns paginated quotes with optional search",
            "/api/v1/quotes/{id}": "GET - Returns a specific quote by ID",
            "/api/v1/chat": "POST - AI chat endpoint",
        },
    }


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "timestamp": _now(),
        "quotes": {"total": store.count() if store else 0},
        "environment": get_settings().app_env,
        "version": __version__,
    }


@app.get("/api/v1/quote", response_model=RandomQuoteResponse)
@api_limit
async def random_quote(request: Request):
    try:
        quote = store.random_one()
    except EmptyStoreError:
        logger.exception("Error getting random quote")
        return _error(500, "Internal server error", "Failed to retrieve quote")
    return RandomQuoteResponse(quote=quote, timestamp=_now())


@app.get("/api/v1/quotes", response_model=PageResult)
@api_limit
async def list_quotes(
    request: Request,
    contains: str | None = None,
    page: str | None = None,
    limit: str | None = None,
):
    page_num = max(1, _parse_int(page, 1))
    limit_num = min(get_settings().max_page_size, max(1, _parse_int(limit, 10)))
    if contains:
        return store.search(contains, page_num, limit_num)
    return store.paginate(page_num, limit_num)


@app.get("/api/v1/quotes/{quote_id}", response_model=QuoteResponse)
@api_limit
async def quote_by_id(request: Request, quote_id: str):
    quote = store.by_id(quote_id)
    if quote is None:
        return _error(404, "Quote not found", f"No quote found with ID: {quote_id}")
    return QuoteResponse(quote=quote)


@app.post("/api/v1/chat", response_model=ChatResponse, response_model_exclude_none=True)
@api_limit
@chat_limit
async def chat(request: Request):
    try:
        body = await request.json()
    except ValueError:
        body = {}

    errors = selector.validate(body)
    if errors:
        raise ValidationError(errors)

    history = [ChatTurn(**turn) for turn in body.get("history") or []]
    reply = await selector.respond(body["message"], body.get("language") or "en", history)

    return ChatResponse(
        response=reply.message,
        language=reply.language,
        direction=reply.direction,
        provider=reply.provider,
        timestamp=_now(),
        quote=reply.quote,
        fallback=True if reply.error else None,
    )


@app.get("/quote")
async def legacy_quote():
    return RedirectResponse("/api/v1/quote", status_code=301)


@app.get("/quotes")
async def legacy_quotes(request: Request):
    query = f"?{request.url.query}" if request.url.query else ""
    return RedirectResponse(f"/api/v1/quotes{query}", status_code=301)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("quotes_api.app:app", host="0.0.0.0", port=settings.port, reload=True)
