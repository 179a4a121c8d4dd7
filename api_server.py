"""
FastAPI Backend Server

Exposes the support assistant as REST API endpoints for the chat widget
to consume.
"""

import asyncio
import time
from collections import defaultdict
from typing import Dict, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware

from supportdesk import __version__
from supportdesk.config import settings
from supportdesk.core.llm import build_responder
from supportdesk.exceptions import SourceUnavailable
from supportdesk.logger import get_logger, init_logging
from supportdesk.messages import msg
from supportdesk.pipeline.composer import ResponseComposer

init_logging()
logger = get_logger(__name__)


# Pydantic models for API
class ChatRequest(BaseModel):
    message: Optional[str] = None


class ChatResponse(BaseModel):
    response: str


class CacheClearRequest(BaseModel):
    domain: Optional[str] = None


# Global composer instance
composer: Optional[ResponseComposer] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup resources."""
    global composer

    settings.validate_all()
    composer = ResponseComposer(responder=build_responder())
    logger.info(f"Support assistant ready, knowledge domains: {composer.knowledge.cache.domains}")

    yield

    composer = None


# Rate limiting middleware
class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Simple in-memory rate limiting middleware.
    Limits requests per IP address within a time window.
    """

    def __init__(self, app, requests_limit: int = 60, window_seconds: int = 60):
        super().__init__(app)
        self.requests_limit = requests_limit
        self.window_seconds = window_seconds
        self.request_counts: Dict[str, list] = defaultdict(list)

    async def dispatch(self, request: Request, call_next):
        if request.url.path == "/api/health":
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            client_ip = forwarded.split(",")[0].strip()

        current_time = time.time()
        cutoff_time = current_time - self.window_seconds
        expired = [
            ip for ip, stamps in self.request_counts.items()
            if not stamps or stamps[-1] <= cutoff_time
        ]
        for ip in expired:
            del self.request_counts[ip]

        self.request_counts[client_ip] = [
            ts for ts in self.request_counts[client_ip] if ts > cutoff_time
        ]

        if len(self.request_counts[client_ip]) >= self.requests_limit:
            return JSONResponse(
                status_code=429,
                content={
                    "detail": msg("error.rate_limited"),
                    "retry_after": self.window_seconds
                },
                headers={"Retry-After": str(self.window_seconds)}
            )

        self.request_counts[client_ip].append(current_time)
        return await call_next(request)


app = FastAPI(
    title="Support Desk API",
    description="REST API for the heuristic customer support assistant",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    RateLimitMiddleware,
    requests_limit=settings.rate_limit_requests,
    window_seconds=settings.rate_limit_window,
)

# CORS middleware - uses configurable origins from settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_composer() -> ResponseComposer:
    """Get the composer instance."""
    if composer is None:
        raise HTTPException(status_code=503, detail=msg("error.assistant_not_ready"))
    return composer


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.post("/api/chat", response_model=ChatResponse)
async def chat(request: ChatRequest):
    """Answer one customer message."""
    if not request.message or not request.message.strip():
        raise HTTPException(status_code=400, detail=msg("error.message_required"))

    assistant = get_composer()
    try:
        answer = await asyncio.to_thread(assistant.answer, request.message)
    except SourceUnavailable as e:
        logger.error(f"Chat error: {e}")
        return JSONResponse(
            status_code=503,
            content={"error": str(e), "response": msg("error.source_unavailable")},
        )
    except Exception as e:
        logger.error(f"Chat error: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return ChatResponse(response=answer)


@app.get("/api/products")
async def products():
    """Featured products overview."""
    assistant = get_composer()
    overview = await asyncio.to_thread(assistant.knowledge.products_overview)
    return {"products": overview}


@app.post("/api/cache/clear")
async def clear_cache(request: Optional[CacheClearRequest] = None):
    """Invalidate one cached knowledge domain, or all of them."""
    assistant = get_composer()
    domain = request.domain if request else None
    assistant.knowledge.reset(domain)
    return {"success": True, "domain": domain, "message": msg("cache.cleared")}


@app.get("/api/diagnostics/{domain}")
async def diagnostics(domain: str):
    """Provenance and preview of a cached knowledge domain."""
    assistant = get_composer()
    if not assistant.knowledge.is_live(domain):
        raise HTTPException(status_code=404, detail=f"Unknown knowledge domain '{domain}'")
    return assistant.knowledge.diagnostics(domain)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api_server:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
    )
