"""FastAPI application entry point."""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from config import config
from fairjack.exceptions import CommitmentIntegrityError
from server.routes import fairness, game
from server.service import get_game_service, reset_game_service
from server.session import InMemorySessionStore

logging.basicConfig(level=config.logging.level, format=config.logging.format)
logger = logging.getLogger(__name__)

limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[f"{config.rate_limit.requests_per_minute}/minute"],
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Pick the session backend before the first request arrives."""
    service = await get_game_service()
    logger.info("Fairjack ready (%s)", type(service.store).__name__)

    # Redis expires keys itself; the in-memory store needs a sweeper
    sweeper = None
    if isinstance(service.store, InMemorySessionStore):
        sweeper = asyncio.create_task(
            service.store.sweep_forever(config.session.cleanup_interval)
        )
    app.state.session_sweeper = sweeper

    yield

    if sweeper is not None:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
    reset_game_service()


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


def _integrity_violation_handler(request: Request, exc: CommitmentIntegrityError) -> JSONResponse:
    # Server bookkeeping is broken; never hand the client a verdict
    return JSONResponse(
        status_code=500,
        content={"detail": "Commitment integrity violation"},
    )


app = FastAPI(
    title="Fairjack",
    description="Provably fair blackjack: committed seeds, replayable shuffles",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(CommitmentIntegrityError, _integrity_violation_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allowed_origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=config.cors.allow_methods,
    allow_headers=config.cors.allow_headers,
)


@app.get("/api/health")
@limiter.limit(f"{config.rate_limit.requests_per_minute}/minute")
async def health_check(request: Request) -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


app.include_router(game.router, prefix="/api/game", tags=["game"])
app.include_router(fairness.router, prefix="/api/fair", tags=["fairness"])


def run() -> None:
    """Serve the app with uvicorn."""
    import uvicorn

    uvicorn.run("server.main:app", host=config.host, port=config.port, reload=config.debug)
