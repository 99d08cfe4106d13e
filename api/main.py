"""Flux AI — FastAPI entrypoint (AI endpoint + health check)."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.flux import router as flux_router
from src.core.config import settings
from src.core.observability import tracing_enabled
from src.modes.prompt_loader import validate_all_prompts

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

MODES_DIR = Path(__file__).resolve().parent.parent / "src" / "modes"

CLIENT_HEADERS = [
    "authorization",
    "x-client-info",
    "apikey",
    "content-type",
    "x-supabase-client-platform",
    "x-supabase-client-platform-version",
    "x-supabase-client-runtime",
    "x-supabase-client-runtime-version",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Flux AI...")

    for problem in validate_all_prompts(MODES_DIR):
        logger.error("Prompt contract problem: %s", problem)

    if not settings.gateway_configured:
        logger.warning("LOVABLE_API_KEY is not set; AI requests will fail with a configuration error")
    logger.info("Langfuse tracing %s", "enabled" if tracing_enabled() else "disabled")

    yield

    logger.info("Shutting down Flux AI...")


app = FastAPI(title="Flux AI", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=CLIENT_HEADERS,
)

app.include_router(flux_router)


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "gateway": "configured" if settings.gateway_configured else "missing",
    }
