"""Flux AI endpoint — one POST route for classify, plan, council and chat."""

import logging

import httpx
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask

from src.core.config import Settings, settings
from src.core.dispatcher import dispatch
from src.core.exceptions import FluxError
from src.core.schemas.request import FluxRequest

logger = logging.getLogger(__name__)
router = APIRouter(tags=["flux-ai"])


def get_settings() -> Settings:
    return settings


def get_upstream_transport() -> httpx.AsyncBaseTransport | None:
    """Transport for gateway calls; None means httpx's default network transport."""
    return None


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.options("/flux-ai", include_in_schema=False)
async def flux_ai_preflight():
    return Response(status_code=200)


@router.post("/flux-ai")
async def flux_ai(
    request: Request,
    cfg: Settings = Depends(get_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_upstream_transport),
):
    """Dispatch a ``{type, messages, context}`` envelope.

    Every failure becomes ``{"error": message}``: mapped provider errors keep
    their status, everything else is a 500.
    """
    try:
        envelope = FluxRequest.model_validate(await request.json())
        result = await dispatch(envelope, cfg, transport)
    except FluxError as e:
        if e.status_code >= 500:
            logger.error("flux-ai error: %s (%s)", e.message, e.code.value)
        return error_response(e.message, e.status_code)
    except Exception as e:
        logger.exception("flux-ai error: %s", e)
        return error_response(str(e) or "Unknown error", 500)

    if result.stream is not None:
        # aclose also covers a caller that leaves before the first chunk
        return StreamingResponse(
            result.stream.relay(),
            media_type="text/event-stream",
            background=BackgroundTask(result.stream.aclose),
        )
    return JSONResponse(result.payload)
