"""Routes a request envelope to its mode and runs it.

Stateless: the registry, model router and gateway client are built per call.
"""

import logging

import httpx

from src.core.config import Settings
from src.core.exceptions import ConfigError
from src.core.llm.gateway import AIGateway
from src.core.llm.router import ModelRouter
from src.core.observability import observe
from src.core.schemas.request import FluxRequest
from src.modes import create_registry
from src.modes.base import ModeResult

logger = logging.getLogger(__name__)

MISSING_CREDENTIAL_MESSAGE = "LOVABLE_API_KEY is not configured"


def build_gateway(settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> AIGateway:
    if not settings.lovable_api_key:
        raise ConfigError(MISSING_CREDENTIAL_MESSAGE)
    return AIGateway(
        api_key=settings.lovable_api_key,
        url=settings.ai_gateway_url,
        timeout=settings.ai_request_timeout,
        transport=transport,
    )


@observe(name="dispatch")
async def dispatch(
    envelope: FluxRequest,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ModeResult:
    """Route the envelope to its mode and run it.

    Raises ConfigError before any upstream call when the credential is
    missing; provider errors from the mode propagate unchanged.
    """
    gateway = build_gateway(settings, transport)
    mode = create_registry().get(envelope.type)
    model = ModelRouter(settings).get_model(mode.name)
    logger.info("flux-ai: %s request via %s", mode.name, model.model_id)
    return await mode.execute(envelope, gateway, model.model_id)
