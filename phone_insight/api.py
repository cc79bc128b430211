"""HTTP entry point accepting ``{"phone": "..."}`` and returning the combined enrichment result."""
from __future__ import annotations

import json
import logging
import threading
from typing import Any, Callable, Dict, Optional, Tuple, Union

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from .config import load_settings
from .errors import ConfigurationError, InvalidRequestError
from .factory import build_orchestrator
from .orchestrator import EnrichmentOrchestrator

LOGGER = logging.getLogger(__name__)

ENRICH_PATH = "/api/enrich"
PHONE_REQUIRED = "Valid phone number (string) is required."
PROCESSING_ERROR = "API processing error."

OrchestratorProvider = Callable[[], EnrichmentOrchestrator]


class MalformedRequestError(InvalidRequestError):
    """The request body is not valid JSON."""


def parse_enrichment_request(raw_body: Union[bytes, str]) -> str:
    """Return the phone number from a JSON request body, rejecting blank values."""

    try:
        body = json.loads(raw_body)
    except ValueError as exc:
        raise MalformedRequestError("Invalid request format.") from exc

    phone = body.get("phone") if isinstance(body, dict) else None
    if not isinstance(phone, str) or not phone.strip():
        raise InvalidRequestError(PHONE_REQUIRED)
    return phone


def handle_enrichment_request(
    raw_body: Union[bytes, str],
    orchestrator_provider: OrchestratorProvider,
) -> Tuple[int, Dict[str, Any]]:
    """Validate ``raw_body``, run the pipeline, and return ``(status_code, payload)``.

    Provider failures are reported with status 200 inside the embedded report;
    only malformed requests (400) and unexpected errors (500) use other codes.
    """

    try:
        orchestrator = orchestrator_provider()
    except ConfigurationError as exc:
        LOGGER.error("Server configuration error: %s", exc)
        return 500, {"error": f"Server configuration error: {exc}"}

    try:
        phone = parse_enrichment_request(raw_body)
        result = orchestrator.enrich(phone)
    except MalformedRequestError as exc:
        LOGGER.warning("Rejected malformed enrichment request: %s", exc)
        return 400, {"error": PROCESSING_ERROR, "details": str(exc)}
    except InvalidRequestError as exc:
        LOGGER.warning("Rejected enrichment request: %s", exc)
        return 400, {"error": str(exc)}
    except Exception as exc:
        LOGGER.exception("Error in enrichment request handler")
        return 500, {"error": PROCESSING_ERROR, "details": str(exc) or "An internal server error occurred."}

    return 200, result.to_dict()


def _default_provider(config: Optional[Dict[str, Any]]) -> OrchestratorProvider:
    lock = threading.Lock()
    built: Dict[str, EnrichmentOrchestrator] = {}

    def provider() -> EnrichmentOrchestrator:
        with lock:
            if "orchestrator" not in built:
                built["orchestrator"] = build_orchestrator(load_settings(config), config)
            return built["orchestrator"]

    return provider


def create_app(
    orchestrator_provider: Optional[OrchestratorProvider] = None,
    *,
    config: Optional[Dict[str, Any]] = None,
) -> FastAPI:
    """Create the FastAPI application serving the enrichment endpoint."""

    provider = orchestrator_provider or _default_provider(config)
    app = FastAPI(title="Phone Insight API", version="0.1.0")

    @app.get(ENRICH_PATH)
    async def describe_endpoint():
        return {"message": 'API endpoint active. Use POST with { "phone": "number" }.'}

    @app.post(ENRICH_PATH)
    async def enrich_phone(request: Request):
        raw_body = await request.body()
        status_code, payload = await run_in_threadpool(handle_enrichment_request, raw_body, provider)
        return JSONResponse(payload, status_code=status_code)

    return app


app = create_app()


__all__ = [
    "ENRICH_PATH",
    "MalformedRequestError",
    "app",
    "create_app",
    "handle_enrichment_request",
    "parse_enrichment_request",
]
