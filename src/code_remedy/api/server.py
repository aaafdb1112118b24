"""
HTTP entry point for the remediation service.

POST /fix takes {"code", "error", "language"} and answers {"result": "<markdown>"}.
"""
import logging
from typing import Optional

from aiohttp import web

from ..core.config import Config
from ..core.exceptions import RemediationFailure, RequestValidationError
from ..models.request import RemediationRequest
from ..services.ai_service import MODEL, RemediationService
from ..models.response import FAILURE_MESSAGE

logger = logging.getLogger(__name__)

SERVICE_KEY = web.AppKey("remediation_service", RemediationService)

routes = web.RouteTableDef()


@routes.post("/fix")
async def handle_fix(request: web.Request) -> web.Response:
    try:
        payload = await request.json()
    except ValueError:
        return web.json_response({"error": "Request body must be valid JSON."}, status=400)

    try:
        remediation = RemediationRequest.from_payload(payload)
    except RequestValidationError as e:
        return web.json_response({"error": str(e)}, status=400)

    service = request.app[SERVICE_KEY]
    try:
        result = await service.fix(remediation.code, remediation.error, remediation.language)
    except RemediationFailure as e:
        logger.error(f"Remediation failed: {e}")
        return web.json_response({"error": FAILURE_MESSAGE}, status=502)

    return web.json_response({"result": result})


@routes.get("/health")
async def handle_health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "model": MODEL})


def create_app(config: Config, service: Optional[RemediationService] = None) -> web.Application:
    """Builds the app. Without credentials the service constructor raises ConfigurationError here."""
    service = service or RemediationService(config)

    async def service_session(app: web.Application):
        async with app[SERVICE_KEY]:
            yield

    app = web.Application()
    app[SERVICE_KEY] = service
    app.cleanup_ctx.append(service_session)
    app.add_routes(routes)
    return app


def run_server(config: Config, host: Optional[str] = None, port: Optional[int] = None):
    host = host or config.server.host
    port = port or config.server.port
    app = create_app(config)
    logger.info(f"Serving remediation API on http://{host}:{port}")
    web.run_app(app, host=host, port=port, print=None)
