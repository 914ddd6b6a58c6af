"""
API route registration.
"""

from typing import TYPE_CHECKING

from aiohttp import web

from filerelease.service.api.handlers.exports import ExportsHandler
from filerelease.service.api.handlers.health import HealthHandler

if TYPE_CHECKING:
    from filerelease.service.server import ReleaseService

EXPORT_PREFIX = "/v1/api/export"
API_PREFIX = "/api/v1"


def setup_routes(app: web.Application, service: "ReleaseService") -> None:
    """
    Register all API routes.

    Args:
        app: aiohttp Application
        service: ReleaseService instance for handler access
    """
    health = HealthHandler(service)
    exports = ExportsHandler(service)

    app.router.add_routes(
        [
            # Health & scheduler
            web.get("/health", health.health),
            web.get(f"{API_PREFIX}/health", health.health),
            web.get(f"{API_PREFIX}/scheduler", health.scheduler_status),
            # On-demand exports
            web.post(f"{EXPORT_PREFIX}/{{category}}", exports.release),
            web.get(f"{EXPORT_PREFIX}/{{category}}/pending", exports.pending),
        ]
    )
