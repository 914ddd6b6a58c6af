"""
filerelease long-running service (HTTP API + background scheduler).

Provides:
- POST /v1/api/export/{category} to release a category on demand
- GET /v1/api/export/{category}/pending to preview what would be released
- GET /health, /api/v1/health and /api/v1/scheduler
- Background cron scheduler, one schedule per category
"""

from __future__ import annotations

from pathlib import Path

from aiohttp import web

from filerelease.config.loader import load_config
from filerelease.config.settings import ReleaseSettings
from filerelease.service.api import setup_routes
from filerelease.service.api.middleware import error_middleware
from filerelease.service.releaser import FileReleaser
from filerelease.service.scheduler import ReleaseScheduler
from filerelease.utils.logging import get_logger, setup_logging_from_config

logger = get_logger("filerelease.service")


class ReleaseService:
    """Wires settings, the releaser and the scheduler together for the HTTP app."""

    def __init__(self, settings: ReleaseSettings, *, enable_scheduler: bool = True):
        self.settings = settings
        self.releaser = FileReleaser(settings)
        self.scheduler: ReleaseScheduler | None = (
            ReleaseScheduler(self.releaser, settings.schedules) if enable_scheduler else None
        )

    def start_background_tasks(self) -> None:
        if self.scheduler is not None:
            self.scheduler.start()

    async def stop_background_tasks(self) -> None:
        if self.scheduler is not None:
            await self.scheduler.stop()


SERVICE_KEY = web.AppKey("release_service", ReleaseService)


def create_app(service: ReleaseService) -> web.Application:
    """Build the aiohttp application for ``service``."""
    app = web.Application(middlewares=[error_middleware])
    app[SERVICE_KEY] = service
    setup_routes(app, service)

    async def on_startup(app: web.Application) -> None:
        service.start_background_tasks()
        logger.info(
            f"Release service ready staging={service.settings.staging_dir} publish={service.settings.publish_dir}"
        )

    async def on_cleanup(app: web.Application) -> None:
        await service.stop_background_tasks()

    app.on_startup.append(on_startup)
    app.on_cleanup.append(on_cleanup)
    return app


def run_service(
    *,
    project_dir: Path,
    env: str | None,
    host: str | None = None,
    port: int | None = None,
    enable_scheduler: bool = True,
) -> None:
    """
    Run the release service (blocking).

    Args:
        project_dir: Directory holding config.yaml
        env: Environment name (dev, staging, prod)
        host: Host to bind to (default: service.host from config)
        port: Port to bind to (default: service.port from config)
        enable_scheduler: Run the background cron scheduler
    """
    config = load_config(project_dir, env=env)
    setup_logging_from_config(config.data, project_dir=project_dir)
    settings = ReleaseSettings.from_config(config)

    service = ReleaseService(settings, enable_scheduler=enable_scheduler)
    app = create_app(service)

    bind_host = host or settings.host
    bind_port = port or settings.port
    logger.info(f"filerelease service starting on http://{bind_host}:{bind_port}")

    # Request logging is done by the error middleware
    web.run_app(app, host=bind_host, port=bind_port, access_log=None, print=None)
