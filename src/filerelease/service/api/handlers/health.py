"""
Health and scheduler status endpoints.
"""

import time

from aiohttp import web

from filerelease.service.api.handlers import BaseHandler


class HealthHandler(BaseHandler):
    """Handler for health check and scheduler status endpoints."""

    def __init__(self, service):
        super().__init__(service)
        self._start_time = time.time()

    async def health(self, request: web.Request) -> web.Response:
        """
        GET /health, GET /api/v1/health

        Returns service health status.
        """
        data = {
            "status": "ok",
            "version": self._get_version(),
            "uptime_seconds": round(time.time() - self._start_time, 2),
            "scheduler_running": bool(self.scheduler and self.scheduler.running),
        }
        return await self.json_response(data, request=request)

    async def scheduler_status(self, request: web.Request) -> web.Response:
        """
        GET /api/v1/scheduler

        Returns per-category cron, next fire time and last run outcome.
        """
        if self.scheduler is not None:
            data = self.scheduler.status()
        else:
            data = {"running": False, "scheduled_categories": 0, "categories": []}
        return await self.json_response(data, request=request)

    def _get_version(self) -> str:
        from filerelease import __version__

        return __version__
