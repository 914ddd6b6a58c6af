"""
REST API module for filerelease.

HTTP endpoints for on-demand releases, health and scheduler status.
"""

from filerelease.service.api.routes import setup_routes

__all__ = ["setup_routes"]
