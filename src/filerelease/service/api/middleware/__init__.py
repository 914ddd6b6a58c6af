"""
API middleware components.
"""

from filerelease.service.api.middleware.error import error_middleware

__all__ = ["error_middleware"]
