"""
Error handling middleware.

Provides consistent error responses and request ID tracking. The request ID
is also bound as the logging correlation id for everything the request logs.
"""

import uuid
from typing import Callable

from aiohttp import web

from filerelease.exceptions import FileSystemError
from filerelease.observability.structured_logging import add_correlation_id
from filerelease.service.api.errors import APIError, ErrorCode
from filerelease.service.api.payloads import system_failure_response
from filerelease.service.api.routes import EXPORT_PREFIX
from filerelease.utils.logging import get_logger

logger = get_logger("filerelease.api.middleware.error")


@web.middleware
async def error_middleware(request: web.Request, handler: Callable) -> web.StreamResponse:
    """
    Middleware for consistent error handling.

    - Adds request_id to all requests and responses
    - APIError -> structured JSON error with the error's status
    - FileSystemError -> 500 export payload with a single "system" error
    - Unexpected errors -> 500 (export payload on export routes)
    """
    request_id = f"req_{uuid.uuid4().hex[:12]}"
    request["request_id"] = request_id
    headers = {"X-Request-ID": request_id}

    with add_correlation_id(request_id):
        try:
            response = await handler(request)
            response.headers["X-Request-ID"] = request_id
            return response

        except APIError as e:
            logger.warning(
                f"API error: {e.code.value} - {e.message}",
                extra={"error_code": e.code.value, "status": e.status, "path": request.path, "method": request.method},
            )
            return web.json_response(e.to_dict(request_id), status=e.status, headers=headers)

        except FileSystemError as e:
            logger.error(f"File system error: {e.message}", extra={"path": request.path}, exc_info=True)
            return web.json_response(
                system_failure_response(request.get("category"), e.message),
                status=500,
                headers=headers,
            )

        except web.HTTPException as e:
            # aiohttp renders its own HTTP exceptions; only tag them
            e.headers["X-Request-ID"] = request_id
            raise

        except Exception as e:
            logger.error(
                f"Unexpected error: {e}",
                extra={"path": request.path, "method": request.method},
                exc_info=True,
            )
            if request.path.startswith(EXPORT_PREFIX):
                body = system_failure_response(request.get("category"), f"An unexpected error occurred: {e}")
            else:
                body = {
                    "error": {
                        "code": ErrorCode.INTERNAL_ERROR.value,
                        "message": "An internal error occurred",
                        "request_id": request_id,
                    }
                }
            return web.json_response(body, status=500, headers=headers)
