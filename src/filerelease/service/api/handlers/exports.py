"""
On-demand export endpoints.
"""

import asyncio

from aiohttp import web

from filerelease.core.categories import Category
from filerelease.service.api.errors import ErrorCode, NotFoundError
from filerelease.service.api.handlers import BaseHandler
from filerelease.service.api.payloads import export_response


class ExportsHandler(BaseHandler):
    """Handler for releasing staged files of a category."""

    def _resolve_category(self, request: web.Request) -> Category:
        slug = request.match_info["category"]
        try:
            category = Category.parse(slug)
        except ValueError:
            raise NotFoundError(
                "Category",
                slug,
                ErrorCode.CATEGORY_NOT_FOUND,
                details={"valid": [c.slug for c in Category]},
            ) from None
        # Lets the error middleware name the category in a failure payload
        request["category"] = category.name
        return category

    async def release(self, request: web.Request) -> web.Response:
        """
        POST /v1/api/export/{category}

        Moves every staged file of the category into the publish directory.
        Returns 200 with per-file errors embedded; a directory-level fault is
        turned into a 500 by the error middleware.
        """
        category = self._resolve_category(request)
        result = await asyncio.to_thread(
            self.releaser.release,
            category,
            correlation_id=self.get_request_id(request),
        )
        return await self.json_response(export_response(category.name, result), request=request)

    async def pending(self, request: web.Request) -> web.Response:
        """
        GET /v1/api/export/{category}/pending

        Lists the staged files that a release would move right now.
        """
        category = self._resolve_category(request)
        files = await asyncio.to_thread(self.releaser.list_files, category)
        data = {
            "category": category.name,
            "prefix": category.prefix,
            "pendingFiles": sorted(path.name for path in files),
        }
        return await self.json_response(data, request=request)
