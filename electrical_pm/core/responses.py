import math
from typing import Any, List, Optional
from fastapi import Query
from electrical_pm.core.config import settings


class PageParams:
    """Query-string pagination shared by every list endpoint."""

    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1),
    ):
        self.page = page
        self.limit = min(limit, settings.MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def ok(data: Any = None, message: Optional[str] = None) -> dict:
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


def paginated(items: List[Any], total: int, params: PageParams, message: Optional[str] = None) -> dict:
    body = ok(items, message)
    body["pagination"] = {
        "page": params.page,
        "limit": params.limit,
        "total": total,
        "total_pages": math.ceil(total / params.limit) if params.limit else 0,
    }
    return body
