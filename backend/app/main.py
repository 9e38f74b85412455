"""Read API over the collected news."""

from __future__ import annotations

import datetime
import logging
import math
from typing import Any, Optional

from fastapi import Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from joshi_news.organizations import ORGANIZATIONS
from joshi_news.storage import NewsStorage

from .lifecycle import get_news_storage, is_ready, lifespan

logger = logging.getLogger(__name__)

app = FastAPI(title="Joshi News API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


class NewsListResponse(BaseModel):
    success: bool = True
    data: list[dict[str, Any]]
    count: int
    totalCount: int
    page: int
    totalPages: int
    timestamp: str


class OrganizationOut(BaseModel):
    name: str
    displayName: str


class OrganizationsResponse(BaseModel):
    success: bool = True
    data: list[OrganizationOut]
    timestamp: str


class StatisticsOut(BaseModel):
    total: int
    byOrganization: dict[str, int]
    latestUpdate: Optional[str] = None


class StatisticsResponse(BaseModel):
    success: bool = True
    data: StatisticsOut
    timestamp: str


class MessageResponse(BaseModel):
    success: bool = True
    message: str


def _now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def _error_response(exc: Exception, context: str) -> JSONResponse:
    logger.exception(f"{context} failed", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error", "timestamp": _now()},
    )


def _require_storage(storage: Optional[NewsStorage]) -> NewsStorage:
    if storage is None:
        raise RuntimeError("News storage unavailable")
    return storage


@app.get("/health")
async def health_check(ready: bool = Depends(is_ready)):
    """Health check endpoint for load balancer probes."""
    return {"status": "healthy" if ready else "starting", "service": "api"}


@app.get("/api/news", response_model=NewsListResponse)
def get_news(
    organization: Optional[str] = None,
    limit: int = Query(20, ge=1, le=1000),
    page: int = Query(1, ge=1),
    storage: Optional[NewsStorage] = Depends(get_news_storage),
):
    """Stored news, newest first, optionally for one organization.

    ``organization=all`` (or omitting it) pages across every organization.
    """
    try:
        store = _require_storage(storage)
        if organization and organization != "all":
            items = store.load_by_organization(organization)
        else:
            items = store.load_by_organization(None)
    except Exception as exc:
        return _error_response(exc, "News listing")

    total = len(items)
    start = (page - 1) * limit
    page_items = items[start : start + limit]
    return NewsListResponse(
        data=[item.to_dict() for item in page_items],
        count=len(page_items),
        totalCount=total,
        page=page,
        totalPages=math.ceil(total / limit),
        timestamp=_now(),
    )


@app.get("/api/organizations", response_model=OrganizationsResponse)
def get_organizations():
    return OrganizationsResponse(
        data=[
            OrganizationOut(name=org.name, displayName=org.display_name)
            for org in ORGANIZATIONS
        ],
        timestamp=_now(),
    )


@app.get("/api/statistics", response_model=StatisticsResponse)
def get_statistics(storage: Optional[NewsStorage] = Depends(get_news_storage)):
    try:
        stats = _require_storage(storage).statistics()
    except Exception as exc:
        return _error_response(exc, "Statistics")

    return StatisticsResponse(
        data=StatisticsOut(
            total=stats["total"],
            byOrganization=stats["by_organization"],
            latestUpdate=stats["latest_update"],
        ),
        timestamp=_now(),
    )


@app.post("/api/admin/clear", response_model=MessageResponse)
def clear_data(storage: Optional[NewsStorage] = Depends(get_news_storage)):
    try:
        _require_storage(storage).clear()
    except Exception as exc:
        return _error_response(exc, "Clearing storage")

    logger.info("Cleared all stored news via admin endpoint")
    return MessageResponse(message="All stored news cleared")
