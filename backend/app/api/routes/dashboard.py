"""Dashboard API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.api.schemas.dashboard import DashboardResponse
from app.observability.metrics import log_metric, timed
from app.observability.tracing import trace
from app.services.dashboard import DashboardLoader
from app.store.base import RecordStore
from app.store.deps import get_store

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse, tags=["dashboard"])
async def get_dashboard(
    http_request: Request,
    store: RecordStore = Depends(get_store),
) -> DashboardResponse:
    """Load every dashboard collection and the derived stats in one cycle."""
    request_id = getattr(http_request.state, "request_id", None)
    loader = DashboardLoader(store)

    with timed("dashboard.get"), trace("dashboard.get", metadata={"route": "/dashboard"}, request_id=request_id):
        state = await loader.load()
        if state.status == "error":
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=state.error)

    log_metric("dashboard.get.projects_count", len(state.projects))
    log_metric("dashboard.get.notifications_count", len(state.notifications))

    return DashboardResponse(
        projects=state.projects,
        tasks=state.tasks,
        timers=state.timers,
        invoices=state.invoices,
        notifications=state.notifications,
        stats=state.stats,
        request_id=request_id or "",
    )
