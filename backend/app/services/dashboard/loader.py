"""Load orchestration for the dashboard."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from app.api.schemas.dashboard import DashboardState
from app.services.dashboard.queries import (
    fetch_invoices,
    fetch_notifications,
    fetch_projects,
    fetch_tasks,
    fetch_timers,
)
from app.services.dashboard.stats import calculate_stats
from app.services.notification_service import mark_notification_read
from app.store.base import RecordStore, StoreError

logger = logging.getLogger(__name__)


@dataclass
class MarkReadResult:
    status: str
    reason: str

    @property
    def ok(self) -> bool:
        return self.status == "updated"


def describe_error(exc: BaseException) -> str:
    message = exc.message if isinstance(exc, StoreError) else str(exc)
    return message or "Unknown error"


class DashboardLoader:
    """Fetch, normalise and aggregate everything the dashboard shows.

    ``state`` is replaced as a whole on every transition, so a consumer never
    observes a half-applied load. Each load cycle gets a generation number;
    only the latest cycle may publish, and starting a new cycle cancels the
    one still in flight.
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store
        self._generation = 0
        self._inflight: Optional[asyncio.Future] = None
        self._status_before_cycle = "idle"
        self.state = DashboardState()

    @property
    def generation(self) -> int:
        return self._generation

    async def load(self) -> DashboardState:
        if self._inflight is None:
            self._status_before_cycle = self.state.status
        self._discard_inflight()
        self._generation += 1
        generation = self._generation
        self.state = self.state.model_copy(update={"status": "loading", "loading": True, "error": None})

        task = asyncio.ensure_future(self._fetch_all())
        self._inflight = task
        try:
            data = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                logger.debug("Dashboard load %s superseded", generation)
                return self.state
            # The caller itself was cancelled; leave no cycle looking active.
            self._abandon()
            raise
        except Exception as exc:
            payload = exc.payload if isinstance(exc, StoreError) else None
            logger.error("Failed to load dashboard data (cycle=%s): %s payload=%s", generation, exc, payload)
            self._publish(generation, status="error", loading=False, error=describe_error(exc))
            return self.state
        finally:
            if self._inflight is task:
                self._inflight = None

        self._publish(generation, status="success", loading=False, error=None, **data)
        return self.state

    refetch = load

    def cancel(self) -> None:
        """Abandon the in-flight cycle, if any."""
        if self._inflight is None:
            return
        self._abandon()

    async def mark_notification_as_read(self, notification_id: str) -> MarkReadResult:
        try:
            user = await self._store.get_current_user()
            updated = await mark_notification_read(
                self._store,
                notification_id,
                user_id=user.id if user else None,
            )
        except Exception as exc:
            payload = exc.payload if isinstance(exc, StoreError) else None
            logger.error("Failed to mark notification %s as read: %s payload=%s", notification_id, exc, payload)
            return MarkReadResult(status="failed", reason=describe_error(exc))

        if not updated:
            return MarkReadResult(status="not_found", reason="notification not found")

        notifications = [
            notification.model_copy(update={"is_read": True}) if notification.id == notification_id else notification
            for notification in self.state.notifications
        ]
        self.state = self.state.model_copy(update={"notifications": notifications})
        return MarkReadResult(status="updated", reason="notification marked as read")

    async def _fetch_all(self) -> dict:
        results = await asyncio.gather(
            fetch_projects(self._store),
            fetch_tasks(self._store),
            fetch_timers(self._store),
            fetch_invoices(self._store),
            fetch_notifications(self._store),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

        projects, tasks, timers, invoices, notifications = results
        return {
            "projects": projects,
            "tasks": tasks,
            "timers": timers,
            "invoices": invoices,
            "notifications": notifications,
            "stats": calculate_stats(projects, tasks, invoices),
        }

    def _discard_inflight(self) -> None:
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None

    def _abandon(self) -> None:
        self._discard_inflight()
        self._generation += 1
        self.state = self.state.model_copy(update={"status": self._status_before_cycle, "loading": False})

    def _publish(self, generation: int, **changes) -> bool:
        if generation != self._generation:
            logger.debug("Discarding result of stale dashboard load %s", generation)
            return False
        self.state = self.state.model_copy(update=changes)
        return True
