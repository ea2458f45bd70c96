from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from taskdash.domain.entities import DisplayTask, Overlay, TaskEntity
from taskdash.domain.enums import Category
from taskdash.domain.filters import ViewFilters
from taskdash.infra.clickup import ClickUpClient, ClickUpError
from taskdash.infra.repository import OverlayRepository, TaskCacheRepository

from . import search as search_ranker
from . import view_engine

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DashboardService:
    def __init__(
        self,
        overlays: OverlayRepository,
        cache: TaskCacheRepository,
        client: ClickUpClient | None = None,
        user_id: int | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._overlays = overlays
        self._cache = cache
        self._client = client
        self._clock = clock
        self.user_id = user_id
        self.tasks: list[TaskEntity] = []

    def load_cached(self) -> int:
        self.tasks = self._cache.load_tasks()
        logger.info("Loaded %d cached tasks", len(self.tasks))
        return len(self.tasks)

    def fetch_remote(self) -> list[TaskEntity]:
        """Fetch the remote feed without touching the snapshot or any store.

        Safe to run off the GUI thread; pair it with `apply_refresh`.
        """
        if self._client is None:
            raise ClickUpError("No ClickUp client configured")
        if self.user_id is None:
            raise ClickUpError("No ClickUp user id configured")

        team_id = self._client.get_team_id()
        return self._client.fetch_tasks(team_id, self.user_id)

    def apply_refresh(self, tasks: list[TaskEntity]) -> int:
        # cache first so a failed write leaves the snapshot as it was
        self._cache.replace_tasks(tasks)
        self.tasks = list(tasks)
        self._overlays.set_last_refresh(self._clock())
        logger.info("Refreshed %d tasks", len(tasks))
        return len(tasks)

    def refresh(self) -> int:
        return self.apply_refresh(self.fetch_remote())

    def last_refresh(self) -> datetime | None:
        return self._overlays.get_last_refresh()

    def overlays(self) -> dict[str, Overlay]:
        return self._overlays.get_overlays()

    def current_tasks(self, category: Category, search: str = "") -> list[DisplayTask]:
        filters = ViewFilters(category=category, user_id=self.user_id, search=search)
        return view_engine.build_view(self.tasks, self.overlays(), self._clock(), filters)

    def group_counts(self) -> dict[Category, int]:
        return view_engine.counts(self.tasks, self.overlays(), self._clock())

    def search(self, query: str) -> list[DisplayTask]:
        return search_ranker.search(self.tasks, self.overlays(), query)

    def get_task(self, task_id: str) -> DisplayTask | None:
        task = next((t for t in self.tasks if t.id == task_id), None)
        if task is None:
            return None
        return DisplayTask(task, self._overlays.get_overlay(task_id))

    def toggle_pin(self, task_id: str) -> bool:
        return self._overlays.toggle_pin(task_id)

    def snooze(self, task_id: str, days: int | str) -> datetime:
        if isinstance(days, bool) or not isinstance(days, (int, str)):
            raise ValueError(f"Invalid number of days: {days!r}")
        try:
            days = int(days)
        except ValueError as exc:
            raise ValueError(f"Invalid number of days: {days!r}") from exc
        if days <= 0:
            raise ValueError(f"Invalid number of days: {days}")
        until = self._clock() + timedelta(days=days)
        self._overlays.snooze(task_id, until)
        return until

    def unsnooze(self, task_id: str) -> None:
        self._overlays.unsnooze(task_id)
