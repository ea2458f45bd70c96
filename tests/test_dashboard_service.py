from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from taskdash.domain.entities import DEFAULT_OVERLAY, Overlay, TaskEntity
from taskdash.domain.enums import Category
from taskdash.infra.clickup import ClickUpError
from taskdash.services.dashboard_service import DashboardService

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)
ME = 7


class FakeOverlays:
    def __init__(self) -> None:
        self.overlays: dict[str, Overlay] = {}
        self.last_refresh: datetime | None = None

    def get_overlays(self) -> dict[str, Overlay]:
        return dict(self.overlays)

    def get_overlay(self, task_id: str) -> Overlay:
        return self.overlays.get(task_id, DEFAULT_OVERLAY)

    def toggle_pin(self, task_id: str) -> bool:
        current = self.get_overlay(task_id)
        self.overlays[task_id] = replace(current, pinned=not current.pinned)
        return self.overlays[task_id].pinned

    def snooze(self, task_id: str, until: datetime) -> Overlay:
        self.overlays[task_id] = replace(self.get_overlay(task_id), snoozed_until=until)
        return self.overlays[task_id]

    def unsnooze(self, task_id: str) -> None:
        if task_id in self.overlays:
            self.overlays[task_id] = replace(self.overlays[task_id], snoozed_until=None)

    def get_last_refresh(self) -> datetime | None:
        return self.last_refresh

    def set_last_refresh(self, value: datetime) -> None:
        self.last_refresh = value


class FakeCache:
    def __init__(self, tasks: list[TaskEntity] | None = None, error: Exception | None = None) -> None:
        self.tasks = list(tasks or [])
        self.error = error

    def load_tasks(self) -> list[TaskEntity]:
        return list(self.tasks)

    def replace_tasks(self, tasks: list[TaskEntity]) -> None:
        if self.error:
            raise self.error
        self.tasks = list(tasks)


class FakeClient:
    def __init__(self, tasks: list[TaskEntity], error: Exception | None = None) -> None:
        self.tasks = tasks
        self.error = error
        self.calls: list[tuple[str, int]] = []

    def get_team_id(self) -> str:
        if self.error:
            raise self.error
        return "team-1"

    def fetch_tasks(self, team_id: str, user_id: int) -> list[TaskEntity]:
        self.calls.append((team_id, user_id))
        return list(self.tasks)


def _task(task_id: str, status: str = "to do", **kwargs) -> TaskEntity:
    kwargs.setdefault("assignee_ids", frozenset({ME}))
    kwargs.setdefault("name", f"Task {task_id}")
    return TaskEntity(id=task_id, status=status, **kwargs)


def _service(client=None, cache=None, overlays=None) -> DashboardService:
    return DashboardService(
        overlays or FakeOverlays(),
        cache or FakeCache(),
        client=client,
        user_id=ME,
        clock=lambda: NOW,
    )


def test_refresh_replaces_snapshot_and_cache() -> None:
    cache = FakeCache()
    overlays = FakeOverlays()
    client = FakeClient([_task("A"), _task("B", status="done")])
    service = _service(client=client, cache=cache, overlays=overlays)

    assert service.refresh() == 2

    assert client.calls == [("team-1", ME)]
    assert [t.id for t in cache.tasks] == ["A", "B"]
    assert overlays.last_refresh == NOW
    assert service.last_refresh() == NOW
    assert [d.id for d in service.current_tasks(Category.MY_ACTION)] == ["A"]


def test_failed_refresh_keeps_previous_snapshot() -> None:
    cache = FakeCache([_task("cached")])
    service = _service(client=FakeClient([], error=ClickUpError("boom")), cache=cache)
    service.load_cached()

    with pytest.raises(ClickUpError):
        service.refresh()

    assert [t.id for t in service.tasks] == ["cached"]
    assert [t.id for t in cache.tasks] == ["cached"]


def test_failed_cache_write_keeps_previous_snapshot() -> None:
    cache = FakeCache([_task("cached")])
    overlays = FakeOverlays()
    service = _service(client=FakeClient([_task("fresh")]), cache=cache, overlays=overlays)
    service.load_cached()
    cache.error = RuntimeError("disk full")

    with pytest.raises(RuntimeError):
        service.refresh()

    assert [t.id for t in service.tasks] == ["cached"]
    assert [t.id for t in cache.tasks] == ["cached"]
    assert overlays.last_refresh is None


def test_fetch_remote_leaves_state_until_applied() -> None:
    cache = FakeCache([_task("cached")])
    overlays = FakeOverlays()
    service = _service(client=FakeClient([_task("fresh")]), cache=cache, overlays=overlays)
    service.load_cached()

    fetched = service.fetch_remote()

    assert [t.id for t in fetched] == ["fresh"]
    assert [t.id for t in service.tasks] == ["cached"]
    assert overlays.last_refresh is None

    assert service.apply_refresh(fetched) == 1
    assert [t.id for t in service.tasks] == ["fresh"]
    assert [t.id for t in cache.tasks] == ["fresh"]
    assert overlays.last_refresh == NOW


def test_refresh_without_client_fails() -> None:
    with pytest.raises(ClickUpError):
        _service().refresh()


def test_current_tasks_apply_user_filter() -> None:
    service = _service(cache=FakeCache([_task("mine"), _task("theirs", assignee_ids=frozenset({1}))]))
    service.load_cached()

    assert [d.id for d in service.current_tasks(Category.MY_ACTION)] == ["mine"]
    assert service.group_counts()[Category.MY_ACTION] == 2


def test_snooze_moves_task_until_it_expires() -> None:
    service = _service(cache=FakeCache([_task("A", status="in progress")]))
    service.load_cached()

    until = service.snooze("A", "3")

    assert until == NOW + timedelta(days=3)
    assert [d.id for d in service.current_tasks(Category.SNOOZED)] == ["A"]
    assert service.current_tasks(Category.MY_ACTION) == []

    service.unsnooze("A")
    assert [d.id for d in service.current_tasks(Category.MY_ACTION)] == ["A"]


@pytest.mark.parametrize("days", ["abc", "", "1.5", 0, -2, 1.5, True, None])
def test_snooze_rejects_invalid_days(days) -> None:
    service = _service(cache=FakeCache([_task("A")]))

    with pytest.raises(ValueError):
        service.snooze("A", days)


def test_toggle_pin_is_reflected_in_results() -> None:
    service = _service(cache=FakeCache([_task("A")]))
    service.load_cached()

    assert service.toggle_pin("A") is True
    [display] = service.current_tasks(Category.MY_ACTION)
    assert display.overlay.pinned
    assert service.get_task("A").overlay.pinned
    assert service.toggle_pin("A") is False


def test_search_ranks_across_groups() -> None:
    service = _service(cache=FakeCache([_task("A", status="done"), _task("B", name="deploy api")]))
    service.load_cached()

    assert [d.id for d in service.search("dep")] == ["B"]
    assert service.search("") == []
    assert service.get_task("missing") is None
