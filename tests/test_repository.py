from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from taskdash.domain.entities import DEFAULT_OVERLAY, TaskEntity
from taskdash.infra import models  # noqa: F401
from taskdash.infra.db import Base
from taskdash.infra.repository import OverlayRepository, TaskCacheRepository


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False)
    engine.dispose()


def test_missing_overlay_is_default(session_factory) -> None:
    repo = OverlayRepository(session_factory)

    assert repo.get_overlay("nope") == DEFAULT_OVERLAY
    assert repo.get_overlays() == {}
    assert not repo.is_pinned("nope")


def test_toggle_pin_round_trip(session_factory) -> None:
    repo = OverlayRepository(session_factory)

    assert repo.toggle_pin("A") is True
    assert repo.is_pinned("A")
    assert repo.toggle_pin("A") is False
    assert repo.get_overlays()["A"].pinned is False


def test_snooze_persists_utc_timestamp(session_factory) -> None:
    repo = OverlayRepository(session_factory)
    until = datetime(2026, 2, 1, 9, 30, tzinfo=timezone.utc)

    repo.toggle_pin("A")
    repo.snooze("A", until)

    overlay = repo.get_overlay("A")
    assert overlay.snoozed_until == until
    assert overlay.snoozed_until.tzinfo is not None
    assert overlay.pinned

    repo.unsnooze("A")
    assert repo.get_overlay("A").snoozed_until is None
    assert repo.get_overlay("A").pinned


def test_unsnooze_without_overlay_is_noop(session_factory) -> None:
    repo = OverlayRepository(session_factory)

    repo.unsnooze("ghost")

    assert repo.get_overlays() == {}


def test_last_refresh_round_trip(session_factory) -> None:
    repo = OverlayRepository(session_factory)
    stamp = datetime(2026, 1, 15, 8, 0, tzinfo=timezone.utc)

    assert repo.get_last_refresh() is None
    repo.set_last_refresh(stamp)
    repo.set_last_refresh(stamp)
    assert repo.get_last_refresh() == stamp


def test_task_cache_keeps_order_and_fields(session_factory) -> None:
    repo = TaskCacheRepository(session_factory)
    due = datetime(2026, 3, 1, 0, 0, tzinfo=timezone.utc)
    tasks = [
        TaskEntity(
            id="z1",
            name="Ship it",
            status="in progress",
            list_name="Backend",
            due_date=due,
            priority=2,
            url="https://app.clickup.com/t/z1",
            tags=("release", "api"),
            description="Cut the release",
            custom_item_id=1006,
            custom_id="PROJ-1",
            parent_id="a0",
            assignee_ids=frozenset({7, 3}),
        ),
        TaskEntity(id="a0", name="Parent", status="open"),
    ]

    repo.replace_tasks(tasks)

    assert repo.load_tasks() == tasks


def test_replace_tasks_drops_previous_snapshot(session_factory) -> None:
    repo = TaskCacheRepository(session_factory)
    repo.replace_tasks([TaskEntity(id="old", name="Old", status="open")])

    repo.replace_tasks(
        [
            TaskEntity(id="new", name="New", status="open"),
            TaskEntity(id="new", name="Duplicate", status="open"),
        ]
    )

    assert [(t.id, t.name) for t in repo.load_tasks()] == [("new", "New")]
