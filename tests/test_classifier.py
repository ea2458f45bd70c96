from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from taskdash.domain.classifier import classify, in_category, status_to_group
from taskdash.domain.entities import Overlay, TaskEntity
from taskdash.domain.enums import PERSON_ITEM_ID, Category

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def _task(status: str = "to do", custom_item_id: int | None = None) -> TaskEntity:
    return TaskEntity(id="t1", name="Task", status=status, custom_item_id=custom_item_id)


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        ("in progress", Category.MY_ACTION),
        ("To Do", Category.MY_ACTION),
        ("todo", Category.MY_ACTION),
        ("to-do", Category.MY_ACTION),
        ("IN REVIEW", Category.MY_ACTION),
        ("to review", Category.MY_ACTION),
        ("blocked", Category.WAITING),
        ("Testing", Category.WAITING),
        ("pending review", Category.WAITING),
        ("validation", Category.WAITING),
        ("backlog", Category.BACKLOG),
        ("open", Category.BACKLOG),
        ("new", Category.BACKLOG),
        ("Complete", Category.DONE),
        ("shipped", Category.DONE),
        ("won't do", Category.DONE),
        ("canceled", Category.DONE),
        ("for reference", Category.DONE),
    ],
)
def test_status_to_group(status: str, expected: Category) -> None:
    assert status_to_group(status) == expected


def test_unknown_status_defaults_to_backlog() -> None:
    assert status_to_group("awaiting legal") == Category.BACKLOG
    assert status_to_group("") == Category.BACKLOG


def test_person_task_ignores_status_and_snooze() -> None:
    task = _task(status="done", custom_item_id=PERSON_ITEM_ID)
    snoozed = Overlay(snoozed_until=NOW + timedelta(days=3))

    assert classify(task, Overlay(), NOW) == Category.PERSON
    assert classify(task, snoozed, NOW) == Category.PERSON


def test_active_snooze_overrides_status() -> None:
    task = _task(status="done")
    overlay = Overlay(snoozed_until=NOW + timedelta(hours=1))

    assert classify(task, overlay, NOW) == Category.SNOOZED


def test_expired_snooze_reverts_to_status_group() -> None:
    task = _task(status="done")
    overlay = Overlay(snoozed_until=NOW + timedelta(hours=1))

    assert classify(task, overlay, NOW + timedelta(hours=2)) == Category.DONE
    # strictly later than now is required
    assert classify(task, overlay, NOW + timedelta(hours=1)) == Category.DONE


def test_person_partition_membership() -> None:
    person = _task(status="to do", custom_item_id=PERSON_ITEM_ID)
    regular = _task(status="to do", custom_item_id=1004)

    assert in_category(person, Overlay(), NOW, Category.PERSON)
    assert not in_category(person, Overlay(), NOW, Category.MY_ACTION)
    assert in_category(regular, Overlay(), NOW, Category.MY_ACTION)
    assert not in_category(regular, Overlay(), NOW, Category.PERSON)


def test_category_navigation_wraps() -> None:
    assert Category.MY_ACTION.next() == Category.WAITING
    assert Category.PERSON.next() == Category.MY_ACTION
    assert Category.MY_ACTION.previous() == Category.PERSON
    assert Category.from_position(4) == Category.SNOOZED
    assert Category.from_position(6) is None
    assert Category.SNOOZED.label == "Snoozed"


def test_task_labels() -> None:
    task = TaskEntity(id="1", name="x", status="open", priority=1, custom_item_id=1006)
    assert task.priority_label == "Urgent"
    assert task.task_type_label == "Feature"
    assert TaskEntity(id="2", name="y", status="open", custom_item_id=4242).task_type_label == "Custom"
    assert TaskEntity(id="3", name="z", status="open").task_type_label is None
    assert TaskEntity(id="4", name="w", status="open", priority=9).priority_label is None
