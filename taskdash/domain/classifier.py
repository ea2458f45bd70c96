"""Maps a task and its local overlay to the tab it is shown under."""
from __future__ import annotations

from datetime import datetime

from .entities import Overlay, TaskEntity
from .enums import Category

STATUS_GROUPS: dict[str, Category] = {
    # actionable by me
    "in progress": Category.MY_ACTION,
    "to do": Category.MY_ACTION,
    "to-do": Category.MY_ACTION,
    "todo": Category.MY_ACTION,
    "in review": Category.MY_ACTION,
    "review": Category.MY_ACTION,
    "to review": Category.MY_ACTION,
    # ball in someone else's court
    "blocked": Category.WAITING,
    "in testing": Category.WAITING,
    "testing": Category.WAITING,
    "to validate": Category.WAITING,
    "validation": Category.WAITING,
    "pending review": Category.WAITING,
    "backlog": Category.BACKLOG,
    "open": Category.BACKLOG,
    "new": Category.BACKLOG,
    "done": Category.DONE,
    "complete": Category.DONE,
    "completed": Category.DONE,
    "closed": Category.DONE,
    "released": Category.DONE,
    "deployed": Category.DONE,
    "shipped": Category.DONE,
    "cancelled": Category.DONE,
    "canceled": Category.DONE,
    "won't do": Category.DONE,
    "wontdo": Category.DONE,
    "for reference": Category.DONE,
}


def status_to_group(status: str) -> Category:
    """Unknown statuses land in the backlog."""
    return STATUS_GROUPS.get(status.lower(), Category.BACKLOG)


def classify(task: TaskEntity, overlay: Overlay, now: datetime) -> Category:
    if task.is_person:
        return Category.PERSON
    if overlay.is_snoozed(now):
        return Category.SNOOZED
    return status_to_group(task.status)


def in_category(task: TaskEntity, overlay: Overlay, now: datetime, category: Category) -> bool:
    """Membership test used by both the tab builder and the tab counters.

    Person tasks form their own partition: they only ever show under the
    Person tab, whatever their status or snooze state.
    """
    if category == Category.PERSON:
        return task.is_person
    return not task.is_person and classify(task, overlay, now) == category
