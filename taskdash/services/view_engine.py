"""Per-tab task sets and tab counters.

Everything here is pure: callers pass the fetched tasks, the overlay map and
the current time, and get a fresh result back. Nothing is cached or mutated.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime

from taskdash.domain.classifier import in_category
from taskdash.domain.entities import DEFAULT_OVERLAY, DisplayTask, Overlay, TaskEntity
from taskdash.domain.enums import Category
from taskdash.domain.filters import ViewFilters

from .hierarchy import sort_hierarchy


def _is_assigned(task: TaskEntity, user_id: int | None) -> bool:
    return user_id is None or task.is_assigned_to(user_id)


def matches_text(task: TaskEntity, text: str) -> bool:
    if not text:
        return True
    needle = text.lower()
    fields = [task.name, task.list_name, task.status, task.description or ""]
    return any(needle in value.lower() for value in fields)


def collect_ancestors(
    task: TaskEntity,
    index: Mapping[str, TaskEntity],
    user_id: int | None,
) -> list[TaskEntity]:
    """Walk up the parent chain, nearest parent first.

    The first parent not assigned to ``user_id`` is still included, but the
    walk stops there. A parent id missing from ``index`` or already seen on
    this walk ends it as well.
    """
    ancestors: list[TaskEntity] = []
    seen = {task.id}
    parent_id = task.parent_id
    while parent_id is not None and parent_id not in seen:
        parent = index.get(parent_id)
        if parent is None:
            break
        ancestors.append(parent)
        seen.add(parent_id)
        if not _is_assigned(parent, user_id):
            break
        parent_id = parent.parent_id
    return ancestors


def build_set(
    all_tasks: Iterable[TaskEntity],
    overlays: Mapping[str, Overlay],
    now: datetime,
    category: Category,
    user_id: int | None = None,
    text_filter: str = "",
) -> list[DisplayTask]:
    tasks = list(all_tasks)
    index = {task.id: task for task in tasks}

    primary = [
        task
        for task in tasks
        if in_category(task, overlays.get(task.id, DEFAULT_OVERLAY), now, category)
        and _is_assigned(task, user_id)
        and matches_text(task, text_filter)
    ]

    included: dict[str, DisplayTask] = {}
    for task in primary:
        chain = collect_ancestors(task, index, user_id)
        for member in [*reversed(chain), task]:
            if member.id not in included:
                included[member.id] = DisplayTask(member, overlays.get(member.id, DEFAULT_OVERLAY))

    return sort_hierarchy(included.values())


def build_view(
    all_tasks: Iterable[TaskEntity],
    overlays: Mapping[str, Overlay],
    now: datetime,
    filters: ViewFilters,
) -> list[DisplayTask]:
    return build_set(
        all_tasks,
        overlays,
        now,
        filters.category,
        user_id=filters.user_id,
        text_filter=filters.search,
    )


def counts(
    all_tasks: Iterable[TaskEntity],
    overlays: Mapping[str, Overlay],
    now: datetime,
) -> dict[Category, int]:
    tasks = list(all_tasks)
    return {
        category: sum(
            1
            for task in tasks
            if in_category(task, overlays.get(task.id, DEFAULT_OVERLAY), now, category)
        )
        for category in Category
    }
