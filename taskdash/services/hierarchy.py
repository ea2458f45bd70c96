"""Ordering of a visible task set so that families stay together.

A task's root is its topmost ancestor *within the visible set*; its depth is
the number of visible ancestors above it (the root itself has depth 0).
Families are ordered by root priority, then root id; inside a family
parents come before children, and the task id settles any remaining tie.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping

from taskdash.domain.entities import DisplayTask


def family_position(task: DisplayTask, visible: Mapping[str, DisplayTask]) -> tuple[DisplayTask, int]:
    """Return ``(root, depth)`` for ``task`` inside ``visible``."""
    seen = {task.id}
    root = task
    depth = 0
    parent_id = task.task.parent_id
    while parent_id is not None and parent_id in visible and parent_id not in seen:
        seen.add(parent_id)
        root = visible[parent_id]
        depth += 1
        parent_id = root.task.parent_id
    return root, depth


def sort_hierarchy(tasks: Iterable[DisplayTask]) -> list[DisplayTask]:
    items = list(tasks)
    visible = {item.id: item for item in items}

    def sort_key(item: DisplayTask) -> tuple:
        root, depth = family_position(item, visible)
        priority = root.task.priority
        return (priority is None, priority or 0, root.id, depth, item.id)

    return sorted(items, key=sort_key)
