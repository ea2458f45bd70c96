from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .enums import PERSON_ITEM_ID, PRIORITY_LABELS, TASK_TYPE_LABELS


@dataclass(frozen=True)
class TaskEntity:
    id: str
    name: str
    status: str
    list_name: str = ""
    due_date: datetime | None = None
    priority: int | None = None
    url: str = ""
    tags: tuple[str, ...] = ()
    description: str | None = None
    custom_item_id: int | None = None
    custom_id: str | None = None
    parent_id: str | None = None
    assignee_ids: frozenset[int] = field(default_factory=frozenset)

    @property
    def is_person(self) -> bool:
        return self.custom_item_id == PERSON_ITEM_ID

    @property
    def is_subtask(self) -> bool:
        return self.parent_id is not None

    def is_assigned_to(self, user_id: int) -> bool:
        return user_id in self.assignee_ids

    @property
    def priority_label(self) -> str | None:
        if self.priority is None:
            return None
        return PRIORITY_LABELS.get(self.priority)

    @property
    def task_type_label(self) -> str | None:
        if self.custom_item_id is None:
            return None
        return TASK_TYPE_LABELS.get(self.custom_item_id, "Custom")


@dataclass(frozen=True)
class Overlay:
    pinned: bool = False
    snoozed_until: datetime | None = None
    # stored but not used for classification or ordering
    sort_order: int | None = None

    def is_snoozed(self, now: datetime) -> bool:
        return self.snoozed_until is not None and self.snoozed_until > now


DEFAULT_OVERLAY = Overlay()


@dataclass(frozen=True)
class DisplayTask:
    task: TaskEntity
    overlay: Overlay = DEFAULT_OVERLAY

    @property
    def id(self) -> str:
        return self.task.id
