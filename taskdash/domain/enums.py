from __future__ import annotations

from enum import IntEnum, StrEnum

PERSON_ITEM_ID = 1020


class Category(StrEnum):
    MY_ACTION = "my_action"
    WAITING = "waiting"
    BACKLOG = "backlog"
    DONE = "done"
    SNOOZED = "snoozed"
    PERSON = "person"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]

    @property
    def position(self) -> int:
        return list(Category).index(self)

    @classmethod
    def from_position(cls, position: int) -> Category | None:
        members = list(cls)
        if 0 <= position < len(members):
            return members[position]
        return None

    def next(self) -> Category:
        members = list(Category)
        return members[(self.position + 1) % len(members)]

    def previous(self) -> Category:
        members = list(Category)
        return members[(self.position - 1) % len(members)]


CATEGORY_LABELS = {
    Category.MY_ACTION: "My Action",
    Category.WAITING: "Waiting",
    Category.BACKLOG: "Backlog",
    Category.DONE: "Done",
    Category.SNOOZED: "Snoozed",
    Category.PERSON: "Person",
}


class PriorityLevel(IntEnum):
    URGENT = 1
    HIGH = 2
    NORMAL = 3
    LOW = 4


PRIORITY_LABELS = {
    PriorityLevel.URGENT: "Urgent",
    PriorityLevel.HIGH: "High",
    PriorityLevel.NORMAL: "Normal",
    PriorityLevel.LOW: "Low",
}

TASK_TYPE_LABELS = {
    0: "Task",
    1004: "Bug",
    1005: "Milestone",
    1006: "Feature",
    1007: "Epic",
    1008: "Story",
    1009: "Spike",
    PERSON_ITEM_ID: "Person",
}
