from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone

from sqlalchemy import delete, select

from taskdash.domain.entities import DEFAULT_OVERLAY, Overlay, TaskEntity

from .db import SessionLocal
from .models import AppStateModel, CachedTaskModel, OverlayModel

logger = logging.getLogger(__name__)

LAST_REFRESH_KEY = "last_refresh"


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands timezone-aware columns back naive
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _to_overlay(model: OverlayModel) -> Overlay:
    return Overlay(
        pinned=bool(model.pinned),
        snoozed_until=_as_utc(model.snoozed_until),
        sort_order=model.sort_order,
    )


def _to_entity(model: CachedTaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        name=model.name,
        status=model.status,
        list_name=model.list_name,
        due_date=_as_utc(model.due_date),
        priority=model.priority,
        url=model.url,
        tags=tuple(model.tags or ()),
        description=model.description,
        custom_item_id=model.custom_item_id,
        custom_id=model.custom_id,
        parent_id=model.parent_id,
        assignee_ids=frozenset(model.assignee_ids or ()),
    )


def _to_model(task: TaskEntity, position: int) -> CachedTaskModel:
    return CachedTaskModel(
        id=task.id,
        position=position,
        name=task.name,
        status=task.status,
        list_name=task.list_name,
        due_date=task.due_date,
        priority=task.priority,
        url=task.url,
        tags=list(task.tags),
        description=task.description,
        custom_item_id=task.custom_item_id,
        custom_id=task.custom_id,
        parent_id=task.parent_id,
        assignee_ids=sorted(task.assignee_ids),
    )


class OverlayRepository:
    def __init__(self, session_factory=SessionLocal) -> None:
        self._session_factory = session_factory

    def get_overlays(self) -> dict[str, Overlay]:
        with self._session_factory() as session:
            return {
                model.task_id: _to_overlay(model)
                for model in session.scalars(select(OverlayModel))
            }

    def get_overlay(self, task_id: str) -> Overlay:
        with self._session_factory() as session:
            model = session.get(OverlayModel, task_id)
            return _to_overlay(model) if model else DEFAULT_OVERLAY

    def save_overlay(self, task_id: str, overlay: Overlay) -> Overlay:
        with self._session_factory() as session:
            model = session.get(OverlayModel, task_id)
            if model is None:
                model = OverlayModel(task_id=task_id)
                session.add(model)
            model.pinned = overlay.pinned
            model.snoozed_until = overlay.snoozed_until
            model.sort_order = overlay.sort_order
            session.commit()
        return overlay

    def toggle_pin(self, task_id: str) -> bool:
        current = self.get_overlay(task_id)
        updated = self.save_overlay(task_id, replace(current, pinned=not current.pinned))
        logger.info("Task %s %s", task_id, "pinned" if updated.pinned else "unpinned")
        return updated.pinned

    def is_pinned(self, task_id: str) -> bool:
        return self.get_overlay(task_id).pinned

    def snooze(self, task_id: str, until: datetime) -> Overlay:
        current = self.get_overlay(task_id)
        logger.info("Task %s snoozed until %s", task_id, until.isoformat())
        return self.save_overlay(task_id, replace(current, snoozed_until=until))

    def unsnooze(self, task_id: str) -> None:
        with self._session_factory() as session:
            model = session.get(OverlayModel, task_id)
            if model is None:
                return
            model.snoozed_until = None
            session.commit()
        logger.info("Task %s unsnoozed", task_id)

    def get_last_refresh(self) -> datetime | None:
        with self._session_factory() as session:
            row = session.get(AppStateModel, LAST_REFRESH_KEY)
            if row is None or not row.value:
                return None
            return _as_utc(datetime.fromisoformat(row.value))

    def set_last_refresh(self, value: datetime) -> None:
        with self._session_factory() as session:
            row = session.get(AppStateModel, LAST_REFRESH_KEY)
            if row is None:
                row = AppStateModel(key=LAST_REFRESH_KEY)
                session.add(row)
            row.value = value.isoformat()
            session.commit()


class TaskCacheRepository:
    def __init__(self, session_factory=SessionLocal) -> None:
        self._session_factory = session_factory

    def load_tasks(self) -> list[TaskEntity]:
        with self._session_factory() as session:
            stmt = select(CachedTaskModel).order_by(CachedTaskModel.position.asc())
            return [_to_entity(model) for model in session.scalars(stmt)]

    def replace_tasks(self, tasks: list[TaskEntity]) -> None:
        with self._session_factory() as session:
            session.execute(delete(CachedTaskModel))
            seen: set[str] = set()
            for position, task in enumerate(tasks):
                if task.id in seen:
                    continue
                seen.add(task.id)
                session.add(_to_model(task, position))
            session.commit()
        logger.info("Cached %d tasks", len(seen))
