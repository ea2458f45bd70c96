"""ClickUp API client using a personal API token."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import requests

from taskdash.domain.entities import TaskEntity

logger = logging.getLogger(__name__)

CLICKUP_API_BASE = "https://api.clickup.com/api/v2"


class ClickUpError(RuntimeError):
    pass


def _parse_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_millis(value: Any) -> datetime | None:
    millis = _parse_int(value)
    if millis is None:
        return None
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)


def convert_task(raw: dict[str, Any]) -> TaskEntity:
    try:
        return TaskEntity(
            id=str(raw["id"]),
            name=raw.get("name") or "",
            status=(raw.get("status") or {}).get("status", ""),
            list_name=(raw.get("list") or {}).get("name", ""),
            due_date=_parse_millis(raw.get("due_date")),
            priority=_parse_int((raw.get("priority") or {}).get("id")),
            url=raw.get("url") or "",
            tags=tuple(tag["name"] for tag in raw.get("tags") or () if tag.get("name")),
            description=raw.get("text_content"),
            custom_item_id=_parse_int(raw.get("custom_item_id")),
            custom_id=raw.get("custom_id"),
            parent_id=raw.get("parent"),
            assignee_ids=frozenset(
                assignee_id
                for assignee_id in (_parse_int(a.get("id")) for a in raw.get("assignees") or ())
                if assignee_id is not None
            ),
        )
    except (KeyError, AttributeError, TypeError) as exc:
        raise ClickUpError(f"Malformed task payload: {exc}") from exc


class ClickUpClient:
    def __init__(
        self,
        api_token: str,
        session: requests.Session | None = None,
        timeout: float = 30.0,
        base_url: str = CLICKUP_API_BASE,
    ) -> None:
        self._api_token = api_token
        self._session = session or requests.Session()
        self._timeout = timeout
        self._base_url = base_url.rstrip("/")

    def _get(self, endpoint: str, params: list[tuple[str, str]] | None = None) -> dict[str, Any]:
        url = f"{self._base_url}/{endpoint}"
        try:
            resp = self._session.get(
                url,
                params=params,
                headers={"Authorization": self._api_token, "Accept": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise ClickUpError(f"ClickUp request failed: {exc}") from exc

        if resp.status_code != 200:
            raise ClickUpError(f"ClickUp API error ({resp.status_code}): {resp.text}")

        try:
            return resp.json()
        except ValueError as exc:
            raise ClickUpError(f"ClickUp returned invalid JSON for {endpoint}") from exc

    def get_team_id(self) -> str:
        teams = self._get("team").get("teams") or []
        if not teams:
            raise ClickUpError("No teams found in workspace")
        return str(teams[0]["id"])

    def fetch_task_by_id(self, task_id: str) -> TaskEntity:
        return convert_task(self._get(f"task/{task_id}"))

    def fetch_tasks(self, team_id: str, user_id: int | str) -> list[TaskEntity]:
        """Fetch tasks assigned to ``user_id`` plus any parents they reference."""
        data = self._get(
            f"team/{team_id}/task",
            params=[
                ("assignees[]", str(user_id)),
                ("include_closed", "true"),
                ("subtasks", "true"),
            ],
        )
        tasks = [convert_task(raw) for raw in data.get("tasks") or []]
        logger.info("Fetched %d assigned tasks from team %s", len(tasks), team_id)

        existing = {task.id for task in tasks}
        missing: list[str] = []
        for task in tasks:
            if task.parent_id and task.parent_id not in existing and task.parent_id not in missing:
                missing.append(task.parent_id)

        for parent_id in missing:
            try:
                tasks.append(self.fetch_task_by_id(parent_id))
            except ClickUpError as exc:
                logger.warning("Skipping parent task %s: %s", parent_id, exc)

        return tasks
