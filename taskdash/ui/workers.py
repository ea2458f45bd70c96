from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Signal

from taskdash.infra.clickup import ClickUpError
from taskdash.services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)


class RefreshWorker(QObject):
    """Runs the network half of a refresh; results are applied by the receiver."""

    fetched = Signal(object)
    failed = Signal(str)
    done = Signal()

    def __init__(self, service: DashboardService):
        super().__init__()
        self._service = service

    def run(self) -> None:
        try:
            tasks = self._service.fetch_remote()
        except ClickUpError as exc:
            logger.error("Refresh failed: %s", exc)
            self.failed.emit(str(exc))
        else:
            self.fetched.emit(tasks)
        finally:
            self.done.emit()
