from __future__ import annotations

import logging
import sys
from pathlib import Path

from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import QApplication, QMessageBox, QStyleFactory

from taskdash.config import PROJECT_ROOT, SETTINGS
from taskdash.infra.clickup import ClickUpClient, ClickUpError
from taskdash.infra.db import init_db
from taskdash.infra.logging import setup_logging
from taskdash.infra.repository import OverlayRepository, TaskCacheRepository
from taskdash.services.dashboard_service import DashboardService
from taskdash.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def _apply_dark_palette(app: QApplication) -> None:
    palette = QPalette()
    palette.setColor(QPalette.Window, QColor("#0F172A"))
    palette.setColor(QPalette.WindowText, QColor("#E6EDF3"))
    palette.setColor(QPalette.Base, QColor("#111827"))
    palette.setColor(QPalette.AlternateBase, QColor("#1B2230"))
    palette.setColor(QPalette.Text, QColor("#E6EDF3"))
    palette.setColor(QPalette.Button, QColor("#202A3B"))
    palette.setColor(QPalette.ButtonText, QColor("#E6EDF3"))
    palette.setColor(QPalette.Highlight, QColor("#2563EB"))
    palette.setColor(QPalette.HighlightedText, QColor("#FFFFFF"))
    app.setPalette(palette)


def _find_qss_path() -> Path | None:
    candidates = [
        Path(__file__).resolve().parent / "ui" / "styles.qss",
        PROJECT_ROOT / "taskdash" / "ui" / "styles.qss",
    ]
    for path in candidates:
        if path.exists():
            return path
    return None


def load_styles(app: QApplication) -> None:
    qss_path = _find_qss_path()
    if qss_path:
        app.setStyleSheet(qss_path.read_text(encoding="utf-8"))


def build_service() -> DashboardService:
    client = ClickUpClient(SETTINGS.api_token, timeout=SETTINGS.request_timeout)
    return DashboardService(
        OverlayRepository(),
        TaskCacheRepository(),
        client=client,
        user_id=SETTINGS.user_id,
    )


def main() -> None:
    setup_logging()
    app = QApplication(sys.argv)

    missing = SETTINGS.missing_credentials()
    if missing:
        QMessageBox.critical(
            None,
            "Configuration error",
            "Set the following in your .env file:\n" + "\n".join(missing),
        )
        return

    try:
        init_db()
    except Exception as exc:  # noqa: BLE001
        QMessageBox.critical(None, "DB error", str(exc))
        return

    service = build_service()
    service.load_cached()

    if SETTINGS.auto_refresh or not service.tasks:
        try:
            service.refresh()
        except ClickUpError as exc:
            logger.error("Initial refresh failed: %s", exc)

    app.setStyle(QStyleFactory.create("Fusion"))
    _apply_dark_palette(app)
    app.setFont(QFont("Segoe UI", 10))
    load_styles(app)

    window = MainWindow(service)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
