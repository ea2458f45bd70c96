from __future__ import annotations

from datetime import datetime

from PySide6.QtCore import QSize, Qt
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from taskdash.domain.entities import DisplayTask

PRIORITY_COLORS = {
    1: "#E24A4A",
    2: "#E57B63",
    3: "#E0B25B",
    4: "#7CC4A1",
}

INDENT_PX = 18


class TaskItemWidget(QWidget):
    def __init__(self, display: DisplayTask, depth: int = 0, now: datetime | None = None):
        super().__init__()
        self.display = display
        task = display.task

        self.setObjectName("TaskCard")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.setMinimumHeight(48)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12 + depth * INDENT_PX, 6, 12, 6)
        layout.setSpacing(2)

        markers = []
        if display.overlay.pinned:
            markers.append("📌")
        if now is not None and display.overlay.is_snoozed(now):
            markers.append("💤")
        prefix = "└ " if depth else ""
        title_text = task.name.strip() if task.name else "Untitled"
        title = QLabel(f"{prefix}{' '.join(markers + [title_text])}")
        title.setProperty("class", "task-title")
        title.setWordWrap(True)
        title.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)

        meta_parts = [task.status, task.list_name]
        if task.custom_id:
            meta_parts.insert(0, task.custom_id)
        if task.due_date:
            meta_parts.append(f"Due {task.due_date.strftime('%Y-%m-%d')}")
        meta = QLabel(" | ".join(part for part in meta_parts if part))
        meta.setProperty("class", "task-meta")
        meta.setWordWrap(True)

        header = QHBoxLayout()
        header.setSpacing(8)
        header.addWidget(title, 1)
        if task.priority_label:
            priority = QLabel(task.priority_label)
            priority.setProperty("class", "task-priority")
            priority.setStyleSheet(
                f"background-color: {PRIORITY_COLORS.get(task.priority, '#9CA3AF')};"
            )
            priority.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
            header.addWidget(priority, 0, Qt.AlignTop)

        layout.addLayout(header)
        layout.addWidget(meta)

    def set_selected(self, selected: bool) -> None:
        self.setProperty("selected", selected)
        self.style().unpolish(self)
        self.style().polish(self)


class TaskListWidget(QListWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self._h_margin = 12
        self._v_margin = 8
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self._update_viewport_margins()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self.sync_item_sizes()

    def _update_viewport_margins(self) -> None:
        scrollbar_width = self.verticalScrollBar().width() or self.verticalScrollBar().sizeHint().width()
        right_margin = self._h_margin + (scrollbar_width if self.verticalScrollBar().isVisible() else 0)
        self.setViewportMargins(self._h_margin, self._v_margin, right_margin, self._v_margin)

    def sync_item_sizes(self) -> None:
        self._update_viewport_margins()
        viewport_width = self.viewport().width()
        for index in range(self.count()):
            item = self.item(index)
            widget = self.itemWidget(item)
            if widget:
                widget.setMinimumWidth(viewport_width)
                widget.setMaximumWidth(viewport_width)
                widget.adjustSize()
                hint = widget.sizeHint()
                item.setSizeHint(QSize(viewport_width, hint.height()))
                widget.resize(viewport_width, hint.height())
