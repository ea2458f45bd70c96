from __future__ import annotations

import logging

from PySide6.QtCore import QThread, QUrl, Qt
from PySide6.QtGui import QDesktopServices, QGuiApplication, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QApplication,
    QCheckBox,
    QFrame,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from taskdash.config import SETTINGS
from taskdash.domain.entities import DisplayTask
from taskdash.domain.enums import Category
from taskdash.services.dashboard_service import DashboardService, utcnow
from taskdash.services.hierarchy import family_position

from .widgets import TaskItemWidget, TaskListWidget
from .workers import RefreshWorker

logger = logging.getLogger(__name__)


class MainWindow(QWidget):
    def __init__(self, service: DashboardService):
        super().__init__()
        self.setWindowTitle("Task Dashboard")
        self.resize(1280, 760)

        self.service = service
        self.current_category = Category.MY_ACTION
        self.current_task_id: str | None = None
        self._displayed: list[DisplayTask] = []
        self._refresh_thread: QThread | None = None
        self._refresh_worker: RefreshWorker | None = None

        main_layout = QHBoxLayout(self)
        main_layout.setContentsMargins(12, 12, 12, 12)

        splitter = QSplitter(Qt.Horizontal)
        main_layout.addWidget(splitter)

        splitter.addWidget(self._build_sidebar())
        splitter.addWidget(self._build_center())
        splitter.addWidget(self._build_detail_panel())
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 2)
        splitter.setStretchFactor(2, 2)
        splitter.setSizes([220, 640, 420])

        QShortcut(QKeySequence("Ctrl+R"), self, self.refresh_remote)
        QShortcut(QKeySequence("Ctrl+F"), self, self.search_input.setFocus)

        self.refresh_view()

    def _build_sidebar(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("Sidebar")
        layout = QVBoxLayout(frame)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        title = QLabel("Groups")
        title.setProperty("class", "sidebar-title")
        layout.addWidget(title)

        self.category_list = QListWidget()
        self.category_list.setObjectName("FilterList")
        self.category_list.setSpacing(6)
        for category in Category:
            item = QListWidgetItem(category.label)
            item.setData(Qt.UserRole, category.value)
            self.category_list.addItem(item)
        self.category_list.setCurrentRow(0)
        self.category_list.currentItemChanged.connect(self.on_category_change)
        layout.addWidget(self.category_list)

        self.refresh_button = QPushButton("Refresh")
        self.refresh_button.clicked.connect(self.refresh_remote)
        layout.addWidget(self.refresh_button)

        self.refresh_label = QLabel("")
        self.refresh_label.setProperty("class", "stats")
        self.refresh_label.setWordWrap(True)
        layout.addWidget(self.refresh_label)

        layout.addStretch()
        return frame

    def _build_center(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("CenterPanel")
        layout = QVBoxLayout(frame)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(12)

        header = QHBoxLayout()
        self.header_title = QLabel(self.current_category.label)
        self.header_title.setProperty("class", "panel-title")
        self.status_label = QLabel("")
        self.status_label.setProperty("class", "stats-badge")
        header.addWidget(self.header_title)
        header.addStretch()
        header.addWidget(self.status_label)

        search_row = QHBoxLayout()
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Filter by name, list, status or description")
        self.search_input.textChanged.connect(self.refresh_view)

        self.global_search = QCheckBox("All tasks")
        self.global_search.setToolTip("Fuzzy search across every group")
        self.global_search.toggled.connect(self.refresh_view)

        search_row.addWidget(self.search_input, 1)
        search_row.addWidget(self.global_search)

        self.task_list = TaskListWidget()
        self.task_list.setObjectName("TaskList")
        self.task_list.setSpacing(4)
        self.task_list.currentItemChanged.connect(self.on_task_selected)

        layout.addLayout(header)
        layout.addLayout(search_row)
        layout.addWidget(self.task_list)
        return frame

    def _build_detail_panel(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("DetailPanel")
        frame_layout = QVBoxLayout(frame)
        frame_layout.setContentsMargins(0, 0, 0, 0)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.NoFrame)
        scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)

        content = QWidget()
        content_layout = QVBoxLayout(content)
        content_layout.setContentsMargins(12, 12, 12, 12)
        content_layout.setSpacing(8)

        title = QLabel("Details")
        title.setProperty("class", "panel-title")

        self.detail_name = QLabel("")
        self.detail_name.setProperty("class", "task-title")
        self.detail_name.setWordWrap(True)

        self.detail_meta = QLabel("")
        self.detail_meta.setProperty("class", "task-meta")
        self.detail_meta.setWordWrap(True)
        self.detail_meta.setTextInteractionFlags(Qt.TextSelectableByMouse)

        self.detail_description = QLabel("")
        self.detail_description.setWordWrap(True)
        self.detail_description.setAlignment(Qt.AlignTop | Qt.AlignLeft)
        self.detail_description.setTextInteractionFlags(Qt.TextSelectableByMouse)

        self.pin_button = QPushButton("Pin")
        self.pin_button.clicked.connect(self.toggle_pin)

        self.snooze_button = QPushButton("Snooze")
        self.snooze_button.setProperty("variant", "secondary")
        self.snooze_button.clicked.connect(self.snooze_task)

        self.unsnooze_button = QPushButton("Unsnooze")
        self.unsnooze_button.setProperty("variant", "ghost")
        self.unsnooze_button.clicked.connect(self.unsnooze_task)

        self.open_button = QPushButton("Open in browser")
        self.open_button.setProperty("variant", "secondary")
        self.open_button.clicked.connect(self.open_in_browser)

        self.copy_button = QPushButton("Copy name")
        self.copy_button.setProperty("variant", "ghost")
        self.copy_button.clicked.connect(self.copy_name)

        actions = QHBoxLayout()
        actions.setSpacing(8)
        for button in (self.pin_button, self.snooze_button, self.unsnooze_button):
            actions.addWidget(button, 1)

        links = QHBoxLayout()
        links.setSpacing(8)
        links.addWidget(self.open_button, 1)
        links.addWidget(self.copy_button, 1)

        content_layout.addWidget(title)
        content_layout.addWidget(self.detail_name)
        content_layout.addWidget(self.detail_meta)
        content_layout.addLayout(actions)
        content_layout.addLayout(links)
        content_layout.addWidget(self.detail_description, 1)

        scroll.setWidget(content)
        frame_layout.addWidget(scroll)
        self._set_actions_enabled(False)
        return frame

    def refresh_view(self) -> None:
        query = self.search_input.text()
        now = utcnow()
        if self.global_search.isChecked():
            tasks = self.service.search(query)
            depths = {display.id: 0 for display in tasks}
            self.header_title.setText("Search")
        else:
            tasks = self.service.current_tasks(self.current_category, query)
            visible = {display.id: display for display in tasks}
            depths = {display.id: family_position(display, visible)[1] for display in tasks}
            self.header_title.setText(self.current_category.label)

        self._displayed = tasks
        self.task_list.clear()
        for display in tasks:
            item = QListWidgetItem()
            item.setData(Qt.UserRole, display.id)
            widget = TaskItemWidget(display, depths.get(display.id, 0), now)
            self.task_list.addItem(item)
            self.task_list.setItemWidget(item, widget)
            item.setSizeHint(widget.sizeHint())

        self._refresh_counts()
        self.status_label.setText(f"{len(tasks)} shown")

        if tasks:
            row = next(
                (i for i, display in enumerate(tasks) if display.id == self.current_task_id),
                0,
            )
            self.task_list.setCurrentRow(row)
        else:
            self.current_task_id = None
            self._clear_details()
        self.task_list.sync_item_sizes()

    def _refresh_counts(self) -> None:
        counts = self.service.group_counts()
        for index in range(self.category_list.count()):
            item = self.category_list.item(index)
            category = Category(item.data(Qt.UserRole))
            item.setText(f"{category.label} ({counts.get(category, 0)})")

        last_refresh = self.service.last_refresh()
        if last_refresh:
            self.refresh_label.setText(f"Updated {last_refresh.astimezone():%Y-%m-%d %H:%M}")

    def refresh_remote(self) -> None:
        if self._refresh_thread is not None:
            return

        thread = QThread(self)
        worker = RefreshWorker(self.service)
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.fetched.connect(self._on_refresh_fetched)
        worker.failed.connect(self._on_refresh_failed)
        worker.done.connect(thread.quit)
        thread.finished.connect(self._on_refresh_thread_finished)

        self._refresh_thread = thread
        self._refresh_worker = worker
        self.refresh_button.setEnabled(False)
        self.status_label.setText("Refreshing...")
        QApplication.setOverrideCursor(Qt.BusyCursor)
        thread.start()

    def _on_refresh_fetched(self, tasks) -> None:
        count = self.service.apply_refresh(tasks)
        self.status_label.setText(f"Loaded {count} tasks")
        self.refresh_view()

    def _on_refresh_failed(self, message: str) -> None:
        self.status_label.setText("Refresh failed")
        QMessageBox.warning(self, "Refresh failed", message)

    def _on_refresh_thread_finished(self) -> None:
        QApplication.restoreOverrideCursor()
        self.refresh_button.setEnabled(True)
        if self._refresh_worker is not None:
            self._refresh_worker.deleteLater()
        if self._refresh_thread is not None:
            self._refresh_thread.deleteLater()
        self._refresh_worker = None
        self._refresh_thread = None

    def closeEvent(self, event) -> None:  # type: ignore[override]
        if self._refresh_thread is not None:
            self._refresh_thread.quit()
            self._refresh_thread.wait()
        super().closeEvent(event)

    def on_category_change(self, current: QListWidgetItem) -> None:
        if not current:
            return
        self.current_category = Category(current.data(Qt.UserRole))
        self.current_task_id = None
        if self.global_search.isChecked():
            self.global_search.setChecked(False)
            return
        self.refresh_view()

    def on_task_selected(
        self,
        current: QListWidgetItem,
        previous: QListWidgetItem | None = None,
    ) -> None:
        if previous:
            widget = self.task_list.itemWidget(previous)
            if isinstance(widget, TaskItemWidget):
                widget.set_selected(False)
        if not current:
            return
        widget = self.task_list.itemWidget(current)
        if isinstance(widget, TaskItemWidget):
            widget.set_selected(True)
            self.current_task_id = widget.display.id
            self.populate_details(widget.display)

    def populate_details(self, display: DisplayTask) -> None:
        task = display.task
        self.detail_name.setText(task.name)

        rows = [
            ("ID", task.custom_id or task.id),
            ("Status", task.status),
            ("List", task.list_name),
            ("Priority", task.priority_label),
            ("Type", task.task_type_label),
            ("Due", task.due_date.astimezone().strftime("%Y-%m-%d") if task.due_date else None),
            ("Tags", ", ".join(task.tags) if task.tags else None),
            ("Parent", task.parent_id),
        ]
        if self.service.user_id is not None:
            assigned = task.is_assigned_to(self.service.user_id)
            rows.append(("Assigned", "yes" if assigned else "no"))
        if display.overlay.snoozed_until:
            rows.append(("Snoozed until", f"{display.overlay.snoozed_until.astimezone():%Y-%m-%d %H:%M}"))
        rows.append(("URL", task.url))
        self.detail_meta.setText("\n".join(f"{label}: {value}" for label, value in rows if value))
        self.detail_description.setText(task.description or "")

        self.pin_button.setText("Unpin" if display.overlay.pinned else "Pin")
        self._set_actions_enabled(True)
        self.unsnooze_button.setEnabled(display.overlay.snoozed_until is not None)

    def _clear_details(self) -> None:
        self.detail_name.clear()
        self.detail_meta.clear()
        self.detail_description.clear()
        self._set_actions_enabled(False)

    def _set_actions_enabled(self, enabled: bool) -> None:
        for button in (
            self.pin_button,
            self.snooze_button,
            self.unsnooze_button,
            self.open_button,
            self.copy_button,
        ):
            button.setEnabled(enabled)

    def _selected(self) -> DisplayTask | None:
        if self.current_task_id is None:
            return None
        return next((d for d in self._displayed if d.id == self.current_task_id), None)

    def toggle_pin(self) -> None:
        display = self._selected()
        if display is None:
            return
        pinned = self.service.toggle_pin(display.id)
        self.status_label.setText("Task pinned" if pinned else "Task unpinned")
        self.refresh_view()

    def snooze_task(self) -> None:
        display = self._selected()
        if display is None:
            return
        days, ok = QInputDialog.getInt(
            self,
            "Snooze",
            "Snooze for how many days?",
            SETTINGS.snooze_default_days,
            1,
            365,
        )
        if not ok:
            return
        try:
            self.service.snooze(display.id, days)
        except ValueError:
            self.status_label.setText("Invalid number")
            return
        self.status_label.setText(f"Task snoozed for {days} days")
        self.refresh_view()

    def unsnooze_task(self) -> None:
        display = self._selected()
        if display is None:
            return
        self.service.unsnooze(display.id)
        self.status_label.setText("Task unsnoozed")
        self.refresh_view()

    def open_in_browser(self) -> None:
        display = self._selected()
        if display is None or not display.task.url:
            return
        if QDesktopServices.openUrl(QUrl(display.task.url)):
            self.status_label.setText("Opened in browser")
        else:
            self.status_label.setText("Failed to open")

    def copy_name(self) -> None:
        display = self._selected()
        if display is None:
            return
        QGuiApplication.clipboard().setText(display.task.name)
        self.status_label.setText("Copied task name")
