import datetime
import logging
from dataclasses import dataclass, field

from PySide6.QtCore import QFileSystemWatcher, QTimer, Qt
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget

from FrontEnd.components.calendar_grid import MonthGrid
from FrontEnd.styles.design_tokens import COLORS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WidgetEntry:
	date: datetime.date
	current_month: datetime.date
	work_days: frozenset = field(default_factory=frozenset)


def build_entry(work_days, today):
	"""Timeline entry for `today`: the month it falls in and its work days."""
	month_days = frozenset(
		d for d in work_days if d.year == today.year and d.month == today.month
	)
	return WidgetEntry(date=today, current_month=today.replace(day=1), work_days=month_days)


class CalendarWidgetWindow(QWidget):
	"""Passive calendar surface. Reads the shared snapshot only.

	Re-renders on its own schedule (`refresh_seconds`) and whenever the main
	app touches the refresh marker or rewrites the snapshot.
	"""

	def __init__(self, shared, refresh_seconds=3600, parent=None):
		super().__init__(parent)
		self.shared = shared
		self.entry = None
		self.setWindowTitle("Uptime")
		self.setWindowFlags(Qt.Tool | Qt.WindowStaysOnBottomHint)
		self.setStyleSheet(f"background: {COLORS['background']};")

		layout = QVBoxLayout()
		layout.setContentsMargins(4, 4, 4, 4)
		self.title = QLabel("")
		self.title.setAlignment(Qt.AlignmentFlag.AlignCenter)
		self.title.setStyleSheet(f"color: {COLORS['text_strong']}; font-weight: 600;")
		self.grid = MonthGrid()
		layout.addWidget(self.title)
		layout.addWidget(self.grid)
		self.setLayout(layout)
		self.resize(220, 200)

		self._schedule = QTimer(self)
		self._schedule.setInterval(int(refresh_seconds * 1000))
		self._schedule.timeout.connect(self.reload)
		self._schedule.start()

		self._watcher = QFileSystemWatcher(self)
		if shared.container is not None:
			self._watcher.directoryChanged.connect(self._on_changed)
			self._watcher.fileChanged.connect(self._on_changed)
			self._watch()
		else:
			logger.warning("No shared container, widget only refreshes on schedule")

		self.reload()

	def _watch(self):
		# a replaced file drops out of the watcher, so paths are re-added after every change
		watched = set(self._watcher.files()) | set(self._watcher.directories())
		for path in (self.shared.container, self.shared.refresh_path):
			if path.exists() and str(path) not in watched:
				self._watcher.addPath(str(path))

	def _on_changed(self, _path):
		self._watch()
		self.reload()

	def reload(self):
		self.entry = build_entry(self.shared.get_work_days(), datetime.date.today())
		self.title.setText(self.entry.current_month.strftime("%B %Y"))
		self.grid.set_entry(self.entry.current_month, self.entry.work_days)
