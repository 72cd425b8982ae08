import logging

from PySide6.QtCore import QObject, QTimer, Qt, Signal
from PySide6.QtGui import QColor, QFont, QIcon, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QMenu, QSystemTrayIcon

from BackEnd.core.clock import fmt_compact
from FrontEnd.styles.design_tokens import COLORS

logger = logging.getLogger(__name__)


def menu_bar_text(timer_service):
	"""Label next to the tray icon: elapsed time while running, blank otherwise."""
	if timer_service is None or not timer_service.is_running:
		return ""
	return fmt_compact(timer_service.elapsed_sec)


class MenuBarService(QObject):
	"""Tray icon that mirrors the running timer.

	Subscribes to the timer's state changes and polls it once per second only
	while a session is running. `cleanup()` undoes everything `setup()` did.
	"""

	open_requested = Signal()
	quit_requested = Signal()

	def __init__(self, parent=None):
		super().__init__(parent)
		self.timer_service = None
		self.title = ""
		self.tray = None
		self._poll = QTimer(self)
		self._poll.setInterval(1000)
		self._poll.timeout.connect(self.update_display)

	def setup(self, timer_service):
		self.timer_service = timer_service
		timer_service.state_changed.connect(self._on_state)

		if QSystemTrayIcon.isSystemTrayAvailable():
			self.tray = QSystemTrayIcon(self)
			self.tray.setToolTip("Uptime")
			menu = QMenu()
			title_action = menu.addAction("Uptime")
			title_action.setEnabled(False)
			menu.addSeparator()
			menu.addAction("Open Uptime").triggered.connect(self.open_requested.emit)
			menu.addSeparator()
			menu.addAction("Quit").triggered.connect(self.quit_requested.emit)
			self.tray.setContextMenu(menu)
			self._menu = menu
			self.tray.activated.connect(self._on_activated)
			self.tray.show()
		else:
			logger.info("No system tray available, menu bar label disabled")

		self._on_state(timer_service.state)

	def update_display(self):
		self.title = menu_bar_text(self.timer_service)
		if self.tray is None:
			return
		running = bool(self.title)
		self.tray.setIcon(QIcon(_render_icon(self.title, running)))
		self.tray.setToolTip(f"Uptime {self.title}" if running else "Uptime")

	@property
	def polling(self):
		return self._poll.isActive()

	def cleanup(self):
		self._poll.stop()
		if self.timer_service is not None:
			try:
				self.timer_service.state_changed.disconnect(self._on_state)
			except (RuntimeError, TypeError):
				logger.debug("Menu bar already disconnected")
			self.timer_service = None
		if self.tray is not None:
			self.tray.hide()
			self.tray.deleteLater()
			self.tray = None

	def _on_state(self, state):
		if state == "running":
			self._poll.start()
		else:
			self._poll.stop()
		self.update_display()

	def _on_activated(self, reason):
		if reason in (QSystemTrayIcon.ActivationReason.Trigger, QSystemTrayIcon.ActivationReason.DoubleClick):
			self.open_requested.emit()


def _render_icon(text, running):
	# Draw a clock face, plus the elapsed time to its right while running.
	width = 96 if running else 32
	pixmap = QPixmap(width, 32)
	pixmap.fill(Qt.transparent)
	painter = QPainter(pixmap)
	painter.setRenderHint(QPainter.Antialiasing)
	color = QColor(COLORS['primary'] if running else COLORS['text_strong'])
	pen = QPen(color)
	pen.setWidth(3)
	pen.setCapStyle(Qt.RoundCap)
	painter.setPen(pen)
	painter.drawEllipse(4, 4, 24, 24)
	painter.drawLine(16, 16, 16, 9)
	painter.drawLine(16, 16, 21, 16)
	if running:
		font = QFont()
		font.setPixelSize(16)
		font.setBold(True)
		painter.setFont(font)
		painter.drawText(32, 0, width - 32, 32, Qt.AlignVCenter | Qt.AlignLeft, text)
	painter.end()
	return pixmap
