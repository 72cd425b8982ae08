import logging

from PySide6.QtCore import QObject, QTimer, Signal

logger = logging.getLogger(__name__)

SESSION_TIMER_ID = "sessionTimer"
COMPLETE_TITLE = "Timer Complete"
COMPLETE_BODY = "Your work session timer has finished!"


class Notifier(QObject):
	"""Schedules one-shot alerts by id. Delivery is fire-and-forget."""

	delivered = Signal(str, str, str)  # identifier, title, body

	def __init__(self, parent=None):
		super().__init__(parent)
		self._pending = {}

	def schedule(self, identifier, delay_sec, title, body):
		self.cancel(identifier)
		if delay_sec <= 0:
			return
		timer = QTimer(self)
		timer.setSingleShot(True)
		timer.setInterval(int(delay_sec * 1000))
		timer.timeout.connect(lambda: self._fire(identifier, title, body))
		self._pending[identifier] = timer
		timer.start()
		logger.debug("Scheduled %s in %.0fs", identifier, delay_sec)

	def cancel(self, identifier):
		timer = self._pending.pop(identifier, None)
		if timer is not None:
			timer.stop()
			timer.deleteLater()

	def pending(self, identifier):
		timer = self._pending.get(identifier)
		return timer is not None and timer.isActive()

	def remaining_ms(self, identifier):
		timer = self._pending.get(identifier)
		if timer is None:
			return None
		return timer.remainingTime()

	def _fire(self, identifier, title, body):
		timer = self._pending.pop(identifier, None)
		if timer is None:
			return
		timer.deleteLater()
		logger.info("Delivering alert %s", identifier)
		self.delivered.emit(identifier, title, body)
