from PySide6.QtCore import QObject, Signal


class CalendarService(QObject):
	"""Work days of the year shown in the calendar page."""

	changed = Signal()

	def __init__(self, aggregator, parent=None):
		super().__init__(parent)
		self.aggregator = aggregator
		self.year_of = aggregator.today()
		self.work_days = set()

	def load_work_days(self, year_of=None):
		self.year_of = year_of or self.aggregator.today()
		self.work_days = self.aggregator.work_days(self.year_of)
		# the widget draws the current month; browsing other years must not overwrite it
		if self.year_of.year == self.aggregator.today().year:
			self.aggregator.publish_work_days(self.work_days)
		self.changed.emit()

	def has_work_completed(self, day):
		return day in self.work_days

	def refresh(self, year_of=None):
		self.load_work_days(year_of or self.year_of)
