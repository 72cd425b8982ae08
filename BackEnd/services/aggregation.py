from __future__ import annotations

import calendar
import logging
from datetime import date, timedelta

from BackEnd.core.clock import SystemClock, local_day
from BackEnd.repos.session_repo import SessionStore
from BackEnd.services.shared_storage import SharedStorage

logger = logging.getLogger(__name__)


class Aggregator:
	"""Derives day totals and work days from the store and republishes them
	to the shared snapshot the passive displays read."""

	def __init__(self, store: SessionStore, shared: SharedStorage, clock=None):
		self.store = store
		self.shared = shared
		self.clock = clock or SystemClock()

	def today(self) -> date:
		return local_day(self.clock.now())

	def today_total(self) -> float:
		return self.store.total_duration(self.today())

	def work_days(self, day: date | None = None) -> set[date]:
		return self.store.work_days(day or self.today())

	# ----- Publishing -----
	def publish_today(self) -> None:
		today = self.today()
		self.shared.save_today_duration(self.store.total_duration(today), now=self.clock.now())
		self.shared.save_work_days(self.store.work_days(today))
		self.shared.request_refresh()

	def publish_for_date(self, day: date) -> None:
		if day == self.today():
			self.shared.save_today_duration(self.store.total_duration(day), now=self.clock.now())
		self.shared.save_work_days(self.store.work_days(day))
		self.shared.request_refresh()

	def publish_work_days(self, days) -> None:
		self.shared.save_work_days(days)

	def reset_shared(self) -> None:
		self.shared.reset()
		self.shared.request_refresh()

	def reset_all(self) -> None:
		logger.info("Deleting all sessions and widget data")
		self.store.delete_all_sessions()
		self.reset_shared()

	# ----- Testing utilities -----
	def create_test_session(self, day: date, duration_sec: float) -> None:
		self.store.create_test_session(day, duration_sec)
		self.publish_for_date(day)

	def delete_sessions(self, day: date) -> None:
		self.store.delete_sessions(day)
		self.publish_for_date(day)

	# ----- History -----
	def daily_totals(self, days) -> list[float]:
		"""Seconds worked on each of `days` (closed sessions only)."""
		if not days:
			return []
		totals = {}
		for s in self.store.sessions_in_range(min(days), max(days)):
			if not s.is_open:
				totals[s.day] = totals.get(s.day, 0.0) + s.duration_sec
		return [totals.get(d, 0.0) for d in days]


def period_days(timeframe: str, offset: int, today: date) -> list[date]:
	"""Days of the week (Monday first) or month `offset` periods back."""
	if timeframe == "week":
		start_of_week = today - timedelta(days=today.weekday()) - timedelta(weeks=offset)
		return [start_of_week + timedelta(days=i) for i in range(7)]

	year = today.year
	month = today.month - offset
	while month <= 0:
		month += 12
		year -= 1
	num_days = calendar.monthrange(year, month)[1]
	return [date(year, month, i + 1) for i in range(num_days)]


def period_label(timeframe: str, offset: int, first_day: date) -> str:
	unit = "Week" if timeframe == "week" else "Month"
	if offset == 0:
		return f"This {unit}"
	if offset == 1:
		return f"Last {unit}"
	return first_day.strftime("%b-%d-%Y")
