import calendar
import time
from datetime import date, datetime, time as dtime, timezone


class SystemClock:
	"""Wall clock for session records plus a monotonic source for elapsed time."""

	def now(self) -> datetime:
		return datetime.now(timezone.utc)

	def monotonic(self) -> float:
		return time.monotonic()


def local_day(dt: datetime) -> date:
	"""Return the local calendar day an instant falls into."""
	if dt.tzinfo is None:
		return dt.date()
	return dt.astimezone().date()


def local_midnight(day: date) -> datetime:
	"""Local midnight of `day` as an aware datetime."""
	return datetime.combine(day, dtime.min).astimezone()


def year_bounds(day: date):
	"""First and last day of the year containing `day`."""
	return date(day.year, 1, 1), date(day.year, 12, 31)


def month_days(day: date):
	"""Every day of the month containing `day`, no padding."""
	count = calendar.monthrange(day.year, day.month)[1]
	return [date(day.year, day.month, i + 1) for i in range(count)]


def _split(seconds):
	total = max(0, int(seconds))
	return total // 3600, (total % 3600) // 60, total % 60


def fmt_hms(seconds) -> str:
	"""Format seconds as HH:MM:SS."""
	h, m, s = _split(seconds)
	return f"{h:02}:{m:02}:{s:02}"


def fmt_compact(seconds) -> str:
	"""Format seconds as MM:SS, or HH:MM:SS once an hour has passed."""
	h, m, s = _split(seconds)
	if h > 0:
		return f"{h:02}:{m:02}:{s:02}"
	return f"{m:02}:{s:02}"


def fmt_duration_short(seconds) -> str:
	h, m, _ = _split(seconds)
	if h > 0:
		return f"{h}h {m}m"
	return f"{m}m"
