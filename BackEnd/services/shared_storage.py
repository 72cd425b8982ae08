from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import date, datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

SNAPSHOT_FILE = "snapshot.json"
REFRESH_FILE = "refresh.request"

TODAY_HOURS = "todayHours"
LAST_UPDATED = "lastUpdated"
WORK_DAYS = "workDays"


class SharedStorage:
	"""Key/value snapshot read by the widget process.

	The whole blob is rewritten on every save; there is one writer, so the
	last write wins. A missing container means the save is skipped.
	"""

	def __init__(self, container: Path | None):
		self.container = Path(container) if container is not None else None

	@property
	def snapshot_path(self) -> Path | None:
		if self.container is None:
			return None
		return self.container / SNAPSHOT_FILE

	@property
	def refresh_path(self) -> Path | None:
		if self.container is None:
			return None
		return self.container / REFRESH_FILE

	# ----- Writes -----
	def save_today_duration(self, seconds: float, now: datetime | None = None) -> None:
		stamp = (now or datetime.now(timezone.utc)).isoformat()
		self._update({TODAY_HOURS: seconds / 3600, LAST_UPDATED: stamp})

	def save_work_days(self, days) -> None:
		self._update({WORK_DAYS: sorted(d.isoformat() for d in days)})

	def reset(self) -> None:
		data = self._read()
		for key in (TODAY_HOURS, LAST_UPDATED, WORK_DAYS):
			data.pop(key, None)
		self._write(data)

	def request_refresh(self) -> None:
		"""Tell the widget process to re-render now."""
		path = self.refresh_path
		if path is None:
			logger.warning("Could not access shared storage, widget refresh skipped")
			return
		# replaced, not rewritten in place, so a directory watcher sees it
		try:
			fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=".refresh-")
			with os.fdopen(fd, "w", encoding="utf-8") as f:
				f.write(datetime.now(timezone.utc).isoformat())
			os.replace(tmp, path)
		except OSError as exc:
			logger.warning("Widget refresh request failed: %s", exc)

	# ----- Reads -----
	def get_today_hours(self) -> float:
		try:
			return float(self._read().get(TODAY_HOURS, 0) or 0)
		except (TypeError, ValueError):
			return 0.0

	def get_last_updated(self) -> datetime | None:
		raw = self._read().get(LAST_UPDATED)
		try:
			return datetime.fromisoformat(raw) if raw else None
		except (TypeError, ValueError):
			return None

	def get_work_days(self) -> list[date]:
		days = []
		for raw in self._read().get(WORK_DAYS) or []:
			try:
				days.append(date.fromisoformat(raw))
			except (TypeError, ValueError):
				logger.debug("Skipping malformed work day %r", raw)
		return days

	def has_work_today(self) -> bool:
		return self.get_today_hours() > 0

	# ----- Internals -----
	def _read(self) -> dict:
		path = self.snapshot_path
		if path is None or not path.exists():
			return {}
		try:
			with open(path, encoding="utf-8") as f:
				data = json.load(f)
		except (OSError, ValueError) as exc:
			logger.warning("Unreadable shared snapshot %s: %s", path, exc)
			return {}
		return data if isinstance(data, dict) else {}

	def _update(self, values: dict) -> None:
		if self.container is None:
			logger.warning("Could not access shared storage, snapshot not saved")
			return
		data = self._read()
		data.update(values)
		self._write(data)

	def _write(self, data: dict) -> None:
		path = self.snapshot_path
		if path is None:
			logger.warning("Could not access shared storage, snapshot not saved")
			return
		try:
			fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=".snapshot-", suffix=".json")
			with os.fdopen(fd, "w", encoding="utf-8") as f:
				json.dump(data, f, indent=2)
			os.replace(tmp, path)
		except OSError as exc:
			logger.warning("Could not write shared snapshot %s: %s", path, exc)
