from __future__ import annotations

import logging
import sqlite3
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from BackEnd.core.clock import local_day, local_midnight, year_bounds

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

_COLUMNS = "id, start_utc, end_utc, duration_sec, local_date, created_utc"


@dataclass(frozen=True)
class SessionRecord:
	id: str
	start: datetime
	end: datetime | None
	duration_sec: float
	day: date
	created_at: datetime

	@property
	def is_open(self) -> bool:
		return self.end is None


def _to_utc(value: datetime) -> datetime:
	if value.tzinfo is None:
		raise ValueError("Datetime must be timezone-aware")
	return value.astimezone(timezone.utc)


def _record(row) -> SessionRecord:
	return SessionRecord(
		id=row["id"],
		start=datetime.fromisoformat(row["start_utc"]),
		end=datetime.fromisoformat(row["end_utc"]) if row["end_utc"] else None,
		duration_sec=float(row["duration_sec"] or 0),
		day=date.fromisoformat(row["local_date"]),
		created_at=datetime.fromisoformat(row["created_utc"]),
	)


class SessionStore:
	"""SQLite-backed session records, bucketed by the local day they started on.

	Reads never raise: a failing query is logged and yields an empty result,
	so totals fall back to zero. Failed writes are logged and dropped.
	"""

	def __init__(self, db_path: str | Path):
		self._conn = sqlite3.connect(str(db_path))
		self._conn.row_factory = sqlite3.Row
		self._closed = False
		with open(SCHEMA_PATH, encoding="utf-8") as f:
			self._conn.executescript(f.read())
		self._conn.commit()

	def close(self) -> None:
		if self._closed:
			return
		self._conn.close()
		self._closed = True

	# ----- Writes -----
	def create_session(self, start: datetime, now: datetime | None = None) -> SessionRecord | None:
		"""Open a session at `start`. Returns the already-open one if any."""
		existing = self.active_session()
		if existing is not None:
			logger.debug("Session %s already open, not creating another", existing.id)
			return existing
		record = SessionRecord(
			id=uuid.uuid4().hex,
			start=_to_utc(start),
			end=None,
			duration_sec=0.0,
			day=local_day(start),
			created_at=_to_utc(now or datetime.now(timezone.utc)),
		)
		if not self._insert(record):
			return None
		return record

	def end_session(self, session_id: str, end: datetime, start: datetime | None = None) -> SessionRecord | None:
		"""Close an open session. `start` replaces the stored start instant."""
		try:
			row = self._conn.execute(
				f"SELECT {_COLUMNS} FROM sessions WHERE id=? AND end_utc IS NULL",
				(session_id,),
			).fetchone()
			if row is None:
				logger.debug("No open session %s to close", session_id)
				return None
			start_dt = _to_utc(start) if start is not None else datetime.fromisoformat(row["start_utc"])
			end_dt = _to_utc(end)
			duration = max(0.0, (end_dt - start_dt).total_seconds())
			self._conn.execute(
				"UPDATE sessions SET start_utc=?, end_utc=?, duration_sec=? WHERE id=?",
				(start_dt.isoformat(), end_dt.isoformat(), duration, session_id),
			)
			self._conn.commit()
		except sqlite3.Error:
			logger.exception("Failed to close session %s", session_id)
			self._rollback()
			return None
		return SessionRecord(
			id=row["id"],
			start=start_dt,
			end=end_dt,
			duration_sec=duration,
			day=date.fromisoformat(row["local_date"]),
			created_at=datetime.fromisoformat(row["created_utc"]),
		)

	def close_stale_sessions(self) -> int:
		"""Close sessions left open by an abnormal exit, with zero duration."""
		try:
			cur = self._conn.execute(
				"UPDATE sessions SET end_utc=start_utc, duration_sec=0 WHERE end_utc IS NULL"
			)
			self._conn.commit()
		except sqlite3.Error:
			logger.exception("Failed to close stale sessions")
			self._rollback()
			return 0
		if cur.rowcount:
			logger.warning("Closed %d stale open session(s)", cur.rowcount)
		return cur.rowcount

	def create_test_session(self, day: date, duration_sec: float) -> SessionRecord | None:
		"""Insert a closed session starting 9 AM local on `day`."""
		start = (local_midnight(day) + timedelta(hours=9)).astimezone(timezone.utc)
		record = SessionRecord(
			id=uuid.uuid4().hex,
			start=start,
			end=start + timedelta(seconds=duration_sec),
			duration_sec=float(duration_sec),
			day=day,
			created_at=datetime.now(timezone.utc),
		)
		if not self._insert(record):
			return None
		return record

	def delete_sessions(self, day: date) -> None:
		self._write("DELETE FROM sessions WHERE local_date=?", (day.isoformat(),))

	def delete_all_sessions(self) -> None:
		self._write("DELETE FROM sessions", ())

	# ----- Queries -----
	def sessions_on_day(self, day: date) -> list[SessionRecord]:
		"""Closed sessions of one day, newest start first."""
		return self._select(
			f"SELECT {_COLUMNS} FROM sessions WHERE local_date=? AND end_utc IS NOT NULL "
			"ORDER BY start_utc DESC",
			(day.isoformat(),),
		)

	def total_duration(self, day: date) -> float:
		return sum(s.duration_sec for s in self.sessions_on_day(day))

	def sessions_in_range(self, first: date, last: date) -> list[SessionRecord]:
		"""Sessions whose day bucket falls in [first, last], oldest day first."""
		return self._select(
			f"SELECT {_COLUMNS} FROM sessions WHERE local_date BETWEEN ? AND ? "
			"ORDER BY local_date ASC, start_utc ASC",
			(first.isoformat(), last.isoformat()),
		)

	def work_days(self, day: date) -> set[date]:
		"""Days of the year containing `day` with at least one nonzero closed session."""
		first, last = year_bounds(day)
		return {
			s.day
			for s in self.sessions_in_range(first, last)
			if not s.is_open and s.duration_sec > 0
		}

	def has_work_completed(self, day: date) -> bool:
		return self.total_duration(day) > 0

	def active_session(self) -> SessionRecord | None:
		rows = self._select(
			f"SELECT {_COLUMNS} FROM sessions WHERE end_utc IS NULL ORDER BY start_utc DESC LIMIT 1",
			(),
		)
		return rows[0] if rows else None

	# ----- Internals -----
	def _select(self, sql, params) -> list[SessionRecord]:
		try:
			rows = self._conn.execute(sql, params).fetchall()
		except sqlite3.Error:
			logger.exception("Session query failed")
			return []
		return [_record(row) for row in rows]

	def _insert(self, record: SessionRecord) -> bool:
		return self._write(
			f"INSERT INTO sessions ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
			(
				record.id,
				record.start.isoformat(),
				record.end.isoformat() if record.end else None,
				record.duration_sec,
				record.day.isoformat(),
				record.created_at.isoformat(),
			),
		)

	def _write(self, sql, params) -> bool:
		try:
			self._conn.execute(sql, params)
			self._conn.commit()
		except sqlite3.Error:
			logger.exception("Session write failed")
			self._rollback()
			return False
		return True

	def _rollback(self) -> None:
		try:
			self._conn.rollback()
		except sqlite3.Error:
			logger.debug("Rollback failed", exc_info=True)
