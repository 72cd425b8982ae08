import logging
from dataclasses import dataclass
from datetime import timedelta

from PySide6.QtCore import QObject, QTimer, Signal

from BackEnd.core.clock import SystemClock
from BackEnd.services.notifier import COMPLETE_BODY, COMPLETE_TITLE, SESSION_TIMER_ID

logger = logging.getLogger(__name__)

IDLE = "idle"
RUNNING = "running"
PAUSED = "paused"


@dataclass(frozen=True)
class TimerSnapshot:
	state: str
	elapsed_sec: int
	target_sec: int
	remaining_sec: int
	progress: float
	complete: bool

	@property
	def is_running(self):
		return self.state == RUNNING

	@property
	def is_paused(self):
		return self.state == PAUSED


class TimerService(QObject):
	"""Work session lifecycle: idle -> running <-> paused -> idle.

	Elapsed time comes from the clock's monotonic source. While running, a
	1-second QTimer and the pending completion alert are held; every exit
	from the running state releases both before returning.
	"""

	tick = Signal(object)  # emits TimerSnapshot
	state_changed = Signal(str)  # emits 'idle', 'running', 'paused'
	completed = Signal()
	config_changed = Signal()

	def __init__(self, store, aggregator, notifier=None, clock=None,
			target_duration=3600, timer_enabled=False, parent=None):
		super().__init__(parent)
		self.store = store
		self.aggregator = aggregator
		self.notifier = notifier
		self.clock = clock or SystemClock()

		self.target_duration = int(target_duration)
		self.timer_enabled = bool(timer_enabled)

		self.state = IDLE
		self.elapsed_sec = 0.0
		self.session_id = None
		self._start_mono = None
		self._completion_fired = False

		self._timer = QTimer(self)
		self._timer.setInterval(1000)
		self._timer.timeout.connect(self._on_tick)

	# ----- Derived state -----
	@property
	def is_running(self):
		return self.state == RUNNING

	@property
	def is_paused(self):
		return self.state == PAUSED

	@property
	def has_open_session(self):
		return self.state != IDLE

	@property
	def remaining_time(self):
		if not self.timer_enabled:
			return 0.0
		return max(0.0, self.target_duration - self.elapsed_sec)

	@property
	def progress(self):
		if not self.timer_enabled or self.target_duration <= 0:
			return 0.0
		return min(1.0, self.elapsed_sec / self.target_duration)

	@property
	def is_timer_complete(self):
		return self.timer_enabled and self.elapsed_sec >= self.target_duration

	@property
	def tick_active(self):
		return self._timer.isActive()

	def snapshot(self) -> TimerSnapshot:
		return TimerSnapshot(
			state=self.state,
			elapsed_sec=int(self.elapsed_sec),
			target_sec=self.target_duration,
			remaining_sec=int(round(self.remaining_time)),
			progress=self.progress,
			complete=self.is_timer_complete,
		)

	# ----- Configuration (only while idle) -----
	def set_preset_duration(self, minutes):
		self._configure(int(minutes) * 60, True)

	def set_custom_duration(self, hours, minutes, seconds=0):
		total = int(hours) * 3600 + int(minutes) * 60 + int(seconds)
		if total <= 0:
			return
		self._configure(total, True)

	def reset_timer(self):
		self._configure(self.target_duration, False)

	def _configure(self, target, enabled):
		if self.has_open_session:
			logger.debug("Ignoring timer change while a session is open")
			return
		self.target_duration = target
		self.timer_enabled = enabled
		self.config_changed.emit()

	# ----- Transitions -----
	def start(self):
		if self.state != IDLE:
			return
		if not self.timer_enabled or self.target_duration < 1:
			logger.debug("Start ignored: timer not set")
			return

		self._start_mono = self.clock.monotonic()
		self.elapsed_sec = 0.0
		self._completion_fired = False
		now = self.clock.now()
		record = self.store.create_session(now, now=now)
		self.session_id = record.id if record is not None else None
		self.state = RUNNING
		self._acquire_running(self.target_duration)
		logger.info("Session started (target %ss)", self.target_duration)
		self._emit()

	def pause(self):
		if self.state != RUNNING:
			return
		self.elapsed_sec = self.clock.monotonic() - self._start_mono
		self._release_running()
		self.state = PAUSED
		self._emit()

	def resume(self):
		if self.state != PAUSED or not self.timer_enabled:
			return
		# virtual start: continue from the frozen elapsed value
		self._start_mono = self.clock.monotonic() - self.elapsed_sec
		self.state = RUNNING
		self._acquire_running(self.target_duration - self.elapsed_sec)
		self._emit()

	def toggle(self):
		if self.state == IDLE:
			self.start()
		elif self.state == RUNNING:
			self.pause()
		else:
			self.resume()

	def stop(self):
		if self.state == IDLE:
			return
		if self.state == RUNNING:
			self.elapsed_sec = self.clock.monotonic() - self._start_mono
		self._release_running()

		elapsed = self.elapsed_sec
		session_id = self.session_id
		self.state = IDLE
		self.elapsed_sec = 0.0
		self.session_id = None
		self._start_mono = None

		if session_id is not None:
			end = self.clock.now()
			# paused spans are dropped from the record: end - start == time worked
			self.store.end_session(session_id, end, start=end - timedelta(seconds=elapsed))
		logger.info("Session stopped after %.0fs", elapsed)
		self.aggregator.publish_today()
		self._emit()

	def shutdown(self):
		"""Process teardown: persist any open session, always drop the tick and alert."""
		try:
			self.stop()
		finally:
			self._release_running()

	# ----- Running-state resources -----
	def _acquire_running(self, alert_in):
		self._timer.start()
		if self.notifier is not None:
			self.notifier.schedule(SESSION_TIMER_ID, alert_in, COMPLETE_TITLE, COMPLETE_BODY)

	def _release_running(self):
		self._timer.stop()
		if self.notifier is not None:
			self.notifier.cancel(SESSION_TIMER_ID)

	def _on_tick(self):
		if self.state != RUNNING:
			return
		self.elapsed_sec = self.clock.monotonic() - self._start_mono
		self.tick.emit(self.snapshot())
		if self.is_timer_complete and not self._completion_fired:
			self._completion_fired = True
			logger.info("Timer complete")
			self.completed.emit()

	def _emit(self):
		self.state_changed.emit(self.state)
		self.tick.emit(self.snapshot())
