from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from PySide6.QtCore import QSettings

from BackEnd.core import paths

DEFAULT_TARGET_SECONDS = 3600


@dataclass(frozen=True)
class AppConfig:
	data_dir: Path
	db_path: Path
	log_path: Path
	shared_dir: Path | None
	log_level: int
	widget_refresh_seconds: int


def _log_level_from_env(name: str) -> int:
	raw = os.getenv(name, "INFO").strip().upper()
	level = logging.getLevelName(raw)
	if not isinstance(level, int):
		raise ValueError(f"Invalid log level in {name}: {raw}")
	return level


def _positive_int_env(name: str, default: int) -> int:
	raw = os.getenv(name, str(default)).strip()
	try:
		parsed = int(raw)
	except ValueError as exc:
		raise ValueError(f"Environment variable {name} must be an integer") from exc

	if parsed <= 0:
		raise ValueError(f"Environment variable {name} must be positive")
	return parsed


def load_config() -> AppConfig:
	return AppConfig(
		data_dir=paths.user_data_dir(),
		db_path=paths.db_path(),
		log_path=paths.log_path(),
		shared_dir=paths.shared_dir(),
		log_level=_log_level_from_env("UPTIME_LOG_LEVEL"),
		widget_refresh_seconds=_positive_int_env("UPTIME_WIDGET_REFRESH_SECONDS", 3600),
	)


class TimerSettings:
	"""User preferences kept between runs."""

	def __init__(self, settings: QSettings | None = None):
		self._settings = settings or QSettings(paths.APP_NAME, paths.APP_NAME)

	def target_duration(self) -> int:
		try:
			return int(self._settings.value("timer/target_seconds", DEFAULT_TARGET_SECONDS))
		except (TypeError, ValueError):
			return DEFAULT_TARGET_SECONDS

	def timer_enabled(self) -> bool:
		return _as_bool(self._settings.value("timer/enabled", False))

	def save_timer(self, target_seconds: int, enabled: bool) -> None:
		self._settings.setValue("timer/target_seconds", int(target_seconds))
		self._settings.setValue("timer/enabled", bool(enabled))

	def show_testing_mode(self) -> bool:
		return _as_bool(self._settings.value("ui/show_testing_mode", False))

	def set_show_testing_mode(self, value: bool) -> None:
		self._settings.setValue("ui/show_testing_mode", bool(value))


def _as_bool(value) -> bool:
	# INI backends hand booleans back as strings.
	if isinstance(value, str):
		return value.strip().lower() in ("1", "true", "yes")
	return bool(value)
