import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

APP_NAME = "Uptime"


def user_data_dir(app_name=APP_NAME):
	"""Return per-user data dir (Windows/macOS/Linux). UPTIME_DATA_DIR wins."""
	override = os.environ.get("UPTIME_DATA_DIR")
	if override:
		path = Path(override).expanduser()
	else:
		if os.name == "nt":
			base = os.environ.get("LOCALAPPDATA", os.path.expanduser("~\\AppData\\Local"))
		elif os.name == "posix":
			base = os.environ.get("XDG_DATA_HOME", os.path.expanduser("~/.local/share"))
		else:
			base = os.path.expanduser("~")
		path = Path(base) / app_name
	path.mkdir(parents=True, exist_ok=True)
	return path


def db_path():
	"""Return Path to uptime.db inside user data dir."""
	return user_data_dir() / "uptime.db"


def log_path():
	return user_data_dir() / "uptime.log"


def shared_dir():
	"""Directory both the app and the widget process can reach, or None."""
	override = os.environ.get("UPTIME_SHARED_DIR")
	path = Path(override).expanduser() if override else user_data_dir() / "shared"
	try:
		path.mkdir(parents=True, exist_ok=True)
	except OSError as exc:
		logger.warning("Shared container unavailable at %s: %s", path, exc)
		return None
	return path
