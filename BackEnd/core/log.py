import logging

LOGGER = logging.getLogger("uptime")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_handlers = []


def setup_logging(level=logging.INFO, log_path=None):
	"""Configure the root logger. Calling it again replaces the previous handlers."""
	root = logging.getLogger()
	reset_logging()
	root.setLevel(level)
	formatter = logging.Formatter(LOG_FORMAT)

	stream = logging.StreamHandler()
	stream.setFormatter(formatter)
	_handlers.append(stream)

	if log_path is not None:
		handler = logging.FileHandler(log_path, encoding="utf-8")
		handler.setFormatter(formatter)
		_handlers.append(handler)

	for handler in _handlers:
		root.addHandler(handler)


def reset_logging():
	"""Detach and close the handlers installed by setup_logging."""
	root = logging.getLogger()
	while _handlers:
		handler = _handlers.pop()
		root.removeHandler(handler)
		handler.close()


def log_unhandled_exception(exc_type, exc, tb):
	LOGGER.error("Unhandled exception", exc_info=(exc_type, exc, tb))
