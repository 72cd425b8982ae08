import sys
import logging

from PySide6.QtWidgets import QApplication

from BackEnd.core.config import load_config
from BackEnd.core.log import log_unhandled_exception, setup_logging
from BackEnd.services.shared_storage import SharedStorage
from FrontEnd.widget.calendar_widget import CalendarWidgetWindow

logger = logging.getLogger("uptime.widget")


def main():
    config = load_config()
    setup_logging(config.log_level)
    sys.excepthook = log_unhandled_exception

    app = QApplication(sys.argv)
    app.setApplicationName("Uptime Widget")
    win = CalendarWidgetWindow(SharedStorage(config.shared_dir), config.widget_refresh_seconds)
    win.show()
    logger.info("Widget reading %s", config.shared_dir)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
