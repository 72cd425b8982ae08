import sys
import logging

from PySide6.QtWidgets import QApplication

from BackEnd.core.config import TimerSettings, load_config
from BackEnd.core.log import log_unhandled_exception, setup_logging
from BackEnd.repos.session_repo import SessionStore
from BackEnd.services.aggregation import Aggregator
from BackEnd.services.calendar_service import CalendarService
from BackEnd.services.notifier import Notifier
from BackEnd.services.shared_storage import SharedStorage
from BackEnd.services.timer_service import TimerService
from FrontEnd.components.menu_bar import MenuBarService
from FrontEnd.ui_main import MainWindow

logger = logging.getLogger("uptime")


def main():
    config = load_config()
    setup_logging(config.log_level, config.log_path)
    sys.excepthook = log_unhandled_exception

    app = QApplication(sys.argv)
    app.setApplicationName("Uptime")

    # One instance of each service per process, handed to whoever needs it.
    store = SessionStore(config.db_path)
    store.close_stale_sessions()
    shared = SharedStorage(config.shared_dir)
    aggregator = Aggregator(store, shared)
    settings = TimerSettings()
    notifier = Notifier()
    timer_service = TimerService(
        store, aggregator, notifier,
        target_duration=settings.target_duration(),
        timer_enabled=settings.timer_enabled(),
    )
    calendar_service = CalendarService(aggregator)

    menu_bar = MenuBarService()
    menu_bar.setup(timer_service)
    app.setQuitOnLastWindowClosed(menu_bar.tray is None)

    win = MainWindow(timer_service, aggregator, calendar_service, settings, menu_bar)
    menu_bar.open_requested.connect(lambda: (win.show(), win.raise_(), win.activateWindow()))
    menu_bar.quit_requested.connect(win.quit_app)

    def teardown():
        timer_service.shutdown()
        menu_bar.cleanup()
        store.close()

    app.aboutToQuit.connect(teardown)
    aggregator.publish_today()
    win.show()
    logger.info("Uptime started, data in %s", config.data_dir)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
