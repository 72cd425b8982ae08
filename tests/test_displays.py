import time
from datetime import date

from PySide6.QtCore import QCoreApplication

from BackEnd.services.calendar_service import CalendarService
from FrontEnd.components.footer_today import today_text
from FrontEnd.components.menu_bar import MenuBarService, menu_bar_text
from FrontEnd.widget.calendar_widget import CalendarWidgetWindow, build_entry
from conftest import TODAY


def test_menu_bar_text_follows_running_state(timer, clock) -> None:
    assert menu_bar_text(timer) == ""
    assert menu_bar_text(None) == ""

    timer.start()
    clock.set(75)
    timer._on_tick()
    assert menu_bar_text(timer) == "01:15"

    clock.set(3725)
    timer._on_tick()
    assert menu_bar_text(timer) == "01:02:05"

    timer.pause()
    assert menu_bar_text(timer) == ""


def test_menu_bar_polls_only_while_running(timer, clock) -> None:
    menu_bar = MenuBarService()
    menu_bar.setup(timer)
    assert not menu_bar.polling

    timer.start()
    assert menu_bar.polling
    clock.set(9)
    timer._on_tick()
    menu_bar.update_display()
    assert menu_bar.title == "00:09"

    timer.pause()
    assert not menu_bar.polling
    assert menu_bar.title == ""

    timer.resume()
    assert menu_bar.polling
    timer.stop()
    assert not menu_bar.polling


def test_menu_bar_cleanup_unsubscribes(timer) -> None:
    menu_bar = MenuBarService()
    menu_bar.setup(timer)
    menu_bar.cleanup()

    timer.start()

    assert menu_bar.timer_service is None
    assert not menu_bar.polling


def test_calendar_service_loads_year_and_publishes(aggregator, store, shared) -> None:
    store.create_test_session(TODAY, 600)
    store.create_test_session(date(2025, 6, 1), 600)
    calendar = CalendarService(aggregator)
    changes = []
    calendar.changed.connect(lambda: changes.append(True))

    calendar.load_work_days()

    assert calendar.work_days == {TODAY}
    assert calendar.has_work_completed(TODAY)
    assert not calendar.has_work_completed(date(2026, 3, 11))
    assert shared.get_work_days() == [TODAY]
    assert changes == [True]


def test_calendar_other_year_does_not_overwrite_widget(aggregator, store, shared) -> None:
    store.create_test_session(TODAY, 600)
    store.create_test_session(date(2025, 6, 1), 600)
    calendar = CalendarService(aggregator)
    calendar.load_work_days()

    calendar.refresh(date(2025, 1, 1))

    assert calendar.work_days == {date(2025, 6, 1)}
    assert shared.get_work_days() == [TODAY]


def test_build_entry_keeps_current_month_only() -> None:
    days = [date(2026, 3, 1), date(2026, 3, 10), date(2026, 2, 28), date(2025, 3, 10)]

    entry = build_entry(days, date(2026, 3, 17))

    assert entry.current_month == date(2026, 3, 1)
    assert entry.date == date(2026, 3, 17)
    assert entry.work_days == frozenset({date(2026, 3, 1), date(2026, 3, 10)})


def test_widget_window_reloads_from_snapshot(shared) -> None:
    shared.container.mkdir()
    today = date.today()
    shared.save_work_days([today])
    window = CalendarWidgetWindow(shared, refresh_seconds=3600)
    assert today in window.entry.work_days

    shared.reset()
    window.reload()
    assert window.entry.work_days == frozenset()
    window.close()


def test_today_text() -> None:
    assert today_text(0) == "Today: 0m"
    assert today_text(3900) == "Today: 1h 5m"


def wait_for(condition, timeout=3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        QCoreApplication.processEvents()
        if condition():
            return True
        time.sleep(0.02)
    return condition()


def test_widget_reloads_on_refresh_request(shared, monkeypatch) -> None:
    shared.container.mkdir()
    shared.request_refresh()
    window = CalendarWidgetWindow(shared, refresh_seconds=3600)
    reloads = []
    original = window.reload
    monkeypatch.setattr(window, "reload", lambda: (reloads.append(1), original()))

    shared.request_refresh()
    assert wait_for(lambda: reloads)

    # the marker is watched again after being replaced
    wait_for(lambda: False, timeout=0.2)
    reloads.clear()
    shared.request_refresh()
    assert wait_for(lambda: reloads)
    window.close()
