from BackEnd.services.calendar_service import CalendarService
from FrontEnd.ui_main import PAGE_TESTING, MainWindow
from conftest import TODAY


def build_window(timer, aggregator):
    return MainWindow(timer, aggregator, CalendarService(aggregator))


def test_buttons_follow_timer_state(timer, aggregator, clock) -> None:
    win = build_window(timer, aggregator)
    assert win.start_pause_btn.text() == "Start"
    assert not win.end_btn.isEnabled()

    win.start_pause_btn.click()
    assert timer.is_running
    assert win.start_pause_btn.text() == "Pause"
    assert not win.editor.isEnabled()

    clock.set(30)
    win.start_pause_btn.click()
    assert win.start_pause_btn.text() == "Resume"

    win.end_btn.click()
    assert win.start_pause_btn.text() == "Start"
    assert win.footer_today.label.text() == "Today: 0m"
    win.close()


def test_remaining_time_label(timer, aggregator, clock) -> None:
    win = build_window(timer, aggregator)
    assert win.timer_label.text() == "00:01:00"

    timer.start()
    clock.set(15)
    timer._on_tick()
    assert win.timer_label.text() == "00:00:45"

    clock.set(61)
    timer._on_tick()
    assert win.status_label.text() == "Timer Complete!"
    timer.stop()
    win.close()


def test_set_custom_target_from_editor(timer, aggregator) -> None:
    win = build_window(timer, aggregator)
    win.hours_spin.setValue(1)
    win.minutes_spin.setValue(30)
    win.seconds_spin.setValue(0)

    win.set_btn.click()

    assert timer.target_duration == 5400
    assert win.timer_label.text() == "01:30:00"
    win.close()


def test_testing_page_creates_session(timer, aggregator, store) -> None:
    win = build_window(timer, aggregator)
    assert win.sidebar.item(PAGE_TESTING).isHidden()

    win.testing_action.setChecked(True)
    assert not win.sidebar.item(PAGE_TESTING).isHidden()

    win.test_date.setDate(TODAY)
    win.test_hours.setValue(1)
    win.test_minutes.setValue(30)
    win._create_test_session()

    assert store.total_duration(TODAY) == 5400
    assert TODAY in win.calendar_service.work_days
    win.close()
