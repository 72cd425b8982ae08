from datetime import date, datetime, time, timedelta, timezone

from BackEnd.repos.session_repo import SessionStore


def local(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute)).astimezone()


def test_create_and_end_session_sets_duration() -> None:
    store = SessionStore(":memory:")
    day = date(2026, 2, 1)

    record = store.create_session(local(day, 10))
    assert record.is_open
    assert record.duration_sec == 0
    assert record.day == day

    closed = store.end_session(record.id, local(day, 10, 30))
    assert closed.duration_sec == 1800
    assert closed.end - closed.start == timedelta(seconds=1800)
    assert store.active_session() is None


def test_end_session_with_virtual_start_keeps_day_bucket() -> None:
    store = SessionStore(":memory:")
    day = date(2026, 2, 1)
    record = store.create_session(local(day, 0, 5))

    end = local(day + timedelta(days=1), 0, 20)
    closed = store.end_session(record.id, end, start=end - timedelta(minutes=10))

    assert closed.duration_sec == 600
    assert closed.day == day
    assert store.sessions_on_day(day)[0].duration_sec == 600


def test_only_one_open_session() -> None:
    store = SessionStore(":memory:")
    day = date(2026, 2, 1)
    first = store.create_session(local(day, 9))
    second = store.create_session(local(day, 11))

    assert second.id == first.id
    assert len(store.sessions_in_range(day, day)) == 1


def test_end_session_twice_is_noop() -> None:
    store = SessionStore(":memory:")
    day = date(2026, 2, 1)
    record = store.create_session(local(day, 9))
    store.end_session(record.id, local(day, 10))

    assert store.end_session(record.id, local(day, 11)) is None
    assert store.total_duration(day) == 3600


def test_sessions_on_day_excludes_open_and_orders_newest_first() -> None:
    store = SessionStore(":memory:")
    day = date(2026, 2, 1)
    early = store.create_session(local(day, 8))
    store.end_session(early.id, local(day, 9))
    late = store.create_session(local(day, 14))
    store.end_session(late.id, local(day, 15))
    store.create_session(local(day, 18))

    sessions = store.sessions_on_day(day)

    assert [s.id for s in sessions] == [late.id, early.id]


def test_total_duration_zero_without_sessions() -> None:
    store = SessionStore(":memory:")
    assert store.total_duration(date(2026, 2, 1)) == 0
    assert store.has_work_completed(date(2026, 2, 1)) is False


def test_two_test_sessions_same_day_sum() -> None:
    store = SessionStore(":memory:")
    day = date(2026, 2, 1)
    store.create_test_session(day, 1800)
    store.create_test_session(day, 3600)

    assert store.total_duration(day) == 5400
    assert store.has_work_completed(day) is True
    assert store.total_duration(day + timedelta(days=1)) == 0


def test_test_session_starts_at_nine_local() -> None:
    store = SessionStore(":memory:")
    record = store.create_test_session(date(2026, 2, 1), 900)

    assert record.start.astimezone().hour == 9
    assert record.end - record.start == timedelta(seconds=900)


def test_sessions_in_range_ascending_by_day() -> None:
    store = SessionStore(":memory:")
    for day in (date(2026, 3, 5), date(2026, 3, 1), date(2026, 3, 3), date(2026, 4, 1)):
        store.create_test_session(day, 600)

    days = [s.day for s in store.sessions_in_range(date(2026, 3, 1), date(2026, 3, 31))]

    assert days == [date(2026, 3, 1), date(2026, 3, 3), date(2026, 3, 5)]


def test_work_days_limited_to_year_and_nonzero() -> None:
    store = SessionStore(":memory:")
    store.create_test_session(date(2026, 1, 1), 600)
    store.create_test_session(date(2026, 1, 1), 1200)
    store.create_test_session(date(2026, 12, 31), 60)
    store.create_test_session(date(2026, 6, 1), 0)
    store.create_test_session(date(2025, 12, 31), 600)
    store.create_session(local(date(2026, 7, 1), 9))

    assert store.work_days(date(2026, 8, 15)) == {date(2026, 1, 1), date(2026, 12, 31)}
    assert store.work_days(date(2025, 1, 1)) == {date(2025, 12, 31)}


def test_delete_sessions_for_day_and_all() -> None:
    store = SessionStore(":memory:")
    store.create_test_session(date(2026, 2, 1), 600)
    store.create_test_session(date(2026, 2, 2), 600)

    store.delete_sessions(date(2026, 2, 1))
    assert store.total_duration(date(2026, 2, 1)) == 0
    assert store.total_duration(date(2026, 2, 2)) == 600

    store.delete_all_sessions()
    assert store.sessions_in_range(date(2026, 1, 1), date(2026, 12, 31)) == []


def test_close_stale_sessions_leaves_none_open() -> None:
    store = SessionStore(":memory:")
    store.create_session(local(date(2026, 2, 1), 9))

    assert store.close_stale_sessions() == 1
    assert store.active_session() is None
    assert store.total_duration(date(2026, 2, 1)) == 0
    assert store.close_stale_sessions() == 0


def test_unavailable_store_yields_empty_results() -> None:
    store = SessionStore(":memory:")
    store.create_test_session(date(2026, 2, 1), 600)
    store.close()

    assert store.sessions_on_day(date(2026, 2, 1)) == []
    assert store.total_duration(date(2026, 2, 1)) == 0
    assert store.work_days(date(2026, 2, 1)) == set()
    assert store.active_session() is None
    assert store.create_session(datetime.now(timezone.utc)) is None
    store.delete_all_sessions()


def test_store_persists_to_file(tmp_path) -> None:
    path = tmp_path / "uptime.db"
    store = SessionStore(path)
    store.create_test_session(date(2026, 2, 1), 600)
    store.close()

    reopened = SessionStore(path)
    assert reopened.total_duration(date(2026, 2, 1)) == 600
    reopened.close()
