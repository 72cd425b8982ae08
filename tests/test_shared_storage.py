import json
from datetime import date, datetime, timezone

from BackEnd.services.shared_storage import SharedStorage


def test_save_and_read_snapshot(tmp_path) -> None:
    shared = SharedStorage(tmp_path)
    stamp = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)

    shared.save_today_duration(5400, now=stamp)
    shared.save_work_days({date(2026, 3, 10), date(2026, 1, 2)})

    assert shared.get_today_hours() == 1.5
    assert shared.get_last_updated() == stamp
    assert shared.get_work_days() == [date(2026, 1, 2), date(2026, 3, 10)]
    assert shared.has_work_today() is True

    raw = json.loads(shared.snapshot_path.read_text(encoding="utf-8"))
    assert raw == {
        "todayHours": 1.5,
        "lastUpdated": "2026-03-10T12:00:00+00:00",
        "workDays": ["2026-01-02", "2026-03-10"],
    }


def test_work_days_overwritten_not_merged(tmp_path) -> None:
    shared = SharedStorage(tmp_path)
    shared.save_work_days([date(2026, 1, 1), date(2026, 1, 2)])
    shared.save_work_days([date(2026, 2, 1)])

    assert shared.get_work_days() == [date(2026, 2, 1)]


def test_reset_clears_keys(tmp_path) -> None:
    shared = SharedStorage(tmp_path)
    shared.save_today_duration(600)
    shared.save_work_days([date(2026, 1, 1)])

    shared.reset()

    assert shared.get_today_hours() == 0
    assert shared.get_last_updated() is None
    assert shared.get_work_days() == []
    assert shared.has_work_today() is False


def test_missing_container_skips_with_warning(caplog) -> None:
    shared = SharedStorage(None)

    shared.save_today_duration(600)
    shared.save_work_days([date(2026, 1, 1)])
    shared.request_refresh()
    shared.reset()

    assert shared.get_today_hours() == 0
    assert shared.get_work_days() == []
    assert "Could not access shared storage" in caplog.text


def test_unwritable_container_does_not_raise(tmp_path) -> None:
    shared = SharedStorage(tmp_path / "does-not-exist")

    shared.save_today_duration(600)
    shared.request_refresh()

    assert shared.get_today_hours() == 0


def test_corrupt_snapshot_reads_empty(tmp_path) -> None:
    shared = SharedStorage(tmp_path)
    shared.snapshot_path.write_text("{not json", encoding="utf-8")

    assert shared.get_today_hours() == 0
    assert shared.get_work_days() == []

    shared.save_work_days([date(2026, 1, 1)])
    assert shared.get_work_days() == [date(2026, 1, 1)]


def test_request_refresh_rewrites_marker(tmp_path) -> None:
    shared = SharedStorage(tmp_path)
    shared.request_refresh()
    first = shared.refresh_path.read_text(encoding="utf-8")

    assert first
    assert datetime.fromisoformat(first).tzinfo is not None


def test_request_refresh_replaces_marker_without_leftovers(tmp_path) -> None:
    shared = SharedStorage(tmp_path)
    shared.request_refresh()
    shared.request_refresh()

    assert [p.name for p in tmp_path.iterdir()] == ["refresh.request"]
