from datetime import datetime, timezone
from pathlib import Path

from bufcsv.core.paths import daily_path, rotating_path


def _fixed(ts: str):
    dt = datetime.fromisoformat(ts)
    return lambda: dt


def test_daily_path_uses_date_in_timezone(tmp_path):
    # 2025-10-22 16:00 UTC は JST で 10/23
    resolve = daily_path(tmp_path, "order_log", now=_fixed("2025-10-22T16:00:00+00:00"))

    assert resolve() == tmp_path / "20251023order_log.csv"


def test_daily_path_with_utc(tmp_path):
    resolve = daily_path(tmp_path, "trades", tz=timezone.utc, suffix=".txt",
                         now=_fixed("2025-10-22T16:00:00+00:00"))

    assert resolve() == tmp_path / "20251022trades.txt"


def test_rotating_path_keeps_file_until_limit(tmp_path):
    resolve = rotating_path(tmp_path, "log", limit_bytes=10, now=_fixed("2025-01-01T00:00:00+09:00"))

    first = resolve()
    assert first == tmp_path / "20250101log.csv"
    first.write_text("12345", encoding="utf-8")
    assert resolve() == first

    first.write_text("0123456789abc", encoding="utf-8")
    second = resolve()
    assert second == tmp_path / "20250101log_0001.csv"

    second.write_text("0123456789abc", encoding="utf-8")
    assert resolve() == tmp_path / "20250101log_0002.csv"


def test_rotating_path_skips_full_unsuffixed_file(tmp_path):
    full = tmp_path / "20250101log.csv"
    full.write_text("x" * 20, encoding="utf-8")
    (tmp_path / "20250101log_0003.csv").write_text("x" * 20, encoding="utf-8")

    resolve = rotating_path(tmp_path, "log", limit_bytes=10, now=_fixed("2025-01-01T12:00:00+09:00"))

    assert resolve() == Path(tmp_path / "20250101log_0004.csv")
