# bufcsv/core/paths.py
# 役割：File(path=関数) に渡す“保存先を決める関数”を作るヘルパー
# 追加: 日付タグ(YYYYMMDD)で日次ローテーションし、さらにサイズ上限を超えたら _0001, _0002 ... に分割します。
from __future__ import annotations

from datetime import datetime, tzinfo
from pathlib import Path
from typing import Callable
from zoneinfo import ZoneInfo  # 日付タグのタイムゾーン

_LIMIT_BYTES_DEFAULT = 20 * 1024 * 1024  # 20MB 目安


def _date_tag(tz: tzinfo, now: Callable[[], datetime] | None = None) -> str:
    dt = now() if now is not None else datetime.now(tz)
    return dt.astimezone(tz).strftime("%Y%m%d")


def _next_seq_path(base_dir: Path, prefix: str, suffix: str, start_from: int = 1) -> Path:
    # 既存の _####<suffix> を走査して最大+1を作る
    max_seq = 0
    for p in base_dir.glob(f"{prefix}_*{suffix}"):
        try:
            n = int(p.name[len(prefix) + 1:-len(suffix) or None])
        except ValueError:
            continue
        max_seq = max(max_seq, n)
    seq = max(max_seq + 1, start_from)
    return base_dir / f"{prefix}_{seq:04d}{suffix}"


def _under_limit(p: Path, limit_bytes: int) -> bool:
    try:
        return p.stat().st_size < max(1, int(limit_bytes))
    except OSError:
        return False


def daily_path(directory: str | Path, stem: str, *, tz: str | tzinfo = "Asia/Tokyo",
               suffix: str = ".csv", now: Callable[[], datetime] | None = None) -> Callable[[], Path]:
    """【関数】呼ぶたびに <directory>/<YYYYMMDD><stem><suffix> を返す関数を作る（日付が変われば別ファイル）"""
    base_dir = Path(directory)
    zone = ZoneInfo(tz) if isinstance(tz, str) else tz

    def _resolve() -> Path:
        return base_dir / f"{_date_tag(zone, now)}{stem}{suffix}"

    return _resolve


def rotating_path(directory: str | Path, stem: str, *, limit_bytes: int = _LIMIT_BYTES_DEFAULT,
                  tz: str | tzinfo = "Asia/Tokyo", suffix: str = ".csv",
                  now: Callable[[], datetime] | None = None) -> Callable[[], Path]:
    """
    【関数】日次＋サイズでローテーションする保存先関数を作る。
    - 同じ日付のあいだは直前のファイルを使い続け、limit_bytes に達したら次の連番へ
    - 日付が変わったら、まず無印（<YYYYMMDD><stem><suffix>）から始める
    """
    base_dir = Path(directory)
    zone = ZoneInfo(tz) if isinstance(tz, str) else tz
    active: list[Path | None] = [None]  # 直前に返した保存先

    def _resolve() -> Path:
        prefix = f"{_date_tag(zone, now)}{stem}"
        last = active[0]
        if last is not None and last.name.startswith(prefix) and last.exists():
            target = last if _under_limit(last, limit_bytes) else _next_seq_path(base_dir, prefix, suffix)
        else:
            unsuffixed = base_dir / f"{prefix}{suffix}"
            if not unsuffixed.exists() or _under_limit(unsuffixed, limit_bytes):
                target = unsuffixed
            else:
                target = _next_seq_path(base_dir, prefix, suffix)
        active[0] = target
        return target

    return _resolve
