# bufcsv/core/scheduler.py
# 役割：いつ flush するかを決める“段取り係”と、一定間隔で flush を呼ぶタイマー
# - 件数しきい値：バッファ件数が flush_lines を“超えたら”（= flush_lines+1 件目で）flush
# - 時間しきい値：flush_interval(ms) ごとにタイマーが flush を呼ぶ（件数とは独立）
# - どちらも 0：add のたびに即 flush（バッファしない）
from __future__ import annotations

import threading  # タイマー用のバックグラウンドスレッドと停止フラグ
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from loguru import logger


class TimerFacility(Protocol):
    """繰り返しタイマーの最小インターフェース"""

    def schedule_repeating(self, interval_ms: int, callback: Callable[[], None]) -> Any: ...

    def cancel(self, handle: Any) -> None: ...


@dataclass
class TimerHandle:
    stop: threading.Event
    thread: threading.Thread


class ThreadTimer:
    """【関数】1ハンドル=1デーモンスレッド。stop が立つまで interval ごとに callback を呼ぶ"""

    def schedule_repeating(self, interval_ms: int, callback: Callable[[], None]) -> TimerHandle:
        stop = threading.Event()
        interval_s = max(0.001, interval_ms / 1000.0)

        def _loop() -> None:
            while not stop.wait(interval_s):
                try:
                    callback()
                except Exception:
                    logger.exception("csv interval callback failed")

        th = threading.Thread(target=_loop, name="bufcsv-flush-timer", daemon=True)
        th.start()
        return TimerHandle(stop=stop, thread=th)

    def cancel(self, handle: TimerHandle) -> None:
        # join はしない：コールバック実行中に File のロック待ちで止まっている可能性があるため
        handle.stop.set()


class FlushScheduler:
    """【関数】flush の判定（件数/しきい値なし）と、時間フラッシュ用タイマーの持ち主"""

    def __init__(self, flush_lines: int = 0, flush_interval: int = 0,
                 timer: TimerFacility | None = None) -> None:
        self.flush_lines = flush_lines
        self.flush_interval = flush_interval
        self._timer = timer if timer is not None else ThreadTimer()
        self._handle: Any = None

    @property
    def immediate(self) -> bool:
        """しきい値が何も無い＝add のたびに flush"""
        return self.flush_lines == 0 and self.flush_interval == 0

    @property
    def running(self) -> bool:
        return self._handle is not None

    def should_flush(self, buffered: int) -> bool:
        """【関数】add 直後の判定。件数ルールを先に見て、発火しなければ“しきい値なし”ルール"""
        if self.flush_lines > 0 and buffered > self.flush_lines:
            return True
        return self.immediate

    def start(self, callback: Callable[[], None]) -> None:
        if self.flush_interval > 0 and self._handle is None:
            self._handle = self._timer.schedule_repeating(self.flush_interval, callback)

    def stop(self) -> None:
        """【関数】タイマーを止める（2回目以降は何もしない）"""
        if self._handle is not None:
            self._timer.cancel(self._handle)
            self._handle = None
