# bufcsv/core/events.py
# 役割：書き込みの“お知らせ係”。data（書いた内容）と error（書き込み失敗）を購読者へ順に届ける
from __future__ import annotations

from pathlib import Path
from typing import Callable, List

from loguru import logger  # 購読者がいない失敗はログに残す

from bufcsv.core.errors import StorageWriteError

DataHandler = Callable[[Path, str], None]
ErrorHandler = Callable[[StorageWriteError, Path, str], None]


class Notifier:
    """【関数】data/error の購読者リストを持ち、登録順に呼び出す"""

    def __init__(self) -> None:
        self._data: List[DataHandler] = []
        self._error: List[ErrorHandler] = []

    def subscribe_data(self, handler: DataHandler) -> DataHandler:
        """data(destination, text) の購読者を登録（デコレータとしても使える）"""
        self._data.append(handler)
        return handler

    def subscribe_error(self, handler: ErrorHandler) -> ErrorHandler:
        """error(err, destination, text) の購読者を登録（デコレータとしても使える）"""
        self._error.append(handler)
        return handler

    def unsubscribe(self, handler: Callable[..., None]) -> None:
        if handler in self._data:
            self._data.remove(handler)
        if handler in self._error:
            self._error.remove(handler)

    def emit_data(self, destination: Path, text: str) -> None:
        # 呼び出し元（flush）と同じスレッドで同期的に呼ぶ。例外はそのまま呼び出し元へ
        for handler in list(self._data):
            handler(destination, text)

    def emit_error(self, err: StorageWriteError, destination: Path, text: str) -> None:
        # 書き込みワーカー側のスレッドから呼ばれる
        handlers = list(self._error)
        if not handlers:
            logger.error(f"csv write failed: path={destination} bytes={len(text)} err={err.__cause__!r}")
            return
        for handler in handlers:
            try:
                handler(err, destination, text)
            except Exception:
                logger.exception(f"csv error handler failed: path={destination}")
