# bufcsv/core/file.py
# 役割：バッファ付きCSVファイルの本体（File）。列台帳・バッファ・段取り・保存先の状態を束ねる
# - 【関数】add：1行をバッファへ（dict なら列を推論）→しきい値を満たせば flush
# - 【関数】flush：ヘッダ判定→テキスト化→バッファを空に→data通知→非同期で保存→保存先を記録
# - 【関数】complete：タイマー停止→最後の flush→閉じる（以後の add/flush/complete は NotOpenError）
# ディスク上のファイルを開きっぱなしにはしない。“開いている”のはメモリ上の状態だけ。
from __future__ import annotations

import threading  # タイマースレッドと呼び出し元スレッドの同時実行を直列化する
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Dict, List

from loguru import logger

from bufcsv.core.buffer import Row, RowBuffer
from bufcsv.core.destination import DestinationTracker
from bufcsv.core.errors import NotOpenError, StorageWriteError
from bufcsv.core.events import DataHandler, ErrorHandler, Notifier
from bufcsv.core.render import render_header, render_rows
from bufcsv.core.scheduler import FlushScheduler, TimerFacility
from bufcsv.core.schema import FieldSchema
from bufcsv.core.storage import LocalStorage, StorageAdapter
from bufcsv.core.utils import CsvOptions, build_options, resolve_path


class File:
    """
    バッファ付き書き込みを行うCSVファイル。
    使い方：
      f = File(path="celebrities.csv", flush_lines=100)
      f.add({"Name": "Albert Einstein", "Expertise": "Relativity"})
      f.complete()
    """

    def __init__(
        self,
        options: CsvOptions | Dict[str, Any] | None = None,
        *,
        storage: StorageAdapter | None = None,
        timer: TimerFacility | None = None,
        on_data: DataHandler | None = None,
        on_error: ErrorHandler | None = None,
        **kwargs: Any,
    ) -> None:
        self.options = build_options(options, **kwargs)
        # 自前で作った保存係は complete で止める
        self._owned_storage = LocalStorage() if storage is None else None
        self.storage: StorageAdapter = storage if storage is not None else self._owned_storage
        self.notifier = Notifier()
        if on_data is not None:
            self.notifier.subscribe_data(on_data)
        if on_error is not None:
            self.notifier.subscribe_error(on_error)

        self.schema = FieldSchema(self.options.fields)
        self._buffer = RowBuffer(self.schema)
        self._destination = DestinationTracker()
        self._scheduler = FlushScheduler(self.options.flush_lines, self.options.flush_interval, timer)
        self._pending: List[Future] = []
        self._lock = threading.RLock()
        self._idle = threading.Condition(self._lock)  # 書き込み完了の待ち合わせ
        self._open = True
        self._scheduler.start(self._on_interval)
        logger.info(
            f"csv open: path={self.options.path!r} flush_lines={self.options.flush_lines} "
            f"flush_interval={self.options.flush_interval}"
        )

    # ---- 状態の参照 ----
    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def buffered(self) -> int:
        """まだ書き出していない行数"""
        return len(self._buffer)

    @property
    def last_path(self) -> Path | None:
        return self._destination.last_path

    def _require_open(self) -> None:
        if not self._open:
            raise NotOpenError()

    # ---- 公開操作 ----
    def add(self, row: Row) -> None:
        """【関数】1行を追加する。list/tuple はスキーマ順、dict は列名で並べ替える"""
        with self._lock:
            self._require_open()
            self._buffer.append(row)
            if self._scheduler.should_flush(len(self._buffer)):
                self.flush()

    def flush(self) -> Future | None:
        """【関数】バッファの全行を書き出す。空なら何もしない（None を返す）"""
        with self._lock:
            self._require_open()
            if not self._buffer:
                return None

            destination = resolve_path(self.options.path)
            header = self._destination.wants_header(destination, self.options, self.storage)
            rows = self._buffer.rows
            text = (render_header(self.schema, self.options) if header else "") + render_rows(
                rows, self.schema, self.options
            )
            # テキスト化が済んだら即座に空にする（書き込み中の add は空のバッファを見る）
            self._buffer.drain()

            self.notifier.emit_data(destination, text)

            mode = self._destination.write_mode(destination, self.options)
            logger.debug(f"csv flush: path={destination} rows={len(rows)} header={header} mode={mode.value}")
            fut = self.storage.write(destination, text, encoding=self.options.encoding, mode=mode)
            self._track(fut, destination, text)

            self._destination.record(destination)
            return fut

    def complete(self) -> None:
        """【関数】タイマーを止め、残りを flush して閉じる（再オープンは不可）"""
        with self._lock:
            self._require_open()
            self._scheduler.stop()
            self.flush()
            self._open = False
            if self._owned_storage is not None:
                # 書き込み中の分は待たない（ワーカーは積まれた依頼を終えてから止まる）
                self._owned_storage.close(wait=False)
        logger.info(f"csv complete: last_path={self.last_path}")

    def wait_pending(self, timeout: float | None = None) -> bool:
        """【関数】発行済みの書き込みがすべて終わるまで待つ（complete は待たない）"""
        with self._idle:
            return self._idle.wait_for(lambda: not self._pending, timeout=timeout)

    # ---- 購読 ----
    def on_data(self, handler: DataHandler) -> DataHandler:
        return self.notifier.subscribe_data(handler)

    def on_error(self, handler: ErrorHandler) -> ErrorHandler:
        return self.notifier.subscribe_error(handler)

    # ---- with 構文 ----
    def __enter__(self) -> "File":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._open:
            self.complete()

    # ---- 内部 ----
    def _track(self, fut: Future, destination: Path, text: str) -> None:
        self._pending.append(fut)

        def _done(f: Future) -> None:
            try:
                err = None if f.cancelled() else f.exception()
                if err is not None:
                    self.notifier.emit_error(StorageWriteError(destination, text, err), destination, text)
            finally:
                with self._idle:
                    if f in self._pending:
                        self._pending.remove(f)
                    self._idle.notify_all()

        fut.add_done_callback(_done)

    def _on_interval(self) -> None:
        # タイマースレッドから呼ばれる。閉じた後に来た分は捨てる
        with self._lock:
            if self._open:
                self.flush()
