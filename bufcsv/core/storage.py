# bufcsv/core/storage.py
# 役割：CSVテキストをディスクへ書く“保存係”（上書き/追記）。書き込みは専用の1スレッドで順番に行う
# - 【関数】exists：保存先が既にあるか（同期）
# - 【関数】write：書き込み依頼を積み、Future を返す（結果は後で届く）
# - 【関数】join/close：発行済みの依頼を待つ／ワーカーを止める
from __future__ import annotations

import threading  # 発行済み Future の集合を守る
from concurrent.futures import Future, ThreadPoolExecutor, wait  # 1ワーカー＝依頼順に実行
from enum import Enum
from pathlib import Path
from typing import Protocol, Set

from loguru import logger


class WriteMode(str, Enum):
    OVERWRITE = "overwrite"
    APPEND = "append"


class StorageAdapter(Protocol):
    """File が保存係に求める最小インターフェース"""

    def exists(self, path: Path) -> bool: ...

    def write(self, path: Path, text: str, *, encoding: str, mode: WriteMode) -> Future: ...


class LocalStorage:
    """
    ローカルファイルへの保存係。
    - ワーカー1本の ThreadPoolExecutor で処理するので、同じ保存先への書き込み順は依頼順のまま
    - 失敗は例外を投げず Future に載せて返す（呼び元は add_done_callback で受け取る）
    - プロセス終了時は concurrent.futures が積み残しを処理してからワーカーを止める
    """

    def __init__(self, *, mkdirs: bool = True) -> None:
        self.mkdirs = mkdirs  # 親フォルダが無ければ作る
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="bufcsv-storage")
        self._futures: Set[Future] = set()
        self._lock = threading.Lock()

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def write(self, path: Path, text: str, *, encoding: str = "utf8",
              mode: WriteMode = WriteMode.APPEND) -> Future:
        """【関数】書き込み依頼を積む。戻り値の Future は成功で保存先Path、失敗で例外を持つ"""
        try:
            fut = self._executor.submit(self._write_now, Path(path), text, encoding, WriteMode(mode))
        except RuntimeError as e:
            # close 後の依頼：同期では投げず Future に載せる
            fut = Future()
            fut.set_exception(e)
            return fut
        with self._lock:
            self._futures.add(fut)
        fut.add_done_callback(self._forget)
        return fut

    def join(self, timeout: float | None = None) -> None:
        """【関数】ここまでに積まれた依頼がすべて終わるまで待つ"""
        with self._lock:
            pending = list(self._futures)
        wait(pending, timeout=timeout)

    def close(self, wait: bool = True) -> None:
        """【関数】ワーカーを止める。wait=False でも積まれた依頼は処理されてからスレッドが終わる"""
        self._executor.shutdown(wait=wait)

    def _forget(self, fut: Future) -> None:
        with self._lock:
            self._futures.discard(fut)

    def _write_now(self, path: Path, text: str, encoding: str, mode: WriteMode) -> Path:
        if self.mkdirs:
            path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" で eol をそのまま書く（OSの改行変換をしない）
        with path.open("w" if mode is WriteMode.OVERWRITE else "a", encoding=encoding, newline="") as f:
            f.write(text)
        logger.trace(f"csv written: path={path} mode={mode.value} chars={len(text)}")
        return path
