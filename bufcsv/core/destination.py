# bufcsv/core/destination.py
# 役割：直前に書いた保存先を覚えておき、「ヘッダを付けるか」「上書きか追記か」を決める
from __future__ import annotations

from pathlib import Path

from bufcsv.core.storage import StorageAdapter, WriteMode
from bufcsv.core.utils import CsvOptions


class DestinationTracker:
    """【関数】保存先の状態（last_path）と、flushごとの判定"""

    def __init__(self) -> None:
        self.last_path: Path | None = None

    def is_new(self, destination: Path) -> bool:
        return destination != self.last_path

    def wants_header(self, destination: Path, opts: CsvOptions, storage: StorageAdapter) -> bool:
        """
        ヘッダを付けるのは:
          - headers が有効
          - かつ まだ書いていない保存先
          - かつ（上書きモード または 保存先が既に存在する）
        """
        return bool(
            opts.headers
            and self.is_new(destination)
            and (opts.overwrite or storage.exists(destination))
        )

    def write_mode(self, destination: Path, opts: CsvOptions) -> WriteMode:
        """上書きは「overwrite 有効 かつ 初めての保存先」のときだけ。ほかは追記"""
        if opts.overwrite and self.is_new(destination):
            return WriteMode.OVERWRITE
        return WriteMode.APPEND

    def record(self, destination: Path) -> None:
        # 書き込みの成否に関係なく記録する
        self.last_path = destination
