# bufcsv/core/errors.py
# 役割：CSVライターの失敗を種類ごとに分ける例外クラス群（上位で判別しやすくする）

from __future__ import annotations

from pathlib import Path


class CsvError(Exception):
    """bufcsv の一般的な失敗"""


class NotOpenError(CsvError):
    """complete() 後に add/flush/complete が呼ばれた"""

    def __init__(self, message: str = "file_not_open") -> None:
        super().__init__(message)


class InvalidDataKindError(CsvError, TypeError):
    """行データが list/tuple でも dict でもない"""

    def __init__(self, row: object) -> None:
        super().__init__(f"invalid_data: expected a sequence or a mapping, got {type(row).__name__}")
        self.row = row


class NotStringableError(CsvError):
    """値を文字列に変換できない（__str__ が例外を投げた）"""

    def __init__(self, value: object, cause: BaseException | None = None) -> None:
        super().__init__(f"not_a_string: {type(value).__name__} cannot be rendered as text")
        self.value = value
        self.__cause__ = cause


class MissingOptionError(CsvError, ValueError):
    """必須オプション（path）が無い"""

    def __init__(self, name: str) -> None:
        super().__init__(f"missing option: '{name}'.")
        self.name = name


class StorageWriteError(CsvError):
    """保存先への書き込み失敗。非同期で起きるので error 通知でのみ届く"""

    def __init__(self, destination: Path, text: str, cause: BaseException) -> None:
        super().__init__(f"write failed: {destination} ({cause})")
        self.destination = destination
        self.text = text
        self.__cause__ = cause
