"""core パッケージの初期化
- 役割: バッファ付きCSVライターの部品（列台帳/描画/バッファ/段取り/保存先/保存係/通知）を入れる箱
"""

from .errors import (
    CsvError,
    InvalidDataKindError,
    MissingOptionError,
    NotOpenError,
    NotStringableError,
    StorageWriteError,
)
from .events import Notifier
from .file import File
from .paths import daily_path, rotating_path
from .scheduler import FlushScheduler, ThreadTimer
from .schema import FieldSchema, FieldSpec
from .storage import LocalStorage, WriteMode
from .utils import CsvOptions, load_options

__all__ = [
    "CsvError",
    "CsvOptions",
    "FieldSchema",
    "FieldSpec",
    "File",
    "FlushScheduler",
    "InvalidDataKindError",
    "LocalStorage",
    "MissingOptionError",
    "NotOpenError",
    "NotStringableError",
    "Notifier",
    "StorageWriteError",
    "ThreadTimer",
    "WriteMode",
    "daily_path",
    "load_options",
    "rotating_path",
]
