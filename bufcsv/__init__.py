"""bufcsv: バッファ付きCSVライターのトップレベル・パッケージ
- 役割: `from bufcsv import File` で主要クラスを取り出せるようにする
- 注意: 実処理は core 配下に置き、ここは入口の“名札”だけ
"""
__version__ = "0.1.0"  # pyproject の version と合わせる

from bufcsv.core import (  # noqa: E402
    CsvError,
    CsvOptions,
    FieldSpec,
    File,
    InvalidDataKindError,
    LocalStorage,
    MissingOptionError,
    NotOpenError,
    NotStringableError,
    StorageWriteError,
    WriteMode,
)

__all__ = [
    "__version__",
    "CsvError",
    "CsvOptions",
    "FieldSpec",
    "File",
    "InvalidDataKindError",
    "LocalStorage",
    "MissingOptionError",
    "NotOpenError",
    "NotStringableError",
    "StorageWriteError",
    "WriteMode",
]
