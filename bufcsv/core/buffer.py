# bufcsv/core/buffer.py
# 役割：まだ書き出していない行の“待ち行列”と、受け取った行（list/dict）の正規化
# - dict 行：列推論→スキーマ順の list に並べ替え（無いキーは None）
# - list/tuple 行：スキーマ順に並んでいる前提でそのまま受け取る

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, List

from bufcsv.core.errors import InvalidDataKindError
from bufcsv.core.schema import FieldSchema

Row = Sequence[Any] | Mapping[str, Any]


def normalize(row: Row, schema: FieldSchema) -> List[Any]:
    """【関数】行をスキーマ順の値リストへ。list/dict 以外は InvalidDataKindError"""
    if isinstance(row, Mapping):
        schema.infer_from(row)
        return [row.get(name) for name in schema]
    if isinstance(row, Sequence) and not isinstance(row, (str, bytes, bytearray)):
        return list(row)
    raise InvalidDataKindError(row)


class RowBuffer:
    """【関数】正規化済みの行をためる箱。drain で中身を丸ごと取り出して空にする"""

    def __init__(self, schema: FieldSchema) -> None:
        self.schema = schema
        self._rows: List[List[Any]] = []

    def append(self, row: Row) -> List[Any]:
        values = normalize(row, self.schema)
        self._rows.append(values)
        return values

    def drain(self) -> List[List[Any]]:
        """【関数】今ある行をすべて返し、バッファは即座に空にする"""
        rows, self._rows = self._rows, []
        return rows

    @property
    def rows(self) -> List[List[Any]]:
        return list(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __bool__(self) -> bool:
        return bool(self._rows)
