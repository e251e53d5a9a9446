# bufcsv/core/schema.py
# 役割：列の並び（フィールドスキーマ）を持つ“列台帳”
# - 【関数】infer_from：dict 行のキーから未知の列を末尾に追加（既存の順番は絶対に動かさない）
# - 列順 = 挿入順。過去・未来のすべての行がこの順番で並ぶ

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class FieldSpec:
    """【関数】列ごとの設定（いまは引用符で囲むかどうかだけ）"""
    quoted: bool = True


class FieldSchema:
    """【関数】列名→FieldSpec の順序付き台帳。追加のみ可能で削除・並べ替えはしない"""

    def __init__(self, fields: Mapping[str, FieldSpec] | None = None) -> None:
        self._fields: dict[str, FieldSpec] = {}  # dict は挿入順を保つ
        for name, spec in (fields or {}).items():
            self.add(name, spec)

    def add(self, name: str, spec: FieldSpec | None = None) -> bool:
        """未知の列なら末尾に追加して True、既知なら何もしないで False"""
        if name in self._fields:
            return False
        self._fields[name] = spec if spec is not None else FieldSpec()
        return True

    def infer_from(self, row: Mapping[str, object]) -> list[str]:
        """【関数】dict 行のキーを走査し、新しい列を quoted=True で追加する（追加した列名を返す）"""
        return [name for name in row.keys() if self.add(name)]

    @property
    def names(self) -> list[str]:
        return list(self._fields)

    @property
    def specs(self) -> list[FieldSpec]:
        return list(self._fields.values())

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __getitem__(self, name: str) -> FieldSpec:
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"FieldSchema({self.names!r})"
