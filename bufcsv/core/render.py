# bufcsv/core/render.py
# 役割：スキーマと書式設定から“1行ぶんのCSVテキスト”を作る純粋関数群（状態を持たない）
# - 【関数】render_value：None→NULLトークン、quoted列→引用符で囲む
# - 【関数】render_header：列名をすべて引用符で囲んで区切り文字で連結
# - 【関数】render_rows：バッファの行を順に連結（足りない末尾はNULLで埋める）

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from bufcsv.core.errors import NotStringableError
from bufcsv.core.schema import FieldSchema, FieldSpec
from bufcsv.core.utils import CsvOptions

_EXCESS_FIELD = FieldSpec(quoted=True)  # スキーマより長い行のはみ出し列


def _to_text(value: Any) -> str:
    try:
        return str(value)
    except Exception as e:
        raise NotStringableError(value, e) from e


def enquote(value: Any, opts: CsvOptions) -> str:
    """【関数】値を引用符で囲む。埋め込まれた引用符は“最初の1つだけ”エスケープする"""
    text = _to_text(value)
    if opts.quote:
        text = text.replace(opts.quote, opts.escape + opts.quote, 1)
    return opts.quote + text + opts.quote


def render_value(value: Any, spec: FieldSpec | None, opts: CsvOptions) -> str:
    """【関数】1セルぶん：None はNULLトークンそのまま（引用符なし）"""
    if value is None:
        return opts.null_value
    if (spec or _EXCESS_FIELD).quoted:
        return enquote(value, opts)
    return _to_text(value)


def render_header(schema: FieldSchema, opts: CsvOptions) -> str:
    """【関数】ヘッダ行：列名は quoted 設定に関係なく常に引用符で囲む"""
    return opts.delimiter.join(enquote(name, opts) for name in schema) + opts.eol


def render_line(values: Sequence[Any], specs: Sequence[FieldSpec], opts: CsvOptions) -> str:
    """【関数】データ1行：位置で列設定を引き、列数に満たない分はNULLで埋める"""
    cells = [
        render_value(v, specs[i] if i < len(specs) else None, opts)
        for i, v in enumerate(values)
    ]
    while len(cells) < len(specs):
        cells.append(opts.null_value)
    return opts.delimiter.join(cells) + opts.eol


def render_rows(rows: Iterable[Sequence[Any]], schema: FieldSchema, opts: CsvOptions) -> str:
    """【関数】バッファの行をバッファ順にすべて連結する"""
    specs = schema.specs
    return "".join(render_line(row, specs, opts) for row in rows)
