# bufcsv/core/utils.py
# 役割：ライター設定の型検査（Pydantic）と、YAML からの読み込み・base.yml との深いマージを行う“設定ローダー”
from __future__ import annotations

from pathlib import Path  # ファイルパスを安全に扱う
from typing import Any, Callable, Dict  # 型ヒント用
import os  # 既定の改行コード（os.linesep）
import copy  # 辞書のディープコピーで安全に合成
import yaml  # YAML読取（pyyaml）
from pydantic import AliasChoices, BaseModel, ConfigDict, Field  # 型検査モデル（v2）

from bufcsv.core.errors import MissingOptionError
from bufcsv.core.schema import FieldSpec

PathOption = str | Path | Callable[[], str | Path]  # 固定パス or flushごとに呼ぶ関数


# ─────────────────────────────────────────────────────────────
# Pydanticモデル定義（構築後は変更不可）
class CsvOptions(BaseModel):
    """CSVライターの設定：既定値で埋めたうえで File が参照する最終形"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    encoding: str = "utf8"
    delimiter: str = Field(",", validation_alias=AliasChoices("delimiter", "delimeter"))
    quote: str = '"'
    escape: str = "\\"
    null_value: str = Field("NULL", validation_alias=AliasChoices("null_value", "nullValue"))
    eol: str = Field(default_factory=lambda: os.linesep)
    headers: bool = True
    overwrite: bool = True
    fields: Dict[str, FieldSpec] = Field(default_factory=dict)
    flush_interval: int = Field(0, ge=0, description="ms。0で時間フラッシュ無効",
                                validation_alias=AliasChoices("flush_interval", "flushInterval"))
    flush_lines: int = Field(0, ge=0, description="行数しきい値。0で件数フラッシュ無効",
                             validation_alias=AliasChoices("flush_lines", "flushLines"))
    path: PathOption = Field(..., description="出力先。関数なら flush のたびに評価する")


def build_options(options: CsvOptions | Dict[str, Any] | None = None, **overrides: Any) -> CsvOptions:
    """【関数】dict/キーワード引数から CsvOptions を作る（path が無ければ MissingOptionError）"""
    if isinstance(options, CsvOptions) and not overrides:
        return options
    if isinstance(options, CsvOptions):
        merged: Dict[str, Any] = options.model_dump()
    else:
        merged = dict(options or {})
    merged.update(overrides)
    if merged.get("path") is None:
        raise MissingOptionError("path")
    return CsvOptions.model_validate(merged)


def resolve_path(path: PathOption) -> Path:
    """【関数】現在の出力先を返す（関数なら呼んで、その戻り値を使う）"""
    return Path(path() if callable(path) else path)


# ─────────────────────────────────────────────────────────────
# 【関数】YAML読取：指定パスのYAMLを辞書で返す（空は {}）
def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data or {}


# ─────────────────────────────────────────────────────────────
# 【関数】深いマージ：base の上に override を重ねる（辞書は再帰、配列/スカラは置換）
def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for k, v in override.items():
        if k in merged and isinstance(merged[k], dict) and isinstance(v, dict):
            merged[k] = deep_merge(merged[k], v)
        else:
            merged[k] = copy.deepcopy(v)
    return merged


# ─────────────────────────────────────────────────────────────
# 【関数】設定ローダー：同じフォルダの base.yml＋指定yml＋引数の上書きを合成し、型検査して返す
def load_options(config_path: str | os.PathLike[str], *, defaults: Dict[str, Any] | None = None,
                 **overrides: Any) -> CsvOptions:
    """
    使い方：
      from bufcsv.core.utils import load_options
      opts = load_options("configs/export.yml", flush_lines=500)
    効能：
      - base.yml があれば土台にし、指定ファイルの差分を“深く”上書きする
      - defaults は base.yml よりさらに下の土台（YAML に無いキーだけ効く）
      - 引数で渡した上書き（None は無視）を最後に重ねる
    """
    cpath = Path(config_path).resolve()
    base_path = cpath.parent / "base.yml"
    base = _read_yaml(base_path) if base_path.is_file() and cpath.name != "base.yml" else {}
    merged = deep_merge(deep_merge(defaults or {}, base), _read_yaml(cpath))
    merged = deep_merge(merged, {k: v for k, v in overrides.items() if v is not None})
    return build_options(merged)
