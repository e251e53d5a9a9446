# bufcsv/cli/export.py
# 役割：Parquet / NDJSON のレコードをバッファ付きCSVライター（File）経由で CSV に書き出すCLI
# - 【関数】_parse_args：入力・出力・しきい値などの引数を読む
# - 【関数】_setup_logs：loguru のシンク（stderr＋任意のファイル）を初期化する
# - 【関数】_iter_records：入力を1件ずつ dict で流す（stdin の NDJSON は逐次読み）
# - 【関数】main：設定を組み立て→File に add→complete→書き込み完了を待つ

from __future__ import annotations

import argparse  # CLI引数の処理
import sys  # stdin / stderr
from datetime import datetime  # 出力ファイル名に時刻を入れる
from itertools import islice  # --limit
from pathlib import Path  # パス操作
from typing import Any, Dict, Iterator

import orjson  # stdin の NDJSON を1行ずつ読む
import polars as pl  # Parquet/NDJSON の読み込み
from loguru import logger  # 進捗表示

from bufcsv.core.file import File
from bufcsv.core.utils import CsvOptions, build_options, load_options

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | pid={process.id} | {name}:{function}:{line} - {message}"


def _default_out(src: str) -> Path:
    """【関数】出力ファイルの既定パス（data/results/ に時刻入りで保存）"""
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    stem = "stdin" if src == "-" else Path(src).stem
    return Path("data") / "results" / f"{stem}_export_{ts}.csv"


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """【関数】引数定義：何を読んで、どこへ、どんな間隔で書くかを決める"""
    p = argparse.ArgumentParser(description="Export Parquet/NDJSON records to CSV through a buffered writer")
    p.add_argument("--input", required=True, help="入力ファイル（.parquet / .ndjson / .jsonl）。- で stdin の NDJSON")
    p.add_argument("--out", default=None, help="出力CSVパス（省略時は data/results/ に時刻入りで作成）")
    p.add_argument("--config", default=None, help="CSVライター設定のYAML（base.yml があれば土台にする）")
    p.add_argument("--flush-lines", type=int, default=None, help="この行数を超えたら書き出す")
    p.add_argument("--flush-interval", type=int, default=None, help="書き出し間隔（ms）")
    p.add_argument("--no-headers", action="store_true", help="ヘッダ行を出さない")
    p.add_argument("--append", action="store_true", help="既存ファイルに追記する（上書きしない）")
    p.add_argument("--limit", type=int, default=None, help="先頭から何件だけ出すか（省略で全件）")
    p.add_argument("--log-level", default="INFO", help="ログレベル")
    p.add_argument("--log-file", default=None, help="ログファイル（指定時は 128MB でローテーション）")
    return p.parse_args(argv)


def _setup_logs(level: str, log_file: str | None, rotate_mb: int = 128) -> list[int]:
    """【関数】stderr と任意のファイルにシンクを張る（PID入りフォーマット）"""
    logger.remove()
    sink_ids = [logger.add(sys.stderr, level=level, format=_LOG_FORMAT)]
    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        sink_ids.append(logger.add(path, level=level, rotation=f"{int(rotate_mb)} MB", enqueue=True, format=_LOG_FORMAT))
    return sink_ids


def _iter_records(src: str) -> Iterator[Dict[str, Any]]:
    """【関数】入力を1件ずつ dict で返す"""
    if src == "-":
        for raw in sys.stdin.buffer:
            raw = raw.strip()
            if not raw:
                continue
            yield orjson.loads(raw)
        return
    path = Path(src)
    if not path.exists():
        raise FileNotFoundError(f"source not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".parquet":
        df = pl.read_parquet(path)
    elif suffix in (".ndjson", ".jsonl"):
        df = pl.read_ndjson(path)
    else:
        raise ValueError(f"unsupported input format: {suffix} (use .parquet / .ndjson / .jsonl)")
    yield from df.iter_rows(named=True)


def _build_options(args: argparse.Namespace) -> CsvOptions:
    """【関数】YAML 設定（任意）に CLI 引数を重ねて最終設定を作る。path は --out → YAML → data/results/ 配下の順"""
    fallback = str(_default_out(args.input))
    overrides: Dict[str, Any] = {
        "path": args.out,
        "flush_lines": args.flush_lines,
        "flush_interval": args.flush_interval,
        "headers": False if args.no_headers else None,
        "overwrite": False if args.append else None,
    }
    if args.config:
        return load_options(args.config, defaults={"path": fallback}, **overrides)
    overrides["path"] = args.out or fallback
    return build_options({k: v for k, v in overrides.items() if v is not None})


def main(argv: list[str] | None = None) -> int:
    """【関数】本体：レコードを読んで File に流し、最後に書き込み完了まで待つ"""
    args = _parse_args(argv)
    _setup_logs(args.log_level, args.log_file)

    opts = _build_options(args)

    failures: list[str] = []
    csv_file = File(opts, on_error=lambda err, dest, text: failures.append(f"{dest}: {err}"))

    count = 0
    records = _iter_records(args.input)
    if args.limit is not None:
        records = islice(records, args.limit)
    with csv_file:
        for rec in records:
            csv_file.add(rec)
            count += 1
    csv_file.wait_pending()

    if failures:
        for f in failures:
            logger.error(f"export failed: {f}")
        return 1
    logger.info(f"exported rows={count} columns={len(csv_file.schema)} → {csv_file.last_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
