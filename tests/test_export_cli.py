from pathlib import Path

import polars as pl

from bufcsv.cli.export import main


def test_export_parquet_to_csv(tmp_path):
    src = tmp_path / "orders.parquet"
    pl.DataFrame({"side": ["buy", "sell"], "px": [100.5, None]}).write_parquet(src)
    out = tmp_path / "orders.csv"

    rc = main(["--input", str(src), "--out", str(out), "--flush-lines", "1"])

    assert rc == 0
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines == ['"side","px"', '"buy","100.5"', '"sell",NULL']


def test_export_ndjson_with_limit_and_no_headers(tmp_path):
    src = tmp_path / "events.ndjson"
    src.write_text('{"a": 1}\n{"a": 2}\n{"a": 3}\n', encoding="utf-8")
    out = tmp_path / "events.csv"

    rc = main(["--input", str(src), "--out", str(out), "--limit", "2", "--no-headers"])

    assert rc == 0
    assert out.read_text(encoding="utf-8").splitlines() == ['"1"', '"2"']


def test_export_uses_yaml_config(tmp_path):
    src = tmp_path / "events.ndjson"
    src.write_text('{"ts": 1, "msg": "hi"}\n', encoding="utf-8")
    out = tmp_path / "events.csv"
    cfg = tmp_path / "export.yml"
    cfg.write_text(f"path: {out.as_posix()}\nfields:\n  ts:\n    quoted: false\n", encoding="utf-8")

    rc = main(["--input", str(src), "--config", str(cfg)])

    assert rc == 0
    assert out.read_text(encoding="utf-8").splitlines() == ['"ts","msg"', '1,"hi"']


def test_export_reports_write_failures(tmp_path):
    src = tmp_path / "events.ndjson"
    src.write_text('{"a": 1}\n', encoding="utf-8")
    blocker = tmp_path / "blocker"
    blocker.write_text("file", encoding="utf-8")

    rc = main(["--input", str(src), "--out", str(blocker / "out.csv")])

    assert rc == 1


def test_export_with_shipped_config_falls_back_to_results_dir(tmp_path, monkeypatch):
    cfg = Path(__file__).resolve().parents[1] / "configs" / "export.yml"
    src = tmp_path / "events.ndjson"
    src.write_text('{"ts": 1, "msg": "hi"}\n', encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    rc = main(["--input", str(src), "--config", str(cfg)])

    assert rc == 0
    outs = list((tmp_path / "data" / "results").glob("events_export_*.csv"))
    assert len(outs) == 1
    assert outs[0].read_text(encoding="utf-8").splitlines() == ['"ts","msg"', '1,"hi"']
