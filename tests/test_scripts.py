from __future__ import annotations

import runpy
import sys
from pathlib import Path

import pytest

from bytelab.dataio.dataset import read_table
from bytelab.utils import config
from bytelab.utils.exceptions import InvalidRangeError

SCRIPTS = Path(__file__).resolve().parents[1] / "scripts"


def run_script(name: str, monkeypatch, *argv: str) -> None:
    monkeypatch.setattr(sys, "argv", [name, *argv])
    runpy.run_path(str(SCRIPTS / name), run_name="__main__")


def test_histogram_script_summary(monkeypatch, capsys, sample_file):
    run_script("histogram.py", monkeypatch, str(sample_file), "--counter", "uint32")
    out = capsys.readouterr().out
    assert "10 bytes in 1 chunk(s)" in out
    assert "0x41: 4" in out


def test_histogram_script_delta_table(monkeypatch, capsys, sample_file, tmp_path):
    out_path = tmp_path / "delta.csv"
    run_script(
        "histogram.py", monkeypatch, str(sample_file), "--accuracy", "5", "--out", str(out_path)
    )
    df = read_table(out_path)
    assert df["length"].tolist() == [5, 5]
    assert df["histogram.065"].tolist() == [4, 0]
    assert "wrote 2 rows" in capsys.readouterr().out


def test_histogram_script_bad_range(monkeypatch, sample_file):
    with pytest.raises(InvalidRangeError):
        run_script("histogram.py", monkeypatch, str(sample_file), "--end", "99")


@pytest.fixture
def corpus(tmp_path, sample):
    d = tmp_path / "corpus"
    d.mkdir()
    (d / "a.bin").write_bytes(sample)
    (d / "empty.bin").write_bytes(b"")
    return d


@pytest.fixture
def data_dirs(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "DATA_ROOT", tmp_path / "data")
    monkeypatch.setattr(config, "OUTPUTS_DIR", tmp_path / "data" / "outputs")


def test_entropy_map_script(monkeypatch, capsys, corpus, tmp_path, data_dirs):
    out_path = tmp_path / "map.csv"
    run_script(
        "entropy_map.py",
        monkeypatch,
        "--input-dir",
        str(corpus),
        "--accuracy",
        "4",
        "--out",
        str(out_path),
    )
    df = read_table(out_path)
    assert len(df) == 3
    assert df["offset"].tolist() == [0, 4, 8]
    assert {Path(s).name for s in df["source"]} == {"a.bin"}
    out = capsys.readouterr().out
    assert "a.bin: 3 chunks" in out


def test_entropy_map_script_yaml_config(monkeypatch, corpus, tmp_path, data_dirs):
    out_path = tmp_path / "from_config.parquet"
    cfg = tmp_path / "map.yaml"
    cfg.write_text(
        f"input_dir: {corpus}\naccuracy: 5\ncounter: uint16\nout: {out_path}\n"
    )
    run_script("entropy_map.py", monkeypatch, "--config", str(cfg))
    df = read_table(out_path)
    assert df["length"].tolist() == [5, 5]


def test_entropy_map_script_requires_input(monkeypatch, data_dirs):
    with pytest.raises(SystemExit):
        run_script("entropy_map.py", monkeypatch)
