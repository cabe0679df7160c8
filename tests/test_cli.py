"""
Tests for the patternscope command line.

Run with: pytest tests/test_cli.py -v
"""

import json
import logging

import numpy as np
import pandas as pd
import pytest

from patternscope.cli import load_table, main


@pytest.fixture(autouse=True)
def reset_logging():
    """main() installs handlers on the package logger; drop them afterwards."""
    yield
    logging.getLogger("patternscope").handlers = []
    logging.getLogger("patternscope").setLevel(logging.NOTSET)


@pytest.fixture
def trend_csv(tmp_path):
    np.random.seed(42)
    t = np.arange(80)
    frame = pd.DataFrame({
        "sales": 2.0 * t + np.random.randn(80),
        "cost": 1.5 * t + np.random.randn(80),
        "region": ["north"] * 80,
    })
    path = tmp_path / "trend.csv"
    frame.to_csv(path, index=False)
    return path


@pytest.fixture
def noise_json(tmp_path):
    np.random.seed(7)
    rows = [{"sales": float(v), "cost": float(c)} for v, c in np.random.randn(80, 2)]
    path = tmp_path / "noise.json"
    path.write_text(json.dumps(rows))
    return path


class TestLoadTable:

    def test_csv(self, trend_csv):
        frame = load_table(str(trend_csv))
        assert list(frame.columns) == ["sales", "cost", "region"]
        assert len(frame) == 80

    def test_json_records(self, noise_json):
        frame = load_table(str(noise_json))
        assert set(frame.columns) == {"sales", "cost"}

    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_table(str(tmp_path / "absent.csv"))


class TestCommands:

    def test_detect(self, trend_csv, capsys):
        assert main(["detect", str(trend_csv)]) == 0
        patterns = json.loads(capsys.readouterr().out)

        types = {p["type"] for p in patterns}
        assert {"trend", "correlation"} <= types

    def test_detect_advanced(self, trend_csv, capsys):
        assert main(["detect", str(trend_csv), "--advanced"]) == 0
        patterns = json.loads(capsys.readouterr().out)
        assert all("algorithm" in p for p in patterns)

    def test_fingerprint(self, trend_csv, capsys):
        assert main(["fingerprint", str(trend_csv), "--id", "trend"]) == 0
        fingerprint = json.loads(capsys.readouterr().out)

        assert fingerprint["id"] == "trend"
        assert set(fingerprint["statistical"]) == {"sales", "cost"}

    def test_compare(self, trend_csv, noise_json, capsys):
        assert main(["compare", str(trend_csv), str(noise_json)]) == 0
        comparison = json.loads(capsys.readouterr().out)

        assert 0.0 <= comparison["overall_similarity"] <= 1.0
        assert comparison["recommendations"]

    def test_missing_file(self, tmp_path, capsys):
        assert main(["detect", str(tmp_path / "absent.csv")]) == 1
        assert "Error" in capsys.readouterr().err

    def test_bad_primary_field(self, trend_csv, capsys):
        assert main(["fingerprint", str(trend_csv), "--id", "x", "--primary-field", "region"]) == 1

    def test_bad_config(self, trend_csv, tmp_path):
        assert main(["--config", str(tmp_path / "absent.yaml"), "detect", str(trend_csv)]) == 1
