from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from main import parse_args, run
from services.oracle_sources import PLACEHOLDER_RANDOM_VALUE

SOURCES = """
[[sources]]
name = "binance"
url = "https://fapi.binance.com/fapi/v1/ticker/price?symbol={}{}"
params = []
jsonpath = "$.price"
decimal = 12
bases = ["USDT"]
quotes = ["BTC"]
"""


@pytest.fixture()
def sources_file(tmp_path: Path) -> Path:
    path = tmp_path / "sources.toml"
    path.write_text(SOURCES, encoding="utf-8")
    return path


def test_run_prints_rng_value(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = run(parse_args(["--source", "rng"]))

    output = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert output == {"source": "rng", "params": [], "value": str(PLACEHOLDER_RANDOM_VALUE)}


def test_run_prints_time_value(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = run(parse_args(["--source", "time"]))

    output = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert int(output["value"]) > 1_600_000_000


def test_run_lists_sources(sources_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = run(parse_args(["--sources-file", str(sources_file), "--list"]))

    assert exit_code == 0
    assert capsys.readouterr().out.split() == ["time", "rng", "binance"]


def test_run_reports_classified_fetch_error(sources_file: Path, caplog: pytest.LogCaptureFixture) -> None:
    args = parse_args(["--sources-file", str(sources_file), "--source", "binance", "--params", "5", "0"])

    with caplog.at_level(logging.ERROR):
        exit_code = run(args)

    assert exit_code == 1
    assert "index_out_of_range" in caplog.text


def test_run_rejects_unknown_source(sources_file: Path, caplog: pytest.LogCaptureFixture) -> None:
    args = parse_args(["--sources-file", str(sources_file), "--source", "coinbase"])

    with caplog.at_level(logging.ERROR):
        exit_code = run(args)

    assert exit_code == 1
    assert "Unknown source 'coinbase'" in caplog.text


def test_run_rejects_source_list_with_wrong_marker_count(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "sources.toml"
    path.write_text(SOURCES.replace("symbol={}{}", "symbol={}"), encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        exit_code = run(parse_args(["--sources-file", str(path), "--source", "binance"]))

    assert exit_code == 1
    assert "markers" in caplog.text


def test_run_rejects_invalid_custom_jsonpath(caplog: pytest.LogCaptureFixture) -> None:
    args = parse_args(["--url", "https://feed.example/fixed", "--jsonpath", "$.["])

    with caplog.at_level(logging.ERROR):
        exit_code = run(args)

    assert exit_code == 1
    assert "Invalid JSONPath" in caplog.text
