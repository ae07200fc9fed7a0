from __future__ import annotations

from pathlib import Path

import pytest

from inferbench.config import BenchConfig, load_config


REPO_ROOT = Path(__file__).resolve().parents[1]


def test_load_config_reads_yaml(tmp_path: Path) -> None:
    cfg_path = tmp_path / "bench.yaml"
    cfg_path.write_text("model:\n  name: resnet18\n  top_k: 5\n", encoding="utf-8")

    cfg = load_config(str(cfg_path))
    assert cfg == {"model": {"name": "resnet18", "top_k": 5}}


def test_load_config_empty_file_gives_empty_dict(tmp_path: Path) -> None:
    cfg_path = tmp_path / "empty.yaml"
    cfg_path.write_text("", encoding="utf-8")
    assert load_config(str(cfg_path)) == {}


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


def test_defaults_from_empty_config() -> None:
    bench = BenchConfig.from_dict({})
    assert bench.model_name == "mobilenet_v2"
    assert bench.top_k == 3
    assert (bench.max_width, bench.max_height) == (600, 600)
    assert bench.average_denominator == "attempts"
    assert bench.seed is None


def test_overrides_from_sections() -> None:
    bench = BenchConfig.from_dict({
        "model": {"name": "resnet50", "pretrained": False, "top_k": 1},
        "display": {"max_width": 320, "max_height": 240},
        "catalog": {"path": "samples.txt"},
        "benchmark": {"iterations": 3, "seed": 7, "average_denominator": "measurements"},
        "logging": {"level": "debug"},
    })
    assert bench.model_name == "resnet50"
    assert bench.pretrained is False
    assert bench.top_k == 1
    assert (bench.max_width, bench.max_height) == (320, 240)
    assert bench.catalog == "samples.txt"
    assert bench.iterations == 3
    assert bench.seed == 7
    assert bench.average_denominator == "measurements"
    assert bench.log_level == "DEBUG"


def test_unknown_denominator_rejected() -> None:
    with pytest.raises(ValueError):
        BenchConfig.from_dict({"benchmark": {"average_denominator": "loads"}})


def test_shipped_default_config_parses() -> None:
    bench = BenchConfig.from_dict(load_config(str(REPO_ROOT / "configs" / "default.yaml")))
    assert bench.model_name == "mobilenet_v2"
    assert bench.checkpoint is None
    assert bench.catalog == "data/images"
