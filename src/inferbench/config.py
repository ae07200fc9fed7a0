"""
Configuration loading utilities for inferbench.

- load_config(path) -> dict (raw YAML)
- BenchConfig.from_dict(cfg) -> typed settings with defaults filled in
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .constants import (
    DEFAULT_CATALOG_PATH,
    DEFAULT_CONFIG_PATH,
    DEFAULT_MODEL_NAME,
    DEFAULT_TOP_K,
    MAX_DISPLAY_HEIGHT,
    MAX_DISPLAY_WIDTH,
)

AVERAGE_DENOMINATORS = ("attempts", "measurements")


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load a YAML configuration file and return it as a Python dict.

    If no path is provided, uses DEFAULT_CONFIG_PATH from constants.py.
    """
    if path is None:
        cfg_path = Path(DEFAULT_CONFIG_PATH)
    else:
        cfg_path = Path(path)

    if not cfg_path.is_file():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")

    with cfg_path.open("r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

    return cfg


@dataclass
class BenchConfig:
    model_name: str = DEFAULT_MODEL_NAME
    pretrained: bool = True
    checkpoint: Optional[str] = None
    classes: Optional[str] = None
    top_k: int = DEFAULT_TOP_K
    max_width: int = MAX_DISPLAY_WIDTH
    max_height: int = MAX_DISPLAY_HEIGHT
    catalog: str = str(DEFAULT_CATALOG_PATH)
    iterations: int = 10
    seed: Optional[int] = None
    average_denominator: str = "attempts"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "BenchConfig":
        """
        Build settings from the sections of a loaded YAML config.

        Missing sections or keys keep their defaults.
        """
        model_cfg = cfg.get("model") or {}
        display_cfg = cfg.get("display") or {}
        catalog_cfg = cfg.get("catalog") or {}
        bench_cfg = cfg.get("benchmark") or {}
        log_cfg = cfg.get("logging") or {}

        denominator = str(bench_cfg.get("average_denominator", "attempts"))
        if denominator not in AVERAGE_DENOMINATORS:
            raise ValueError(
                f"benchmark.average_denominator must be one of {AVERAGE_DENOMINATORS}, "
                f"got {denominator!r}"
            )

        seed = bench_cfg.get("seed")
        return cls(
            model_name=str(model_cfg.get("name", DEFAULT_MODEL_NAME)),
            pretrained=bool(model_cfg.get("pretrained", True)),
            checkpoint=model_cfg.get("checkpoint"),
            classes=model_cfg.get("classes"),
            top_k=int(model_cfg.get("top_k", DEFAULT_TOP_K)),
            max_width=int(display_cfg.get("max_width", MAX_DISPLAY_WIDTH)),
            max_height=int(display_cfg.get("max_height", MAX_DISPLAY_HEIGHT)),
            catalog=str(catalog_cfg.get("path", DEFAULT_CATALOG_PATH)),
            iterations=int(bench_cfg.get("iterations", 10)),
            seed=None if seed is None else int(seed),
            average_denominator=denominator,
            log_level=str(log_cfg.get("level", "INFO")).upper(),
        )
