#!/usr/bin/env python3
"""
CLI entry point for the inferbench project.

This script exposes subcommands:
  - bench : load the model, classify random catalog images, report timings
  - size  : compute the letterboxed display size of an image

It is linked to the 'inferbench' terminal command via pyproject.toml:
    [project.scripts]
    inferbench = "inferbench.cli:main"
"""

import argparse
import asyncio
import json
import random
from typing import Optional

import numpy as np

from inferbench.config import BenchConfig, load_config
from inferbench.data_models import SessionSnapshot
from inferbench.dimensions import compute_display_size
from inferbench.constants import MAX_DISPLAY_HEIGHT, MAX_DISPLAY_WIDTH
from inferbench.errors import InvalidInputError
from inferbench.io_utils import load_catalog, load_image
from inferbench.logging_utils import get_logger, setup_logging, timer
from inferbench.session import SessionController
from inferbench.timing import TimingAggregator
from inferbench.vision import TorchvisionProvider

logger = get_logger("inferbench.cli")


def build_controller(bench: BenchConfig) -> SessionController:
    provider = TorchvisionProvider(
        pretrained=bench.pretrained,
        checkpoint=bench.checkpoint,
        classes=bench.classes,
        top_k=bench.top_k,
    )
    return SessionController(
        provider=provider,
        catalog=load_catalog(bench.catalog),
        image_loader=load_image,
        model_name=bench.model_name,
        max_width=bench.max_width,
        max_height=bench.max_height,
        timings=TimingAggregator(bench.average_denominator),
        rng=random.Random(bench.seed),
    )


def format_snapshot(snap: SessionSnapshot) -> str:
    """Plain-text rendering of the benchmark page."""
    lines = []
    if not snap.model_ready:
        lines.append("Loading model...")
    else:
        lines.append(f"Model Load Time: {snap.model_load_latency_ms:.2f}ms")
    if snap.current_image is not None:
        size = snap.display_size
        dims = f" ({size.width}x{size.height})" if size is not None else ""
        lines.append(f"Image: {snap.current_image}{dims}")
        for p in snap.predictions:
            lines.append(f"  {p.label}: {p.confidence:.4f}")
        lines.append(f"Image inference time: {snap.last_inference_ms:.2f}ms")
        lines.append(f"Average inference time: {snap.average_inference_ms:.2f}ms")
    if snap.error:
        lines.append(f"Error: {snap.error}")
    return "\n".join(lines)


async def run_bench(controller: SessionController, iterations: int, as_json: bool = False) -> Optional[dict]:
    """Run `iterations` image cycles; returns None if the model never loaded."""
    if not await controller.initialize():
        print(format_snapshot(controller.snapshot()))
        return None

    print(f"Model Load Time: {controller.model_load_latency_ms:.2f}ms")

    latencies = []
    for i in range(1, iterations + 1):
        ok = await controller.request_new_image()
        snap = controller.snapshot()
        if ok:
            latencies.append(snap.last_inference_ms)

        print(f"\n=== IMAGE {i}/{iterations} ===")
        if as_json:
            print(json.dumps(snap.to_dict(), indent=2))
        else:
            print(format_snapshot(snap))

    summary = {
        "model": controller.model_name,
        "attempts": controller.attempts,
        "measured_images": len(controller.timings),
        "average_ms": controller.average_inference_ms,
    }
    if latencies:
        arr = np.asarray(latencies, dtype=np.float64)
        summary["p50_ms"] = float(np.percentile(arr, 50))
        summary["p95_ms"] = float(np.percentile(arr, 95))
        summary["min_ms"] = float(arr.min())
        summary["max_ms"] = float(arr.max())
    return summary


def main():
    parser = argparse.ArgumentParser(
        prog="inferbench",
        description="Image classification inference benchmark"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ------------------ bench ------------------
    p_bench = subparsers.add_parser("bench", help="Classify random catalog images and time each inference")
    p_bench.add_argument("--config", default=None, help="YAML config (default: configs/default.yaml)")
    p_bench.add_argument("--catalog", default=None, help="Image directory or locator list (overrides config)")
    p_bench.add_argument("--iterations", type=int, default=None)
    p_bench.add_argument("--seed", type=int, default=None)
    p_bench.add_argument("--json", action="store_true", help="Print each snapshot as JSON")

    # ------------------ size ------------------
    p_size = subparsers.add_parser("size", help="Compute the display size of an image")
    p_size.add_argument("--width", type=float, required=True, help="Natural image width")
    p_size.add_argument("--height", type=float, required=True, help="Natural image height")
    p_size.add_argument("--max-width", type=int, default=MAX_DISPLAY_WIDTH)
    p_size.add_argument("--max-height", type=int, default=MAX_DISPLAY_HEIGHT)

    args = parser.parse_args()

    # --------------------------------------------------------
    # process commands
    # --------------------------------------------------------

    if args.command == "size":
        try:
            size = compute_display_size(args.width, args.height, args.max_width, args.max_height)
        except InvalidInputError as exc:
            raise SystemExit(f"Error: {exc}")
        print(json.dumps(size.to_dict()))
        return

    elif args.command == "bench":
        bench = BenchConfig.from_dict(load_config(args.config))
        if args.catalog is not None:
            bench.catalog = args.catalog
        if args.iterations is not None:
            bench.iterations = args.iterations
        if args.seed is not None:
            bench.seed = args.seed

        setup_logging(bench.log_level)
        controller = build_controller(bench)

        with timer(f"bench ({bench.iterations} images)"):
            summary = asyncio.run(run_bench(controller, bench.iterations, as_json=args.json))
        if summary is None:
            raise SystemExit(f"Error: {controller.error}")

        print("\n=== SUMMARY ===")
        print(json.dumps(summary, indent=2))
        return


if __name__ == "__main__":
    main()
