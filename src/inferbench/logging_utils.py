"""
Logging utilities for the inferbench package.

Provides:
- setup_logging(): configure a rich console logger
- get_logger(): get a module-specific logger
- timer: small context manager to measure durations in milliseconds
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Union

from rich.logging import RichHandler


def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Configure root logging for the whole project.
    Call this once (e.g. in the CLI or the gradio app).
    """
    if logging.getLogger().handlers:
        # Already configured, don't add handlers twice
        return

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger for a given module or component.
    If name is None, returns the root logger.
    """
    return logging.getLogger(name)


@contextmanager
def timer(label: str) -> Iterator[Dict[str, float]]:
    """
    Context manager to measure elapsed time.

    The yielded dict gets an "ms" entry once the block exits.

    Example:
        with timer("model load") as t:
            load_model()
        print(t["ms"])
    """
    result: Dict[str, float] = {}
    t0 = time.perf_counter()
    try:
        yield result
    finally:
        result["ms"] = (time.perf_counter() - t0) * 1000.0
        logging.getLogger("inferbench.timer").info("%s took %.2f ms", label, result["ms"])
