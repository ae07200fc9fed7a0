"""
Per-image inference timings and their running average.

The average divides the summed durations by the number of load *attempts*,
not by the number of recorded durations. While a load is in flight (or after
a failed one) the average is therefore pulled toward zero. That matches the
benchmark page this harness reproduces; pass denominator="measurements" to
divide by the number of recorded durations instead.
"""

from __future__ import annotations

import math
from typing import Dict, Optional, Tuple

from .config import AVERAGE_DENOMINATORS
from .logging_utils import get_logger

logger = get_logger(__name__)


class TimingAggregator:
    def __init__(self, denominator: str = "attempts") -> None:
        if denominator not in AVERAGE_DENOMINATORS:
            raise ValueError(f"Unknown denominator {denominator!r}, expected one of {AVERAGE_DENOMINATORS}")
        self.denominator = denominator
        self._durations: Dict[str, float] = {}
        self._version = 0
        # (version, total_attempts) -> average
        self._cached: Optional[Tuple[Tuple[int, int], float]] = None

    def record(self, locator: str, duration_ms: float) -> None:
        """Store the latest duration for `locator`, replacing any earlier one."""
        if not math.isfinite(duration_ms) or duration_ms < 0:
            raise ValueError(f"duration_ms must be finite and >= 0, got {duration_ms}")
        if locator in self._durations:
            logger.debug("Overwriting timing for %s (%.2f ms -> %.2f ms)",
                         locator, self._durations[locator], duration_ms)
        self._durations[locator] = float(duration_ms)
        self._version += 1

    def average_ms(self, total_attempts: int) -> float:
        key = (self._version, total_attempts)
        if self._cached is not None and self._cached[0] == key:
            return self._cached[1]

        if self.denominator == "measurements":
            count = len(self._durations)
        else:
            count = total_attempts

        avg = sum(self._durations.values()) / count if count > 0 else 0.0
        self._cached = (key, avg)
        return avg

    @property
    def durations(self) -> Dict[str, float]:
        return dict(self._durations)

    def __len__(self) -> int:
        return len(self._durations)

    def reset(self) -> None:
        self._durations.clear()
        self._version += 1
        self._cached = None
