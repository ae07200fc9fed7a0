"""
Dataclasses used across the inferbench session.

These give structure to:
- the image currently on display and its display size
- classifier predictions
- the read-only snapshot handed to the view layer

They are intentionally lightweight.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


# ------------------------------------------------------------
# Images
# ------------------------------------------------------------

@dataclass(frozen=True)
class ImageHandle:
    locator: str
    natural_width: int
    natural_height: int
    pixels: Any = field(default=None, repr=False, compare=False)  # PIL.Image.Image


@dataclass(frozen=True)
class DisplayDimensions:
    width: int
    height: int

    def to_dict(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}


# ------------------------------------------------------------
# Classifier output
# ------------------------------------------------------------

@dataclass(frozen=True)
class Prediction:
    label: str
    confidence: float  # in [0, 1]

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "confidence": self.confidence}


# ------------------------------------------------------------
# Display surface
# ------------------------------------------------------------

@dataclass(frozen=True)
class SessionSnapshot:
    """
    Everything a view needs to render the benchmark page.
    Times are in milliseconds; 0 means "not measured yet".
    """
    state: str
    model_ready: bool
    model_load_latency_ms: float
    current_image: Optional[str]
    display_size: Optional[DisplayDimensions]
    predictions: Tuple[Prediction, ...]
    last_inference_ms: float
    average_inference_ms: float
    attempts: int = 0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        # Convert dataclass to standard dict for JSON printing
        predictions: List[Dict[str, Any]] = [p.to_dict() for p in self.predictions]
        return {
            "state": self.state,
            "model_ready": self.model_ready,
            "model_load_latency_ms": self.model_load_latency_ms,
            "current_image": self.current_image,
            "display_size": None if self.display_size is None else self.display_size.to_dict(),
            "predictions": predictions,
            "last_inference_ms": self.last_inference_ms,
            "average_inference_ms": self.average_inference_ms,
            "attempts": self.attempts,
            "error": self.error,
        }
