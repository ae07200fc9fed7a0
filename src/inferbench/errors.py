"""
Error kinds raised or recorded by the benchmark session.

Each one also derives from the builtin the rest of the package would
otherwise raise, so callers catching ValueError / OSError keep working.
"""

from __future__ import annotations


class InferBenchError(Exception):
    """Base class for all inferbench errors."""


class InvalidInputError(InferBenchError, ValueError):
    """Dimension inputs that are zero, negative or not finite."""


class ModelLoadError(InferBenchError, RuntimeError):
    """The model provider failed to load the requested model."""


class ImageLoadError(InferBenchError, OSError):
    """An image locator could not be read or decoded."""


class ClassificationError(InferBenchError, RuntimeError):
    """The model failed while classifying the current image."""
