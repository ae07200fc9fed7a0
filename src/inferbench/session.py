"""
Benchmark session: load model → pick random image → classify → measure.

State machine:

    UNINITIALIZED → MODEL_LOADING → IDLE → IMAGE_LOADING → CLASSIFYING → IDLE → ...

MODEL_LOADING happens once. A failed model load leaves the session in
MODEL_LOADING with the error exposed on the snapshot; nothing is retried.
Only one image cycle can be in flight; requests made meanwhile are ignored.

All collaborators are injected so several sessions can coexist and tests
can drive the controller with fakes:

    controller = SessionController(TorchvisionProvider(), catalog, load_image)
    await controller.initialize()
    await controller.request_new_image()
    print(controller.snapshot().to_dict())
"""

from __future__ import annotations

import asyncio
import random
import time
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple

from .constants import DEFAULT_MODEL_NAME, MAX_DISPLAY_HEIGHT, MAX_DISPLAY_WIDTH
from .data_models import DisplayDimensions, ImageHandle, Prediction, SessionSnapshot
from .dimensions import resolve_display_size
from .errors import ClassificationError, ImageLoadError, InferBenchError, ModelLoadError
from .logging_utils import get_logger
from .timing import TimingAggregator

logger = get_logger(__name__)

ImageLoader = Callable[[str], Awaitable[ImageHandle]]


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    MODEL_LOADING = "model_loading"
    IDLE = "idle"
    IMAGE_LOADING = "image_loading"
    CLASSIFYING = "classifying"


class SessionController:
    def __init__(
        self,
        provider: Any,
        catalog: Sequence[str],
        image_loader: ImageLoader,
        model_name: str = DEFAULT_MODEL_NAME,
        max_width: int = MAX_DISPLAY_WIDTH,
        max_height: int = MAX_DISPLAY_HEIGHT,
        timings: Optional[TimingAggregator] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        if not catalog:
            raise ValueError("Image catalog is empty")

        self.provider = provider
        self.catalog: Tuple[str, ...] = tuple(catalog)
        self.image_loader = image_loader
        self.model_name = model_name
        self.max_width = max_width
        self.max_height = max_height
        self.timings = timings if timings is not None else TimingAggregator()
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock

        self.model: Any = None
        self.model_load_start = 0.0
        self.model_load_end = 0.0
        self._model_requested = False
        self._model_task: Optional["asyncio.Future[bool]"] = None

        # In-flight image cycle, None when idle
        self._phase: Optional[SessionState] = None

        self.image: Optional[ImageHandle] = None
        self.display_size: Optional[DisplayDimensions] = None
        self.predictions: List[Prediction] = []

        # Session counters
        self.attempts = 0
        self.inference_start = 0.0
        self.inference_end = 0.0
        self._measured = False

        self.error: Optional[InferBenchError] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def _now_ms(self) -> float:
        return self.clock() * 1000.0

    @property
    def state(self) -> SessionState:
        if self._phase is not None:
            return self._phase
        if self.model is None:
            return SessionState.MODEL_LOADING if self._model_requested else SessionState.UNINITIALIZED
        return SessionState.IDLE

    @property
    def model_ready(self) -> bool:
        return self.model is not None

    @property
    def busy(self) -> bool:
        return self._phase is not None

    @property
    def model_load_latency_ms(self) -> float:
        if self.model is None:
            return 0.0
        return self.model_load_end - self.model_load_start

    @property
    def last_inference_ms(self) -> float:
        if self._measured:
            return self.inference_end - self.inference_start
        return 0.0

    @property
    def average_inference_ms(self) -> float:
        return self.timings.average_ms(self.attempts)

    def _enter(self, phase: Optional[SessionState]) -> None:
        before = self.state
        self._phase = phase
        logger.debug("Session %s -> %s", before.value, self.state.value)

    # ------------------------------------------------------------------
    # Model
    # ------------------------------------------------------------------

    async def initialize(self) -> bool:
        """
        Load the model once. Returns True when the model is ready.

        A provider failure is stored as ModelLoadError on `self.error`
        and the session stays in MODEL_LOADING.
        Concurrent callers share the one in-flight load.
        """
        if self._model_requested:
            if self._model_task is not None and not self._model_task.done():
                return await asyncio.shield(self._model_task)
            return self.model is not None

        self._model_requested = True
        self.model_load_start = self._now_ms()
        self._model_task = asyncio.ensure_future(self._load_model())
        return await asyncio.shield(self._model_task)

    async def _load_model(self) -> bool:
        logger.info("Loading model %s", self.model_name)
        try:
            model = await self.provider.load(self.model_name)
        except Exception as exc:
            self.error = ModelLoadError(f"Could not load model {self.model_name}: {exc}")
            self.error.__cause__ = exc
            logger.warning("%s", self.error)
            return False

        self.model_load_end = self._now_ms()
        self.model = model
        logger.info("Model %s ready in %.2f ms", self.model_name, self.model_load_latency_ms)
        return True

    # ------------------------------------------------------------------
    # Image cycle
    # ------------------------------------------------------------------

    async def request_new_image(self) -> bool:
        """
        Pick a random locator and run one load → classify cycle.

        Returns False when the request was ignored because a cycle is already
        in flight, or when the cycle ended in a stored error.
        """
        if self._phase is not None:
            logger.debug("Ignoring image request while %s", self._phase.value)
            return False

        locator = self.rng.choice(self.catalog)
        # Counted on request, not on completion: the average divides by attempts.
        self.attempts += 1
        self._enter(SessionState.IMAGE_LOADING)
        try:
            image, size = await self._load(locator)
        except ImageLoadError as exc:
            self.error = exc
            logger.warning("Image load failed for %s: %s", locator, exc)
            self._enter(None)
            return False
        except BaseException:
            self._enter(None)
            raise

        self._on_image_loaded(image, size)
        return await self._classify()

    async def _load(self, locator: str) -> Tuple[ImageHandle, DisplayDimensions]:
        pending = asyncio.ensure_future(self._fetch(locator))
        size = await resolve_display_size(pending, self.max_width, self.max_height)
        return pending.result(), size

    async def _fetch(self, locator: str) -> ImageHandle:
        try:
            return await self.image_loader(locator)
        except ImageLoadError:
            raise
        except Exception as exc:
            raise ImageLoadError(f"Could not read image {locator}: {exc}") from exc

    def _on_image_loaded(self, image: ImageHandle, size: DisplayDimensions) -> None:
        self.image = image
        self.display_size = size
        self.inference_start = 0.0
        self.inference_end = 0.0
        self._measured = False
        self.error = None
        logger.debug("Loaded %s (%dx%d) -> display %dx%d", image.locator,
                     image.natural_width, image.natural_height, size.width, size.height)
        self._enter(SessionState.CLASSIFYING)

    async def _classify(self) -> bool:
        if self.model is None or self.image is None:
            # User action raced ahead of the model load.
            self._enter(None)
            return False

        image = self.image
        self.inference_start = self._now_ms()
        try:
            predictions = await self.model.classify(image)
        except Exception as exc:
            self.error = ClassificationError(f"Classification failed for {image.locator}: {exc}")
            self.error.__cause__ = exc
            logger.warning("%s", self.error)
            self._enter(None)
            return False

        self.inference_end = self._now_ms()
        self._measured = True
        self.predictions = list(predictions)
        self.timings.record(image.locator, self.last_inference_ms)
        logger.info("Classified %s in %.2f ms (avg %.2f ms over %d attempts)",
                    image.locator, self.last_inference_ms, self.average_inference_ms, self.attempts)
        self._enter(None)
        return True

    # ------------------------------------------------------------------
    # Display surface
    # ------------------------------------------------------------------

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.state.value,
            model_ready=self.model_ready,
            model_load_latency_ms=self.model_load_latency_ms,
            current_image=None if self.image is None else self.image.locator,
            display_size=self.display_size,
            predictions=tuple(self.predictions),
            last_inference_ms=self.last_inference_ms,
            average_inference_ms=self.average_inference_ms,
            attempts=self.attempts,
            error=None if self.error is None else str(self.error),
        )
