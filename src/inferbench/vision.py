"""
Model provider for the benchmark session.

Exposes the two-step contract the session controller relies on:

    provider = TorchvisionProvider(top_k=3)
    model = await provider.load("mobilenet_v2")
    predictions = await model.classify(image_handle)

Both steps run the blocking torch work on a worker thread so the event loop
stays responsive. A fine-tuned checkpoint can replace the ImageNet head:

    TorchvisionProvider(checkpoint="artifacts/best.pth", classes="artifacts/classes.txt")
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional, Union

import numpy as np
import torch
import torch.nn as nn
from torchvision import transforms

from .constants import DEFAULT_TOP_K, DEVICE
from .data_models import ImageHandle, Prediction
from .io_utils import load_classes_txt
from .logging_utils import get_logger
from .models import IMAGENET_MEAN, IMAGENET_STD, IMG_SIZE, imagenet_categories, make_model

logger = get_logger(__name__)

# ============================================================
# Torchvision transforms
# ============================================================

eval_tfms = transforms.Compose([
    transforms.Resize(int(IMG_SIZE * 1.14)),
    transforms.CenterCrop(IMG_SIZE),
    transforms.ToTensor(),
    transforms.Normalize(IMAGENET_MEAN, IMAGENET_STD),
])


class TorchvisionClassifier:
    """A loaded model plus its label vocabulary. Read-only after construction."""

    def __init__(self, model: nn.Module, classes: List[str], top_k: int = DEFAULT_TOP_K,
                 device: Union[str, torch.device] = DEVICE) -> None:
        self.model = model.to(device).eval()
        self.classes = classes
        self.top_k = max(1, min(top_k, len(classes)))
        self.device = device

    def predict(self, image: ImageHandle) -> List[Prediction]:
        """Blocking top-k classification of one image."""
        if image.pixels is None:
            raise ValueError(f"Image {image.locator} has no pixel data")

        x = eval_tfms(image.pixels.convert("RGB")).unsqueeze(0).to(self.device)
        with torch.no_grad():
            logits = self.model(x)

        probs = torch.softmax(logits, dim=1)[0].cpu().numpy()
        top_idx = np.argsort(probs)[::-1][: self.top_k]
        return [
            Prediction(label=self.classes[i] if i < len(self.classes) else f"class_{i}",
                       confidence=float(probs[i]))
            for i in top_idx
        ]

    async def classify(self, image: ImageHandle) -> List[Prediction]:
        return await asyncio.to_thread(self.predict, image)


class TorchvisionProvider:
    def __init__(
        self,
        pretrained: bool = True,
        checkpoint: Optional[Union[str, Path]] = None,
        classes: Optional[Union[str, Path]] = None,
        top_k: int = DEFAULT_TOP_K,
        device: Union[str, torch.device] = DEVICE,
    ) -> None:
        if checkpoint is not None and classes is None:
            raise ValueError("A checkpoint needs a classes.txt to name its outputs")
        self.pretrained = pretrained
        self.checkpoint = Path(checkpoint) if checkpoint is not None else None
        self.classes = Path(classes) if classes is not None else None
        self.top_k = top_k
        self.device = device

    def build(self, name: str) -> TorchvisionClassifier:
        """Blocking construction of the classifier (may download weights)."""
        if self.checkpoint is None:
            model = make_model(name, pretrained=self.pretrained)
            classes = imagenet_categories(name)
        else:
            if not self.checkpoint.is_file():
                raise FileNotFoundError(f"Missing checkpoint: {self.checkpoint}")
            classes = load_classes_txt(self.classes)
            model = make_model(name, pretrained=False, num_classes=len(classes))
            sd = torch.load(self.checkpoint, map_location=self.device)
            model.load_state_dict(sd, strict=True)

        logger.info("Built %s (%d classes) on %s", name, len(classes), self.device)
        return TorchvisionClassifier(model, classes, top_k=self.top_k, device=self.device)

    async def load(self, name: str) -> TorchvisionClassifier:
        return await asyncio.to_thread(self.build, name)
