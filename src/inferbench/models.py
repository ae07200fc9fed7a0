"""
Torchvision classifier architectures supported by the benchmark.

Used by:
- the model provider (inferbench.vision)
"""

from __future__ import annotations

from typing import List, Optional

import torch.nn as nn
from torchvision import models

# Common image size + normalization (ImageNet)
IMG_SIZE = 224
IMAGENET_MEAN = [0.485, 0.456, 0.406]
IMAGENET_STD = [0.229, 0.224, 0.225]

_WEIGHTS = {
    "mobilenet_v2": models.MobileNet_V2_Weights.IMAGENET1K_V1,
    "mobilenet_v3_small": models.MobileNet_V3_Small_Weights.IMAGENET1K_V1,
    "mobilenet_v3_large": models.MobileNet_V3_Large_Weights.IMAGENET1K_V1,
    "resnet18": models.ResNet18_Weights.IMAGENET1K_V1,
    "resnet50": models.ResNet50_Weights.IMAGENET1K_V2,
}

SUPPORTED_MODELS = tuple(_WEIGHTS)


def imagenet_categories(name: str) -> List[str]:
    """ImageNet label names bundled with the torchvision weights (no download)."""
    name = name.lower()
    if name not in _WEIGHTS:
        raise ValueError(f"Unsupported model: {name} (expected one of {SUPPORTED_MODELS})")
    return list(_WEIGHTS[name].meta["categories"])


def _replace_last_linear(seq: nn.Sequential, num_classes: int) -> None:
    for i in reversed(range(len(seq))):
        if isinstance(seq[i], nn.Linear):
            seq[i] = nn.Linear(seq[i].in_features, num_classes)
            return
    raise ValueError("Unexpected classifier structure.")


def make_model(name: str, pretrained: bool = True, num_classes: Optional[int] = None) -> nn.Module:
    """
    Build a Torchvision classifier.

    With num_classes=None the ImageNet head is kept; otherwise the final
    layer is replaced so a fine-tuned checkpoint can be loaded into it.
    """
    name = name.lower()
    if name not in _WEIGHTS:
        raise ValueError(f"Unsupported model: {name} (expected one of {SUPPORTED_MODELS})")

    ctor = getattr(models, name)
    m = ctor(weights=_WEIGHTS[name] if pretrained else None)

    if num_classes is None:
        return m

    # --- ResNet family ---
    if name.startswith("resnet"):
        m.fc = nn.Linear(m.fc.in_features, num_classes)
        return m

    # --- MobileNet family ---
    _replace_last_linear(m.classifier, num_classes)
    return m
