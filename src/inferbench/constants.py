"""
Global constants for the inferbench package.
"""

from pathlib import Path
import os

import torch

# Directories
CONFIGS_DIR = Path(os.getenv("INFERBENCH_CONFIGS_DIR", "configs")).resolve()
DATA_DIR = Path(os.getenv("INFERBENCH_DATA_DIR", "data")).resolve()

# Device
DEVICE = torch.device(os.getenv("INFERBENCH_DEVICE", "cuda" if torch.cuda.is_available() else "cpu"))

# Defaults
DEFAULT_CONFIG_PATH = Path(os.getenv("INFERBENCH_DEFAULT_CONFIG", CONFIGS_DIR / "default.yaml")).resolve()
DEFAULT_CATALOG_PATH = Path(os.getenv("INFERBENCH_CATALOG", DATA_DIR / "images")).resolve()
DEFAULT_MODEL_NAME = os.getenv("INFERBENCH_MODEL", "mobilenet_v2")

# Display box of the benchmark page (px)
MAX_DISPLAY_WIDTH = 600
MAX_DISPLAY_HEIGHT = 600

# Number of labels returned per classification
DEFAULT_TOP_K = 3

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp")
