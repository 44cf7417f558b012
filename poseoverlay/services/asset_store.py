from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

import cv2
import numpy as np

from poseoverlay.models.config import AssetConfig

logger = logging.getLogger(__name__)


class AssetStore:
    """Resolves image identifiers such as "rightForearm.png" to RGBA pixels."""

    def __init__(self, cfg: AssetConfig):
        self.root = Path(cfg.directory)
        self.cache_images = cfg.cache_images
        self._cache: Dict[str, Optional[np.ndarray]] = {}

    def path_for(self, image_id: str) -> Path:
        return self.root / image_id

    def register(self, image_id: str, rgba: np.ndarray) -> None:
        data = np.asarray(rgba, dtype=np.uint8)
        if data.ndim != 3 or data.shape[2] != 4:
            raise ValueError(f"expected [H, W, 4] pixels for {image_id}, got {data.shape}")
        self._cache[image_id] = data

    def load(self, image_id: str) -> Optional[np.ndarray]:
        if image_id in self._cache:
            return self._cache[image_id]
        image = self._read(self.path_for(image_id))
        if image is None:
            logger.warning("asset %s not found under %s", image_id, self.root)
        if self.cache_images:
            self._cache[image_id] = image
        return image

    @staticmethod
    def _read(path: Path) -> Optional[np.ndarray]:
        if not path.exists():
            return None
        raw = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if raw is None:
            return None
        if raw.ndim == 2:
            return cv2.cvtColor(raw, cv2.COLOR_GRAY2RGBA)
        if raw.shape[2] == 3:
            return cv2.cvtColor(raw, cv2.COLOR_BGR2RGBA)
        return cv2.cvtColor(raw, cv2.COLOR_BGRA2RGBA)

    def clear(self) -> None:
        self._cache.clear()
