from __future__ import annotations

import logging
from typing import Dict, Iterator, Optional, Sequence, Tuple

from poseoverlay.core.constants import (
    CONNECTED_PART_NAMES,
    CONNECTED_SURFACE_NAMES,
    part_key,
)
from poseoverlay.core.keypoints import Keypoint, index_keypoints

logger = logging.getLogger(__name__)


def _resolve(
    indexed: Dict[str, Keypoint], names: Sequence, min_confidence: float
) -> Optional[Tuple[Keypoint, ...]]:
    resolved = []
    for name in names:
        keypoint = indexed.get(part_key(name))
        if keypoint is None:
            logger.debug(
                "skipping %s: no keypoint for %s",
                "_".join(part_key(n) for n in names),
                part_key(name),
            )
            return None
        if keypoint.score < min_confidence:
            return None
        resolved.append(keypoint)
    return tuple(resolved)


def filter_bones(
    keypoints: Sequence[Keypoint],
    min_confidence: float,
    pairs: Sequence = CONNECTED_PART_NAMES,
) -> Iterator[Tuple[Keypoint, Keypoint]]:
    """Yield (A, B) keypoints for every bone whose endpoints both pass min_confidence."""
    indexed = index_keypoints(keypoints)
    for pair in pairs:
        resolved = _resolve(indexed, pair, min_confidence)
        if resolved is not None:
            yield resolved


def filter_surfaces(
    keypoints: Sequence[Keypoint],
    min_confidence: float,
    quads: Sequence = CONNECTED_SURFACE_NAMES,
) -> Iterator[Tuple[Keypoint, Keypoint, Keypoint, Keypoint]]:
    """Yield (A, B, C, D) keypoints for every surface whose corners all pass min_confidence."""
    indexed = index_keypoints(keypoints)
    for quad in quads:
        resolved = _resolve(indexed, quad, min_confidence)
        if resolved is not None:
            yield resolved
