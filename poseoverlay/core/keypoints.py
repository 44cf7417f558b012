from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from poseoverlay.core.constants import NUM_KEYPOINTS, PART_NAMES, part_index, part_key
from poseoverlay.core.errors import MalformedInputError


@dataclass(frozen=True)
class Position:
    y: float
    x: float

    def scaled(self, scale: float) -> "Position":
        return Position(self.y * scale, self.x * scale)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.y, self.x)


@dataclass(frozen=True)
class Keypoint:
    part: str
    score: float
    position: Position


@dataclass(frozen=True)
class Pose:
    score: float
    keypoints: List[Keypoint] = field(default_factory=list)


@dataclass(frozen=True)
class BoundingBox:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def corners(self) -> List[Position]:
        return [
            Position(self.min_y, self.min_x),
            Position(self.min_y, self.max_x),
            Position(self.max_y, self.max_x),
            Position(self.max_y, self.min_x),
        ]


def validate_keypoint(keypoint: Keypoint) -> Keypoint:
    score = float(keypoint.score)
    if not 0.0 <= score <= 1.0:
        raise MalformedInputError(
            f"score {score} for {part_key(keypoint.part)} is outside [0, 1]"
        )
    pos = keypoint.position
    if not (math.isfinite(float(pos.x)) and math.isfinite(float(pos.y))):
        raise MalformedInputError(f"non-finite position for {part_key(keypoint.part)}")
    return keypoint


def index_keypoints(keypoints: Iterable[Keypoint]) -> Dict[str, Keypoint]:
    """Map part name to keypoint, validating scores and positions.

    Unknown part names raise PartLookupError; duplicates keep the last entry.
    """
    indexed: Dict[str, Keypoint] = {}
    for keypoint in keypoints:
        validate_keypoint(keypoint)
        part_index(keypoint.part)
        indexed[part_key(keypoint.part)] = keypoint
    return indexed


def keypoints_from_array(data: np.ndarray) -> List[Keypoint]:
    """Build keypoints from a (17, 3) array of y, x, score rows."""
    arr = np.asarray(data, dtype=np.float64)
    if arr.shape != (NUM_KEYPOINTS, 3):
        raise MalformedInputError(
            f"expected keypoint array of shape ({NUM_KEYPOINTS}, 3), got {arr.shape}"
        )
    return [
        validate_keypoint(
            Keypoint(
                part=name,
                score=float(row[2]),
                position=Position(float(row[0]), float(row[1])),
            )
        )
        for name, row in zip(PART_NAMES, arr)
    ]


def keypoints_from_joints(joints: Dict[int, Tuple[float, float, float]]) -> List[Keypoint]:
    """Convert detector output keyed by joint index, as (x, y, confidence).

    Joints the detector dropped are left out; the adjacency filter skips them.
    """
    out: List[Keypoint] = []
    for joint_idx in sorted(joints):
        if not 0 <= int(joint_idx) < NUM_KEYPOINTS:
            raise MalformedInputError(f"joint index {joint_idx} out of range")
        x, y, conf = joints[joint_idx]
        out.append(
            validate_keypoint(
                Keypoint(
                    part=PART_NAMES[int(joint_idx)],
                    score=float(conf),
                    position=Position(float(y), float(x)),
                )
            )
        )
    return out


def get_bounding_box(
    keypoints: Sequence[Keypoint], min_confidence: Optional[float] = None
) -> Optional[BoundingBox]:
    points = [
        kp.position
        for kp in map(validate_keypoint, keypoints)
        if min_confidence is None or kp.score >= min_confidence
    ]
    if not points:
        return None
    xs = [float(p.x) for p in points]
    ys = [float(p.y) for p in points]
    return BoundingBox(min_x=min(xs), min_y=min(ys), max_x=max(xs), max_y=max(ys))
