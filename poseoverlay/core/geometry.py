from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from poseoverlay.core.keypoints import Position
from poseoverlay.core.render_info import RenderInfo


@dataclass(frozen=True)
class ImageTransform:
    anchor: Position
    scale_x: float
    scale_y: float
    angle_deg: float
    origin: Tuple[float, float]
    size: Tuple[float, float]

    def matrix(self) -> np.ndarray:
        """2x3 affine mapping image pixel (u, v) to surface (x, y).

        Same composition as the SVG transform
        translate(anchor) rotate(angle) scale(sx sy), with the image placed
        at origin in the local frame.
        """
        theta = math.radians(self.angle_deg)
        cos_t = math.cos(theta)
        sin_t = math.sin(theta)
        sx = self.scale_x
        sy = self.scale_y
        ox, oy = self.origin
        a = cos_t * sx
        b = -sin_t * sy
        c = sin_t * sx
        d = cos_t * sy
        tx = self.anchor.x + a * ox + b * oy
        ty = self.anchor.y + c * ox + d * oy
        return np.array([[a, b, tx], [c, d, ty]], dtype=np.float64)


def _vec(a: Position, b: Position) -> np.ndarray:
    # (x, y) from a to b
    return np.array([b.x - a.x, b.y - a.y], dtype=np.float64)


def _midpoint(a: Position, b: Position) -> np.ndarray:
    return np.array([(a.x + b.x) / 2.0, (a.y + b.y) / 2.0], dtype=np.float64)


def distance(a: Position, b: Position) -> float:
    return float(np.linalg.norm(_vec(a, b)))


def bone_transform(a: Position, b: Position, info: RenderInfo) -> ImageTransform:
    scale = distance(a, b) / info.nominal_height
    # Limb art points up, so rotate by -90 to lay it along A->B.
    angle = math.degrees(math.atan2(b.y - a.y, b.x - a.x)) - 90.0
    return ImageTransform(
        anchor=a,
        scale_x=scale,
        scale_y=scale,
        angle_deg=angle,
        origin=(info.x, info.y),
        size=(info.width, info.height),
    )


def surface_transform(
    a: Position, b: Position, c: Position, d: Position, info: RenderInfo
) -> ImageTransform:
    left = _vec(a, b)
    down = _midpoint(a, b) - _midpoint(c, d)
    scale_x = float(np.linalg.norm(left)) / info.nominal_width
    scale_y = float(np.linalg.norm(down)) / info.nominal_height
    cross = left[0] * down[1] - left[1] * down[0]
    if cross > 0:
        scale_y = -scale_y
    angle = math.degrees(math.atan2(left[1], left[0]))
    return ImageTransform(
        anchor=a,
        scale_x=scale_x,
        scale_y=scale_y,
        angle_deg=angle,
        origin=(info.x, info.y),
        size=(info.width, info.height),
    )


def head_score(a: Position, b: Position, info: RenderInfo) -> float:
    return distance(a, b) * info.strength
