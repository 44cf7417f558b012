from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

import numpy as np

from poseoverlay.core.adjacency import filter_bones, filter_surfaces
from poseoverlay.core.constants import CONNECTED_PART_NAMES, CONNECTED_SURFACE_NAMES
from poseoverlay.core.geometry import (
    ImageTransform,
    bone_transform,
    head_score,
    surface_transform,
)
from poseoverlay.core.heatmap import get_offset_points
from poseoverlay.core.keypoints import (
    Keypoint,
    Pose,
    Position,
    get_bounding_box,
    validate_keypoint,
)
from poseoverlay.core.render_info import (
    BONE_RENDER_INFO,
    SURFACE_RENDER_INFO,
    RenderInfo,
    RenderInfoLookup,
    key_name,
    lookup_render_info,
    missing_render_info,
)
from poseoverlay.core.surfaces import DrawingSurface
from poseoverlay.models.config import OverlayConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    lookup: RenderInfoLookup
    keypoints: Tuple[Keypoint, ...]
    transform: ImageTransform
    score: float = 0.0


class OverlayRenderer:
    """Turns a person's keypoints into draw calls on a DrawingSurface.

    The renderer holds configuration and read-only tables only; nothing is
    carried from one render pass to the next.
    """

    def __init__(
        self,
        cfg: Optional[OverlayConfig] = None,
        bone_table: Dict[tuple, RenderInfo] = BONE_RENDER_INFO,
        surface_table: Dict[tuple, RenderInfo] = SURFACE_RENDER_INFO,
        bone_pairs: Sequence = CONNECTED_PART_NAMES,
        surface_quads: Sequence = CONNECTED_SURFACE_NAMES,
    ):
        self.cfg = cfg or OverlayConfig()
        self.bone_table = bone_table
        self.surface_table = surface_table
        self.bone_pairs = bone_pairs
        self.surface_quads = surface_quads
        self.missing = missing_render_info(self.cfg.missing_asset)

    def _lookup(
        self, keypoints: Sequence[Keypoint], table: Dict[tuple, RenderInfo], warned: Set[str]
    ) -> RenderInfoLookup:
        lookup = lookup_render_info([kp.part for kp in keypoints], table, self.missing)
        if not lookup.resolved:
            name = key_name(lookup.key)
            if name not in warned:
                logger.warning("missed adjacency name = %s", name)
                warned.add(name)
        return lookup

    @staticmethod
    def _position(keypoint: Keypoint, scale: float) -> Position:
        return keypoint.position.scaled(scale)

    def draw_keypoints(
        self,
        keypoints: Iterable[Keypoint],
        min_confidence: float,
        surface: DrawingSurface,
        scale: float = 1.0,
    ) -> None:
        checked = [validate_keypoint(kp) for kp in keypoints]
        for keypoint in checked:
            if keypoint.score < min_confidence:
                continue
            surface.draw_circle(
                self._position(keypoint, scale), self.cfg.point_radius, self.cfg.point_color
            )

    def bone_placements(
        self, keypoints: Sequence[Keypoint], min_confidence: float, scale: float = 1.0
    ) -> List[Placement]:
        warned: Set[str] = set()
        placements: List[Placement] = []
        for pair in filter_bones(keypoints, min_confidence, self.bone_pairs):
            lookup = self._lookup(pair, self.bone_table, warned)
            a, b = (self._position(kp, scale) for kp in pair)
            placements.append(Placement(lookup, pair, bone_transform(a, b, lookup.info)))
        return placements

    def draw_skeleton(
        self,
        keypoints: Sequence[Keypoint],
        min_confidence: float,
        surface: DrawingSurface,
        scale: float = 1.0,
    ) -> None:
        for placement in self.bone_placements(keypoints, min_confidence, scale):
            surface.draw_oriented_image(placement.transform, placement.lookup.info.image)

    def surface_placements(
        self, keypoints: Sequence[Keypoint], min_confidence: float, scale: float = 1.0
    ) -> List[Placement]:
        """Surfaces to draw, in draw order.

        At most one torso (first match by name) and one head (highest
        span * strength) are kept; the two choices are independent. Quads
        with no table entry are kept as placeholders and never compete for
        the head slot.
        """
        warned: Set[str] = set()
        torso: Optional[Placement] = None
        head: Optional[Placement] = None
        others: List[Placement] = []
        placeholders: List[Placement] = []

        for quad in filter_surfaces(keypoints, min_confidence, self.surface_quads):
            lookup = self._lookup(quad, self.surface_table, warned)
            a, b, c, d = (self._position(kp, scale) for kp in quad)
            info = lookup.info
            placement = Placement(
                lookup, quad, surface_transform(a, b, c, d, info), head_score(a, b, info)
            )
            if not lookup.resolved:
                placeholders.append(placement)
            elif self.cfg.torso_marker in info.name:
                if torso is None:
                    torso = placement
            elif self.cfg.head_marker in info.name:
                if head is None or placement.score > head.score:
                    head = placement
            else:
                others.append(placement)

        ordered = [p for p in (torso, head) if p is not None]
        return ordered + others + placeholders

    def draw_surfaces(
        self,
        keypoints: Sequence[Keypoint],
        min_confidence: float,
        surface: DrawingSurface,
        scale: float = 1.0,
    ) -> None:
        for placement in self.surface_placements(keypoints, min_confidence, scale):
            surface.draw_oriented_image(placement.transform, placement.lookup.info.image)

    def draw_bounding_box(
        self,
        keypoints: Sequence[Keypoint],
        surface: DrawingSurface,
        min_confidence: Optional[float] = None,
        scale: float = 1.0,
    ) -> None:
        threshold = min_confidence if self.cfg.bounding_box_respects_confidence else None
        box = get_bounding_box(keypoints, threshold)
        if box is None:
            return
        surface.draw_polygon_outline(
            [corner.scaled(scale) for corner in box.corners()],
            self.cfg.bounding_box_color,
            fill="transparent",
            stroke_width=self.cfg.bounding_box_stroke_width,
        )

    def draw_heatmap_values(
        self, heatmap_coords: np.ndarray, output_stride: int, surface: DrawingSurface
    ) -> None:
        scaled = np.asarray(heatmap_coords, dtype=np.float64).reshape(-1, 2) * float(output_stride)
        for y, x in scaled:
            if x != 0 and y != 0:
                surface.draw_circle(
                    Position(float(y), float(x)), self.cfg.heatmap_radius, self.cfg.point_color
                )

    def draw_offset_vectors(
        self,
        heatmap_coords: np.ndarray,
        offsets: np.ndarray,
        output_stride: int,
        surface: DrawingSurface,
        scale: float = 1.0,
    ) -> None:
        coords = np.asarray(heatmap_coords, dtype=np.float64)
        offset_points = get_offset_points(heatmap_coords, output_stride, offsets)
        starts = coords * float(output_stride)
        for (sy, sx), (ey, ex) in zip(starts, offset_points):
            surface.draw_line(
                Position(float(sy) * scale, float(sx) * scale),
                Position(float(ey) * scale, float(ex) * scale),
                self.cfg.offset_vector_color,
                self.cfg.offset_vector_width,
            )

    def render_poses(
        self, poses: Iterable[Pose], surface: DrawingSurface, scale: float = 1.0
    ) -> int:
        """Draw every pose above min_pose_confidence; returns how many were drawn."""
        cfg = self.cfg
        drawn = 0
        for pose in poses:
            if pose.score < cfg.min_pose_confidence:
                continue
            if cfg.show_surfaces:
                self.draw_surfaces(pose.keypoints, cfg.min_part_confidence, surface, scale)
            if cfg.show_skeleton:
                self.draw_skeleton(pose.keypoints, cfg.min_part_confidence, surface, scale)
            if cfg.show_points:
                self.draw_keypoints(pose.keypoints, cfg.min_part_confidence, surface, scale)
            if cfg.show_bounding_box:
                self.draw_bounding_box(pose.keypoints, surface, cfg.min_part_confidence, scale)
            drawn += 1
        return drawn
