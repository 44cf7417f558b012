from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from poseoverlay.core.colors import parse_color


class OverlayConfig(BaseModel):
    point_color: str = "aqua"
    point_radius: float = 3.0
    bounding_box_color: str = "red"
    bounding_box_stroke_width: float = 4.0
    bounding_box_respects_confidence: bool = False
    offset_vector_color: str = "aqua"
    offset_vector_width: float = 2.0
    heatmap_radius: float = 5.0
    missing_asset: str = "missing.png"
    head_marker: str = "head"
    torso_marker: str = "torso"
    min_part_confidence: float = 0.1
    min_pose_confidence: float = 0.15
    show_points: bool = True
    show_skeleton: bool = True
    show_surfaces: bool = True
    show_bounding_box: bool = False

    @field_validator("point_color", "bounding_box_color", "offset_vector_color")
    @classmethod
    def _validate_color(cls, value: str) -> str:
        parse_color(value)
        return value

    @field_validator("min_part_confidence", "min_pose_confidence")
    @classmethod
    def _validate_confidence(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError("confidence thresholds must be within [0, 1]")
        return value

    @field_validator(
        "point_radius",
        "heatmap_radius",
        "bounding_box_stroke_width",
        "offset_vector_width",
    )
    @classmethod
    def _validate_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("sizes must be positive")
        return value


class AssetConfig(BaseModel):
    directory: str = "skeletonImages"
    cache_images: bool = True


class CanvasConfig(BaseModel):
    width: int = 640
    height: int = 480
    background: str = "transparent"

    @field_validator("width", "height")
    @classmethod
    def _validate_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("canvas size must be positive")
        return value

    @field_validator("background")
    @classmethod
    def _validate_background(cls, value: str) -> str:
        parse_color(value)
        return value


class AppConfig(BaseModel):
    overlay: OverlayConfig = Field(default_factory=OverlayConfig)
    assets: AssetConfig = Field(default_factory=AssetConfig)
    canvas: CanvasConfig = Field(default_factory=CanvasConfig)

    def asset_path(self) -> Path:
        return Path(self.assets.directory)


class ConfigUpdate(BaseModel):
    overlay: Optional[OverlayConfig] = None
    assets: Optional[AssetConfig] = None
    canvas: Optional[CanvasConfig] = None
