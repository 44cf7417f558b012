from __future__ import annotations

import numpy as np

from poseoverlay.core.errors import MalformedInputError


def argmax_2d(scores: np.ndarray) -> np.ndarray:
    """Per-part (y, x) grid coordinates of the heatmap maximum.

    scores has shape [height, width, num_parts]; the result is an int32
    array of shape [num_parts, 2].
    """
    arr = np.asarray(scores)
    if arr.ndim != 3:
        raise MalformedInputError(f"heatmap must be 3-D, got shape {arr.shape}")
    height, width, depth = arr.shape
    flat = arr.reshape(height * width, depth)
    idx = np.argmax(flat, axis=0)
    ys = idx // width
    xs = idx % width
    return np.stack([ys, xs], axis=1).astype(np.int32)


def get_offset_vectors(heatmap_coords: np.ndarray, offsets: np.ndarray) -> np.ndarray:
    """Offset (dy, dx) at each heatmap coordinate.

    offsets has shape [height, width, 2 * num_parts]: channel k holds the y
    offset of part k and channel k + num_parts its x offset.
    """
    coords = np.asarray(heatmap_coords, dtype=np.int64)
    off = np.asarray(offsets, dtype=np.float64)
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise MalformedInputError(f"heatmap coordinates must be [N, 2], got {coords.shape}")
    num_parts = coords.shape[0]
    if off.ndim != 3 or off.shape[2] != 2 * num_parts:
        raise MalformedInputError(
            f"offsets must be [H, W, {2 * num_parts}], got {off.shape}"
        )
    height, width = off.shape[:2]
    ys, xs = coords[:, 0], coords[:, 1]
    outside = (ys < 0) | (ys >= height) | (xs < 0) | (xs >= width)
    if np.any(outside):
        raise MalformedInputError(
            f"heatmap coordinates {coords[outside].tolist()} fall outside a {height}x{width} grid"
        )
    parts = np.arange(num_parts)
    dy = off[ys, xs, parts]
    dx = off[ys, xs, parts + num_parts]
    return np.stack([dy, dx], axis=1)


def get_offset_points(
    heatmap_coords: np.ndarray, output_stride: int, offsets: np.ndarray
) -> np.ndarray:
    """Image-space (y, x) of each part: stride-scaled grid cell plus its offset."""
    coords = np.asarray(heatmap_coords, dtype=np.float64)
    return coords * float(output_stride) + get_offset_vectors(heatmap_coords, offsets)
