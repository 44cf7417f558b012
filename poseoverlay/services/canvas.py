from __future__ import annotations

import inspect
from typing import Awaitable, Callable, Sequence, Union

import cv2
import numpy as np

from poseoverlay.core.errors import MalformedInputError
from poseoverlay.core.surfaces import DrawingSurface

PixelSource = Union[np.ndarray, Awaitable[np.ndarray], Callable[[], Awaitable[np.ndarray]]]


async def _read_pixels(source: PixelSource) -> np.ndarray:
    if inspect.iscoroutinefunction(source):
        return await source()
    if inspect.isawaitable(source):
        return await source
    return np.asarray(source)


def rgb_to_rgba(pixels: np.ndarray) -> np.ndarray:
    data = np.asarray(pixels)
    if data.ndim != 3 or data.shape[2] != 3:
        raise MalformedInputError(f"expected [H, W, 3] pixels, got {data.shape}")
    height, width = data.shape[:2]
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[:, :, :3] = np.clip(data, 0, 255).astype(np.uint8)
    rgba[:, :, 3] = 255
    return rgba


async def render_to_canvas(pixels: PixelSource, surface: DrawingSurface) -> np.ndarray:
    """Publish an RGB pixel buffer to the surface once its readback completes.

    pixels may be an array, an awaitable resolving to one, or a coroutine
    function producing one. Returns the RGBA buffer that was published.
    """
    data = await _read_pixels(pixels)
    rgba = rgb_to_rgba(data)
    surface.put_image_data(rgba, 0, 0)
    return rgba


def render_image_to_canvas(
    image: np.ndarray, size: Sequence[int], surface: DrawingSurface
) -> None:
    """Resize the surface to size = (width, height) and draw a BGR/BGRA image at the origin."""
    width, height = int(size[0]), int(size[1])
    surface.resize(width, height)
    img = np.asarray(image, dtype=np.uint8)
    if img.ndim == 2:
        rgba = cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    elif img.shape[2] == 3:
        rgba = cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)
    else:
        rgba = cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    surface.put_image_data(rgba, 0, 0)
