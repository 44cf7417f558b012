from __future__ import annotations

import base64
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Set, Tuple

import cv2
import numpy as np

from poseoverlay.core.colors import parse_color
from poseoverlay.core.geometry import ImageTransform
from poseoverlay.core.keypoints import Position

logger = logging.getLogger(__name__)


class DrawingSurface(Protocol):
    def draw_circle(self, center: Position, radius: float, color: str) -> None: ...

    def draw_oriented_image(self, transform: ImageTransform, image_id: str) -> None: ...

    def draw_polygon_outline(
        self,
        vertices: Sequence[Position],
        stroke_color: str,
        fill: str = "transparent",
        stroke_width: float = 1.0,
    ) -> None: ...

    def draw_line(self, start: Position, end: Position, color: str, width: float = 1.0) -> None: ...

    def put_image_data(self, rgba: np.ndarray, y: int = 0, x: int = 0) -> None: ...

    def resize(self, width: int, height: int) -> None: ...

    def clear(self) -> None: ...


def _fmt(value: float) -> str:
    return f"{float(value):.3f}".rstrip("0").rstrip(".")


class SvgSurface:
    """Collects overlay elements into an SVG document.

    Every drawn element carries the overlay_item class so clear() can drop a
    frame's overlay while keeping any background image.
    """

    OVERLAY_CLASS = "overlay_item"

    def __init__(self, width: int, height: int, asset_prefix: str = "skeletonImages/"):
        self.width = int(width)
        self.height = int(height)
        self.asset_prefix = asset_prefix
        self.elements: List[ET.Element] = []

    def _append(self, tag: str, **attrs) -> ET.Element:
        # stroke_width -> stroke-width, xlink__href -> xlink:href
        names = {k: k.replace("__", ":").replace("_", "-") for k in attrs}
        element = ET.Element(tag, {names[k]: str(v) for k, v in attrs.items()})
        element.set("class", self.OVERLAY_CLASS)
        self.elements.append(element)
        return element

    def draw_circle(self, center: Position, radius: float, color: str) -> None:
        self._append("circle", cx=_fmt(center.x), cy=_fmt(center.y), r=_fmt(radius), fill=color)

    def draw_oriented_image(self, transform: ImageTransform, image_id: str) -> None:
        ox, oy = transform.origin
        width, height = transform.size
        self._append(
            "image",
            x=_fmt(ox),
            y=_fmt(oy),
            width=_fmt(width),
            height=_fmt(height),
            xlink__href=f"{self.asset_prefix}{image_id}",
            transform=(
                f"translate({_fmt(transform.anchor.x)} {_fmt(transform.anchor.y)}) "
                f"rotate({_fmt(transform.angle_deg)}) "
                f"scale({_fmt(transform.scale_x)} {_fmt(transform.scale_y)})"
            ),
        )

    def draw_polygon_outline(
        self,
        vertices: Sequence[Position],
        stroke_color: str,
        fill: str = "transparent",
        stroke_width: float = 1.0,
    ) -> None:
        if not vertices:
            return
        head, *rest = vertices
        path = f"M{_fmt(head.x)} {_fmt(head.y)}"
        for vertex in rest:
            path += f" L{_fmt(vertex.x)} {_fmt(vertex.y)}"
        path += " Z"
        self._append(
            "path", d=path, stroke=stroke_color, fill=fill, stroke_width=_fmt(stroke_width)
        )

    def draw_line(self, start: Position, end: Position, color: str, width: float = 1.0) -> None:
        self._append(
            "line",
            x1=_fmt(start.x),
            y1=_fmt(start.y),
            x2=_fmt(end.x),
            y2=_fmt(end.y),
            stroke=color,
            stroke_width=_fmt(width),
        )

    def put_image_data(self, rgba: np.ndarray, y: int = 0, x: int = 0) -> None:
        bgra = cv2.cvtColor(np.ascontiguousarray(rgba, dtype=np.uint8), cv2.COLOR_RGBA2BGRA)
        ok, encoded = cv2.imencode(".png", bgra)
        if not ok:
            raise ValueError("failed to encode pixel buffer as PNG")
        height, width = rgba.shape[:2]
        element = ET.Element(
            "image",
            {
                "x": str(int(x)),
                "y": str(int(y)),
                "width": str(width),
                "height": str(height),
                "xlink:href": "data:image/png;base64,"
                + base64.b64encode(encoded.tobytes()).decode("ascii"),
            },
        )
        # Background pixels sit under the overlay and survive clear().
        self.elements.insert(0, element)

    def resize(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)

    def clear(self) -> None:
        self.elements = [e for e in self.elements if e.get("class") != self.OVERLAY_CLASS]

    def overlay_items(self) -> List[ET.Element]:
        return [e for e in self.elements if e.get("class") == self.OVERLAY_CLASS]

    def to_svg(self) -> str:
        root = ET.Element(
            "svg",
            {
                "xmlns": "http://www.w3.org/2000/svg",
                "xmlns:xlink": "http://www.w3.org/1999/xlink",
                "width": str(self.width),
                "height": str(self.height),
            },
        )
        root.extend(self.elements)
        return ET.tostring(root, encoding="unicode")

    def save(self, path: str | Path) -> Path:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(self.to_svg(), encoding="utf-8")
        return p


class CanvasSurface:
    """RGBA pixel canvas drawn with OpenCV.

    Channels are stored in RGBA order; OpenCV drawing calls are channel
    agnostic, and save() converts to BGRA for encoding.
    """

    PLACEHOLDER_COLOR = "fuchsia"

    def __init__(self, width: int, height: int, assets=None, background: str = "transparent"):
        self.assets = assets
        self.background = parse_color(background)
        self.pixels = self._blank(int(width), int(height))
        self._warned_assets: Set[str] = set()

    def _blank(self, width: int, height: int) -> np.ndarray:
        img = np.zeros((height, width, 4), dtype=np.uint8)
        img[:, :] = self.background
        return img

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @staticmethod
    def _pt(position: Position) -> Tuple[int, int]:
        return (int(round(float(position.x))), int(round(float(position.y))))

    def draw_circle(self, center: Position, radius: float, color: str) -> None:
        cv2.circle(
            self.pixels,
            self._pt(center),
            max(1, int(round(radius))),
            parse_color(color),
            -1,
            cv2.LINE_AA,
        )

    def draw_line(self, start: Position, end: Position, color: str, width: float = 1.0) -> None:
        cv2.line(
            self.pixels,
            self._pt(start),
            self._pt(end),
            parse_color(color),
            max(1, int(round(width))),
            cv2.LINE_AA,
        )

    def draw_polygon_outline(
        self,
        vertices: Sequence[Position],
        stroke_color: str,
        fill: str = "transparent",
        stroke_width: float = 1.0,
    ) -> None:
        if not vertices:
            return
        pts = np.array([self._pt(v) for v in vertices], dtype=np.int32).reshape(-1, 1, 2)
        fill_rgba = parse_color(fill)
        if fill_rgba[3] > 0:
            cv2.fillPoly(self.pixels, [pts], fill_rgba, cv2.LINE_AA)
        cv2.polylines(
            self.pixels,
            [pts],
            True,
            parse_color(stroke_color),
            max(1, int(round(stroke_width))),
            cv2.LINE_AA,
        )

    def _placeholder(self, transform: ImageTransform) -> None:
        width, height = transform.size
        matrix = transform.matrix()
        corners = np.array(
            [[0.0, 0.0, 1.0], [width, 0.0, 1.0], [width, height, 1.0], [0.0, height, 1.0]]
        )
        mapped = corners @ matrix.T
        self.draw_polygon_outline(
            [Position(float(y), float(x)) for x, y in mapped],
            self.PLACEHOLDER_COLOR,
            stroke_width=2.0,
        )

    def draw_oriented_image(self, transform: ImageTransform, image_id: str) -> None:
        image: Optional[np.ndarray] = None
        if self.assets is not None:
            image = self.assets.load(image_id)
        if image is None:
            if image_id not in self._warned_assets:
                logger.warning("no pixels for asset %s, drawing placeholder outline", image_id)
                self._warned_assets.add(image_id)
            self._placeholder(transform)
            return

        width, height = (max(1, int(round(v))) for v in transform.size)
        if image.shape[1] != width or image.shape[0] != height:
            image = cv2.resize(image, (width, height), interpolation=cv2.INTER_AREA)
        warped = cv2.warpAffine(
            image,
            transform.matrix(),
            (self.width, self.height),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=(0, 0, 0, 0),
        )
        self._composite(warped)

    def _composite(self, src: np.ndarray) -> None:
        src_f = src.astype(np.float32) / 255.0
        dst_f = self.pixels.astype(np.float32) / 255.0
        src_a = src_f[:, :, 3:4]
        dst_a = dst_f[:, :, 3:4]
        out_a = src_a + dst_a * (1.0 - src_a)
        safe_a = np.where(out_a > 0, out_a, 1.0)
        out_rgb = (src_f[:, :, :3] * src_a + dst_f[:, :, :3] * dst_a * (1.0 - src_a)) / safe_a
        out = np.concatenate([out_rgb, out_a], axis=2)
        self.pixels = np.clip(out * 255.0 + 0.5, 0, 255).astype(np.uint8)

    def put_image_data(self, rgba: np.ndarray, y: int = 0, x: int = 0) -> None:
        data = np.asarray(rgba, dtype=np.uint8)
        if data.ndim != 3 or data.shape[2] != 4:
            raise ValueError(f"expected [H, W, 4] pixel data, got {data.shape}")
        y0, x0 = max(0, int(y)), max(0, int(x))
        y1 = min(self.height, int(y) + data.shape[0])
        x1 = min(self.width, int(x) + data.shape[1])
        if y1 <= y0 or x1 <= x0:
            return
        self.pixels[y0:y1, x0:x1] = data[y0 - int(y):y1 - int(y), x0 - int(x):x1 - int(x)]

    def resize(self, width: int, height: int) -> None:
        self.pixels = self._blank(int(width), int(height))

    def clear(self) -> None:
        self.pixels[:, :] = self.background

    def save(self, path: str | Path) -> Path:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        if not cv2.imwrite(str(p), cv2.cvtColor(self.pixels, cv2.COLOR_RGBA2BGRA)):
            raise OSError(f"failed to write {p}")
        return p
