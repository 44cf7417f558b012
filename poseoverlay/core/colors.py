from __future__ import annotations

from typing import Dict, Tuple

RGBA = Tuple[int, int, int, int]

NAMED_COLORS: Dict[str, RGBA] = {
    "aqua": (0, 255, 255, 255),
    "black": (0, 0, 0, 255),
    "blue": (0, 0, 255, 255),
    "fuchsia": (255, 0, 255, 255),
    "gray": (128, 128, 128, 255),
    "green": (0, 128, 0, 255),
    "lime": (0, 255, 0, 255),
    "orange": (255, 165, 0, 255),
    "red": (255, 0, 0, 255),
    "transparent": (0, 0, 0, 0),
    "white": (255, 255, 255, 255),
    "yellow": (255, 255, 0, 255),
}


def parse_color(color: str) -> RGBA:
    """Resolve a CSS colour name or #rgb / #rrggbb / #rrggbbaa string to RGBA."""
    value = color.strip().lower()
    if value in NAMED_COLORS:
        return NAMED_COLORS[value]
    if value.startswith("#"):
        hex_color = value[1:]
        if len(hex_color) == 3:
            hex_color = "".join(ch * 2 for ch in hex_color)
        if len(hex_color) in (6, 8):
            try:
                channels = [int(hex_color[i:i + 2], 16) for i in range(0, len(hex_color), 2)]
            except ValueError:
                pass
            else:
                if len(channels) == 3:
                    channels.append(255)
                return tuple(channels)  # type: ignore[return-value]
    raise ValueError(f"unrecognised colour: {color!r}")
