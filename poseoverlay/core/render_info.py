from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple, Union

from poseoverlay.core.constants import BodyPart, part_key

P = BodyPart


@dataclass(frozen=True)
class RenderInfo:
    """Pixel metadata for one stamped image.

    (x, y) is where the image's top-left corner sits in the local frame whose
    origin is pinned to the first keypoint. width/height are the drawn size;
    nominal_width/nominal_height are the lengths that map to a scale of 1.
    """

    name: str
    image: str
    x: float
    y: float
    width: float
    height: float
    nominal_width: float
    nominal_height: float
    strength: float = 1.0


def _bone(name: str, image: str) -> RenderInfo:
    # Limb art is 200x600 with the joint centred 100px in from the top edge;
    # 400px separates the two joints.
    return RenderInfo(
        name=name,
        image=image,
        x=-100.0,
        y=-100.0,
        width=200.0,
        height=600.0,
        nominal_width=200.0,
        nominal_height=400.0,
    )


def _head(name: str, image: str, strength: float) -> RenderInfo:
    return RenderInfo(
        name=name,
        image=image,
        x=-60.0,
        y=-80.0,
        width=320.0,
        height=520.0,
        nominal_width=200.0,
        nominal_height=360.0,
        strength=strength,
    )


BONE_RENDER_INFO: Dict[Tuple[BodyPart, BodyPart], RenderInfo] = {
    (P.RIGHT_ELBOW, P.RIGHT_WRIST): _bone("rightForearm", "rightForearm.png"),
    (P.LEFT_ELBOW, P.LEFT_WRIST): _bone("leftForearm", "leftForearm.png"),
    (P.RIGHT_SHOULDER, P.RIGHT_ELBOW): _bone("rightBicep", "rightBicep.png"),
    (P.LEFT_SHOULDER, P.LEFT_ELBOW): _bone("leftBicep", "leftBicep.png"),
    (P.RIGHT_HIP, P.RIGHT_KNEE): _bone("rightThigh", "rightThigh.png"),
    (P.LEFT_HIP, P.LEFT_KNEE): _bone("leftThigh", "leftThigh.png"),
    (P.RIGHT_KNEE, P.RIGHT_ANKLE): _bone("rightShin", "rightShin.png"),
    (P.LEFT_KNEE, P.LEFT_ANKLE): _bone("leftShin", "leftShin.png"),
}

# Head strengths weight the eye/ear span so that a frontal face prefers the
# eye-to-eye quad and a turned face prefers the profile quads.
SURFACE_RENDER_INFO: Dict[Tuple[BodyPart, ...], RenderInfo] = {
    (P.LEFT_SHOULDER, P.RIGHT_SHOULDER, P.RIGHT_HIP, P.LEFT_HIP): RenderInfo(
        name="torso",
        image="torso.png",
        x=-20.0,
        y=-40.0,
        width=340.0,
        height=480.0,
        nominal_width=300.0,
        nominal_height=400.0,
    ),
    (P.LEFT_EAR, P.LEFT_EYE, P.RIGHT_SHOULDER, P.LEFT_SHOULDER): _head(
        "head_profile_left", "headProfileLeft.png", 0.8
    ),
    (P.RIGHT_EYE, P.RIGHT_EAR, P.RIGHT_SHOULDER, P.LEFT_SHOULDER): _head(
        "head_profile_right", "headProfileRight.png", 0.8
    ),
    (P.LEFT_EAR, P.RIGHT_EYE, P.RIGHT_SHOULDER, P.LEFT_SHOULDER): _head(
        "head_three_quarter_left", "headThreeQuarterLeft.png", 0.45
    ),
    (P.LEFT_EYE, P.RIGHT_EAR, P.RIGHT_SHOULDER, P.LEFT_SHOULDER): _head(
        "head_three_quarter_right", "headThreeQuarterRight.png", 0.45
    ),
    (P.LEFT_EYE, P.RIGHT_EYE, P.RIGHT_SHOULDER, P.LEFT_SHOULDER): _head(
        "head_front", "headFront.png", 1.0
    ),
}

del P


def missing_render_info(image: str = "missing.png") -> RenderInfo:
    return RenderInfo(
        name="missing",
        image=image,
        x=-100.0,
        y=-100.0,
        width=200.0,
        height=200.0,
        nominal_width=200.0,
        nominal_height=200.0,
        strength=0.0,
    )


MISSING_RENDER_INFO = missing_render_info()


@dataclass(frozen=True)
class ResolvedRenderInfo:
    key: Tuple[str, ...]
    info: RenderInfo
    resolved: bool = True


@dataclass(frozen=True)
class UnresolvedRenderInfo:
    key: Tuple[str, ...]
    info: RenderInfo = MISSING_RENDER_INFO
    resolved: bool = False


RenderInfoLookup = Union[ResolvedRenderInfo, UnresolvedRenderInfo]


def key_name(key: Sequence) -> str:
    return "_".join(part_key(part) for part in key)


def lookup_render_info(
    parts: Sequence,
    table: Dict[Tuple[BodyPart, ...], RenderInfo],
    fallback: RenderInfo = MISSING_RENDER_INFO,
) -> RenderInfoLookup:
    key = tuple(part_key(part) for part in parts)
    try:
        enum_key = tuple(BodyPart(name) for name in key)
    except ValueError:
        return UnresolvedRenderInfo(key=key, info=fallback)
    info = table.get(enum_key)
    if info is None:
        return UnresolvedRenderInfo(key=key, info=fallback)
    return ResolvedRenderInfo(key=key, info=info)
