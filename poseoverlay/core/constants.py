from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple

from poseoverlay.core.errors import PartLookupError


class BodyPart(str, Enum):
    NOSE = "nose"
    LEFT_EYE = "leftEye"
    RIGHT_EYE = "rightEye"
    LEFT_EAR = "leftEar"
    RIGHT_EAR = "rightEar"
    LEFT_SHOULDER = "leftShoulder"
    RIGHT_SHOULDER = "rightShoulder"
    LEFT_ELBOW = "leftElbow"
    RIGHT_ELBOW = "rightElbow"
    LEFT_WRIST = "leftWrist"
    RIGHT_WRIST = "rightWrist"
    LEFT_HIP = "leftHip"
    RIGHT_HIP = "rightHip"
    LEFT_KNEE = "leftKnee"
    RIGHT_KNEE = "rightKnee"
    LEFT_ANKLE = "leftAnkle"
    RIGHT_ANKLE = "rightAnkle"


PART_NAMES = [part.value for part in BodyPart]

NUM_KEYPOINTS = len(PART_NAMES)

PART_IDS: Dict[str, int] = {name: idx for idx, name in enumerate(PART_NAMES)}

BonePair = Tuple[BodyPart, BodyPart]
SurfaceQuad = Tuple[BodyPart, BodyPart, BodyPart, BodyPart]

P = BodyPart

# Limb segments, drawn in this order.
CONNECTED_PART_NAMES: Tuple[BonePair, ...] = (
    (P.LEFT_SHOULDER, P.LEFT_ELBOW),
    (P.LEFT_ELBOW, P.LEFT_WRIST),
    (P.LEFT_HIP, P.LEFT_KNEE),
    (P.LEFT_KNEE, P.LEFT_ANKLE),
    (P.RIGHT_SHOULDER, P.RIGHT_ELBOW),
    (P.RIGHT_ELBOW, P.RIGHT_WRIST),
    (P.RIGHT_HIP, P.RIGHT_KNEE),
    (P.RIGHT_KNEE, P.RIGHT_ANKLE),
)

# Quads are wound A, B, C, D: A->B is the surface's horizontal axis and
# C, D sit on the opposite edge.
CONNECTED_SURFACE_NAMES: Tuple[SurfaceQuad, ...] = (
    (P.LEFT_SHOULDER, P.RIGHT_SHOULDER, P.RIGHT_HIP, P.LEFT_HIP),
    (P.LEFT_EAR, P.LEFT_EYE, P.RIGHT_SHOULDER, P.LEFT_SHOULDER),
    (P.RIGHT_EYE, P.RIGHT_EAR, P.RIGHT_SHOULDER, P.LEFT_SHOULDER),
    (P.LEFT_EAR, P.RIGHT_EYE, P.RIGHT_SHOULDER, P.LEFT_SHOULDER),
    (P.LEFT_EYE, P.RIGHT_EAR, P.RIGHT_SHOULDER, P.LEFT_SHOULDER),
    (P.LEFT_EYE, P.RIGHT_EYE, P.RIGHT_SHOULDER, P.LEFT_SHOULDER),
)

# Parent -> child edges of the skeleton tree, rooted at the nose. Consumers
# walk it in both directions, so the root choice is arbitrary.
POSE_CHAIN: Tuple[BonePair, ...] = (
    (P.NOSE, P.LEFT_EYE),
    (P.LEFT_EYE, P.LEFT_EAR),
    (P.NOSE, P.RIGHT_EYE),
    (P.RIGHT_EYE, P.RIGHT_EAR),
    (P.NOSE, P.LEFT_SHOULDER),
    (P.LEFT_SHOULDER, P.LEFT_ELBOW),
    (P.LEFT_ELBOW, P.LEFT_WRIST),
    (P.LEFT_SHOULDER, P.LEFT_HIP),
    (P.LEFT_HIP, P.LEFT_KNEE),
    (P.LEFT_KNEE, P.LEFT_ANKLE),
    (P.NOSE, P.RIGHT_SHOULDER),
    (P.RIGHT_SHOULDER, P.RIGHT_ELBOW),
    (P.RIGHT_ELBOW, P.RIGHT_WRIST),
    (P.RIGHT_SHOULDER, P.RIGHT_HIP),
    (P.RIGHT_HIP, P.RIGHT_KNEE),
    (P.RIGHT_KNEE, P.RIGHT_ANKLE),
)

POSE_CHAIN_ROOT = P.NOSE

del P


def part_key(part) -> str:
    # BodyPart hashes by member name, so dict keys are always the plain value.
    return part.value if isinstance(part, BodyPart) else str(part)


def part_index(name: str) -> int:
    """Return the array offset of a body part.

    Raises PartLookupError for names outside the fixed vocabulary; callers
    should treat that as a mismatch between the detector and this table.
    """
    try:
        return PART_IDS[part_key(name)]
    except KeyError:
        raise PartLookupError(f"unknown body part: {name!r}") from None


def adjacent_bone_pairs() -> Tuple[BonePair, ...]:
    return CONNECTED_PART_NAMES


def adjacent_surface_quads() -> Tuple[SurfaceQuad, ...]:
    return CONNECTED_SURFACE_NAMES


def skeleton_chain() -> Tuple[BonePair, ...]:
    return POSE_CHAIN


def _validate_tree(edges, root: BodyPart) -> None:
    parents: Dict[BodyPart, BodyPart] = {}
    children: Dict[BodyPart, list[BodyPart]] = {}
    for parent, child in edges:
        if child in parents:
            raise ValueError(f"{child.value} has more than one parent")
        if child == root:
            raise ValueError("root must not have a parent")
        parents[child] = parent
        children.setdefault(parent, []).append(child)

    # A detached cycle surfaces here as unreachable parts.
    seen = {root}
    stack = [root]
    while stack:
        node = stack.pop()
        for child in children.get(node, []):
            seen.add(child)
            stack.append(child)

    missing = [part.value for part in BodyPart if part not in seen]
    if missing:
        raise ValueError(f"parts unreachable from {root.value}: {missing}")


_validate_tree(POSE_CHAIN, POSE_CHAIN_ROOT)

CONNECTED_PART_INDICES = tuple(
    (part_index(a), part_index(b)) for a, b in CONNECTED_PART_NAMES
)

CONNECTED_SURFACE_INDICES = tuple(
    tuple(part_index(name) for name in quad) for quad in CONNECTED_SURFACE_NAMES
)
