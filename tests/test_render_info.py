import unittest

from poseoverlay.core.constants import CONNECTED_PART_NAMES, CONNECTED_SURFACE_NAMES, BodyPart
from poseoverlay.core.render_info import (
    BONE_RENDER_INFO,
    MISSING_RENDER_INFO,
    SURFACE_RENDER_INFO,
    key_name,
    lookup_render_info,
    missing_render_info,
)


class RenderInfoLookupTests(unittest.TestCase):
    def test_every_adjacency_has_an_entry(self):
        for pair in CONNECTED_PART_NAMES:
            self.assertTrue(lookup_render_info(pair, BONE_RENDER_INFO).resolved)
        for quad in CONNECTED_SURFACE_NAMES:
            self.assertTrue(lookup_render_info(quad, SURFACE_RENDER_INFO).resolved)

    def test_lookup_by_plain_names(self):
        lookup = lookup_render_info(["rightElbow", "rightWrist"], BONE_RENDER_INFO)
        self.assertTrue(lookup.resolved)
        self.assertEqual(lookup.info.image, "rightForearm.png")
        self.assertEqual(lookup.key, ("rightElbow", "rightWrist"))

    def test_reversed_pair_is_unresolved(self):
        lookup = lookup_render_info(
            (BodyPart.RIGHT_WRIST, BodyPart.RIGHT_ELBOW), BONE_RENDER_INFO
        )
        self.assertFalse(lookup.resolved)
        self.assertIs(lookup.info, MISSING_RENDER_INFO)
        self.assertEqual(key_name(lookup.key), "rightWrist_rightElbow")

    def test_unknown_part_name_is_unresolved(self):
        fallback = missing_render_info("placeholder.png")
        lookup = lookup_render_info(("nose", "tail"), BONE_RENDER_INFO, fallback)
        self.assertFalse(lookup.resolved)
        self.assertEqual(lookup.info.image, "placeholder.png")
        self.assertEqual(lookup.info.strength, 0.0)

    def test_single_torso_and_weighted_heads(self):
        names = [info.name for info in SURFACE_RENDER_INFO.values()]
        self.assertEqual(sum("torso" in name for name in names), 1)
        heads = [info for info in SURFACE_RENDER_INFO.values() if "head" in info.name]
        self.assertEqual(len(heads), 5)
        self.assertTrue(all(info.strength > 0 for info in heads))


if __name__ == "__main__":
    unittest.main()
