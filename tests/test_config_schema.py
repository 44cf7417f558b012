import tempfile
import unittest
from pathlib import Path

from pydantic import ValidationError

from poseoverlay.models.config import (
    AppConfig,
    AssetConfig,
    CanvasConfig,
    ConfigUpdate,
    OverlayConfig,
)
from poseoverlay.services.config_store import ConfigStore
from poseoverlay.services.runtime import build_runtime


class ConfigSchemaTests(unittest.TestCase):
    def test_defaults_load(self):
        cfg = AppConfig()
        self.assertEqual(cfg.overlay.point_color, "aqua")
        self.assertEqual(cfg.overlay.bounding_box_color, "red")
        self.assertEqual(cfg.overlay.missing_asset, "missing.png")
        self.assertFalse(cfg.overlay.bounding_box_respects_confidence)
        self.assertEqual(cfg.assets.directory, "skeletonImages")
        self.assertGreater(cfg.canvas.width, 0)

    def test_rejects_out_of_range_values(self):
        with self.assertRaises(ValidationError):
            OverlayConfig(min_part_confidence=1.5)
        with self.assertRaises(ValidationError):
            OverlayConfig(point_radius=0)

    def test_rejects_unknown_colours(self):
        with self.assertRaises(ValidationError):
            OverlayConfig(point_color="not-a-colour")
        with self.assertRaises(ValidationError):
            OverlayConfig(bounding_box_color="#12zz45")
        with self.assertRaises(ValidationError):
            OverlayConfig(offset_vector_color="#ffff")
        with self.assertRaises(ValidationError):
            CanvasConfig(background="chartreuse-ish")
        cfg = OverlayConfig(point_color="#e61d5f", bounding_box_color="Yellow")
        self.assertEqual(cfg.bounding_box_color, "Yellow")
        self.assertEqual(CanvasConfig(background="#000").background, "#000")


class ConfigStoreTests(unittest.TestCase):
    def test_creates_defaults_and_persists_updates(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "configs" / "overlay.yaml"
            store = ConfigStore(path)
            self.assertTrue(path.exists())
            self.assertEqual(store.config, AppConfig())

            store.update(ConfigUpdate(overlay=OverlayConfig(point_color="#ff00ff")))
            reloaded = ConfigStore(path)
            self.assertEqual(reloaded.config.overlay.point_color, "#ff00ff")
            self.assertEqual(reloaded.config.assets.directory, "skeletonImages")

    def test_runtime_wires_renderer_and_surfaces(self):
        with tempfile.TemporaryDirectory() as tmp:
            runtime = build_runtime(Path(tmp) / "overlay.yaml")
            self.assertEqual(runtime.renderer.cfg, runtime.config_store.config.overlay)
            canvas = runtime.new_canvas()
            self.assertEqual(canvas.pixels.shape, (480, 640, 4))
            self.assertEqual(runtime.new_svg().asset_prefix, "skeletonImages/")

    def test_svg_prefix_comes_from_asset_path(self):
        with tempfile.TemporaryDirectory() as tmp:
            runtime = build_runtime(Path(tmp) / "overlay.yaml")
            runtime.config_store.update(
                ConfigUpdate(assets=AssetConfig(directory="art/skins/"))
            )
            self.assertEqual(runtime.config_store.config.asset_path(), Path("art/skins"))
            self.assertEqual(runtime.new_svg().asset_prefix, "art/skins/")


if __name__ == "__main__":
    unittest.main()
