from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from poseoverlay.core.renderer import OverlayRenderer
from poseoverlay.core.surfaces import CanvasSurface, SvgSurface
from poseoverlay.services.asset_store import AssetStore
from poseoverlay.services.config_store import ConfigStore


@dataclass
class RenderContext:
    config_store: ConfigStore
    assets: AssetStore
    renderer: OverlayRenderer

    def new_canvas(self) -> CanvasSurface:
        canvas = self.config_store.config.canvas
        return CanvasSurface(
            canvas.width, canvas.height, assets=self.assets, background=canvas.background
        )

    def new_svg(self) -> SvgSurface:
        cfg = self.config_store.config
        prefix = cfg.asset_path().as_posix() + "/"
        return SvgSurface(cfg.canvas.width, cfg.canvas.height, asset_prefix=prefix)


def build_runtime(config_path: Path) -> RenderContext:
    config_store = ConfigStore(config_path)
    cfg = config_store.config
    return RenderContext(
        config_store=config_store,
        assets=AssetStore(cfg.assets),
        renderer=OverlayRenderer(cfg.overlay),
    )
