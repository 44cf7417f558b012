from __future__ import annotations

import logging
from pathlib import Path

import yaml

from poseoverlay.models.config import AppConfig, ConfigUpdate

logger = logging.getLogger(__name__)


class ConfigStore:
    def __init__(self, path: Path):
        self.path = Path(path)
        self.config = self._load_or_create()

    def _load_or_create(self) -> AppConfig:
        if self.path.exists():
            payload = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
            return AppConfig.model_validate(payload)
        logger.info("writing default overlay config to %s", self.path)
        cfg = AppConfig()
        self.save(cfg)
        return cfg

    def save(self, cfg: AppConfig) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            yaml.safe_dump(cfg.model_dump(), sort_keys=False),
            encoding="utf-8",
        )
        self.config = cfg

    def update(self, update: ConfigUpdate) -> AppConfig:
        payload = self.config.model_dump()
        payload.update(update.model_dump(exclude_none=True))
        merged = AppConfig.model_validate(payload)
        self.save(merged)
        return merged
