"""Runtime settings, resolved from defaults, the environment, and CLI flags."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

from backend.models.board import Difficulty

ROOT = Path(__file__).resolve().parent.parent  # python/
PROJECT_ROOT = ROOT.parent
DATA_DIR = PROJECT_ROOT / "data"
ASSETS_DIR = PROJECT_ROOT / "assets"

ENV_PREFIX = "SLIDEQUEST_"


def _env(name: str, default: str) -> str:
    return os.getenv(ENV_PREFIX + name, default)


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DATA_DIR
    assets_dir: Path = ASSETS_DIR
    uploads_dir: Path = field(default=DATA_DIR / "uploads")
    max_upload_bytes: int = 5 * 1024 * 1024
    image_size: int = 400
    jpeg_quality: int = 90
    history_limit: int = 10
    default_difficulty: Difficulty = Difficulty.EASY
    tick_interval: float = 1.0
    host: str = "127.0.0.1"
    port: int = 5000
    log_level: str = "INFO"

    # -- derived paths --------------------------------------------------------

    @property
    def history_path(self) -> Path:
        return self.data_dir / "history.json"

    @property
    def images_path(self) -> Path:
        return self.data_dir / "custom_images.json"

    @property
    def images_dir(self) -> Path:
        """Bundled puzzle artwork shipped with the game."""
        return self.assets_dir / "images"

    # -- construction ---------------------------------------------------------

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``SLIDEQUEST_*`` environment variables.

        Unset variables fall back to the dataclass defaults.  ``uploads_dir``
        follows ``data_dir`` unless it is set explicitly.
        """
        data_dir = Path(_env("DATA_DIR", str(DATA_DIR)))
        return cls(
            data_dir=data_dir,
            assets_dir=Path(_env("ASSETS_DIR", str(ASSETS_DIR))),
            uploads_dir=Path(_env("UPLOADS_DIR", str(data_dir / "uploads"))),
            max_upload_bytes=int(_env("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024))),
            image_size=int(_env("IMAGE_SIZE", "400")),
            jpeg_quality=int(_env("JPEG_QUALITY", "90")),
            history_limit=int(_env("HISTORY_LIMIT", "10")),
            default_difficulty=Difficulty(_env("DIFFICULTY", Difficulty.EASY.value)),
            tick_interval=float(_env("TICK_INTERVAL", "1.0")),
            host=_env("HOST", "127.0.0.1"),
            port=int(_env("PORT", "5000")),
            log_level=_env("LOG_LEVEL", "INFO").upper(),
        )

    def override(self, **changes: object) -> Settings:
        """Return a copy with every non-``None`` keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
