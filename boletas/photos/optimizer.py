"""Downsample uploaded photos before they are embedded in a receipt."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from boletas.errors import PhotoProcessingError
from boletas.photos.intake import remove_files, unique_prefix

logger = logging.getLogger(__name__)


class PhotoOptimizer:
    def __init__(
        self,
        output_dir: str | Path,
        max_size: tuple[int, int] = (1024, 768),
        quality: int = 70,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.max_size = max_size
        self.quality = quality

    def _optimize_one(self, source: Path, target: Path) -> None:
        with Image.open(source) as img:
            img = ImageOps.exif_transpose(img)
            # JPEG has no alpha or palette
            if img.mode != "RGB":
                img = img.convert("RGB")
            # thumbnail() only ever shrinks and keeps the aspect ratio
            img.thumbnail(self.max_size, Image.Resampling.LANCZOS)
            img.save(target, format="JPEG", quality=self.quality, optimize=True)

    def optimize(self, paths: Sequence[str | Path]) -> list[Path]:
        """Return optimized copies of ``paths`` in the same order.

        If any source cannot be decoded, copies already written by this call
        are removed and ``PhotoProcessingError`` is raised.
        """
        if not paths:
            return []
        self.output_dir.mkdir(parents=True, exist_ok=True)

        optimized: list[Path] = []
        for raw in paths:
            source = Path(raw)
            target = self.output_dir / f"opt-{unique_prefix()}-{source.stem}.jpg"
            try:
                self._optimize_one(source, target)
            except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
                remove_files([*optimized, target])
                raise PhotoProcessingError(f"Could not optimize photo {source.name}: {exc}") from exc
            optimized.append(target)

        logger.info(
            "Optimized %d photos (max %dx%d, quality %d)",
            len(optimized),
            self.max_size[0],
            self.max_size[1],
            self.quality,
        )
        return optimized
