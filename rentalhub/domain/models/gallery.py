from __future__ import annotations
from typing import List, Optional

from rentalhub.domain.services.constants import (
    BROKEN_IMAGE_FALLBACK,
    THUMBNAIL_FALLBACK_IMAGE,
    THUMBNAIL_LIMIT,
)


class ImageSource:
    """
    One displayed image. A load error swaps `src` to the local fallback exactly once;
    a failing fallback stays as it is (no retry loop).
    """

    def __init__(self, src: Optional[str], fallback: str = BROKEN_IMAGE_FALLBACK):
        self.src = src
        self.fallback = fallback
        self._swapped = False

    @property
    def swapped(self) -> bool:
        return self._swapped

    def on_error(self) -> bool:
        if self._swapped:
            return False
        self.src = self.fallback
        self._swapped = True
        return True

    def to_dict(self) -> dict:
        return {"src": self.src, "fallback": self.fallback}


class ImageGallery:
    """Main image plus clickable thumbnails (the first three images, shown only when there are several)."""

    def __init__(self, images: List[str], selected: int = 0):
        self.images = list(images)
        self.selected = 0
        self.select(selected)

    @property
    def thumbnails(self) -> List[str]:
        if len(self.images) <= 1:
            return []
        return self.images[:THUMBNAIL_LIMIT]

    def select(self, index: int) -> bool:
        """Select a thumbnail; anything outside the shown thumbnails is ignored."""
        if 0 <= index < len(self.thumbnails):
            self.selected = index
            return True
        return False

    @property
    def main_image(self) -> ImageSource:
        src = self.images[self.selected] if self.images else None
        return ImageSource(src)

    def to_dict(self) -> dict:
        return {
            "selected": self.selected,
            "main_image": self.main_image.to_dict(),
            "thumbnails": [
                ImageSource(img or THUMBNAIL_FALLBACK_IMAGE).to_dict() for img in self.thumbnails
            ],
        }
