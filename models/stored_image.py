from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict
from uuid import UUID

from PIL import Image

DEFAULT_THRESHOLD = 127


@dataclass
class StoredImage:
    """In-memory representation of one uploaded image and its derived state.

    Attributes:
        file_name: Upload file name with the extension stripped.
        width: Width of the processed image in pixels.
        height: Height of the processed image in pixels.
        original_width: Width of the decoded upload.
        original_height: Height of the decoded upload.
        length_mm: Physical label length, derived from the original width
            and the printer dpi when the image was uploaded.
        threshold: Luminance cutoff (0-255) separating text from tape.
        inverted: Whether text and tape colors are swapped.
        original: Decoded upload. Never modified after insertion.
        processed: Two-color buffer for the current threshold/inverted.
            Replaced as a whole, never edited in place.
    """

    file_name: str
    width: int
    height: int
    original_width: int
    original_height: int
    length_mm: int
    original: Image.Image = field(repr=False, compare=False)
    processed: Image.Image = field(repr=False, compare=False)
    threshold: int = DEFAULT_THRESHOLD
    inverted: bool = False

    def replace_processed(self, processed: Image.Image) -> None:
        self.processed = processed
        self.width, self.height = processed.size

    def describe(self, image_id: UUID) -> Dict[str, Any]:
        """Return the API representation; pixel buffers are never included."""
        return {
            "id": str(image_id),
            "file_name": self.file_name,
            "width": self.width,
            "height": self.height,
            "original_width": self.original_width,
            "original_height": self.original_height,
            "length_mm": self.length_mm,
            "threshold": self.threshold,
            "inverted": self.inverted,
        }
