"""Image-to-label transformation pipeline.

Pure functions built on Pillow that turn an arbitrary decoded image into a
two-color (tape/text) bitmap sized to the loaded tape, join several such
bitmaps into one strip, and render the strip to the black/white buffer the
printer expects.

None of these functions keep state or touch the printer; the caller passes
an immutable `PrinterStatus` snapshot, so they are safe to run in parallel
from worker threads.

Example:
    processed = process(decoded, status, threshold=127, invert=False)
    preview = join([processed, other], status)
    ready = render([processed, other], status)
"""

from __future__ import annotations

from typing import Iterable, Tuple

from PIL import Image, ImageChops

from models.printer_status import PrinterInfo, PrinterStatus
from models.stored_image import DEFAULT_THRESHOLD, StoredImage
from services.color_map import color_map

MARGIN = 3
SEPARATOR_WIDTH = MARGIN * 2 + 1
DASH_LENGTH = 4
MM_PER_INCH = 25.4

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)


def _inverted(rgb: Tuple[int, int, int]) -> Tuple[int, int, int]:
    return tuple(255 - channel for channel in rgb)


def _to_luma_alpha(image: Image.Image) -> Image.Image:
    if image.mode == "LA":
        return image.copy()
    # Going through RGBA keeps palette transparency.
    return image.convert("RGBA").convert("LA")


def _band_equals(band: Image.Image, value: int) -> Image.Image:
    return band.point(lambda v: 255 if v == value else 0)


def process(image: Image.Image, status: PrinterStatus, threshold: int, invert: bool) -> Image.Image:
    """Convert a decoded image into a two-color RGBA bitmap for the loaded tape.

    The image is converted to grayscale (keeping alpha), scaled with a
    nearest-neighbour filter so its height equals the tape pixel width, and
    every pixel is classified: a fully opaque pixel darker than `threshold`
    becomes text color, everything else (including partially transparent
    pixels, however dark) becomes tape color. With `invert` the RGB channels
    of the result are inverted.

    Args:
        image: Decoded source image of any size and mode.
        status: Printer status snapshot giving tape width and colors.
        threshold: Luminance cutoff in [0, 255].
        invert: Whether to invert the RGB channels of the result.

    Returns:
        A new RGBA image, `status.tape_px` pixels high.

    Raises:
        UnsupportedColorError: If the tape or text color has no RGB mapping.
        ValueError: If `threshold` is outside [0, 255].
    """
    if not 0 <= threshold <= 255:
        raise ValueError(f"Threshold must be within 0-255, got {threshold}")

    colors = color_map(status.tape_color, status.text_color)
    gray = _to_luma_alpha(image)

    width, height = gray.size
    tape_px = status.tape_px
    ratio = tape_px / height
    scaled = gray.resize((max(1, int(width * ratio)), tape_px), Image.NEAREST)

    luma, alpha = scaled.split()
    dark = luma.point(lambda v: 255 if v < threshold else 0)
    opaque = _band_equals(alpha, 255)
    text_mask = ImageChops.multiply(dark, opaque)

    tape, text = colors.tape, colors.text
    if invert:
        tape, text = _inverted(tape), _inverted(text)

    result = Image.new("RGBA", scaled.size, tape + (255,))
    result.paste(text + (255,), (0, 0) + scaled.size, text_mask)
    return result


def _separator(height: int, status: PrinterStatus) -> Image.Image:
    colors = color_map(status.tape_color, status.text_color)
    separator = Image.new("RGBA", (1, height), colors.tape_rgba)
    for y in range(height):
        if (y // DASH_LENGTH) % 2 == 0:
            separator.putpixel((0, y), colors.text_rgba)
    return separator


def join(images: Iterable[Image.Image], status: PrinterStatus) -> Image.Image:
    """Place processed images side by side, divided by dashed separators.

    Each gap is `MARGIN` pixels of tape, a one pixel separator and another
    `MARGIN` pixels. Images are top-aligned on a tape-colored background
    as tall as the tallest input. An empty input gives a 0x0 image.
    """
    colors = color_map(status.tape_color, status.text_color)
    images = [image.convert("RGBA") for image in images]
    if not images:
        return Image.new("RGBA", (0, 0), colors.tape_rgba)

    width = sum(image.width for image in images) + (len(images) - 1) * SEPARATOR_WIDTH
    height = max(image.height for image in images)

    joined = Image.new("RGBA", (width, height), colors.tape_rgba)
    separator = _separator(height, status)

    offset = 0
    for index, image in enumerate(images):
        joined.alpha_composite(image, dest=(offset, 0))
        offset += image.width
        if index != len(images) - 1:
            offset += MARGIN
            joined.alpha_composite(separator, dest=(offset, 0))
            offset += 1 + MARGIN

    return joined


def render(images: Iterable[Image.Image], status: PrinterStatus) -> Image.Image:
    """Join images and reduce the strip to opaque black and white.

    Pixels exactly matching the tape color become white; all others,
    including separator dashes, become black.
    """
    colors = color_map(status.tape_color, status.text_color)
    joined = join(images, status)
    if joined.width == 0 or joined.height == 0:
        return joined

    red, green, blue, _ = joined.split()
    tape_red, tape_green, tape_blue = colors.tape
    is_tape = ImageChops.multiply(
        ImageChops.multiply(_band_equals(red, tape_red), _band_equals(green, tape_green)),
        _band_equals(blue, tape_blue),
    )

    rendered = Image.new("RGBA", joined.size, BLACK)
    rendered.paste(WHITE, (0, 0) + joined.size, is_tape)
    return rendered


def length_mm(width: int, info: PrinterInfo) -> int:
    """Physical length in whole millimetres of `width` pixels at the printer dpi."""
    return int(width / info.dpi * MM_PER_INCH)


def process_initial(image: Image.Image, file_name: str, status: PrinterStatus, info: PrinterInfo) -> StoredImage:
    """Build the initial StoredImage for a freshly decoded upload."""
    processed = process(image, status, DEFAULT_THRESHOLD, False)
    return StoredImage(
        file_name=file_name,
        width=processed.width,
        height=processed.height,
        original_width=image.width,
        original_height=image.height,
        length_mm=length_mm(image.width, info),
        original=image,
        processed=processed,
        threshold=DEFAULT_THRESHOLD,
        inverted=False,
    )
