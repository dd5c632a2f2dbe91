"""Resolve printer tape/text colors to RGB triples for on-screen rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple, Union

from PIL import ImageColor

from models.printer_status import TapeColor, TextColor

RGB = Tuple[int, int, int]


class UnsupportedColorError(ValueError):
    """Raised when a tape or text color has no RGB mapping."""


_TAPE_COLOR_NAMES: Dict[TapeColor, str] = {
    TapeColor.NONE: "white",
    TapeColor.WHITE: "white",
    TapeColor.CLEAR: "white",
    TapeColor.RED: "red",
    TapeColor.BLUE: "blue",
    TapeColor.YELLOW: "yellow",
    TapeColor.GREEN: "green",
    TapeColor.BLACK: "black",
    TapeColor.CLEAR_WHITE_TEXT: "white",
    TapeColor.WHITE_MATTE: "white",
    TapeColor.CLEAR_MATTE: "white",
    TapeColor.SILVER_MATTE: "silver",
    TapeColor.GOLD_SATIN: "gold",
    TapeColor.SILVER_SATIN: "silver",
    TapeColor.BLUE_TZE_5_345_5: "blue",
    TapeColor.RED_TZE_435: "red",
    TapeColor.ORANGE_FLUORESCENT: "orange",
    TapeColor.YELLOW_FLUORESCENT: "yellow",
    TapeColor.BERRY_PINK_TZE_MQP35: "mediumvioletred",
    TapeColor.LIGHT_GRAY_TZE_MQL35: "lightgray",
    TapeColor.LIME_GREEN_TZE_MQG35: "limegreen",
    TapeColor.YELLOW_F: "yellow",
    TapeColor.PINK: "pink",
    TapeColor.BLUE_F: "blue",
    TapeColor.HEAT_SHRINK_TUBE: "white",
    TapeColor.WHITE_FLEX_ID: "white",
    TapeColor.YELLOW_FLEX_ID: "yellow",
    TapeColor.CLEANING: "white",
    TapeColor.STENCIL: "white",
}

_TEXT_COLOR_NAMES: Dict[TextColor, str] = {
    TextColor.NONE: "black",
    TextColor.WHITE: "white",
    TextColor.RED: "red",
    TextColor.BLUE: "blue",
    TextColor.BLACK: "black",
    TextColor.GOLD: "gold",
    TextColor.BLUE_F: "blue",
    TextColor.CLEANING: "white",
    TextColor.STENCIL: "black",
}


@dataclass(frozen=True)
class ColorMap:
    tape: RGB
    text: RGB

    @property
    def tape_rgba(self) -> Tuple[int, int, int, int]:
        return self.tape + (255,)

    @property
    def text_rgba(self) -> Tuple[int, int, int, int]:
        return self.text + (255,)


def _resolve(names: Dict, color: Union[int, TapeColor, TextColor], kind: str) -> RGB:
    name = names.get(color)
    if name is None:
        label = color.name if hasattr(color, "name") else f"0x{int(color):02X}"
        raise UnsupportedColorError(f"No RGB mapping for {kind} color {label}")
    return ImageColor.getrgb(name)[:3]


def color_map(tape: Union[TapeColor, int], text: Union[TextColor, int]) -> ColorMap:
    """Resolve a (tape, text) color pair to RGB.

    Raises:
        UnsupportedColorError: If either color is OTHER, INCOMPATIBLE or a
            code outside the known enumeration.
    """
    return ColorMap(
        tape=_resolve(_TAPE_COLOR_NAMES, tape, "tape"),
        text=_resolve(_TEXT_COLOR_NAMES, text, "text"),
    )
