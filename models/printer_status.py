"""Printer-side value types: tape geometry, colors and status snapshots.

The enumerations carry the byte codes reported in the printer status
block, so a status read from the device can be mapped directly with
`PrinterStatus.from_codes`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Union


class TapeColor(IntEnum):
    NONE = 0x00
    WHITE = 0x01
    OTHER = 0x02
    CLEAR = 0x03
    RED = 0x04
    BLUE = 0x05
    YELLOW = 0x06
    GREEN = 0x07
    BLACK = 0x08
    CLEAR_WHITE_TEXT = 0x09
    WHITE_MATTE = 0x20
    CLEAR_MATTE = 0x21
    SILVER_MATTE = 0x22
    GOLD_SATIN = 0x23
    SILVER_SATIN = 0x24
    BLUE_TZE_5_345_5 = 0x30
    RED_TZE_435 = 0x31
    ORANGE_FLUORESCENT = 0x40
    YELLOW_FLUORESCENT = 0x41
    BERRY_PINK_TZE_MQP35 = 0x50
    LIGHT_GRAY_TZE_MQL35 = 0x51
    LIME_GREEN_TZE_MQG35 = 0x52
    YELLOW_F = 0x60
    PINK = 0x61
    BLUE_F = 0x62
    HEAT_SHRINK_TUBE = 0x70
    WHITE_FLEX_ID = 0x90
    YELLOW_FLEX_ID = 0x91
    CLEANING = 0xF0
    STENCIL = 0xF1
    INCOMPATIBLE = 0xFF


class TextColor(IntEnum):
    NONE = 0x00
    WHITE = 0x01
    OTHER = 0x02
    RED = 0x04
    BLUE = 0x05
    BLACK = 0x08
    GOLD = 0x0A
    BLUE_F = 0x62
    CLEANING = 0xF0
    STENCIL = 0xF1
    INCOMPATIBLE = 0xFF


class MediaType(IntEnum):
    NONE = 0x00
    LAMINATED = 0x01
    NON_LAMINATED = 0x03
    HEAT_SHRINK_TUBE = 0x11
    INCOMPATIBLE = 0xFF


class TapeSize(Enum):
    """Tape widths with their printable pixel height at 180 dpi."""

    MM_3_5 = (3.5, 24)
    MM_6 = (6, 32)
    MM_9 = (9, 50)
    MM_12 = (12, 70)
    MM_18 = (18, 112)
    MM_24 = (24, 128)

    @property
    def mm(self) -> float:
        return self.value[0]

    @property
    def px(self) -> int:
        return self.value[1]

    @classmethod
    def from_mm(cls, mm: float) -> "TapeSize":
        for size in cls:
            if size.mm == mm:
                return size
        raise ValueError(f"Unsupported tape width: {mm}mm")


@dataclass(frozen=True)
class PrinterInfo:
    """Static capabilities of a printer model."""

    dpi: int
    max_px: int


class PrinterType(Enum):
    PT_P700 = "PT-P700"
    PT_P750W = "PT-P750W"
    PT_E550W = "PT-E550W"
    PT_P710BT = "PT-P710BT"
    PT_H500 = "PT-H500"

    def info(self) -> PrinterInfo:
        # Every supported model prints 128 pins at 180 dpi.
        return PrinterInfo(dpi=180, max_px=128)


@dataclass(frozen=True)
class PrinterStatus:
    """Immutable snapshot of the loaded media, taken once per request.

    Colors are normally enum members; a raw int is kept when the printer
    reports a code outside the known enumeration.
    """

    media_width: TapeSize
    media_type: MediaType
    tape_color: Union[TapeColor, int]
    text_color: Union[TextColor, int]

    @property
    def tape_px(self) -> int:
        return self.media_width.px

    @classmethod
    def from_codes(
        cls,
        media_width: TapeSize,
        media_type: int,
        tape_color: int,
        text_color: int,
    ) -> "PrinterStatus":
        """Build a status from raw status-block codes."""
        return cls(
            media_width=media_width,
            media_type=_lookup(MediaType, media_type),
            tape_color=_lookup(TapeColor, tape_color),
            text_color=_lookup(TextColor, text_color),
        )


def _lookup(enum_cls, code: int):
    try:
        return enum_cls(code)
    except ValueError:
        return int(code)
