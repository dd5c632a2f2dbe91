import pytest

from models.printer_status import MediaType, PrinterStatus, TapeColor, TapeSize, TextColor
from services.color_map import UnsupportedColorError, color_map

UNSUPPORTED_TAPES = {TapeColor.OTHER, TapeColor.INCOMPATIBLE}
UNSUPPORTED_TEXTS = {TextColor.OTHER, TextColor.INCOMPATIBLE}


@pytest.mark.parametrize("tape", [c for c in TapeColor if c not in UNSUPPORTED_TAPES])
def test_every_known_tape_color_maps(tape):
    colors = color_map(tape, TextColor.BLACK)
    assert len(colors.tape) == 3
    assert colors.text == (0, 0, 0)


@pytest.mark.parametrize("text", [c for c in TextColor if c not in UNSUPPORTED_TEXTS])
def test_every_known_text_color_maps(text):
    assert len(color_map(TapeColor.WHITE, text).text) == 3


def test_named_colors():
    colors = color_map(TapeColor.GOLD_SATIN, TextColor.RED)
    assert colors.tape == (255, 215, 0)
    assert colors.text == (255, 0, 0)
    assert colors.tape_rgba == (255, 215, 0, 255)


@pytest.mark.parametrize("tape", sorted(UNSUPPORTED_TAPES))
def test_unsupported_tape_colors_raise(tape):
    with pytest.raises(UnsupportedColorError, match=tape.name):
        color_map(tape, TextColor.BLACK)


@pytest.mark.parametrize("text", sorted(UNSUPPORTED_TEXTS))
def test_unsupported_text_colors_raise(text):
    with pytest.raises(UnsupportedColorError):
        color_map(TapeColor.WHITE, text)


def test_unknown_status_codes_are_kept_and_rejected():
    status = PrinterStatus.from_codes(TapeSize.MM_12, 0x01, 0x77, 0x08)

    assert status.media_type is MediaType.LAMINATED
    assert status.tape_color == 0x77
    assert not isinstance(status.tape_color, TapeColor)
    assert status.text_color is TextColor.BLACK
    with pytest.raises(UnsupportedColorError, match="0x77"):
        color_map(status.tape_color, status.text_color)
