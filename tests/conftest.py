"""Shared fixtures for the label printer tests.

Images are generated with Pillow in memory; the app runs against a
`SimulatedPrinter` so no device is needed.
"""

import pytest
from fastapi.testclient import TestClient
from PIL import Image, ImageDraw

from models.printer_status import MediaType, PrinterStatus, PrinterType, TapeColor, TapeSize, TextColor
from services.printer import SimulatedPrinter
from utils.settings import Settings


@pytest.fixture
def status():
    return PrinterStatus(
        media_width=TapeSize.MM_12,
        media_type=MediaType.LAMINATED,
        tape_color=TapeColor.WHITE,
        text_color=TextColor.BLACK,
    )


@pytest.fixture
def square_image():
    """A 300x200 white image with a 50x50 black square."""
    img = Image.new("RGB", (300, 200), color=(255, 255, 255))
    ImageDraw.Draw(img).rectangle((100, 50, 149, 99), fill=(0, 0, 0))
    return img


@pytest.fixture
def settings(tmp_path):
    return Settings(
        log_level="DEBUG",
        printer_type=PrinterType.PT_P700,
        tape_size=TapeSize.MM_12,
        tape_color=TapeColor.WHITE,
        text_color=TextColor.BLACK,
        media_type=MediaType.LAMINATED,
        print_output_dir=tmp_path / "prints",
        print_timeout_seconds=5.0,
        print_attempts=2,
        public_dir=tmp_path / "public",
    )


@pytest.fixture
def printer(settings):
    return SimulatedPrinter.from_settings(settings)


@pytest.fixture
def client(settings, printer):
    from main import create_app

    app = create_app(settings=settings, driver=printer)
    with TestClient(app) as test_client:
        yield test_client
