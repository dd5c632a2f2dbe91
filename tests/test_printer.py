"""PrinterHandle behaviour with slow and failing drivers."""

import asyncio
import threading
import time

import pytest
from PIL import Image

from models.printer_status import PrinterType
from services.printer import PrinterError, PrinterHandle


class SlowPrinter:
    """Driver whose device calls take `delay` seconds."""

    def __init__(self, status, delay=0.3, failures=0):
        self.ty = PrinterType.PT_P700
        self._status = status
        self.delay = delay
        self.failures = failures
        self.started = 0
        self.finished = 0
        self._count_lock = threading.Lock()

    def status(self):
        return self._status

    def refresh_status(self):
        time.sleep(self.delay)
        with self._count_lock:
            self.finished += 1
        return self._status

    def print_image(self, image):
        with self._count_lock:
            self.started += 1
            call = self.started
        time.sleep(self.delay)
        with self._count_lock:
            self.finished += 1
        if call <= self.failures:
            raise PrinterError("Cover open")


LABEL = Image.new("RGBA", (20, 70), (0, 0, 0, 255))


def test_timed_out_write_is_not_repeated(status):
    driver = SlowPrinter(status, delay=0.3)
    handle = PrinterHandle(driver, timeout=0.1, attempts=3)

    seen = {}

    async def run():
        with pytest.raises(PrinterError, match="timed out"):
            await handle.print_image(LABEL)
        seen["finished"] = driver.finished

    asyncio.run(run())

    assert driver.started == 1
    # The handle only gives up once the device write has ended.
    assert seen["finished"] == 1


def test_snapshot_waits_for_running_write(status):
    driver = SlowPrinter(status, delay=0.3)
    handle = PrinterHandle(driver, timeout=0.1)
    seen = {}

    async def run():
        printing = asyncio.create_task(handle.print_image(LABEL))
        await asyncio.sleep(0.05)
        await handle.snapshot()
        seen["finished_at_snapshot"] = driver.finished
        with pytest.raises(PrinterError):
            await printing

    asyncio.run(run())

    assert seen["finished_at_snapshot"] == 1


def test_rejected_writes_are_retried(status):
    driver = SlowPrinter(status, delay=0.01, failures=1)
    handle = PrinterHandle(driver, timeout=5, attempts=2)

    asyncio.run(handle.print_image(LABEL))

    assert driver.started == 2


def test_single_attempt_by_default(status):
    driver = SlowPrinter(status, delay=0.01, failures=1)
    handle = PrinterHandle(driver, timeout=5)

    with pytest.raises(PrinterError, match="Cover open"):
        asyncio.run(handle.print_image(LABEL))

    assert driver.started == 1


def test_refresh_timeout(status):
    driver = SlowPrinter(status, delay=0.3)
    handle = PrinterHandle(driver, timeout=0.1)

    seen = {}

    async def run():
        with pytest.raises(PrinterError, match="refreshing"):
            await handle.refresh()
        seen["finished"] = driver.finished

    asyncio.run(run())

    assert seen["finished"] == 1
