"""Printer boundary: the driver protocol and the lock-guarded shared handle.

The physical driver (opening the device, reading the status block,
sending raster data) lives outside this service. Anything implementing
`PrinterDriver` can be plugged in; `SimulatedPrinter` is the default and
reports a configured tape while writing print jobs out as PNG files.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import List, Optional, Protocol, Tuple

from PIL import Image

from models.printer_status import PrinterStatus, PrinterType
from utils.settings import Settings

LOGGER = logging.getLogger(__name__)


class PrinterError(RuntimeError):
    """Raised when the printer cannot be reached or rejects a job."""


class PrinterDriver(Protocol):
    ty: PrinterType

    def status(self) -> PrinterStatus:
        ...

    def refresh_status(self) -> PrinterStatus:
        ...

    def print_image(self, image: Image.Image) -> None:
        ...


class SimulatedPrinter:
    """Printer stand-in driven by configuration.

    Printed images are kept in `printed` and, when `output_dir` is set,
    saved there as `label-<timestamp>.png`.
    """

    def __init__(self, ty: PrinterType, status: PrinterStatus, output_dir: Optional[Path] = None) -> None:
        self.ty = ty
        self._status = status
        self.output_dir = output_dir
        self.printed: List[Image.Image] = []

    @classmethod
    def from_settings(cls, settings: Settings) -> "SimulatedPrinter":
        status = PrinterStatus(
            media_width=settings.tape_size,
            media_type=settings.media_type,
            tape_color=settings.tape_color,
            text_color=settings.text_color,
        )
        return cls(settings.printer_type, status, settings.print_output_dir)

    def status(self) -> PrinterStatus:
        return self._status

    def refresh_status(self) -> PrinterStatus:
        return self._status

    def load_tape(self, status: PrinterStatus) -> None:
        """Swap the reported tape, as if a new cassette was inserted."""
        self._status = status

    def print_image(self, image: Image.Image) -> None:
        if image.height > self.ty.info().max_px:
            raise PrinterError(f"Image height {image.height}px exceeds printable {self.ty.info().max_px}px")
        self.printed.append(image.copy())
        if self.output_dir is not None:
            try:
                self.output_dir.mkdir(parents=True, exist_ok=True)
                path = self.output_dir / f"label-{time.time_ns()}.png"
                image.save(path, format="PNG")
            except OSError as exc:
                raise PrinterError(f"Failed to write print output: {exc}") from exc
            LOGGER.info("Simulated print written to %s", path)


class PrinterHandle:
    """Shared printer connection guarded by an asyncio lock.

    Callers take a status snapshot with `snapshot()` and release the lock
    before processing images; only the device write in `print_image`
    holds the lock for its full duration.
    """

    def __init__(self, driver: PrinterDriver, timeout: float = 30.0, attempts: int = 1) -> None:
        self._driver = driver
        self._lock = asyncio.Lock()
        self.timeout = timeout
        self.attempts = max(1, attempts)

    @property
    def driver(self) -> PrinterDriver:
        return self._driver

    async def snapshot(self) -> Tuple[PrinterType, PrinterStatus]:
        async with self._lock:
            return self._driver.ty, self._driver.status()

    async def _call_driver(self, func, *args):
        """Run a blocking driver call in a worker thread, bounded by `timeout`.

        A timed-out call cannot be cancelled, so it is still awaited to the
        end before this returns; the caller keeps holding the lock meanwhile.

        Raises:
            asyncio.TimeoutError: If the call did not finish within `timeout`.
        """
        task = asyncio.ensure_future(asyncio.to_thread(func, *args))
        try:
            return await asyncio.wait_for(asyncio.shield(task), self.timeout)
        except asyncio.TimeoutError:
            LOGGER.warning("Printer call %s exceeded %ss, waiting for it to finish", func.__name__, self.timeout)
            try:
                await task
            except Exception as exc:  # pylint: disable=broad-exception-caught
                LOGGER.error("Late printer call %s failed: %s", func.__name__, exc)
            raise

    async def refresh(self) -> Tuple[PrinterType, PrinterStatus]:
        async with self._lock:
            try:
                status = await self._call_driver(self._driver.refresh_status)
            except asyncio.TimeoutError as exc:
                raise PrinterError("Timed out refreshing printer status") from exc
            LOGGER.info("Printer status refreshed: %s", status)
            return self._driver.ty, status

    async def print_image(self, image: Image.Image) -> None:
        """Send a print-ready image, making at most `attempts` attempts.

        Only attempts the driver rejected with a PrinterError are repeated.
        A timed-out write may already have reached the tape, so it is never
        repeated.

        Raises:
            PrinterError: If the write timed out or every attempt failed.
        """
        async with self._lock:
            last_error: Optional[PrinterError] = None
            for attempt in range(1, self.attempts + 1):
                try:
                    await self._call_driver(self._driver.print_image, image)
                    LOGGER.info("Printed %dx%d label (attempt %d)", image.width, image.height, attempt)
                    return
                except asyncio.TimeoutError as exc:
                    raise PrinterError(f"Print timed out after {self.timeout}s") from exc
                except PrinterError as exc:
                    last_error = exc
                LOGGER.error("Print attempt %d/%d failed: %s", attempt, self.attempts, last_error)
            raise last_error
