import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from models.printer_status import MediaType, PrinterType, TapeColor, TapeSize, TextColor

BASE_DIR = Path(__file__).resolve().parent.parent
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _enum_from_env(var: str, enum_cls, default: str):
    raw = (os.getenv(var) or default).strip()
    key = raw.upper().replace("-", "_")
    try:
        return enum_cls[key]
    except KeyError:
        pass
    try:
        return enum_cls(raw)
    except ValueError as exc:
        choices = ", ".join(member.name for member in enum_cls)
        raise RuntimeError(f"{var}={raw!r} is not valid. Expected one of: {choices}") from exc


def _number_from_env(var: str, default: str, cast, minimum):
    raw = (os.getenv(var) or default).strip()
    try:
        value = cast(raw)
    except ValueError as exc:
        raise RuntimeError(f"{var}={raw!r} must be a number") from exc
    if value < minimum:
        raise RuntimeError(f"{var}={raw!r} must be at least {minimum}")
    return value


@dataclass(frozen=True)
class Settings:
    """
    Application configuration read from environment variables.

    A `.env` file is loaded by `main.py` before `Settings.from_env()` is
    called. Every invalid value raises RuntimeError naming the variable, so
    misconfiguration stops the app at startup instead of at print time.
    """

    log_level: str
    printer_type: PrinterType
    tape_size: TapeSize
    tape_color: TapeColor
    text_color: TextColor
    media_type: MediaType
    print_output_dir: Optional[Path]
    print_timeout_seconds: float
    print_attempts: int
    public_dir: Path
    cors_origins: Tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> "Settings":
        log_level = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
        if log_level not in LOG_LEVELS:
            raise RuntimeError(f"LOG_LEVEL={log_level!r} is not valid. Expected one of: {', '.join(LOG_LEVELS)}")

        tape_mm = _number_from_env("PRINTER_TAPE_SIZE", "12", float, 0)
        try:
            tape_size = TapeSize.from_mm(tape_mm)
        except ValueError as exc:
            raise RuntimeError(f"PRINTER_TAPE_SIZE: {exc}") from exc

        output_dir = os.getenv("PRINT_OUTPUT_DIR")
        public_dir = os.getenv("PUBLIC_DIR")
        cors_origins = tuple(origin.strip() for origin in (os.getenv("CORS_ORIGINS") or "*").split(",") if origin.strip())

        return cls(
            log_level=log_level,
            printer_type=_enum_from_env("PRINTER_TYPE", PrinterType, "PT-P700"),
            tape_size=tape_size,
            tape_color=_enum_from_env("PRINTER_TAPE_COLOR", TapeColor, "WHITE"),
            text_color=_enum_from_env("PRINTER_TEXT_COLOR", TextColor, "BLACK"),
            media_type=_enum_from_env("PRINTER_MEDIA_TYPE", MediaType, "LAMINATED"),
            print_output_dir=Path(output_dir).expanduser() if output_dir and output_dir.strip() else None,
            print_timeout_seconds=_number_from_env("PRINT_TIMEOUT_SECONDS", "30", float, 0.1),
            print_attempts=_number_from_env("PRINT_ATTEMPTS", "1", int, 1),
            public_dir=Path(public_dir).expanduser() if public_dir and public_dir.strip() else BASE_DIR / "public",
            cors_origins=cors_origins or ("*",),
        )
