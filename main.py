import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from routes.image_route import router as image_router
from routes.label_route import router as label_router
from routes.printer_route import router as printer_router
from services.image_store import ImageStore
from services.printer import PrinterDriver, PrinterHandle, SimulatedPrinter
from utils.settings import Settings

load_dotenv()  # Load environment variables from .env file if present

LOGGER = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, driver: Optional[PrinterDriver] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Args:
        settings: Configuration; read from the environment when omitted.
        driver: Printer driver; a `SimulatedPrinter` built from settings
            when omitted.
    """
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan manager to initialize:
          - the printer handle (driver plus its lock)
          - the in-memory image store
        and attach them to `app.state`. Both are shared by every request.
        """
        printer_driver = driver or SimulatedPrinter.from_settings(settings)
        LOGGER.info("Opening printer %s", printer_driver.ty.value)
        app.state.printer = PrinterHandle(
            printer_driver,
            timeout=settings.print_timeout_seconds,
            attempts=settings.print_attempts,
        )
        app.state.image_store = ImageStore()
        app.state.settings = settings

        try:
            yield
        finally:
            app.state.image_store.delete_all()

    app = FastAPI(title="Label Printer", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    public_dir = settings.public_dir

    # Serve static assets from the public directory, if it exists.
    if public_dir.exists():
        app.mount("/public", StaticFiles(directory=public_dir), name="public")

    @app.get("/", include_in_schema=False)
    async def serve_index():
        """
        Serve the frontend index page from the public directory.
        """
        index_path = public_dir / "index.html"
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="Frontend not found")
        return FileResponse(index_path)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports the shared resources and stored image count.
        """
        has_printer = getattr(request.app.state, "printer", None) is not None
        store = getattr(request.app.state, "image_store", None)
        return {"ok": True, "printer_available": has_printer, "images": len(store) if store is not None else 0}

    # Register application routers
    app.include_router(image_router)
    app.include_router(label_router)
    app.include_router(printer_router)

    return app


app = create_app()
