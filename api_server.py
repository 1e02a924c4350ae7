"""FastAPI application bootstrap and routing setup."""

import logging
from fastapi import FastAPI
from termcolor import colored
from fastapi.middleware.cors import CORSMiddleware
from pixelmagic.utility.logger import AppLogger
from pixelmagic.config.settings import GeminiSettings
from pixelmagic.handlers.error_handler import MapExceptions as me
from pixelmagic.services.edit_service.main import ImageEditing
from pixelmagic.services.session_service.store import SessionStore
from pixelmagic.controller.session_controller import router as session_router

AppLogger.init(
    level=logging.INFO,
    log_to_file=True,
    filename="pixelmagic_server.log",
)
logger = AppLogger.get_logger(__name__)

settings = GeminiSettings.from_env()

app = FastAPI(title="PixelMagic AI")
me.register_exception_handlers(app)
app.state.session_store = SessionStore(ImageEditing.get_editor(settings))

logger.info(
    colored(f"Running in {settings.run_mode} mode with {settings.model_name}", "yellow")
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)
app.include_router(session_router)


@app.get("/", tags=["Health"])
def root():
    """Health probe indicating API wiring and logger setup succeeded."""
    return {"status": "ok", "message": "Setup successful", "mode": settings.run_mode}


@app.get("/health", tags=["Health"])
def health_check():
    """Secondary health endpoint used by deployments and monitoring probes."""
    return {
        "status": "ok",
        "message": "FastAPI server running!",
        "mode": settings.run_mode,
        "sessions": len(app.state.session_store),
    }
