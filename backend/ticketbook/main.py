"""FastAPI application entry point."""
import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from ticketbook.config import settings
from ticketbook.database import Base, engine

# Import routers
from ticketbook.routers import auth, events, media

# Import all models so Base.metadata knows about them
from ticketbook.models.event import Event  # noqa: F401

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

UPLOAD_DIRS = {"/uploads": "uploads", "/qr-codes": "qr-codes"}

app = FastAPI(
    title="Ticketbook",
    description="Personal event planner with QR tickets and a photo gallery",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(media.router, prefix="/api", tags=["Media"])
app.include_router(auth.router, prefix="/api", tags=["Session"])

# Locally stored uploads are served back under the same paths recorded on events
for url_path, subdir in UPLOAD_DIRS.items():
    app.mount(
        url_path,
        StaticFiles(directory=os.path.join(settings.PUBLIC_DIR, subdir), check_dir=False),
        name=subdir,
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Database error"})


@app.on_event("startup")
def on_startup():
    """Create upload directories, and database tables for SQLite dev mode."""
    for subdir in UPLOAD_DIRS.values():
        try:
            os.makedirs(os.path.join(settings.PUBLIC_DIR, subdir), exist_ok=True)
        except OSError as exc:
            logger.warning("Could not create upload directory %s: %s", subdir, exc)
    if settings.database_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
