import logging

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

# -------------------------------------------------------
# ⚙️ Core Imports
# -------------------------------------------------------
from .core.config import settings
from .core.logging import setup_logging
from .core.db import Base, engine, get_db, db_healthcheck
from .core.errors import SmartQRError
from .core.qr_utils import QR_DIR
from .models import cloud_file, history as history_model, preference  # noqa: F401  (register tables)
from .services.preferences import ThemeStore

# -------------------------------------------------------
# 🧩 Routers
# -------------------------------------------------------
from .routers import qr, uploads, scan, history, settings as settings_router
from .routers.settings import prefers_dark

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger("smartqr")

VERSION = "1.0.0"

# -------------------------------------------------------
# 🚀 FastAPI Initialization
# -------------------------------------------------------
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=VERSION,
    description="Smart QR Pro – classify, generate, upload and scan QR codes",
)

# -------------------------------------------------------
# 🌐 CORS Middleware
# -------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-QR-Type", "X-QR-Payload", "Content-Disposition"],
)

# -------------------------------------------------------
# ⚠️ Error Handling
# -------------------------------------------------------
@app.exception_handler(SmartQRError)
async def smartqr_error_handler(request: Request, exc: SmartQRError):
    logger.info("[ERROR] %s %s → %s", request.method, request.url.path, exc.code)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)

# -------------------------------------------------------
# 🏁 Startup Events
# -------------------------------------------------------
@app.on_event("startup")
def on_startup():
    """Initialize database and storage paths."""
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("✅ Database models created.")
    except Exception as e:
        logger.warning("⚠️ Database init skipped: %s", e)

    logger.info("📦 QR dir: %s", QR_DIR)
    logger.info("📄 Data dir: %s", settings.DATA_SAVE_DIR)
    logger.info("🗃️ Database: %s", settings.DATABASE_URL)

# -------------------------------------------------------
# ❤️ Health Checks
# -------------------------------------------------------
@app.get("/health", tags=["Health"])
def health():
    return {
        "status": "ok",
        "service": settings.PROJECT_NAME,
        "version": VERSION,
    }

@app.get("/health/db", tags=["Health"])
def health_db():
    ok, error = db_healthcheck()
    return {"database": "ok" if ok else "error", "error": error}

# -------------------------------------------------------
# 🧾 Debug Info
# -------------------------------------------------------
@app.get("/debug/info")
def debug_info():
    return {
        "environment": settings.ENVIRONMENT,
        "base_url": settings.BASE_URL,
        "database": str(settings.DATABASE_URL),
        "directories": {
            "qr": str(QR_DIR),
            "data": settings.DATA_SAVE_DIR,
        },
        "cloudinary": {"cloud_name": settings.CLOUDINARY_CLOUD_NAME},
    }

# -------------------------------------------------------
# 🧭 Root
# -------------------------------------------------------
@app.get("/", include_in_schema=False)
def root(db: Session = Depends(get_db), dark: bool = Depends(prefers_dark)):
    appearance = ThemeStore(db).appearance(dark)
    return {
        "service": settings.PROJECT_NAME,
        "version": VERSION,
        "appearance": {"mode": appearance.mode.value, "effective": appearance.effective.value},
    }

# -------------------------------------------------------
# 🔗 Router Registration
# -------------------------------------------------------
app.include_router(qr.router)
app.include_router(uploads.router)
app.include_router(scan.router)
app.include_router(history.router)
app.include_router(settings_router.router)
