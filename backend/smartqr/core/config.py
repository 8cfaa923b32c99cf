import os
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # 🧠 App Info
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Smart QR Pro")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = os.getenv("DEBUG", "true").lower() == "true"

    # 🌍 Base URLs
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")

    # 📦 File storage
    QR_SAVE_DIR: str = os.getenv("QR_SAVE_DIR", "/tmp/qr")
    DATA_SAVE_DIR: str = os.getenv("DATA_SAVE_DIR", "/tmp/data")

    # 🗄️ Database (SQLite by default, Postgres via DATABASE_URL)
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        f"sqlite:///{os.path.join(DATA_SAVE_DIR, 'smartqr.db')}"
    )

    # 🔳 QR rendering
    QR_SIZE: int = int(os.getenv("QR_SIZE", 1024))
    HISTORY_LIMIT: int = int(os.getenv("HISTORY_LIMIT", 20))

    # ☁️ Cloudinary (unsigned preset, no secret on this side)
    CLOUDINARY_CLOUD_NAME: str = os.getenv("CLOUDINARY_CLOUD_NAME", "your_cloud_name")
    CLOUDINARY_UPLOAD_PRESET: str = os.getenv("CLOUDINARY_UPLOAD_PRESET", "your_unsigned_preset")
    MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", 20 * 1024 * 1024))
    UPLOAD_TIMEOUT_SECONDS: float = float(os.getenv("UPLOAD_TIMEOUT_SECONDS", 120))
    CONNECTIVITY_HOST: str = os.getenv("CONNECTIVITY_HOST", "api.cloudinary.com")

    # 🕓 Logs
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
