import logging

from smartqr.core.db import Base, engine
import smartqr.models.cloud_file, smartqr.models.history, smartqr.models.preference  # noqa: F401

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)

logger.info("⚙️ Dropping and recreating all tables...")
Base.metadata.drop_all(bind=engine)
Base.metadata.create_all(bind=engine)
logger.info("✅ Database schema refreshed successfully.")
