import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once, using LOG_LEVEL from settings."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("smartqr").setLevel(level.upper())
