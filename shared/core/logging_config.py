import logging
import os
from logging.handlers import RotatingFileHandler

from shared.core.config import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(service_name: str) -> None:
    """Console logging, plus a rotating ``<LOG_DIR>/<service_name>.log`` when LOG_DIR is set."""
    handlers = [logging.StreamHandler()]

    if settings.LOG_DIR:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        handlers.append(RotatingFileHandler(
            os.path.join(settings.LOG_DIR, f"{service_name}.log"),
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT,
        ))

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )

    # SQL echo stays off unless asked for explicitly
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger(__name__).info("Logging configured for %s", service_name)
