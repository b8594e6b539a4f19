import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)

logger = logging.getLogger("twoem")
