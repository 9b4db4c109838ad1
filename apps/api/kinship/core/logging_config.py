import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    # SQL statements are only logged at DEBUG.
    engine_logger = logging.getLogger("sqlalchemy.engine")
    engine_logger.setLevel(logging.NOTSET if level == "DEBUG" else logging.WARNING)
