import sys

from loguru import logger


def configure_logging(*, level: str = "INFO", json: bool = False) -> None:
    """Replace loguru's default sink with a single stderr sink.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR).
        json: Serialize each record as a JSON line for log aggregation.
    """
    logger.remove()
    if json:
        logger.add(sys.stderr, level=level.upper(), serialize=True)
        return
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    )
