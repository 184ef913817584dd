import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int | None = None) -> None:
    """Configure root logging once for the API process and scripts.

    Args:
        level: Log level name or number. Defaults to settings.log_level.
    """
    if level is None:
        from action_runtime.config import settings

        level = settings.log_level

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("action_runtime").setLevel(level)
