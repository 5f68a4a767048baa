import logging

from config.settings import Settings

_LOGGING_CONFIGURED = False


def configure_logging(settings: Settings) -> None:
    """Configure process-wide logging once, from LOG_LEVEL."""
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if _LOGGING_CONFIGURED:
        return

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    _LOGGING_CONFIGURED = True
