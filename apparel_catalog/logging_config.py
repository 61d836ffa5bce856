"""Logging setup for the API process."""

from logging.config import dictConfig


def configure_logging(level: str = "INFO") -> None:
    """Send application logs to the console at ``level``."""
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "apparel_catalog": {
                    "level": level.upper(),
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
        }
    )
