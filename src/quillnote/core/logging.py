"""
Logging Configuration

Everything goes to stdout. Application records and uvicorn access lines
get separate formats so request traffic is easy to grep out.
"""

from logging.config import dictConfig

from quillnote.core.config import settings

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Client libraries used by the HTTP gateway and the summarizer
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "aiosqlite", "sqlalchemy.engine")


def setup_logging(level: str | None = None) -> None:
    """
    Configure process-wide logging.

    Args:
        level: Overrides LOG_LEVEL for the root and ``quillnote`` loggers.
            Loggers in QUIET_LOGGERS stay at WARNING either way.
    """
    log_level = (level or settings.LOG_LEVEL).upper()

    loggers: dict[str, dict] = {
        "quillnote": {"level": log_level},
        "uvicorn.access": {
            "level": "INFO",
            "handlers": ["access"],
            "propagate": False,
        },
    }
    for name in QUIET_LOGGERS:
        loggers[name] = {"level": "WARNING"}

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                    "datefmt": DATE_FORMAT,
                },
                "access": {
                    "format": "%(asctime)s | ACCESS   | %(message)s",
                    "datefmt": DATE_FORMAT,
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "default",
                },
                "access": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "access",
                },
            },
            "root": {"level": log_level, "handlers": ["console"]},
            "loggers": loggers,
        }
    )
