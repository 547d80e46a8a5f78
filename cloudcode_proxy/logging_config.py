import logging.config

from cloudcode_proxy.config import get_settings

# Third-party loggers kept at a fixed level regardless of DEBUG
QUIET_LOGGERS = {
    "uvicorn": "INFO",
    # One line per request is already written by RequestLogMiddleware
    "uvicorn.access": "WARNING",
    "httpx": "WARNING",
}


def setup_logging():
    """Send every log record to stdout; DEBUG lowers the proxy's own level."""
    level = "DEBUG" if get_settings().DEBUG else "INFO"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"handlers": ["console"], "level": level},
            "loggers": {
                name: {"handlers": ["console"], "level": quiet_level, "propagate": False}
                for name, quiet_level in QUIET_LOGGERS.items()
            },
        }
    )
