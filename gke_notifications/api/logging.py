import inspect
import logging
import logging.config
import os

from pythonjsonlogger.json import JsonFormatter

from gke_notifications.api.consts import RUNNING_IN_CLOUD_RUN

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
JSON_LOG = os.environ.get("JSON_LOG", "false").lower() == "true"

LOG_FORMAT_OPEN_TELEMETRY = "open_telemetry"
LOG_FORMAT_DEVELOPMENT_TERMINAL = "dev_terminal"

LOG_FORMAT = os.environ.get(
    "LOG_FORMAT",
    (
        LOG_FORMAT_OPEN_TELEMETRY
        if JSON_LOG or RUNNING_IN_CLOUD_RUN
        else LOG_FORMAT_DEVELOPMENT_TERMINAL
    ),
)


class DevTerminalFormatter(logging.Formatter):
    def format(self, record):
        message = super().format(record)
        extra_info = ""

        # Use inspect to go up the stack until we find the _log function
        frame = inspect.currentframe()
        while frame:
            if frame.f_code.co_name == "_log":
                # Extract extra from the _log function's local variables
                extra = frame.f_locals.get("extra", {})
                if extra:
                    extra_info = " ".join(
                        [f"[{k}: {v}]" for k, v in extra.items() if k != "message_dump"]
                    )
                break
            frame = frame.f_back

        return f"{message} {extra_info}".rstrip()


CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": JsonFormatter,
            "fmt": "%(asctime)s %(message)s %(levelname)s %(name)s %(filename)s %(threadName)s %(process)s %(module)s",
            # Cloud Logging picks up severity and timestamp under these names
            "rename_fields": {
                "levelname": "severity",
                "asctime": "timestamp",
            },
        },
        "dev_terminal": {
            "()": DevTerminalFormatter,
            "format": "%(asctime)s - %(thread)s %(threadName)s %(levelname)s - %(message)s",
        },
        "uvicorn_access": {
            "format": "%(asctime)s - %(threadName)s - %(message)s"
        },
    },
    "handlers": {
        "default": {
            "level": LOG_LEVEL,
            "formatter": (
                "json" if LOG_FORMAT == LOG_FORMAT_OPEN_TELEMETRY else "dev_terminal"
            ),
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stdout",
        },
        "uvicorn_access": {
            "class": "logging.StreamHandler",
            "formatter": "uvicorn_access",
        },
    },
    "loggers": {
        "": {
            "handlers": ["default"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        "uvicorn.access": {
            "handlers": ["uvicorn_access"],
            "level": "INFO",
            "propagate": False,
        },
        "uvicorn.error": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "urllib3": {
            "handlers": ["default"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}


def setup_logging(level=None):
    if level:
        CONFIG["handlers"]["default"]["level"] = level
        CONFIG["loggers"][""]["level"] = level
    logging.config.dictConfig(CONFIG)
