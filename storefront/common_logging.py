"""Root logger setup: JSON lines for collectors, plain text for local runs"""
import logging
import sys
from pythonjsonlogger import jsonlogger

JSON_FIELDS = "%(asctime)s %(name)s %(levelname)s %(message)s"

# Noisy third-party loggers kept at WARNING unless debugging
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "passlib")


def _json_formatter(service_name: str) -> logging.Formatter:
    formatter = jsonlogger.JsonFormatter(
        fmt=JSON_FIELDS,
        rename_fields={"asctime": "timestamp", "name": "logger", "levelname": "level"},
        static_fields={"service": service_name}
    )
    formatter.default_time_format = "%Y-%m-%dT%H:%M:%S"
    formatter.default_msec_format = "%s.%03dZ"
    return formatter


def _text_formatter(service_name: str) -> logging.Formatter:
    return logging.Formatter(
        fmt=f"%(asctime)s [{service_name}] %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def setup_logging(service_name: str, log_level: str = "INFO", log_format: str = "json") -> logging.Logger:
    """
    Send every log record to stdout in the configured format

    Handlers already on the root logger are replaced so repeated calls
    (reloads, tests) do not duplicate output.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if log_format.lower() == "json":
        handler.setFormatter(_json_formatter(service_name))
    else:
        handler.setFormatter(_text_formatter(service_name))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    root.debug(f"Logging configured for {service_name}: level={log_level}, format={log_format}")
    return root
