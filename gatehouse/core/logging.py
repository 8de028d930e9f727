"""Structured ECS logging for configuration diagnostics."""

from __future__ import annotations

from datetime import UTC, datetime
import json
import logging
from pathlib import Path

from gatehouse.config.schema import LoggingConfig
from gatehouse.validator.diagnostics import Diagnostics


def _strip_empty(value: object) -> object | None:
    if isinstance(value, dict):
        cleaned = {key: _strip_empty(item) for key, item in value.items()}
        return {key: item for key, item in cleaned.items() if item is not None} or None
    if isinstance(value, list):
        cleaned_list = [_strip_empty(item) for item in value]
        return [item for item in cleaned_list if item is not None] or None
    if value in ("", None):
        return None
    return value


class ECSJsonFormatter(logging.Formatter):
    def __init__(self, service_name: str = "gatehouse") -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, UTC).isoformat(timespec="microseconds")
        payload: dict[str, object] = {
            "@timestamp": timestamp,
            "message": record.getMessage(),
            "log": {
                "level": record.levelname.lower(),
                "logger": record.name,
            },
            "service": {
                "name": getattr(record, "service_name", self.service_name),
            },
            "event": {
                "kind": "event",
                "category": getattr(record, "event_category", "configuration"),
                "action": getattr(record, "event_action", None),
                "outcome": getattr(record, "event_outcome", None),
            },
            "gatehouse": {
                "diagnostic_kind": getattr(record, "diagnostic_kind", None),
                "config_path": getattr(record, "config_path", None),
            },
        }
        cleaned = _strip_empty(payload) or {}
        return json.dumps(cleaned, separators=(",", ":"))


class JsonFormatter(logging.Formatter):
    def __init__(self, service_name: str = "gatehouse") -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="microseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "service": getattr(record, "service_name", self.service_name),
            "message": record.getMessage(),
            "diagnostic_kind": getattr(record, "diagnostic_kind", None),
        }
        cleaned = _strip_empty(payload) or {}
        return json.dumps(cleaned, separators=(",", ":"))


def _formatter(config: LoggingConfig) -> logging.Formatter:
    if config.fmt == "json":
        return JsonFormatter(service_name=config.service_name)
    return ECSJsonFormatter(service_name=config.service_name)


def _sink_handler(config: LoggingConfig, formatter: logging.Formatter) -> logging.Handler:
    if config.sink == "file":
        file_path = config.file_path or "logs/gatehouse.log"
        log_file = Path(file_path)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    return handler


def configure_logging(config: LoggingConfig, force: bool = False) -> None:
    root = logging.getLogger("gatehouse")
    if getattr(root, "_gatehouse_configured", False) and not force:
        return

    root.setLevel(config.level)
    for existing in list(root.handlers):
        existing.close()
    root.handlers.clear()
    root.addHandler(_sink_handler(config, _formatter(config)))

    root.propagate = False
    setattr(root, "_gatehouse_configured", True)


def get_logger(name: str, level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    if name.startswith("gatehouse"):
        parent = logging.getLogger("gatehouse")
        if parent.handlers:
            logger.setLevel(level)
            logger.propagate = True
            return logger

    handler = logging.StreamHandler()
    handler.setFormatter(ECSJsonFormatter())
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def log_diagnostics(logger: logging.Logger, diagnostics: Diagnostics, *, config_path: str | None = None) -> None:
    """Log warnings as deprecation notices and errors as validation failures."""
    for warning in diagnostics.warnings:
        logger.warning(
            warning.message,
            extra={
                "event_action": "validate",
                "event_outcome": "success",
                "diagnostic_kind": warning.kind.value,
                "config_path": config_path,
            },
        )
    for error in diagnostics.errors:
        logger.error(
            error.message,
            extra={
                "event_action": "validate",
                "event_outcome": "failure",
                "diagnostic_kind": error.kind.value,
                "config_path": config_path,
            },
        )
