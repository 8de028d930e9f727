"""Holder for the live configuration with validate-then-swap reloads."""

from __future__ import annotations

import threading
from pathlib import Path

from gatehouse.config.loader import load_config
from gatehouse.config.schema import AppConfig
from gatehouse.core.doctor import run_validation
from gatehouse.core.logging import get_logger
from gatehouse.validator.diagnostics import Diagnostics


class ConfigurationHolder:
    """Serve one fully validated configuration to request-handling code.

    A reload validates a fresh configuration object and only replaces the
    live one when the pass produced no fatal errors. Readers never see a
    record that is still being defaulted.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self._lock = threading.Lock()
        self._current: AppConfig | None = None
        self._generation = 0
        self.logger = get_logger("gatehouse.runtime")
        if config is not None:
            self.load(config)

    def load(self, config: AppConfig) -> Diagnostics:
        diagnostics = self.reload(config)
        diagnostics.raise_for_errors()
        return diagnostics

    def reload(self, candidate: AppConfig) -> Diagnostics:
        diagnostics = run_validation(candidate)
        if diagnostics.has_errors():
            self.logger.error(
                "rejected configuration reload",
                extra={"event_action": "reload", "event_outcome": "failure"},
            )
            return diagnostics
        with self._lock:
            self._current = candidate
            self._generation += 1
            generation = self._generation
        self.logger.info(
            f"configuration generation {generation} is live",
            extra={"event_action": "reload", "event_outcome": "success"},
        )
        return diagnostics

    def reload_from_path(self, path: Path) -> Diagnostics:
        return self.reload(load_config(path))

    def current(self) -> AppConfig:
        with self._lock:
            if self._current is None:
                raise RuntimeError("no validated configuration has been loaded")
            return self._current

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation
