from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_gatehouse_loggers():
    yield
    # Handlers created during one test may hold streams captured by pytest.
    for name in list(logging.Logger.manager.loggerDict):
        if name == "gatehouse" or name.startswith("gatehouse."):
            logger = logging.getLogger(name)
            for handler in list(logger.handlers):
                handler.close()
            logger.handlers.clear()
            if hasattr(logger, "_gatehouse_configured"):
                delattr(logger, "_gatehouse_configured")
