"""
Structured Logging

DESIGN DECISION: The ledger logs through structlog with snake_case event
names and keyword context (``expense_created``, ``expense_id=3``).
Log lines stay machine-readable, and a failed storage write shows up as a
warning without interrupting the user.

Logging is configured once, when this module is first imported, using the
application settings. Call ``configure_logging`` again to switch level or
renderer at runtime.
"""

import logging
import sys
import warnings
from typing import Optional

import structlog
from pydantic import ValidationError

from expense_ledger.config import AppSettings, get_settings


def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """Configure structlog and the stdlib "expense_ledger" logger it writes through."""
    if settings is None:
        try:
            settings = get_settings().app
        except ValidationError as e:
            # A bad LOG_LEVEL must not stop the package from importing.
            warnings.warn(f"Invalid logging settings, using defaults: {e}")
            settings = AppSettings.model_construct()
    level = logging.DEBUG if settings.debug_mode else getattr(logging, settings.log_level)

    package_logger = logging.getLogger("expense_ledger")
    package_logger.setLevel(level)
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Loggers are module-level; caching would pin them to the first config.
        cache_logger_on_first_use=False,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


configure_logging()
