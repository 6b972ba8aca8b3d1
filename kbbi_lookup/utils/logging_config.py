"""
Structured logging configuration for kbbi-lookup.

Logs always go to stderr; stdout is reserved for search output so that
``kbbi search ... --json`` can be piped.
"""

import structlog
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

# Third-party loggers that are only interesting when something breaks
QUIET_LOGGERS = ("httpx", "httpcore")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _processors() -> List:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _console_handler(json_logs: bool) -> logging.Handler:
    if json_logs:
        return logging.StreamHandler(sys.stderr)
    return RichHandler(
        console=Console(stderr=True),
        show_time=False,  # structlog stamps the time
        show_path=False,
        rich_tracebacks=True
    )


def _file_handler(log_file: str) -> logging.Handler:
    log_path = Path(log_file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(log_path, encoding="utf-8")


def configure_logging(
    log_level: str = "WARNING",
    log_file: Optional[str] = None,
    json_logs: bool = False
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Module loggers (``logging.getLogger(__name__)``) and structlog loggers
    share one formatter, so both end up in the same console and file output.

    Args:
        log_level: One of DEBUG, INFO, WARNING, ERROR
        log_file: Optional path to an additional log file
        json_logs: Render records as JSON instead of coloured text
    """
    level = log_level.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {log_level}")

    shared_processors = _processors()

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if json_logs:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handlers = [_console_handler(json_logs)]
    if log_file:
        handlers.append(_file_handler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = handlers
    root_logger.setLevel(getattr(logging, level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class LookupLogger:
    """
    Structured events for dictionary lookups.

    Each lookup produces one ``lookup_*`` event carrying the term and the
    outcome, so a JSON log stream can be filtered per term.
    """

    def __init__(self, name: str = "kbbi_lookup.lookup"):
        if structlog.is_configured():
            self.logger = structlog.get_logger(name)
        else:
            # Library use without configure_logging: defer to stdlib handlers
            self.logger = structlog.wrap_logger(
                logging.getLogger(name),
                wrapper_class=structlog.stdlib.BoundLogger,
                processors=[structlog.processors.KeyValueRenderer(key_order=["event"])],
            )

    def found(self, term: str, entries: int, authenticated: bool) -> None:
        self.logger.info(
            "lookup_found",
            term=term,
            entries=entries,
            authenticated=authenticated
        )

    def not_found(self, term: str, suggestions: int) -> None:
        self.logger.info("lookup_not_found", term=term, suggestions=suggestions)

    def failed(self, term: str, error: BaseException) -> None:
        """Log a lookup that ended in a source or transport error."""
        self.logger.warning(
            "lookup_failed",
            term=term,
            error_type=type(error).__name__,
            error=str(error)
        )
