"""Structured logging setup for the prompt router (structlog).

Production renders one JSON object per line; development uses the coloured
console renderer. Provider credentials never reach a log line: the
redact_secrets processor masks known secret fields and `key=` query params.
"""

import logging
import re
import sys

import structlog
from structlog.types import EventDict, WrappedLogger


SECRET_FIELDS = frozenset({"api_key", "authorization", "x-api-key", "headers"})
_QUERY_KEY = re.compile(r"([?&]key=)[^&\s]+")


def add_service_name(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict["service"] = "prompt-router"
    return event_dict


def redact_secrets(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mask credential-bearing fields and URL query keys."""
    for field in list(event_dict):
        if field.lower() in SECRET_FIELDS:
            event_dict[field] = "***"
        elif isinstance(event_dict[field], str) and "key=" in event_dict[field]:
            event_dict[field] = _QUERY_KEY.sub(r"\1***", event_dict[field])
    return event_dict


def configure_logging(log_level: str = "INFO", environment: str = "development") -> None:
    """Install structlog processors and route stdlib logging through them.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        environment: "production" selects JSON output, anything else the console renderer
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    json_output = environment.lower() == "production"

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service_name,
        redact_secrets,
    ]
    if json_output:
        processors.append(structlog.processors.format_exc_info)
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=processors)
    )
    handler.setLevel(level)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # httpx logs full request URLs, which carry the Google API key
    for noisy in ("httpx", "httpcore", "asyncio", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=log_level,
        environment=environment,
        renderer="json" if json_output else "console",
    )
