import logging
import sys

import structlog

PYMONGO_LOGGERS = (
    "pymongo",
    "pymongo.topology",
    "pymongo.connection",
    "pymongo.serverSelection",
    "pymongo.command",
)


def setup_logging(debug: bool, collection_name: str) -> None:
    """Configure structlog so every event carries the counter collection it was emitted for."""
    log_level = logging.DEBUG if debug else logging.INFO

    # Logs go to stderr, stdout is reserved for generated ids
    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stderr)
    for name in PYMONGO_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(collection=collection_name)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="ts"),
        structlog.processors.format_exc_info,
    ]
    processors.append(structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
