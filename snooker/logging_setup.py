import logging
import sys
from typing import Any, Optional, Sequence, TextIO

import orjson
import structlog


def _orjson_dumps(obj: Any, default: Any) -> str:
    return orjson.dumps(obj, default=default).decode("utf-8")


def configure_logging(
    *,
    level: str = "INFO",
    json_logs: bool = True,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Set up structlog for the replay script and the session/storage layers.

    Logs go to stderr by default so the scoreboard printed on stdout stays
    clean. json_logs=False switches to a plain key=value console format.
    The engine never logs.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    out = stream if stream is not None else sys.stderr

    if json_logs:
        renderer: Any = structlog.processors.JSONRenderer(serializer=_orjson_dumps)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        # loggers are rebuilt on every call so a reconfigure takes effect
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(level=log_level, format="%(message)s", stream=out)


def bind_frame_context(
    *,
    starting_reds: int,
    source: Optional[str] = None,
    players: Optional[Sequence[str]] = None,
) -> None:
    """Attach the frame being replayed to every following log entry."""
    values: dict = {"starting_reds": starting_reds}
    if source is not None:
        values["source"] = source
    if players:
        values["players"] = list(players)
    structlog.contextvars.bind_contextvars(**values)


def clear_frame_context() -> None:
    structlog.contextvars.clear_contextvars()
