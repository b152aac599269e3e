"""Structured JSON logging for footprint scoring runs."""

from __future__ import annotations

import json
import logging
import logging.handlers
from collections.abc import Iterable
from datetime import datetime, timezone
from queue import Full, Queue
from typing import override
from uuid import uuid4

LOGGER = logging.getLogger(__name__)

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRIBUTES: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName", "run_id"}


class JsonFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    def __init__(self, *, default_run_id: str | None = None) -> None:
        super().__init__()
        self._default_run_id = default_run_id

    @override
    def format(self, record: logging.LogRecord) -> str:
        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRIBUTES
        }
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": getattr(record, "run_id", None) or self._default_run_id,
            "context": context,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        elif record.exc_text:
            payload["exception"] = record.exc_text
        return json.dumps(payload, default=str)


class BoundedQueueHandler(logging.handlers.QueueHandler):
    """Queue handler that drops records when the queue is full."""

    @override
    def enqueue(self, record: logging.LogRecord) -> None:
        try:
            self.queue.put_nowait(record)
        except Full:
            self.handleError(record)

    @override
    def handleError(self, record: logging.LogRecord) -> None:
        return


def configure_structured_logging(
    logger: logging.Logger,
    *,
    run_id: str | None = None,
    level: int | str = logging.INFO,
    json_output: bool = True,
) -> logging.handlers.QueueListener:
    """Route ``logger`` through a bounded queue to a stderr stream handler.

    Args:
        logger: Target logger to configure.
        run_id: Identifier attached to every record; generated when omitted.
        level: Logging verbosity level.
        json_output: Emit JSON lines instead of the plain text format.

    Returns:
        The started queue listener; stop it with :func:`shutdown_listeners`.
    """

    logger.setLevel(level)

    record_queue: Queue[logging.LogRecord] = Queue(maxsize=1024)
    logger.addHandler(BoundedQueueHandler(record_queue))

    stream_handler = logging.StreamHandler()
    if json_output:
        stream_handler.setFormatter(JsonFormatter(default_run_id=run_id or str(uuid4())))
    else:
        stream_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

    listener = logging.handlers.QueueListener(record_queue, stream_handler)
    listener.start()
    return listener


def shutdown_listeners(listeners: Iterable[logging.handlers.QueueListener]) -> None:
    """Stop all queue listeners, logging rather than raising shutdown errors."""

    for listener in listeners:
        try:
            listener.stop()
        except Exception as exc:  # pragma: no cover - listener already stopped
            LOGGER.warning("Failed to stop logging listener", exc_info=exc)
