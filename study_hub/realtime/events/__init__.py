"""Domain-specific realtime publishers.

These modules should contain *publish* helpers only (build payload + emit).
They must not define Socket.IO server instances or connection handlers.
Publishers run from ``transaction.on_commit`` and re-read the committed rows,
so payloads always reflect persisted state.
"""

from __future__ import annotations

import functools
import logging

logger = logging.getLogger(__name__)


def publisher(func):
    """Log and swallow any failure of a commit-time publisher.

    The mutation is already committed when a publisher runs; a failed re-read,
    serialization or emit must not turn it into an error response.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception:
            logger.exception("Realtime publish failed: %s%s", func.__name__, args)
            return None

    return wrapper
