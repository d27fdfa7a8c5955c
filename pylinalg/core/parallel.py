"""
Chunked data-parallel loop.

Bulk materialization and bulk assignment split [0, count) into disjoint
chunks. Each chunk reads only immutable inputs and writes only its own
output slots, so chunks need no synchronization with each other.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable

from pylinalg.core.config import get_settings

logger = logging.getLogger(__name__)


def parallel_for(count: int, body: Callable[[int, int], None]) -> None:
    """
    Run body(start, stop) over disjoint chunks covering [0, count).

    Below the configured parallel_threshold the whole range runs inline
    on the calling thread. Exceptions raised by a chunk propagate to the
    caller once every chunk has finished.

    Args:
        count: Number of index positions to cover
        body: Callable receiving a half-open index range
    """
    if count <= 0:
        return
    settings = get_settings()
    if count < settings.parallel_threshold:
        body(0, count)
        return

    workers = settings.max_workers or (os.cpu_count() or 1)
    chunk_size = max(1, -(-count // workers))
    chunks = [(i, min(i + chunk_size, count)) for i in range(0, count, chunk_size)]
    logger.debug("parallel_for: %d positions in %d chunks", count, len(chunks))

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(body, start, stop) for start, stop in chunks]
        for future in as_completed(futures):
            future.result()
