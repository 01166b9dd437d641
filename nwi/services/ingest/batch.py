# nwi/services/ingest/batch.py
import logging
from typing import Awaitable, Callable, List, Sequence, TypeVar

from nwi.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# The store rejects bulk inserts above this many rows per statement
DEFAULT_BATCH_SIZE = 500


class BatchLoader:
    """Persists a sequence in consecutive fixed-size slices, one call per slice."""

    def __init__(self, batch_size: int = DEFAULT_BATCH_SIZE):
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.batch_size = batch_size

    async def load(self, items: Sequence[T], persist: Callable[[List[T]], Awaitable[None]]) -> int:
        """
        Returns the number of persist calls made. Any failure aborts the load
        with PersistenceError; earlier batches stay committed.
        """
        total = len(items)
        calls = 0
        for start in range(0, total, self.batch_size):
            batch = list(items[start:start + self.batch_size])
            try:
                await persist(batch)
            except PersistenceError:
                logger.error(f"❌ Batch {calls} (rows {start}-{start + len(batch) - 1}) failed.")
                raise
            except Exception as e:
                logger.error(f"❌ Batch {calls} (rows {start}-{start + len(batch) - 1}) failed: {e}")
                raise PersistenceError(f"batch {calls} failed: {e}") from e
            calls += 1
            logger.info(f"💾 Batch {calls}: {start + len(batch)}/{total} rows persisted.")
        return calls
