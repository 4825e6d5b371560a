"""Thread-safe Snowflake id generator.

Structure of an id (see ``snowmint.layout``):
- 1 bit unused (sign)
- 41 bits timestamp (milliseconds since CUSTOM_EPOCH)
- 5 bits datacenter id
- 5 bits worker id
- 12 bits sequence number
"""

import logging
import threading
import time
from collections.abc import Callable, Iterator

from snowmint.config import Settings
from snowmint.errors import ClockMovedBackwardError, InvalidLocationError
from snowmint.layout import MAX_DATACENTER_ID, MAX_WORKER_ID, SEQUENCE_MASK, pack_id

logger = logging.getLogger(__name__)

TimeSource = Callable[[], int]
"""Returns the current time in milliseconds since the Unix epoch."""


def current_millis() -> int:
    return time.time_ns() // 1_000_000


def _check_location(field: str, value: int, bound: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= bound:
        raise InvalidLocationError(field, value, bound)
    return value


class IdGenerator:
    """Generates ids for one (worker, datacenter) location.

    ``next_id`` may be called from many threads; calls are serialized by an
    internal lock. The time source must not report times before
    ``CUSTOM_EPOCH``.
    """

    def __init__(
        self,
        worker_id: int,
        datacenter_id: int,
        time_source: TimeSource = current_millis,
    ) -> None:
        self._worker_id = _check_location("worker_id", worker_id, MAX_WORKER_ID)
        self._datacenter_id = _check_location("datacenter_id", datacenter_id, MAX_DATACENTER_ID)
        self._time_source = time_source

        self._sequence = 0
        self._last_timestamp = -1
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, time_source: TimeSource = current_millis) -> "IdGenerator":
        """Build a generator for the location configured in ``settings``."""
        return cls(
            worker_id=settings.generator.worker_id,
            datacenter_id=settings.generator.datacenter_id,
            time_source=time_source,
        )

    @property
    def worker_id(self) -> int:
        return self._worker_id

    @property
    def datacenter_id(self) -> int:
        return self._datacenter_id

    def __repr__(self) -> str:
        return f"IdGenerator(worker_id={self._worker_id}, datacenter_id={self._datacenter_id})"

    def next_id(self) -> int:
        """Return a new id, strictly greater than any id previously returned.

        Raises:
            ClockMovedBackwardError: the time source went backwards since the
                last id. No state changes; the caller decides whether to retry.
        """
        with self._lock:
            timestamp = self._time_source()

            if timestamp < self._last_timestamp:
                regression = self._last_timestamp - timestamp
                logger.warning("Clock moved backwards by %d ms, refusing to generate id", regression)
                raise ClockMovedBackwardError(regression)

            if timestamp == self._last_timestamp:
                self._sequence = (self._sequence + 1) & SEQUENCE_MASK
                if self._sequence == 0:
                    # Sequence exhausted, wait for next millisecond
                    logger.debug("Sequence exhausted at %d, waiting for next millisecond", timestamp)
                    timestamp = self._til_next_millis(self._last_timestamp)
            else:
                self._sequence = 0

            self._last_timestamp = timestamp

            return pack_id(timestamp, self._datacenter_id, self._worker_id, self._sequence)

    def iter_ids(self, count: int) -> Iterator[int]:
        """Yield ``count`` successive ids."""
        for _ in range(count):
            yield self.next_id()

    def _til_next_millis(self, last_timestamp: int) -> int:
        # Spins without sleeping or timing out, holding the lock.
        timestamp = self._time_source()
        while timestamp <= last_timestamp:
            timestamp = self._time_source()
        return timestamp
