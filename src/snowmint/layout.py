"""Identifier bit layout and the pure helpers that decode ids or derive them from a point in time.

Layout, most significant bit first:

    0 | 41 bits ms since CUSTOM_EPOCH | 5 bits datacenter | 5 bits worker | 12 bits sequence

Everything here is stateless and safe to call from any thread.
"""

from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, Field

from snowmint.errors import InvalidIdError, InvalidTimestampError

CUSTOM_EPOCH = 1288834974657  # Thu, 04 Nov 2010 01:42:54.657 GMT

WORKER_ID_BITS = 5
DATACENTER_ID_BITS = 5
SEQUENCE_BITS = 12
TIMESTAMP_BITS = 41

MAX_WORKER_ID = -1 ^ (-1 << WORKER_ID_BITS)
MAX_DATACENTER_ID = -1 ^ (-1 << DATACENTER_ID_BITS)
SEQUENCE_MASK = -1 ^ (-1 << SEQUENCE_BITS)

WORKER_ID_SHIFT = SEQUENCE_BITS
DATACENTER_ID_SHIFT = SEQUENCE_BITS + WORKER_ID_BITS
TIMESTAMP_LEFT_SHIFT = SEQUENCE_BITS + WORKER_ID_BITS + DATACENTER_ID_BITS

# Lower 22 bits: everything below the timestamp field.
NODE_AND_SEQUENCE_MASK = -1 ^ (-1 << TIMESTAMP_LEFT_SHIFT)

MAX_TIMESTAMP = CUSTOM_EPOCH + (1 << TIMESTAMP_BITS) - 1

MIN_ID = -(1 << 63)
MAX_ID = (1 << 63) - 1

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MILLISECOND = timedelta(milliseconds=1)


class IdParts(BaseModel):
    """An identifier split into its fields."""

    id: int
    timestamp: int = Field(description="Milliseconds since the Unix epoch")
    time: datetime = Field(description="Mint time in UTC")
    datacenter_id: int
    worker_id: int
    sequence: int


def pack_id(timestamp: int, datacenter_id: int, worker_id: int, sequence: int) -> int:
    """Pack the fields of an identifier. ``timestamp`` is in Unix milliseconds."""
    return (
        ((timestamp - CUSTOM_EPOCH) << TIMESTAMP_LEFT_SHIFT)
        | (datacenter_id << DATACENTER_ID_SHIFT)
        | (worker_id << WORKER_ID_SHIFT)
        | sequence
    )


def timestamp_from_time(t: datetime) -> int:
    """Milliseconds since the Unix epoch, floored. Naive datetimes are taken as UTC."""
    if t.tzinfo is None:
        t = t.replace(tzinfo=timezone.utc)
    return (t - UNIX_EPOCH) // _ONE_MILLISECOND


def time_from_timestamp(timestamp: int) -> datetime:
    """Convert Unix milliseconds to an aware UTC datetime without going through floats."""
    return UNIX_EPOCH + timedelta(milliseconds=timestamp)


def _check_timestamp(timestamp: int) -> int:
    if not CUSTOM_EPOCH <= timestamp <= MAX_TIMESTAMP:
        raise InvalidTimestampError(timestamp, CUSTOM_EPOCH, MAX_TIMESTAMP)
    return timestamp - CUSTOM_EPOCH


def _check_id(id: int) -> int:
    if not MIN_ID <= id <= MAX_ID:
        raise InvalidIdError(id)
    return id


def id_to_timestamp(id: int) -> int:
    """Return the Unix millisecond timestamp an id was minted at."""
    return (id >> TIMESTAMP_LEFT_SHIFT) + CUSTOM_EPOCH


def id_to_time(id: int) -> datetime:
    """Return the UTC time an id was minted at."""
    return time_from_timestamp(id_to_timestamp(_check_id(id)))


def id_start_of_timestamp(timestamp: int) -> int:
    """Smallest id that can be minted at ``timestamp`` (Unix ms).

    Usable as an inclusive lower bound for range queries.
    """
    return _check_timestamp(timestamp) << TIMESTAMP_LEFT_SHIFT


def id_start_of_time(t: datetime) -> int:
    return id_start_of_timestamp(timestamp_from_time(t))


def id_end_of_timestamp(timestamp: int) -> int:
    """Largest id that can be minted at ``timestamp`` (Unix ms).

    Usable as an inclusive upper bound for range queries.
    """
    return (_check_timestamp(timestamp) << TIMESTAMP_LEFT_SHIFT) | NODE_AND_SEQUENCE_MASK


def id_end_of_time(t: datetime) -> int:
    return id_end_of_timestamp(timestamp_from_time(t))


def id_add_duration(id: int, duration: timedelta) -> int:
    """Move an id by ``duration``, aligned to the start of the resulting millisecond.

    Location and sequence bits are not carried over; the result is a range
    boundary, not an id any generator issued.
    """
    return id_start_of_time(id_to_time(id) + duration)


def decode_id(id: int) -> IdParts:
    """Split an id into timestamp, location and sequence."""
    timestamp = id_to_timestamp(_check_id(id))
    return IdParts(
        id=id,
        timestamp=timestamp,
        time=time_from_timestamp(timestamp),
        datacenter_id=(id >> DATACENTER_ID_SHIFT) & MAX_DATACENTER_ID,
        worker_id=(id >> WORKER_ID_SHIFT) & MAX_WORKER_ID,
        sequence=id & SEQUENCE_MASK,
    )
