"""Coordination-free, time-sortable 64-bit id generation (Snowflake layout)."""

from snowmint.errors import (
    ClockMovedBackwardError,
    InvalidIdError,
    InvalidLocationError,
    InvalidTimestampError,
    SnowmintError,
    TimeFormatError,
)
from snowmint.generator import IdGenerator, TimeSource, current_millis
from snowmint.layout import (
    CUSTOM_EPOCH,
    IdParts,
    decode_id,
    id_add_duration,
    id_end_of_time,
    id_end_of_timestamp,
    id_start_of_time,
    id_start_of_timestamp,
    id_to_time,
    id_to_timestamp,
)

__all__ = [
    "CUSTOM_EPOCH",
    "ClockMovedBackwardError",
    "IdGenerator",
    "IdParts",
    "InvalidIdError",
    "InvalidLocationError",
    "InvalidTimestampError",
    "SnowmintError",
    "TimeFormatError",
    "TimeSource",
    "current_millis",
    "decode_id",
    "id_add_duration",
    "id_end_of_time",
    "id_end_of_timestamp",
    "id_start_of_time",
    "id_start_of_timestamp",
    "id_to_time",
    "id_to_timestamp",
]
