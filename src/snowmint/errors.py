"""Exceptions raised by snowmint."""


class SnowmintError(Exception):
    """Base exception for snowmint."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidLocationError(SnowmintError, ValueError):
    """Worker or datacenter id outside the range the bit layout can hold."""

    def __init__(self, field: str, value: object, bound: int) -> None:
        self.field = field
        self.value = value
        self.bound = bound
        super().__init__(f"{field} cannot be greater than {bound} or less than 0 (got {value!r})")


class ClockMovedBackwardError(SnowmintError, RuntimeError):
    """The time source reported a value earlier than the last issued timestamp."""

    def __init__(self, milliseconds: int) -> None:
        self.milliseconds = milliseconds
        super().__init__(
            f"Clock moved backwards. Refusing to generate id for {milliseconds} milliseconds"
        )


class InvalidTimestampError(SnowmintError, ValueError):
    """Timestamp outside the range representable in the 41-bit timestamp field."""

    def __init__(self, timestamp: int, lower: int, upper: int) -> None:
        self.timestamp = timestamp
        super().__init__(f"timestamp {timestamp} is outside the id range [{lower}, {upper}]")


class TimeFormatError(SnowmintError, ValueError):
    """None of the known time formats matched the input."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"could not parse time {value!r}")


class InvalidIdError(SnowmintError, ValueError):
    """Value does not fit in a signed 64-bit id."""

    def __init__(self, id: int) -> None:
        self.id = id
        super().__init__(f"id {id} is outside the signed 64-bit range")
