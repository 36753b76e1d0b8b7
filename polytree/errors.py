"""
Exception types raised by the polygon growth engine.

A node that fails the viability test is not an error: it is simply discarded
by the scheduler. These exceptions cover bad input to configuration building
and loading.
"""


class PolytreeError(Exception):
    pass


class GeometryError(PolytreeError, ValueError):
    """Degenerate polygon or edge input to transform construction."""


class ConfigurationError(PolytreeError):
    """Tunables that cannot produce a working tree, e.g. an unallocatable field."""


class MalformedConfigError(PolytreeError, ValueError):
    """A persisted tree record is missing a required key or holds a bad value."""


class UnknownVariantError(MalformedConfigError):
    """A persisted tree record names a variant that is not registered."""


def require(record: dict, key: str):
    """Fetch a required key from a persisted record."""
    if not isinstance(record, dict):
        raise MalformedConfigError(f"Expected a mapping holding {key!r}, got {type(record).__name__}")
    if key not in record:
        raise MalformedConfigError(f"Missing required key {key!r}")
    return record[key]
