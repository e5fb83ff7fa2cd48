"""Exception types shared across the response core."""


class FivefanError(Exception):
    """Base class for response core errors."""


class ConfigError(FivefanError):
    """Configuration file could not be read or has the wrong shape."""


class TransportError(FivefanError):
    """Network-level failure: refused, DNS, timeout, unreadable body."""

    def __init__(self, message: str, timed_out: bool = False):
        super().__init__(message)
        self.timed_out = timed_out


class CorpusError(FivefanError):
    """A voice's phrase table cannot produce a phrase (data bug)."""
