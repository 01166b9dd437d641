# nwi/core/exceptions.py
"""Error taxonomy shared by the ingestion pipeline and the score API."""


class NwiError(Exception):
    pass


class MalformedGeoidError(NwiError, ValueError):
    """A geoid string is not numeric or is shorter than tract precision."""


class MalformedRecordError(NwiError):
    """A CSV extract row does not have the shape of its header."""

    def __init__(self, message: str, line: int = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class NotFoundError(NwiError):
    pass


class BadFormatError(NwiError):
    def __init__(self, fmt: str):
        super().__init__(f"unknown format: {fmt!r}")
        self.format = fmt


class UpstreamResolutionError(NwiError):
    """The geocoder was unreachable or answered with something unusable."""


class PersistenceError(NwiError):
    pass
