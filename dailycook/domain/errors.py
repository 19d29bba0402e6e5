"""Error taxonomy shared by the planning, menu and pricing logic.

A price lookup that finds nothing is not an error: sources and the normalizer
return None for that case.
"""


class DailyCookError(Exception):
    """Base class for errors raised by the core."""


class ValidationError(DailyCookError, ValueError):
    """Malformed input (bad date, unknown recipe id). Never retried."""


class NotFoundError(DailyCookError, LookupError):
    """Record missing or not owned by the requesting user."""


class ExternalSourceFailure(DailyCookError):
    """Network error, timeout or crash while talking to a price source."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source
