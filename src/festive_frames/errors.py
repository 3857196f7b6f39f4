"""
Error Taxonomy
==============

Exception categories raised inside the image supply pipeline.

Only ConfigError has an effect beyond a single item or iteration: it
disables the acquisition worker. Every other category is recoverable,
logged by the caller, and the affected image or iteration is skipped.
"""


class FestiveFramesError(Exception):
    """Base class for all pipeline errors."""
    pass


class ConfigError(FestiveFramesError):
    """Missing or invalid rate or credential for the acquisition worker."""
    pass


class NetworkError(FestiveFramesError):
    """Transport failure or non-success HTTP status."""
    pass


class PayloadError(FestiveFramesError):
    """Malformed JSON or missing expected fields in a response."""
    pass


class DecodeError(FestiveFramesError):
    """Unreadable or empty image bytes."""
    pass


class FilesystemError(FestiveFramesError):
    """Cannot create or write the temporary output location."""
    pass
