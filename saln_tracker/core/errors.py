"""
Error taxonomy for the SALN core.

Fetch failures degrade to empty collections at the presentation boundary.
Lookups that miss are surfaced as not-found. Bad data is rejected where it
enters the system, never patched over inside the algorithms.
"""


class SALNTrackerError(Exception):
    """Base exception for SALN tracker errors."""
    pass


class DataUnavailableError(SALNTrackerError):
    """Raised when the document store cannot be read."""
    pass


class OfficialNotFoundError(SALNTrackerError):
    """Raised when no official matches a slug."""

    def __init__(self, slug: str):
        super().__init__(f"No official with slug '{slug}'")
        self.slug = slug


class InvalidNameError(SALNTrackerError, ValueError):
    """Raised when a display name produces an empty slug."""
    pass


class DataIntegrityError(SALNTrackerError):
    """Raised when stored data breaks a schema rule (unknown enum, duplicate slug...)."""
    pass
