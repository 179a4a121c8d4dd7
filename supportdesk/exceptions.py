"""
Error types raised across the support desk.

Only ``SourceUnavailable`` ever reaches the serving boundary; every other
failure is degraded to a textual reply before it leaves the composer.
"""

from typing import Optional


class SupportDeskError(Exception):
    """Base class for all support desk errors."""


class SourceUnavailable(SupportDeskError):
    """Both the live fetch and the static fallback failed for a domain."""

    def __init__(self, domain: str, reason: Optional[str] = None):
        self.domain = domain
        self.reason = reason
        message = f"Knowledge source '{domain}' is unavailable"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class FetchError(SupportDeskError):
    """The live source answered but its content could not be used."""


class GenerativeResponderFailure(SupportDeskError):
    """The generative responder failed or produced an unusable reply."""
