"""
Error taxonomy for the acquisition pipeline.

None of these reach the user as a hard failure: location and lookup errors
degrade to fallback values, provider errors make the chain move on.
"""


class MonitorError(Exception):
    """Base class for all monitor errors."""


class LocationUnavailable(MonitorError):
    """No position fix: no service, permission denied, or timeout."""


class ReverseLookupFailed(MonitorError):
    """Coordinates could not be turned into a place name."""


class ProviderError(MonitorError):
    """
    A single provider failed to produce a reading.

    Carries the provider code and the underlying cause so the chain can
    collect diagnostics without re-raising transport exceptions.
    """

    def __init__(self, provider, cause):
        self.provider = provider
        self.cause = cause
        super().__init__(f"{provider}: {cause}")


class AllProvidersExhausted(MonitorError):
    """Every real provider failed; only synthetic data is left."""

    def __init__(self, errors):
        self.errors = list(errors)
        providers = ', '.join(error.provider for error in self.errors) or 'none'
        super().__init__(f"All providers failed ({providers})")
