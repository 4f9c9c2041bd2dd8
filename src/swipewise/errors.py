class SwipeWiseError(Exception):
    pass


class ConfigurationConflict(SwipeWiseError):
    """Raised when the category synonym table maps one name to two categories."""


class ExternalServiceUnavailable(SwipeWiseError):
    """A vector-search or text-generation collaborator could not answer."""


class RateLimitExceeded(ExternalServiceUnavailable):
    pass


class CapLookupFailure(SwipeWiseError):
    """The spending ledger could not be read."""
