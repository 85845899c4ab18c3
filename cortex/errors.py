"""Error taxonomy shared by the engine, the note service and the HTTP layer."""


class CortexError(Exception):
    """Base class for failures reported to callers as structured results."""

    status_code: int = 500
    kind: str = "internal_error"


class InvalidRequestError(CortexError):
    """Malformed or out-of-range input, rejected before any external call."""

    status_code = 422
    kind = "validation_error"


class NotFoundError(CortexError):
    """A referenced note does not exist."""

    status_code = 404
    kind = "not_found"


class ProviderError(CortexError):
    """The embedding or classification backend is unreachable or failing."""

    status_code = 502
    kind = "provider_error"


class PersistenceError(CortexError):
    """The note store failed to read or write."""

    status_code = 500
    kind = "persistence_error"
