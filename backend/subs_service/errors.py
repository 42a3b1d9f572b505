"""Error taxonomy shared by the service, repository, and API layers."""


class SubscriptionError(Exception):
    """Base class for every error raised by the subscription core."""


class ValidationError(SubscriptionError):
    """Input is malformed or semantically invalid. Fixable by the caller."""


class NotFoundError(SubscriptionError):
    """The requested subscription does not exist."""


class StorageError(SubscriptionError):
    """The database failed (connectivity, constraint violation, timeout)."""
