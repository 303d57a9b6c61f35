"""Error types raised by kv-collections."""


class CollectionError(Exception):
    """
    Raised by every collection operation on failure.

    Store client failures, malformed stored payloads and local validation
    failures are all surfaced as this single error kind. The original
    exception is chained as ``__cause__``.
    """
