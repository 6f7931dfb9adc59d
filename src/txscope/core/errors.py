class TxScopeError(Exception):
    retryable = False


class UnsupportedChain(TxScopeError):
    pass


class InvalidReference(TxScopeError):
    pass


class NotFound(TxScopeError):
    pass


class SourceUnavailable(TxScopeError):
    retryable = True


class RateLimitError(SourceUnavailable):
    pass


class TransactionUnavailable(TxScopeError):
    """The transaction exists but its execution metadata could not be read."""

    retryable = True
