"""Typed exception hierarchy for quote provider errors.

Provides structured exceptions so the price resolver can tell transport
failures, upstream-reported errors and malformed responses apart in its
logs while treating all of them as "live price unavailable".
"""


class ProviderError(Exception):
    """Base exception for all quote-provider errors.

    Carries the provider name so callers can identify which provider failed.
    """

    def __init__(self, message: str, provider_name: str = ""):
        self.provider_name = provider_name
        super().__init__(message)


class ProviderAuthError(ProviderError):
    """API key missing, expired, or invalid (HTTP or body code 401/403)."""

    pass


class ProviderConnectionError(ProviderError):
    """Network failure or timeout talking to the provider.

    Retriable by default.
    """

    def __init__(self, message: str, provider_name: str = "", retriable: bool = True):
        self.retriable = retriable
        super().__init__(message, provider_name)


class ProviderAPIError(ProviderError):
    """Non-success HTTP status, or an error code reported in the response body."""

    def __init__(
        self,
        message: str,
        provider_name: str = "",
        status_code: int | None = None,
    ):
        self.status_code = status_code
        super().__init__(message, provider_name)

    @property
    def retriable(self) -> bool:
        """429 (quota exceeded) and 5xx errors are generally retriable."""
        if self.status_code is None:
            return False
        return self.status_code == 429 or self.status_code >= 500


class ProviderDataError(ProviderError):
    """Malformed or unparseable response from the provider."""

    pass
