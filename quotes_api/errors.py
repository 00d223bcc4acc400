"""Custom exceptions."""


class FormatError(Exception):
    """Raised when the quote source has an unrecognized shape."""


class EmptyStoreError(Exception):
    """Raised when a quote is requested from an empty store."""


class ValidationError(Exception):
    """Raised when a chat request fails validation."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class ProviderError(Exception):
    """Raised inside the provider client when generation fails."""
