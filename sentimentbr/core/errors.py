# sentimentbr/core/errors.py


class ProviderError(Exception):
    """A single sentiment backend failed (missing key, HTTP error, bad answer)."""

    def __init__(self, provider: str, message: str):
        super().__init__(message)
        self.provider = provider


class ClassificationError(Exception):
    """Both the configured provider and its fallback failed."""
