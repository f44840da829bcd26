"""Custom exception classes for the catalog service."""


class CatalogServiceError(Exception):
    """Base exception for all catalog service errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(CatalogServiceError):
    """Raised when catalog credentials are missing or invalid."""

    pass
