"""
Exception hierarchy for the enrichment service.

Input errors are rejected at the boundary. External service errors are
absorbed by the pipeline's fallback paths and only surface when no
fallback exists.
"""


class EnrichmentError(Exception):
    """Base class for all enrichment errors."""


class InputError(EnrichmentError):
    """Invalid caller input (empty batch, lead without a website, ...)."""


class ExternalServiceError(EnrichmentError):
    """A collaborator call (scrape, AI, store) failed or timed out."""

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(f"{service}: {message}")


class PersistenceError(ExternalServiceError):
    """Reading or writing leads in the store failed."""

    def __init__(self, message: str):
        super().__init__("persistence", message)
