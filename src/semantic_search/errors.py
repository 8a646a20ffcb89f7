"""
Error taxonomy shared by the indexing and search pipelines.

Each error carries the HTTP status the API surface responds with.
"""

from __future__ import annotations


class SemanticSearchError(Exception):
    """Base class for operational errors raised by this package."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SearchValidationError(SemanticSearchError):
    """Rejected input: missing owner, missing query, empty field, ..."""

    status_code = 400


class AuthenticationError(SemanticSearchError):
    """The caller could not be mapped to an owner."""

    status_code = 401


class DocumentNotFoundError(SemanticSearchError):
    """The source document to index does not exist."""

    status_code = 404

    def __init__(self, content_type: str, document_id: str) -> None:
        super().__init__(f"Document {document_id} not found in {content_type}")
        self.content_type = content_type
        self.document_id = document_id


class EmbeddingProviderError(SemanticSearchError):
    """The embedding provider failed to return a vector."""

    status_code = 502


class ConfigurationError(SemanticSearchError):
    """Invalid or incomplete runtime configuration."""

    status_code = 500
