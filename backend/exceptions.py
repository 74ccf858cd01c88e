# backend/exceptions.py

"""Shared exceptions for the application.

Each exception carries the HTTP status it is rendered with by the handlers
registered in ``main.py``; the message is returned as ``{"error": message}``.
"""


class DocsumError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(DocsumError):
    """Raised when store endpoint or credentials are missing."""
    pass


class StorageError(DocsumError):
    """Raised when the object store rejects a request."""
    pass


class ObjectNotFoundError(StorageError):
    """Raised when a requested object does not exist in the bucket."""

    status_code = 404


class MetadataStoreError(DocsumError):
    """Raised when the documents table rejects a request."""
    pass


class UnsupportedFileTypeError(DocsumError):
    """Raised when no text extractor is registered for an extension."""

    status_code = 400


class DuplicateFileError(DocsumError):
    """Raised when an upload's sanitized name is already in the bucket."""

    status_code = 409


class SummarizerConfigError(DocsumError):
    """Raised when no LLM backend can be built from the environment."""
    pass


class SummaryBlockedError(DocsumError):
    """Raised when the provider refuses to return content for safety reasons."""
    pass


class EmptyDocumentError(DocsumError):
    """Raised when extraction yields no text to summarize."""

    status_code = 400


class ProviderError(DocsumError):
    """Raised when the LLM provider call fails; the message carries any hint."""
    pass


class NoSummaryError(DocsumError):
    """Raised when there is no summary text to persist as a file."""

    status_code = 400
