"""Reporting error classes.

Aggregators never raise; these errors belong to the data-access and export
edges of the application.
"""

from __future__ import annotations


class ReportingError(Exception):
    """Base exception for reporting errors."""

    pass


class UpstreamFetchError(ReportingError):
    """Raised when records cannot be loaded from the backend."""

    def __init__(self, collection: str, message: str) -> None:
        self.collection = collection
        super().__init__(f"Could not load {collection}: {message}")


class UnknownExportKindError(ReportingError):
    """Raised when an export type is not one of the known sheet layouts."""

    pass


class UnknownEventError(ReportingError):
    """Raised when an event id is not in the event catalog."""

    pass
