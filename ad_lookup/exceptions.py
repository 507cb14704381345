from __future__ import annotations


class ADLookupError(Exception):
    """Base class for every failure of a directory lookup."""


class InvalidArgumentError(ADLookupError, ValueError):
    pass


class DirectoryConnectionError(ADLookupError):
    pass


class AuthenticationError(ADLookupError):
    pass


class SearchError(ADLookupError):
    def __init__(self, message: str, search_filter: str) -> None:
        super().__init__(message)
        self.search_filter = search_filter


class UserNotFoundError(ADLookupError):
    """Zero entries matched the user filter (not an infrastructure error)."""

    def __init__(self, message: str, search_filter: str) -> None:
        super().__init__(message)
        self.search_filter = search_filter
