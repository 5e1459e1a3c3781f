"""Custom exceptions for BVG transit queries."""


class TransitSearchError(Exception):
    """Base exception for transit query errors."""

    pass


class ValidationError(TransitSearchError):
    """Raised when required input is missing, before any network access."""

    pass


class NetworkError(TransitSearchError):
    """Raised when the document could not be retrieved."""

    pass


class ParseError(TransitSearchError):
    """Raised when a page or item no longer matches its grammar.

    Carries the offending fragment and the URL it came from, since this
    always means the upstream document format changed.
    """

    def __init__(self, message: str, fragment: str | None = None, url: str | None = None):
        super().__init__(message)
        self.fragment = fragment
        self.url = url


class ClassificationError(TransitSearchError):
    """Raised when a field value lies outside its closed vocabulary."""

    pass


class SessionExpiredError(TransitSearchError):
    """Raised when the server discarded the query session.

    Any continuation link in hand is invalid; the query must be rebuilt.
    """

    pass
