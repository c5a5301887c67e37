"""Custom exceptions for the Notion API client."""


class NotionClientError(Exception):
    """Raised when a Notion operation fails.

    Base class for every error raised by the client, covering input
    validation, HTTP errors and API-level errors returned by Notion.
    """

    pass


class InvalidIdentifierError(NotionClientError, ValueError):
    """Raised when a page, database or block ID is not 32 hex characters."""

    pass


class InvalidFilterSyntaxError(NotionClientError, ValueError):
    """Raised when a filter expression cannot be parsed."""

    pass


class InvalidFilterValueError(NotionClientError, ValueError):
    """Raised when a checkbox or number filter value cannot be parsed."""

    pass


class NotionAuthenticationError(NotionClientError):
    """Raised on 401/403 responses."""

    pass


class NotionNotFoundError(NotionClientError):
    """Raised on 404 responses."""

    pass


class NotionValidationError(NotionClientError):
    """Raised on 400 and other 4xx responses.

    :param message: Error message returned by the Notion API.
    :param status_code: HTTP status code of the response.
    """

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(f"Notion API rejected the request: {status_code} - {message}")
        self.message = message
        self.status_code = status_code


class RateLimitExceededError(NotionClientError):
    """Raised when a request is still rate limited after every retry."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"Rate limit exceeded after {attempts} attempts")
        self.attempts = attempts


class NotionTransportError(NotionClientError):
    """Raised on network failures, timeouts, server errors and unreadable responses."""

    pass


class PartialMoveError(NotionClientError):
    """Raised when a move created the copy but a later step failed.

    The copy exists remotely, so the caller has to finish or undo the move
    by hand.

    :param created_id: ID of the page created by the move.
    :param cause: The error raised by the failing step.
    """

    def __init__(self, created_id: str, cause: Exception) -> None:
        super().__init__(
            f"Page copied to {created_id} but the move did not complete: {cause}. "
            "The original page is still in place; archive it or delete the copy manually."
        )
        self.created_id = created_id
        self.cause = cause
