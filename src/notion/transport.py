"""HTTP transport for the Notion API.

Attaches authentication and version headers, classifies responses into the
client's error taxonomy and retries rate-limited requests. This is the only
place where requests are re-issued.
"""

import logging
import time
from collections.abc import Callable
from http import HTTPStatus
from typing import Any

import requests

from src.notion.exceptions import (
    NotionAuthenticationError,
    NotionNotFoundError,
    NotionTransportError,
    NotionValidationError,
    RateLimitExceededError,
)
from src.notion.retry import DEFAULT_BASE_DELAY, MAX_ATTEMPTS, RetryState

logger = logging.getLogger(__name__)

BASE_URL = "https://api.notion.com/v1"

# Notion API timeout in seconds
REQUEST_TIMEOUT = 30

# Notion API version; the last version serving /databases/{id}/query
NOTION_VERSION = "2022-06-28"


class NotionTransport:
    """Performs authenticated exchanges with the Notion API."""

    def __init__(
        self,
        *,
        token: str,
        timeout: float = REQUEST_TIMEOUT,
        api_version: str = NOTION_VERSION,
        base_url: str = BASE_URL,
        max_attempts: int = MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialise the transport.

        :param token: Notion integration token.
        :param timeout: Timeout in seconds for each HTTP exchange.
        :param api_version: Value of the Notion-Version header.
        :param base_url: API base URL.
        :param max_attempts: Attempts per request when rate limited.
        :param base_delay: Delay in seconds before the first retry.
        :param sleep: Function used to wait between retries.
        :raises ValueError: If the token is empty.
        """
        if not token:
            raise ValueError("Notion integration token must not be empty")

        self._token = token
        self._timeout = timeout
        self._api_version = api_version
        self._base_url = base_url.rstrip("/")
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self._sleep = sleep

    @property
    def timeout(self) -> float:
        """Per-request timeout in seconds."""
        return self._timeout

    @property
    def _headers(self) -> dict[str, str]:
        """Headers for Notion API requests.

        :returns: Dictionary of required headers.
        """
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
            "Notion-Version": self._api_version,
        }

    def request(
        self,
        method: str,
        endpoint: str,
        *,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make a request to the Notion API, retrying while rate limited.

        :param method: HTTP method.
        :param endpoint: API endpoint path (without base URL).
        :param body: Optional JSON request body.
        :param params: Optional query parameters.
        :returns: JSON response as dictionary.
        :raises RateLimitExceededError: If still rate limited after every attempt.
        :raises NotionAuthenticationError: On 401 or 403.
        :raises NotionNotFoundError: On 404.
        :raises NotionValidationError: On 400 and other 4xx responses.
        :raises NotionTransportError: On network failures and server errors.
        """
        state = RetryState(base_delay=self._base_delay, max_attempts=self._max_attempts)

        while True:
            response = self._send(method, endpoint, body=body, params=params)
            state.record_attempt()

            if response.status_code != HTTPStatus.TOO_MANY_REQUESTS:
                return self._handle_response(response)

            if state.exhausted:
                raise RateLimitExceededError(state.attempt)

            delay = state.next_delay(_parse_retry_after(response))
            logger.warning(
                f"Rate limited on {method} {endpoint}. Waiting {delay:g}s before retry "
                f"({state.attempt}/{state.max_attempts - 1})"
            )
            self._sleep(delay)

    def _send(
        self,
        method: str,
        endpoint: str,
        *,
        body: dict[str, Any] | None,
        params: dict[str, Any] | None,
    ) -> requests.Response:
        """Perform a single HTTP exchange.

        :raises NotionTransportError: If the request does not complete.
        """
        url = f"{self._base_url}/{endpoint.lstrip('/')}"
        logger.debug(f"Making {method} request to endpoint={endpoint}")

        try:
            return requests.request(
                method,
                url,
                headers=self._headers,
                json=body,
                params=params,
                timeout=self._timeout,
            )
        except requests.exceptions.Timeout as e:
            raise NotionTransportError(
                f"Notion API request timed out after {self._timeout}s"
            ) from e
        except requests.exceptions.RequestException as e:
            raise NotionTransportError(f"Notion API request failed: {e}") from e

    def _handle_response(self, response: requests.Response) -> dict[str, Any]:
        """Classify a non-429 response and decode its body."""
        status = response.status_code

        if status in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
            raise NotionAuthenticationError(
                f"Notion API authentication failed: {status} - {_extract_error_message(response)}"
            )
        if status == HTTPStatus.NOT_FOUND:
            raise NotionNotFoundError(
                f"Notion API resource not found: {_extract_error_message(response)}"
            )
        if 400 <= status < 500:
            raise NotionValidationError(_extract_error_message(response), status_code=status)
        if status >= 500:
            raise NotionTransportError(
                f"Notion API request failed: {status} - {_extract_error_message(response)}"
            )

        if not response.content:
            return {}

        try:
            data = response.json()
        except ValueError as e:
            raise NotionTransportError("Notion API returned a response that is not JSON") from e

        if not isinstance(data, dict):
            raise NotionTransportError("Notion API returned an unexpected response body")
        return data


def _extract_error_message(response: requests.Response) -> str:
    """Extract error message from Notion API error response.

    :param response: Response object from failed request.
    :returns: Error message string.
    """
    try:
        data = response.json()
    except ValueError:
        return response.text
    if isinstance(data, dict):
        return str(data.get("message", response.text))
    return response.text


def _parse_retry_after(response: requests.Response) -> float | None:
    """Read a numeric Retry-After header, in seconds."""
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    return seconds if seconds >= 0 else None
