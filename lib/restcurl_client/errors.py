from __future__ import annotations


class RestClientError(Exception):
    """Base client error."""


class OptionsError(RestClientError, ValueError):
    """Invalid per-call request options."""


class RequestFailed(RestClientError):
    """Transport/network layer error."""

    def __init__(self, method: str, url: str, diagnostic: str):
        super().__init__(f"{method} {url} failed: {diagnostic}")
        self.method = method
        self.url = url
        self.diagnostic = diagnostic


class DecodeError(RestClientError):
    """Response body was requested as JSON but could not be parsed."""

    def __init__(self, method: str, url: str, body: str):
        super().__init__(f"{method} {url} returned a body that is not valid JSON")
        self.method = method
        self.url = url
        self.body = body[:1000]


class ApiError(RestClientError):
    def __init__(self, status_code: int, message: str, details: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class AuthError(ApiError):
    """Auth-related API error."""
